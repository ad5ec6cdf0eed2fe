# products/management/commands/seed_catalog.py

from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from content.models import HeroCarouselSlide, MainMessage
from products.models import Category, Product, ProductImage

CATEGORIES = [
    ("Prévention", "Services dédiés à la prévention des cyber-risques.", "/uploads/prevention.jpg", 1),
    ("Protection", "Services dédiés à la protection contre les menaces cyber.", "/uploads/protection.jpg", 2),
    ("Réponse", "Services dédiés à la réponse aux incidents de sécurité.", "/uploads/reponse.jpg", 3),
]

# (category, name, description, specs, unit_price, discount_price, stock, priority, image)
PRODUCTS = [
    (
        "Prévention",
        "Diagnostic Cyber",
        "Diagnostic complet des cyber-risques pour votre entreprise, incluant l'évaluation "
        "de votre infrastructure et de vos pratiques de sécurité.",
        "Audit complet de sécurité, analyse des vulnérabilités, cartographie des risques "
        "et recommandations personnalisées.",
        "4500.00",
        "4200.00",
        15,
        1,
        "/uploads/diagnostic_cyber.jpg",
    ),
    (
        "Prévention",
        "Test d'intrusion",
        "Test d'intrusion pour évaluer la sécurité de vos systèmes et applications en "
        "simulant des attaques réelles.",
        "Pentesting sur applications web, infrastructure et systèmes, avec rapport "
        "détaillé des vulnérabilités découvertes.",
        "4000.00",
        "3800.00",
        10,
        2,
        "/uploads/test_intrusion.jpg",
    ),
    (
        "Protection",
        "Micro SOC",
        "Surveillance continue de la sécurité avec un centre d'opérations de sécurité "
        "adapté aux PME.",
        "Surveillance 24/7, analyse des logs, détection d'anomalies, alertes en temps réel.",
        "5000.00",
        None,
        12,
        1,
        "/uploads/micro_soc.jpg",
    ),
    (
        "Protection",
        "SOC Managé",
        "SOC avec gestion managée pour une sécurité optimale et une réactivité immédiate.",
        "Surveillance 24/7/365, analyse comportementale, traitement des incidents, "
        "équipe dédiée, rapports réguliers.",
        "7000.00",
        "6500.00",
        8,
        2,
        "/uploads/soc_manage.jpg",
    ),
    (
        "Réponse",
        "Investigation, éradication, remédiation",
        "Réponse complète aux incidents de sécurité, depuis l'investigation jusqu'à la "
        "remédiation.",
        "Analyse forensique, confinement des menaces, élimination des malwares, "
        "reconstruction des systèmes compromis.",
        "8500.00",
        "8000.00",
        5,
        1,
        "/uploads/investigation.jpg",
    ),
    (
        "Réponse",
        "Gestion de crise cybersécurité",
        "Service de gestion de crise complet pour faire face aux incidents de sécurité "
        "majeurs.",
        "Cellule de crise, communication interne et externe, coordination avec les "
        "autorités, plan de continuité d'activité.",
        "9500.00",
        "9000.00",
        3,
        2,
        "/uploads/crisis_management.jpg",
    ),
]

SLIDES = [
    (
        "Solutions de cybersécurité pour les entreprises",
        "Des services de pointe pour protéger vos actifs numériques et garantir la "
        "continuité de votre activité",
        "https://images.unsplash.com/photo-1563986768494-4dee2763ff3f?q=80&w=1920",
        "Découvrir nos solutions",
        "/categories",
    ),
    (
        "Tests d'intrusion et audit de sécurité",
        "Identifiez vos vulnérabilités avant que les hackers ne le fassent",
        "https://images.unsplash.com/photo-1614064641938-3bbee52942c7?q=80&w=1920",
        "En savoir plus",
        "/produit",
    ),
    (
        "Nouveau : SOC Managé 24/7",
        "Surveillance continue et réponse immédiate aux menaces pour une protection optimale",
        "https://images.unsplash.com/photo-1573164713988-8665fc963095?q=80&w=1920",
        "Découvrir le service",
        "/produit",
    ),
]


class Command(BaseCommand):
    help = "Seed demo categories, products (with carousel images), hero slides and the main message."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog..."))

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        category_objs = {}
        for name, description, image, priority in CATEGORIES:
            obj, _ = Category.objects.get_or_create(
                name=name,
                defaults={"description": description, "image": image, "priority_order": priority},
            )
            category_objs[name] = obj

        # -------------------------------
        # PRODUCTS + IMAGES
        # -------------------------------
        created_products = 0
        for cat, name, description, specs, price, discount, stock, priority, image in PRODUCTS:
            product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category_objs[cat],
                    "description": description,
                    "technical_specs": specs,
                    "unit_price": Decimal(price),
                    "discount_price": Decimal(discount) if discount else None,
                    "stock": stock,
                    "available": stock > 0,
                    "priority_order": priority,
                    "main_image": image,
                },
            )
            if created:
                created_products += 1
                ProductImage.objects.create(product=product, url=image, alt=name, position=0)

        # -------------------------------
        # STOREFRONT CONTENT
        # -------------------------------
        for index, (title, description, image_url, button_text, button_link) in enumerate(SLIDES, start=1):
            HeroCarouselSlide.objects.get_or_create(
                title=title,
                defaults={
                    "description": description,
                    "image_url": image_url,
                    "button_text": button_text,
                    "button_link": button_link,
                    "priority_order": index,
                },
            )

        if not MainMessage.objects.exists():
            MainMessage.objects.create(
                content="Offre spéciale : -10% sur nos diagnostics jusqu'à la fin du mois.",
                active=True,
            )

        self.stdout.write(
            self.style.SUCCESS(f"Catalog seeded. New products: {created_products}")
        )
