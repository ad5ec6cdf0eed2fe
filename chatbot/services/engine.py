# chatbot/services/engine.py

"""
KEYWORD CHATBOT ENGINE

Pure function: reply(text, history) -> BotReply. No database access.

history is the conversation so far, oldest first; each entry exposes
message_type ("USER" / "BOT" / "ADMIN"), content and context.

Flow:
1. current context = context of the most recent BOT message
2. contact collection steps (email → subject → message → ready_to_submit)
3. follow-up on product info ("oui" after a product pitch)
4. keyword matching on the lowercased text, first match wins
5. default reply
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

# ----- contexts -----
CTX_INITIAL = "initial"
CTX_ASKING_EMAIL = "asking_for_email"
CTX_ASKING_SUBJECT = "asking_for_subject"
CTX_ASKING_MESSAGE = "asking_for_message"
CTX_READY = "ready_to_submit"
CTX_INFO_PRODUCTS = "info_products"
CTX_INFO_PRICING = "info_pricing"
CTX_INFO_PRODUCT = "info_specific_product"

CONTEXTS = (
    CTX_INITIAL,
    CTX_ASKING_EMAIL,
    CTX_ASKING_SUBJECT,
    CTX_ASKING_MESSAGE,
    CTX_READY,
    CTX_INFO_PRODUCTS,
    CTX_INFO_PRICING,
    CTX_INFO_PRODUCT,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_SUBJECT_LENGTH = 2
MIN_MESSAGE_LENGTH = 5
DEFAULT_SUBJECT = "Demande via chatbot"

BOT = "BOT"
USER = "USER"

# ----- keyword groups (checked in this order) -----
GREETINGS = ("bonjour", "salut", "hello", "hey", "bonsoir")
PRODUCT_WORDS = ("produit", "service", "offre", "solution")
PRICING_WORDS = ("tarif", "prix", "coût", "devis", "combien")
DIAGNOSTIC_WORDS = ("diagnostic",)
INTRUSION_WORDS = ("intrusion", "pentest", "test")
SOC_WORDS = ("soc", "security operations")
INVESTIGATION_WORDS = ("investigation", "incident")
CRISIS_WORDS = ("crise", "urgence")
CONTACT_WORDS = (
    "contact",
    "aide",
    "conseiller",
    "humain",
    "parler",
    "assistance",
    "relation",
    "personne",
    "admin",
)
AFFIRMATIVES = ("oui", "ok", "oui merci", "d'accord", "bien sûr", "volontiers")
INFO_FOLLOW_UPS = ("oui", "ok", "d'accord", "yes", "plus d'informations", "plus de détails")
HANDOFF_HINTS = ("conseiller", "relation", "expert", "contacter")

# ----- replies -----
WELCOME = "Bonjour ! Je suis l'assistant virtuel de CYNA. Comment puis-je vous aider aujourd'hui ?"
ESCALATION_NOTICE = (
    "Cette conversation a été escaladée vers un conseiller. "
    "Un membre de notre équipe vous répondra dès que possible."
)

ASK_EMAIL = (
    "Je vais vous mettre en relation avec un conseiller CYNA qui pourra répondre à toutes vos "
    "questions. Pourriez-vous me préciser votre adresse email afin qu'un expert puisse vous "
    "contacter dans les plus brefs délais ?"
)
ASK_EMAIL_AFTER_INFO = (
    "Je vais vous mettre en relation avec l'un de nos conseillers qui pourra vous donner toutes "
    "les informations détaillées. Pourriez-vous me préciser votre adresse email afin qu'un expert "
    "puisse vous contacter dans les plus brefs délais ?"
)
ASK_EMAIL_AFTER_YES = (
    "Je vais vous mettre en relation avec l'un de nos conseillers. Pourriez-vous me préciser "
    "votre adresse email afin qu'un expert puisse vous contacter dans les plus brefs délais ?"
)
EMAIL_STILL_NEEDED = (
    "Pour vous contacter, j'ai besoin de votre adresse email. Pouvez-vous me l'indiquer ?"
)
EMAIL_INVALID = (
    "Je n'ai pas reconnu cela comme une adresse email valide. Pourriez-vous me donner votre "
    "adresse email (ex: exemple@domaine.com) afin qu'un conseiller puisse vous contacter ?"
)
ASK_SUBJECT = "Merci pour votre email. Pourriez-vous préciser brièvement l'objet de votre demande ?"
SUBJECT_TOO_SHORT = "Pourriez-vous fournir un peu plus de détails sur l'objet de votre demande ?"
ASK_MESSAGE = (
    "Merci pour ces précisions. Maintenant, pouvez-vous détailler votre demande ? Cela nous aidera "
    "à mieux comprendre et répondre à votre besoin."
)
MESSAGE_TOO_SHORT = "Pourriez-vous fournir un peu plus de détails sur votre demande ?"

GREETING_REPLY = "Bonjour ! Comment puis-je vous aider aujourd'hui ?"
PRODUCTS_REPLY = (
    "Nous proposons plusieurs solutions de cybersécurité : Diagnostic Cyber, Test d'intrusion, "
    "Micro SOC, SOC Managé, Investigation et Gestion de crise. Souhaitez-vous des détails sur "
    "l'un de ces services ?"
)
PRICING_REPLY = (
    "Nos tarifs varient selon les services. Le Diagnostic Cyber commence à 4500€, le Test "
    "d'intrusion à 4000€, le Micro SOC à 5000€, le SOC Managé à 7000€. Souhaitez-vous être mis "
    "en relation avec un conseiller pour obtenir un devis personnalisé ?"
)
DIAGNOSTIC_REPLY = (
    "Le Diagnostic Cyber est un audit complet de votre infrastructure informatique qui permet "
    "d'identifier les vulnérabilités de sécurité. Prix à partir de 4500€. Souhaitez-vous être "
    "mis en relation avec un conseiller pour en savoir plus ?"
)
INTRUSION_REPLY = (
    "Le Test d'intrusion simule des attaques réelles pour évaluer la robustesse de vos systèmes. "
    "Il permet d'identifier les vulnérabilités exploitables dans votre infrastructure. Prix à "
    "partir de 4000€. Souhaitez-vous être mis en relation avec un conseiller ?"
)
SOC_REPLY = (
    "Nous proposons deux solutions SOC (Security Operations Center) : le Micro SOC adapté aux PME "
    "(à partir de 5000€) et le SOC Managé pour les grandes entreprises avec une équipe dédiée "
    "24/7 (à partir de 7000€). Souhaitez-vous discuter avec un conseiller pour déterminer la "
    "solution adaptée à vos besoins ?"
)
INVESTIGATION_REPLY = (
    "Notre service d'Investigation permet d'analyser les incidents de sécurité et d'y remédier "
    "efficacement. Prix à partir de 8500€. Souhaitez-vous être mis en relation avec un expert ?"
)
CRISIS_REPLY = (
    "Notre service de Gestion de crise vous accompagne lors d'incidents majeurs de cybersécurité, "
    "avec une équipe dédiée pour minimiser l'impact. Prix à partir de 9500€. Souhaitez-vous être "
    "mis en contact avec un spécialiste ?"
)
AFFIRMATIVE_REPLY = (
    "Souhaitez-vous des informations spécifiques sur l'un de nos services ou être mis en "
    "relation avec un conseiller ?"
)
DEFAULT_REPLY = (
    "Je peux vous renseigner sur nos produits et services de cybersécurité, nos tarifs ou vous "
    "mettre en relation avec un conseiller. Comment puis-je vous aider ?"
)


@dataclass(frozen=True)
class BotReply:
    text: str
    needs_human_support: bool
    context: str = CTX_INITIAL
    collected: Optional[dict] = field(default=None)

    @property
    def ready_to_submit(self) -> bool:
        return self.context == CTX_READY


def _type(entry) -> str:
    return str(getattr(entry, "message_type", "") or "")


def current_context(history: Sequence) -> str:
    for entry in reversed(history):
        if _type(entry) == BOT:
            return getattr(entry, "context", "") or CTX_INITIAL
    return CTX_INITIAL


def _last_bot_content(history: Sequence) -> str:
    for entry in reversed(history):
        if _type(entry) == BOT:
            return (entry.content or "").lower()
    return ""


def _answers_to(history: Sequence, context: str) -> list[str]:
    """USER messages sent while the bot was in `context`, oldest first."""
    answers = []
    asked = CTX_INITIAL
    for entry in history:
        kind = _type(entry)
        if kind == BOT:
            asked = getattr(entry, "context", "") or CTX_INITIAL
        elif kind == USER and asked == context:
            answers.append((entry.content or "").strip())
    return answers


def collected_email(history: Sequence) -> str:
    for answer in reversed(_answers_to(history, CTX_ASKING_EMAIL)):
        if EMAIL_RE.match(answer.lower()):
            return answer.lower()
    return ""


def collected_subject(history: Sequence) -> str:
    for answer in reversed(_answers_to(history, CTX_ASKING_SUBJECT)):
        if len(answer) >= MIN_SUBJECT_LENGTH:
            return answer
    return ""


def _contains_any(text: str, words: Sequence[str]) -> bool:
    return any(word in text for word in words)


def _collection_step(context: str, raw: str, lowered: str, history: Sequence) -> Optional[BotReply]:
    if context == CTX_ASKING_EMAIL:
        if EMAIL_RE.match(lowered):
            return BotReply(ASK_SUBJECT, True, CTX_ASKING_SUBJECT, {"email": lowered})
        if lowered in ("oui", "ok", "d'accord", "yes"):
            return BotReply(EMAIL_STILL_NEEDED, True, CTX_ASKING_EMAIL)
        return BotReply(EMAIL_INVALID, True, CTX_ASKING_EMAIL)

    if context == CTX_ASKING_SUBJECT:
        if len(lowered) < MIN_SUBJECT_LENGTH:
            return BotReply(SUBJECT_TOO_SHORT, True, CTX_ASKING_SUBJECT)
        return BotReply(
            ASK_MESSAGE,
            True,
            CTX_ASKING_MESSAGE,
            {"email": collected_email(history), "subject": raw},
        )

    if context == CTX_ASKING_MESSAGE:
        if len(lowered) < MIN_MESSAGE_LENGTH:
            return BotReply(MESSAGE_TOO_SHORT, True, CTX_ASKING_MESSAGE)

        email = collected_email(history)
        subject = collected_subject(history)
        text = "Parfait ! Nous avons bien enregistré votre demande"
        if subject:
            text += f' concernant "{subject}"'
        text += ". Un conseiller va vous contacter prochainement"
        if email:
            text += f" à l'adresse {email}"
        text += ". Merci pour votre confiance !"
        return BotReply(
            text,
            True,
            CTX_READY,
            {"email": email, "subject": subject or DEFAULT_SUBJECT, "message": raw},
        )

    if context in (CTX_INFO_PRODUCTS, CTX_INFO_PRODUCT) and lowered in INFO_FOLLOW_UPS:
        return BotReply(ASK_EMAIL_AFTER_INFO, True, CTX_ASKING_EMAIL)

    return None


def reply(text: str, history: Sequence = ()) -> BotReply:
    raw = (text or "").strip()
    lowered = raw.lower()

    step = _collection_step(current_context(history), raw, lowered, history)
    if step is not None:
        return step

    if _contains_any(lowered, GREETINGS):
        return BotReply(GREETING_REPLY, False, CTX_INITIAL)
    if _contains_any(lowered, PRODUCT_WORDS):
        return BotReply(PRODUCTS_REPLY, False, CTX_INFO_PRODUCTS)
    if _contains_any(lowered, PRICING_WORDS):
        return BotReply(PRICING_REPLY, True, CTX_INFO_PRICING)
    if _contains_any(lowered, DIAGNOSTIC_WORDS):
        return BotReply(DIAGNOSTIC_REPLY, True, CTX_INFO_PRODUCT)
    if _contains_any(lowered, INTRUSION_WORDS):
        return BotReply(INTRUSION_REPLY, True, CTX_INFO_PRODUCT)
    if _contains_any(lowered, SOC_WORDS):
        return BotReply(SOC_REPLY, True, CTX_INFO_PRODUCT)
    if _contains_any(lowered, INVESTIGATION_WORDS):
        return BotReply(INVESTIGATION_REPLY, True, CTX_INFO_PRODUCT)
    if _contains_any(lowered, CRISIS_WORDS):
        return BotReply(CRISIS_REPLY, True, CTX_INFO_PRODUCT)
    if _contains_any(lowered, CONTACT_WORDS):
        return BotReply(ASK_EMAIL, True, CTX_ASKING_EMAIL)

    if lowered in AFFIRMATIVES:
        if _contains_any(_last_bot_content(history), HANDOFF_HINTS):
            return BotReply(ASK_EMAIL_AFTER_YES, True, CTX_ASKING_EMAIL)
        return BotReply(AFFIRMATIVE_REPLY, False, CTX_INITIAL)

    return BotReply(DEFAULT_REPLY, False, CTX_INITIAL)
