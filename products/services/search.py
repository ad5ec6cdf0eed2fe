"""
======================================================
PATH: products/services/search.py
======================================================
PRODUCT SEARCH RANKING

Match quality per field (lower = better):
- 1   exact match
- 2   one edit away (Levenshtein distance 1)
- 3   starts with the term
- 4   contains the term
- 999 no match / no term

Field weights: name +0, description +10, technical_specs +20.
A product's rank is its best (minimum) score; ties keep input order.
All comparisons are case-insensitive.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from django.db.models import QuerySet

from products.models import Product

NO_MATCH = 999

DESCRIPTION_WEIGHT = 10
SPECS_WEIGHT = 20


class SearchParamError(ValueError):
    """Raised when a search parameter cannot be parsed."""


def levenshtein_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def match_score(value: Optional[str], term: Optional[str]) -> int:
    if not term:
        return NO_MATCH

    value = (value or "").lower()
    term = term.lower()

    if value == term:
        return 1
    if levenshtein_distance(value, term) == 1:
        return 2
    if value.startswith(term):
        return 3
    if term in value:
        return 4
    return NO_MATCH


@dataclass(frozen=True)
class SearchCriteria:
    query: str = ""
    description: str = ""
    features: str = ""
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    only_available: bool = False
    category: Optional[str] = None

    @classmethod
    def from_query_params(cls, params) -> "SearchCriteria":
        return cls(
            query=(params.get("query") or "").strip(),
            description=(params.get("description") or "").strip(),
            features=(params.get("features") or "").strip(),
            min_price=_parse_price(params.get("minPrice"), "minPrice"),
            max_price=_parse_price(params.get("maxPrice"), "maxPrice"),
            only_available=(params.get("onlyAvailable") or "").lower() == "true",
            category=_parse_category(params.get("category")),
        )


def _parse_price(raw, name: str) -> Optional[Decimal]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise SearchParamError(f"{name} must be a number") from exc
    if not value.is_finite() or value < 0:
        raise SearchParamError(f"{name} must be a non-negative number")
    return value


def _parse_category(raw) -> Optional[str]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except ValueError as exc:
        raise SearchParamError("category must be a valid id") from exc


def product_rank(product, criteria: SearchCriteria) -> int:
    score = NO_MATCH

    if criteria.query:
        score = min(score, match_score(product.name, criteria.query))
    if criteria.description:
        score = min(score, match_score(product.description, criteria.description) + DESCRIPTION_WEIGHT)
    if criteria.features:
        score = min(score, match_score(product.technical_specs, criteria.features) + SPECS_WEIGHT)

    return score


def rank_products(products: Iterable, criteria: SearchCriteria) -> List:
    # sorted() is stable: equal ranks keep the incoming order
    return sorted(products, key=lambda p: product_rank(p, criteria))


def filter_products(qs: QuerySet, criteria: SearchCriteria) -> QuerySet:
    if criteria.min_price is not None:
        qs = qs.filter(unit_price__gte=criteria.min_price)
    if criteria.max_price is not None:
        qs = qs.filter(unit_price__lte=criteria.max_price)

    if criteria.query:
        qs = qs.filter(name__icontains=criteria.query)
    if criteria.description:
        qs = qs.filter(description__icontains=criteria.description)
    if criteria.features:
        qs = qs.filter(technical_specs__icontains=criteria.features)

    if criteria.only_available:
        qs = qs.filter(available=True)
    if criteria.category:
        qs = qs.filter(category_id=criteria.category)

    return qs


def search_products(criteria: SearchCriteria, *, base_qs: Optional[QuerySet] = None) -> List[Product]:
    if criteria.min_price is not None and criteria.max_price is not None:
        if criteria.min_price > criteria.max_price:
            raise SearchParamError("minPrice cannot be greater than maxPrice")

    qs = base_qs if base_qs is not None else Product.objects.filter(active=True)
    qs = filter_products(qs, criteria).select_related("category").prefetch_related("images")
    return rank_products(qs, criteria)
