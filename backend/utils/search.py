# backend/utils/search.py
"""
Storefront search scoring.

Queries are matched against product name, material, description and category
with additive weights. English and Indonesian shoppers use the same search box,
so every query term is expanded through a small synonym table before scoring.
"""
import re
from typing import Dict, Iterable, List, Sequence, Tuple

from models.product import Product

MAX_RESULTS = 8

# Category keywords, including plural and Indonesian forms
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "rings": ("ring", "rings", "cincin"),
    "necklaces": ("necklace", "necklaces", "kalung", "liontin", "pendant"),
    "bracelets": ("bracelet", "bracelets", "gelang", "cuff"),
    "earrings": ("earring", "earrings", "anting", "anting-anting", "giwang"),
}

# Prefixes that hint at a category while the shopper is still typing
CATEGORY_STEMS: Dict[str, Tuple[str, ...]] = {
    "rings": ("ring", "cincin"),
    "necklaces": ("neck", "kalung"),
    "bracelets": ("brace", "gelang"),
    "earrings": ("ear", "anting"),
}

# Symmetric material / descriptor synonyms
_SYNONYM_PAIRS = (
    ("gold", "emas"),
    ("silver", "perak"),
    ("pearl", "mutiara"),
    ("diamond", "berlian"),
    ("rose", "mawar"),
    ("stainless", "baja"),
)

SYNONYMS: Dict[str, Tuple[str, ...]] = {}
for _a, _b in _SYNONYM_PAIRS:
    SYNONYMS[_a] = SYNONYMS.get(_a, ()) + (_b,)
    SYNONYMS[_b] = SYNONYMS.get(_b, ()) + (_a,)
for _category, _words in CATEGORY_KEYWORDS.items():
    for _w in _words:
        SYNONYMS[_w] = SYNONYMS.get(_w, ()) + tuple(x for x in _words if x != _w)

# Weights
W_CATEGORY_EXACT = 8
W_CATEGORY_STEM = 5
W_NAME_PREFIX = 6
W_NAME_WORD = 4
W_NAME_SUBSTRING = 3
W_MATERIAL_WORD = 2
W_MATERIAL_SUBSTRING = 1
W_DESCRIPTION = 1
W_PHRASE_PREFIX = 6
W_PHRASE_CONTAINS = 4


def normalize_query(q: str) -> str:
    return " ".join((q or "").lower().split())


def tokenize(query: str) -> List[str]:
    return [t for t in re.split(r"[^\w-]+", query) if len(t) >= 2]


def expand(token: str) -> Tuple[str, ...]:
    return (token,) + SYNONYMS.get(token, ())


def _has_word(haystack: str, term: str) -> bool:
    return re.search(r"(?<!\w)" + re.escape(term) + r"(?!\w)", haystack) is not None


def _category_score(terms: Iterable[str], category: str) -> int:
    best = 0
    for term in terms:
        keywords = CATEGORY_KEYWORDS.get(category, ())
        if term in keywords:
            best = max(best, W_CATEGORY_EXACT)
        elif any(term.startswith(stem) for stem in CATEGORY_STEMS.get(category, ())):
            best = max(best, W_CATEGORY_STEM)
    return best


def _term_score(term: str, name: str, material: str, description: str, whole_words: bool = False) -> int:
    # Synonyms only count as whole words, so "ring" never matches "earrings"
    score = 0
    if _has_word(name, term):
        score += W_NAME_WORD
        if name.startswith(term):
            score += W_NAME_PREFIX
    elif not whole_words and term in name:
        score += W_NAME_SUBSTRING
        if name.startswith(term):
            score += W_NAME_PREFIX
    if _has_word(material, term):
        score += W_MATERIAL_WORD
    elif not whole_words and term in material:
        score += W_MATERIAL_SUBSTRING
    if _has_word(description, term) if whole_words else term in description:
        score += W_DESCRIPTION
    return score


def score_product(query: str, product: Product) -> int:
    """Score a single product against an already normalised query."""
    name = (product.name or "").lower()
    material = (product.material or "").lower()
    description = (product.description or "").lower()
    category = (product.category or "").lower()

    tokens = tokenize(query) or [query]
    score = _category_score([query, *tokens], category)

    for token in tokens:
        score += max(
            _term_score(term, name, material, description, whole_words=(term != token))
            for term in expand(token)
        )

    if len(tokens) > 1:
        if name.startswith(query):
            score += W_PHRASE_PREFIX
        elif query in name:
            score += W_PHRASE_CONTAINS

    return score


def search_products(query: str, products: Sequence[Product], limit: int = MAX_RESULTS) -> List[Product]:
    """Return the best matching products, highest score first (ties by name)."""
    q = normalize_query(query)
    if not q:
        return []

    scored = [(score_product(q, p), p) for p in products]
    scored = [(s, p) for s, p in scored if s > 0]
    scored.sort(key=lambda sp: (-sp[0], (sp[1].name or "").lower()))
    return [p for _, p in scored[:limit]]
