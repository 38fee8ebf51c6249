"""Term variant expansion.

Content repositories name the same logical page in many ways: a page titled
"Product Page" usually lives at ``product-page`` but may also appear as
``productPage`` or ``product_page``. ``generate_variants`` re-tokenizes a
raw term and renders it in each naming convention, plus a crude stem.

Example:
    >>> [v.text for v in generate_variants("Product Pages")]
    ['product pages', 'productPages', 'product-pages', 'product_pages', 'product page']
"""

from __future__ import annotations

import re

from content_discovery.domain.search import TermVariant, VariantKind


# Splits on separators and on lower/digit -> upper case boundaries ("productPage" -> product, Page)
_TOKEN_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+|[^\W\d_]+", re.UNICODE)

# (suffix, replacement) tried in order; first match wins
_SUFFIX_RULES: tuple[tuple[str, str], ...] = (
    ("ies", "y"),
    ("sses", "ss"),
    ("ing", ""),
    ("ed", ""),
    ("s", ""),
)
_MIN_STEM_LENGTH = 3


def tokenize(term: str) -> list[str]:
    """Split a term on whitespace, separators and case boundaries into lower-case tokens."""
    return [match.group(0).lower() for match in _TOKEN_PATTERN.finditer(term)]


def stem(word: str) -> str:
    """Strip one common suffix (plurals, -ing, -ed); best effort, not linguistic."""
    lower = word.lower()
    if lower.endswith("ss"):
        return lower
    for suffix, replacement in _SUFFIX_RULES:
        if lower.endswith(suffix):
            candidate = lower[: -len(suffix)] + replacement
            if len(candidate) >= _MIN_STEM_LENGTH:
                return candidate
    return lower


def generate_variants(term: str) -> list[TermVariant]:
    """Expand ``term`` into an ordered set of lexical variants.

    The ORIGINAL variant (trimmed, lower-cased) always comes first. Variants
    whose normalized text duplicates an earlier one are dropped.
    """
    original = term.strip().lower()
    variants = [TermVariant(text=original, kind=VariantKind.ORIGINAL)]
    tokens = tokenize(term)
    if not tokens:
        return variants

    head, *tail = tokens
    candidates = [
        (head + "".join(token.capitalize() for token in tail), VariantKind.CAMEL_CASE),
        ("-".join(tokens), VariantKind.KEBAB_CASE),
        ("_".join(tokens), VariantKind.SNAKE_CASE),
        (" ".join(tokens), VariantKind.SPACE_SEPARATED),
        (" ".join(stem(token) for token in tokens), VariantKind.STEMMED),
    ]

    seen = {variants[0].normalized}
    for text, kind in candidates:
        variant = TermVariant(text=text, kind=kind)
        if variant.normalized in seen:
            continue
        seen.add(variant.normalized)
        variants.append(variant)
    return variants
