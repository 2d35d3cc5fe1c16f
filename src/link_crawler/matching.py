"""Match predicates deciding whether a crawled page is recorded as a result.

A predicate takes the page URL and the caller's search terms and returns a
bool. Predicates must not have side effects; the orchestrator may call them in
any order relative to storage writes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence


MatchPredicate = Callable[[str, Sequence[str]], bool]


def _normalized_terms(search_terms: Sequence[str]) -> list[str]:
    return [term.strip().lower() for term in search_terms if term and term.strip()]


def url_contains_any_term(url: str, search_terms: Sequence[str]) -> bool:
    """True if any term occurs in ``url`` (case-insensitive); False with no terms."""
    lowered = url.lower()
    return any(term in lowered for term in _normalized_terms(search_terms))


def url_contains_all_terms(url: str, search_terms: Sequence[str]) -> bool:
    """True if every term occurs in ``url`` (case-insensitive); False with no terms."""
    terms = _normalized_terms(search_terms)
    if not terms:
        return False
    lowered = url.lower()
    return all(term in lowered for term in terms)


def match_every_page(url: str, search_terms: Sequence[str]) -> bool:
    """Record every fetched page regardless of terms."""
    return True


PREDICATES: dict[str, MatchPredicate] = {
    "any": url_contains_any_term,
    "all": url_contains_all_terms,
    "every": match_every_page,
}
