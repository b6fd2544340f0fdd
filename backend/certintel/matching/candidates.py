"""certintel/matching/candidates.py

Score a free-text (usually OCR'd) name against directory records.

Two thresholds, deliberately apart:
- AUTO_SELECT_THRESHOLD: the only bar at which a person is picked without a
  human. Misfiling a certificate under the wrong identity is worse than
  asking.
- SUGGEST_THRESHOLD: close enough to show in a "did you mean" list.

Scoring is a pure read of the Person records; nothing here mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from certintel.matching.names import Person, normalize, variant_set

AUTO_SELECT_THRESHOLD = 70
SUGGEST_THRESHOLD = 60
MAX_POSSIBLE_MATCHES = 6

EXACT_VARIANT_SCORE = 100
FIRST_NAME_WEIGHT = 45
LAST_NAME_WEIGHT = 45
DISPLAY_FIRST_LAST_WEIGHT = 20
DISPLAY_MIDDLE_WEIGHT = 5
TOKEN_OVERLAP_WEIGHT = 70


@dataclass(frozen=True)
class MatchCandidate:
    person: Person
    score: int
    matched_variant: str

    def to_dict(self) -> dict:
        return {"person": self.person.to_dict(), "score": self.score, "matched_variant": self.matched_variant}


def _contains_phrase(haystack: str, phrase: str) -> bool:
    return bool(phrase) and f" {phrase} " in f" {haystack} "


def _token_overlap(query_tokens: list[str], variant: str) -> float:
    variant_tokens = set(variant.split())
    matched = sum(1 for t in query_tokens if t in variant_tokens)
    return matched / len(query_tokens)


def score_with_variant(query_name: str | None, person: Person) -> tuple[int, str]:
    query = normalize(query_name)
    if not query:
        return 0, ""

    variants = variant_set(person)
    if query in variants:
        return EXACT_VARIANT_SCORE, query

    q_tokens = query.split()
    first = normalize(person.first_name)
    last = normalize(person.last_name)
    display = normalize(person.display_name)

    score = 0.0
    if first and f"{query} ".startswith(f"{first} "):
        score += FIRST_NAME_WEIGHT
    if last and f" {query}".endswith(f" {last}"):
        score += LAST_NAME_WEIGHT
    if len(q_tokens) >= 2:
        if _contains_phrase(display, f"{q_tokens[0]} {q_tokens[-1]}"):
            score += DISPLAY_FIRST_LAST_WEIGHT
        if any(_contains_phrase(display, t) for t in q_tokens[1:-1]):
            score += DISPLAY_MIDDLE_WEIGHT
    score = min(score, EXACT_VARIANT_SCORE)
    best_variant = normalize(f"{person.first_name} {person.last_name}") or display

    if score < SUGGEST_THRESHOLD:
        for variant in sorted(variants):
            overlap = _token_overlap(q_tokens, variant) * TOKEN_OVERLAP_WEIGHT
            if overlap > score:
                score = overlap
                best_variant = variant

    return int(round(score)), best_variant


def score(query_name: str | None, person: Person) -> int:
    return score_with_variant(query_name, person)[0]


def _scored(query_name: str | None, pool: Iterable[Person]) -> list[MatchCandidate]:
    out: list[MatchCandidate] = []
    for person in pool:
        value, variant = score_with_variant(query_name, person)
        out.append(MatchCandidate(person=person, score=value, matched_variant=variant))
    return out


def find_best_match(query_name: str | None, pool: Iterable[Person]) -> MatchCandidate | None:
    """Top scorer at or above AUTO_SELECT_THRESHOLD; None when that top score is shared."""
    best: MatchCandidate | None = None
    tied = False
    for candidate in _scored(query_name, pool):
        if best is None or candidate.score > best.score:
            best = candidate
            tied = False
        elif candidate.score == best.score:
            tied = True
    if best is None or best.score < AUTO_SELECT_THRESHOLD or tied:
        return None
    return best


def find_possible_matches(
    query_name: str | None,
    pool: Iterable[Person],
    *,
    limit: int = MAX_POSSIBLE_MATCHES,
) -> list[MatchCandidate]:
    ranked = [c for c in _scored(query_name, pool) if c.score >= SUGGEST_THRESHOLD]
    ranked.sort(key=lambda c: c.score, reverse=True)
    return ranked[:limit]


def match_recipient(name: str | None, directory: Iterable[Person]) -> Person | None:
    best = find_best_match(name, directory)
    return best.person if best else None


def rank_possible_recipients(name: str | None, directory: Iterable[Person]) -> list[MatchCandidate]:
    return find_possible_matches(name, directory)
