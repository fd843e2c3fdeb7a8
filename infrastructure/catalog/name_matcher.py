"""
Fuzzy matching of exercise display names against catalog names.

Matching order: exact after normalization, exact with spaces ignored, the
alias table, then rapidfuzz token_set_ratio.
"""
import re
from typing import Dict, Iterable, Optional, Tuple

from rapidfuzz import fuzz

from domain.converters import base_exercise_name


def normalize_name(name: str) -> str:
    """
    Normalize exercise names for better fuzzy matching.

    - drop distance / repetition parameters ("Row 500m" -> "Row")
    - lowercase
    - replace hyphens/underscores with spaces
    - remove non-alphanumeric characters (keep spaces)
    - collapse multiple spaces
    """
    if not name:
        return ""
    s = base_exercise_name(name).lower().strip()

    s = s.replace("-", " ").replace("_", " ")

    # keep alnum and spaces
    s = re.sub(r"[^a-z0-9\s]", " ", s)
    # collapse whitespace
    s = re.sub(r"\s+", " ", s).strip()
    return s


# Spelling variants of catalog names (normalized form -> catalog name)
ALIAS_MAP: Dict[str, str] = {
    "course": "Run",
    "running": "Run",
    "rowing": "RowErg",
    "row": "RowErg",
    "ski erg": "SkiErg",
    "ski": "SkiErg",
    "squats": "Air Squats",
    "air squat": "Air Squats",
    "squat": "Air Squats",
    "pullups": "Pull-ups",
    "pull up": "Pull-ups",
    "pullup": "Pull-ups",
    "pushups": "Push-ups",
    "push up": "Push-ups",
    "pushup": "Push-ups",
    "wallballs": "Wall Balls",
    "wall ball": "Wall Balls",
}


def best_match(
    query: str, choices: Iterable[str]
) -> Tuple[Optional[str], float]:
    """
    Return (best_choice, confidence) for an exercise name against catalog names.

    confidence is 0-1.
    """
    if not query:
        return None, 0.0

    normalized_query = normalize_name(query)
    if not normalized_query:
        return None, 0.0

    choices = list(choices)

    # exact match after normalization, then spaces ignored
    for choice in choices:
        norm = normalize_name(choice)
        if norm == normalized_query or norm.replace(" ", "") == normalized_query.replace(" ", ""):
            return choice, 1.0

    alias_target = ALIAS_MAP.get(normalized_query)
    if alias_target and alias_target in choices:
        return alias_target, 1.0

    # rapidfuzz token_set_ratio on normalized tokens
    best_choice = None
    best_score = -1.0

    for original in choices:
        norm = normalize_name(original)
        if not norm:
            continue
        score = fuzz.token_set_ratio(normalized_query, norm)
        if score > best_score:
            best_score = score
            best_choice = original

    if best_choice is None:
        return None, 0.0

    # map 0-100 → 0-1
    return best_choice, best_score / 100.0
