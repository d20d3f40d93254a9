# jde_er/event_rules/er_decoder/criteria_splitter.py
"""Split the English description of an If/While block into clauses.

The description ("If A is equal to B and C is greater than D") is authored prose
that runs parallel to the structured CRE_NODE list. Clauses come back in order,
each later clause carrying its joining "and"/"or".
"""

import html
import re

OR_MARKER = "__OR_MARKER__"

# Comparator phrases whose inner "or" is not a logical OR
LESS_THAN_OR_EQUAL_TO = re.compile(r"\b(less\s+than)\s+or\s+(equal\s+to)\b", re.IGNORECASE)
GREATER_THAN_OR_EQUAL_TO = re.compile(r"\b(greater\s+than)\s+or\s+(equal\s+to)\b", re.IGNORECASE)
EQUAL_TO_OR_EMPTY = re.compile(r"\b(equal\s+to)\s+or\s+(empty)\b", re.IGNORECASE)

PROTECTED_PHRASES = (LESS_THAN_OR_EQUAL_TO, GREATER_THAN_OR_EQUAL_TO, EQUAL_TO_OR_EMPTY)

_SPLIT_ON_AND_OR = re.compile(r"\s+(and|or)\s+", re.IGNORECASE)


def protect_comparators(text: str) -> str:
    """Replace the "or" inside protected comparator phrases with OR_MARKER."""
    for pattern in PROTECTED_PHRASES:
        text = pattern.sub(rf"\1 {OR_MARKER} \2", text)
    return text


def restore_comparators(text: str) -> str:
    return text.replace(OR_MARKER, "or")


def split_and_or(text: str) -> list[str]:
    """Split on stand-alone and/or, keeping each operator as its own element.
    Empty fragments are dropped and protected phrases are restored.
    """
    parts = (p.strip() for p in _SPLIT_ON_AND_OR.split(text))
    return [restore_comparators(p) for p in parts if p]


def split_criteria(description: str | None) -> list[str]:
    """Return the ordered clauses of a criteria description.

    The first clause is returned verbatim (it normally carries the If/While
    keyword); every following (operator, clause) pair is merged into
    "{and|or} {clause}". A trailing operator without a clause is dropped.
    """
    if description is None or not description.strip():
        return []

    rule = html.unescape(description).strip()
    raw = split_and_or(protect_comparators(rule))
    if not raw:
        return []

    clauses = [raw[0]]
    for i in range(1, len(raw) - 1, 2):
        op = "or" if raw[i].lower() == "or" else "and"
        clauses.append(f"{op} {raw[i + 1]}")
    return clauses


__all__ = [
    "OR_MARKER",
    "PROTECTED_PHRASES",
    "protect_comparators",
    "restore_comparators",
    "split_and_or",
    "split_criteria",
]
