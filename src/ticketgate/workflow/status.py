"""Status Normalizer - Maps free-text status phrases to canonical workflow states."""

from __future__ import annotations

from enum import StrEnum

from ticketgate.logging import get_logger

logger = get_logger("workflow.status")


class CanonicalStatus(StrEnum):
    """Workflow states the agent can ask for by name."""

    OPEN = "open"
    IN_DEVELOPMENT = "in development"
    CODE_REVIEW = "code review"
    IN_TEST = "in test"
    CLOSE = "close"


STATUS_SYNONYMS: dict[CanonicalStatus, tuple[str, ...]] = {
    CanonicalStatus.OPEN: ("reopen", "start over", "reset"),
    CanonicalStatus.IN_DEVELOPMENT: (
        "dev",
        "developing",
        "start dev",
        "kickoff",
        "start working",
        "begin work",
    ),
    CanonicalStatus.CODE_REVIEW: (
        "review",
        "send for review",
        "ready for review",
        "submit for review",
    ),
    CanonicalStatus.IN_TEST: ("qa", "testing", "verify", "test it", "ready for qa"),
    CanonicalStatus.CLOSE: (
        "done",
        "complete",
        "finish",
        "resolved",
        "mark as done",
        "close it",
    ),
}


def _build_lookup(
    synonyms: dict[CanonicalStatus, tuple[str, ...]],
) -> dict[str, CanonicalStatus]:
    """Flatten the synonym table into phrase -> canonical status.

    Raises:
        ValueError: If one phrase maps to two different states.
    """
    lookup: dict[str, CanonicalStatus] = {}
    for canonical, phrases in synonyms.items():
        for phrase in (canonical.value, *phrases):
            key = phrase.lower().strip()
            existing = lookup.get(key)
            if existing is not None and existing is not canonical:
                raise ValueError(
                    f"Status phrase {phrase!r} maps to both {existing.value!r} "
                    f"and {canonical.value!r}"
                )
            lookup[key] = canonical
    return lookup


_LOOKUP = _build_lookup(STATUS_SYNONYMS)


def normalize_status(text: str) -> CanonicalStatus | str:
    """Map a status phrase to its canonical state.

    Matching is exact after lower-casing and trimming; there is no fuzzy or
    substring matching.

    Args:
        text: Free-text status phrase, e.g. "Send for review".

    Returns:
        The canonical status, or the trimmed input unchanged when the phrase
        is not recognized. Unrecognized input is logged as a warning.
    """
    cleaned = text.strip()
    canonical = _LOOKUP.get(cleaned.lower())
    if canonical is None:
        logger.warning("Unknown status input received: %r", text)
        return cleaned
    return canonical
