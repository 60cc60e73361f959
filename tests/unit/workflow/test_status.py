"""Unit tests for status normalization."""

import logging

import pytest

from ticketgate.workflow import STATUS_SYNONYMS, CanonicalStatus, normalize_status
from ticketgate.workflow.status import _build_lookup


@pytest.mark.unit
class TestNormalizeStatus:
    """Tests for normalize_status."""

    @pytest.mark.parametrize(
        ("phrase", "expected"),
        [
            ("Send for review", CanonicalStatus.CODE_REVIEW),
            ("  QA  ", CanonicalStatus.IN_TEST),
            ("start dev", CanonicalStatus.IN_DEVELOPMENT),
            ("Mark as done", CanonicalStatus.CLOSE),
            ("reset", CanonicalStatus.OPEN),
            ("Code Review", CanonicalStatus.CODE_REVIEW),
        ],
    )
    def test_known_phrases(self, phrase: str, expected: CanonicalStatus) -> None:
        """Synonyms and canonical names map case-insensitively after trimming."""
        assert normalize_status(phrase) is expected

    def test_canonical_values_are_display_strings(self) -> None:
        """Canonical statuses compare equal to their lowercase names."""
        assert normalize_status("review") == "code review"
        assert str(CanonicalStatus.IN_TEST) == "in test"

    def test_unknown_phrase_passes_through_trimmed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unrecognized input is returned unchanged apart from trimming, with a warning."""
        with caplog.at_level(logging.WARNING, logger="ticketgate.workflow.status"):
            result = normalize_status("  Blocked ")

        assert result == "Blocked"
        assert not isinstance(result, CanonicalStatus)
        assert "Unknown status input received" in caplog.text

    def test_no_substring_matching(self) -> None:
        """Phrases containing a synonym are not matched."""
        assert normalize_status("please review") == "please review"

    def test_every_synonym_resolves(self) -> None:
        """Each listed synonym maps back to its own status."""
        for canonical, phrases in STATUS_SYNONYMS.items():
            for phrase in phrases:
                assert normalize_status(phrase) is canonical


@pytest.mark.unit
def test_conflicting_synonyms_rejected() -> None:
    """A phrase listed under two statuses is a table error."""
    with pytest.raises(ValueError, match="maps to both"):
        _build_lookup(
            {
                CanonicalStatus.OPEN: ("again",),
                CanonicalStatus.CLOSE: ("Again",),
            }
        )
