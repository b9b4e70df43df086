"""Tests for the extractive summarizer."""

import re
from unittest.mock import patch

import pytest

from docflux.config.models import SummarizerSettings
from docflux.summarizer import FALLBACK_SUMMARY, ExtractiveSummarizer, SummaryCandidate, summarize


def _sentences(summary: str) -> list[str]:
    return [s.strip() for s in re.split(r"[.!?]+", summary) if s.strip()]


class TestShortCircuit:
    def test_short_input_returned_trimmed(self):
        assert summarize("  Just a short note.  ") == "Just a short note."

    def test_boundary_is_100_chars(self):
        text = "x" * 99
        assert summarize(text) == text


class TestSummaryShape:
    def test_at_most_four_sentences_and_shorter(self, long_text):
        summary = summarize(long_text)
        assert len(_sentences(summary)) <= 4
        assert len(summary) < len(long_text)

    def test_source_order_preserved(self, long_text):
        summary = summarize(long_text)
        positions = [long_text.index(s) for s in _sentences(summary)]
        assert positions == sorted(positions)

    def test_first_sentence_favored(self, long_text):
        assert summarize(long_text).startswith("The quarterly report shows")

    def test_ends_with_period(self, long_text):
        assert summarize(long_text).endswith(".")

    def test_three_or_fewer_candidates_all_kept(self):
        text = (
            "The first sentence is long enough to keep. "
            "The second sentence is also long enough here. "
            "Tiny. "
            "The third sentence closes the short document well."
        )
        summary = summarize(text)
        assert _sentences(summary) == [
            "The first sentence is long enough to keep",
            "The second sentence is also long enough here",
            "The third sentence closes the short document well",
        ]

    def test_no_candidates_uses_head_of_text(self):
        text = "word " * 80
        summary = summarize(text)
        assert summary.endswith(".")
        assert len(summary) <= 301

    def test_large_pool_gets_four_sentences(self):
        text = " ".join(f"Sentence number {i} talks about a separate topic entirely." for i in range(10))
        assert len(_sentences(summarize(text))) == 4

    def test_max_sentences_setting_caps_output(self, long_text):
        settings = SummarizerSettings(max_sentences=2)
        assert len(_sentences(summarize(long_text, settings))) == 2

    def test_deterministic(self, long_text):
        assert summarize(long_text) == summarize(long_text)


class TestScoring:
    def test_position_bonus(self):
        first = SummaryCandidate(text="short words only here", position=0)
        middle = SummaryCandidate(text="short words only here", position=5)
        assert ExtractiveSummarizer.score(first, 10) - ExtractiveSummarizer.score(middle, 10) == 3

    def test_keyword_digit_comma_bonus(self):
        plain = SummaryCandidate(text="alpha beta gamma", position=5)
        rich = SummaryCandidate(text="however, alpha 42", position=5)
        # keyword +2, comma +1, digit +1
        assert ExtractiveSummarizer.score(rich, 10) - ExtractiveSummarizer.score(plain, 10) == 4

    def test_length_bonus(self):
        words = " ".join(["word"] * 20)
        candidate = SummaryCandidate(text=words, position=5)
        assert ExtractiveSummarizer.score(candidate, 10) == 3

    def test_normalize_strips_unsupported_chars(self):
        assert ExtractiveSummarizer.normalize("a  @ b\n\n#c") == "a b c"


class TestFallback:
    def test_internal_failure_returns_fallback(self, long_text):
        summarizer = ExtractiveSummarizer()
        with patch.object(summarizer, "_summarize", side_effect=RuntimeError("boom")):
            assert summarizer.summarize(long_text) == FALLBACK_SUMMARY


class TestSettingsValidation:
    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            SummarizerSettings(min_sentence_chars=500, max_sentence_chars=100)
