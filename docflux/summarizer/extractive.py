"""Heuristic extractive summarizer.

Sentences are scored on length, position, digits, commas and a fixed list
of connective/emphasis words. The best few are emitted in source order.
"""

from __future__ import annotations

import logging
import re

from docflux.config.models import SummarizerSettings
from docflux.summarizer.models import SummaryCandidate

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = (
    "Unable to generate a summary: the text may contain unsupported characters."
)

KEYWORDS: frozenset[str] = frozenset({
    # English
    "important", "significant", "key", "main", "essential", "therefore",
    "however", "because", "result", "results", "conclusion", "summary",
    "finally", "first", "moreover", "overall", "notably",
    # Italian
    "importante", "significativo", "principale", "quindi", "tuttavia",
    "perché", "infatti", "inoltre", "risultato", "conclusione", "infine",
    "dunque",
})

_UNSUPPORTED_CHARS_RE = re.compile(r"[^\w\s.,!?;:()\-]")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_WORD_SPLIT_RE = re.compile(r"\s+")
_DIGIT_RE = re.compile(r"\d")
_STRIP_PUNCT = ",;:()-\"'"

# Pools of at least this size get one more sentence in the summary
_LARGE_POOL = 8


class ExtractiveSummarizer:
    """Deterministic sentence-selection summarizer."""

    def __init__(self, settings: SummarizerSettings | None = None) -> None:
        self.settings = settings or SummarizerSettings()

    def summarize(self, text: str) -> str:
        if len(text) < self.settings.min_input_chars:
            return text.strip()

        try:
            return self._summarize(text)
        except Exception:
            logger.exception("Summary generation failed")
            return FALLBACK_SUMMARY

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    @staticmethod
    def normalize(text: str) -> str:
        cleaned = _UNSUPPORTED_CHARS_RE.sub(" ", text)
        return _WORD_SPLIT_RE.sub(" ", cleaned).strip()

    def candidates(self, text: str) -> list[SummaryCandidate]:
        s = self.settings
        sentences = [part.strip() for part in _SENTENCE_SPLIT_RE.split(text)]
        kept = [
            sentence
            for sentence in sentences
            if s.min_sentence_chars <= len(sentence) <= s.max_sentence_chars
        ]
        return [
            SummaryCandidate(text=sentence, position=i)
            for i, sentence in enumerate(kept[: s.max_candidates])
        ]

    @staticmethod
    def score(candidate: SummaryCandidate, total: int) -> float:
        sentence = candidate.text
        words = [w for w in _WORD_SPLIT_RE.split(sentence) if w]
        count = len(words)
        score = 0.0

        if 15 <= count <= 30:
            score += 3
        elif 8 <= count <= 40:
            score += 1

        if candidate.position == 0:
            score += 3
        elif candidate.position == 1:
            score += 2
        if candidate.position >= total - 2:
            score += 1

        if _DIGIT_RE.search(sentence):
            score += 1
        if "," in sentence:
            score += 1

        score += 2 * sum(1 for w in words if w.lower().strip(_STRIP_PUNCT) in KEYWORDS)
        return score

    def _summarize(self, text: str) -> str:
        clean = self.normalize(text)
        pool = self.candidates(clean)
        logger.debug("Summarizing %d chars, %d candidate sentences", len(clean), len(pool))

        if not pool:
            head = clean[: self.settings.max_sentence_chars].rstrip(" .,;:")
            return _with_period(head)

        if len(pool) <= 3:
            return _with_period(". ".join(c.text for c in pool))

        for candidate in pool:
            candidate.score = self.score(candidate, len(pool))

        top_n = 3 if len(pool) < _LARGE_POOL else 4
        top_n = min(top_n, self.settings.max_sentences)
        ranked = sorted(pool, key=lambda c: (-c.score, c.position))[:top_n]
        chosen = sorted(ranked, key=lambda c: c.position)
        return _with_period(". ".join(c.text for c in chosen))


def _with_period(summary: str) -> str:
    return summary if summary.endswith(".") else summary + "."


def summarize(text: str, settings: SummarizerSettings | None = None) -> str:
    """Summarize *text* with the default (or given) settings."""
    return ExtractiveSummarizer(settings).summarize(text)
