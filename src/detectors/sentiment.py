"""
Sentiment Analyzer — Lexicon Polarity Scoring
==============================================
Deterministic, explainable polarity scoring for customer messages.

Per message:
  1. Tokenize (words, emoticon/emoji runs, clause boundaries)
  2. Look up each word in the positive / negative lexicon
  3. Negations flip the next sentiment word inside a short forward window
  4. Intensifiers scale up the next sentiment word inside their window
  5. Emoticons contribute like words
  6. Raw signed sum -> tanh -> score in [-1, 1];
     raw absolute sum / saturation -> magnitude in [0, 1]

Across a conversation, later messages weigh more (geometric recency weights),
so a conversation that sours at the end reads negative overall.

All tables live in detectors/lexicon.py.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Optional, Union

from detectors import lexicon
from models import SentimentDetails, SentimentLabel, SentimentResult, Trend

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

_ALL_EMOTICONS = lexicon.POSITIVE_EMOTICONS + lexicon.NEGATIVE_EMOTICONS

# lowercase spelling -> (canonical spelling, polarity)
_EMOTICONS = {e.lower(): (e, 1) for e in lexicon.POSITIVE_EMOTICONS}
_EMOTICONS.update({e.lower(): (e, -1) for e in lexicon.NEGATIVE_EMOTICONS})


def _alternation(items: Iterable[str]) -> str:
    # Longest first so ":-)" wins over ":" prefixes and "❤️" over "❤"
    return "|".join(re.escape(i) for i in sorted(items, key=len, reverse=True))


# URLs are dropped before tokenizing so "http://" never reads as ":/"
_URL_RE = re.compile(r"[a-z][a-z0-9+.-]*://\S*", re.IGNORECASE)

_TOKEN_RE = re.compile(
    r"(?P<emoticon>"
    r"(?:" + _alternation(e for e in _ALL_EMOTICONS if e.isascii()) + r")(?!\w)"
    r"|" + _alternation(e for e in _ALL_EMOTICONS if not e.isascii()) +
    r")"
    r"|(?P<word>[^\W_]+(?:'[^\W_]+)*)"
    r"|(?P<boundary>[.,!?;]+)",
    re.IGNORECASE,
)


def tokenize(text: str) -> list[tuple[str, str]]:
    """Split text into (kind, token) pairs.

    kind is "emoticon", "word" or "boundary". Words are lowercased; emoticons
    keep their canonical table spelling.
    """
    if not text:
        return []
    normalized = _URL_RE.sub(" ", text.replace("’", "'"))
    tokens = []
    for match in _TOKEN_RE.finditer(normalized):
        kind = match.lastgroup
        token = match.group(kind)
        if kind == "emoticon":
            token = _EMOTICONS[token.lower()][0]
        elif kind == "word":
            token = token.lower()
        tokens.append((kind, token))
    return tokens


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _as_messages(messages) -> list:
    # A lone string is one message, not an iterable of characters
    if isinstance(messages, str):
        return [messages] if messages else []
    return list(messages or [])


def _record(bucket: list[str], item: str) -> None:
    if item not in bucket:
        bucket.append(item)


def label_for_score(score: float) -> SentimentLabel:
    """Map a score in [-1, 1] to its five-band label."""
    if score > lexicon.VERY_POSITIVE_ABOVE:
        return SentimentLabel.VERY_POSITIVE
    if score > lexicon.POSITIVE_ABOVE:
        return SentimentLabel.POSITIVE
    if score >= lexicon.NEGATIVE_BELOW:
        return SentimentLabel.NEUTRAL
    if score >= lexicon.VERY_NEGATIVE_BELOW:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.VERY_NEGATIVE


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------

class SentimentAnalyzer:
    """
    Lexicon-based sentiment analyzer.

    Holds no mutable state; one instance can be shared freely across threads.
    """

    def analyze(self, text: Optional[str]) -> SentimentResult:
        """Score a single message."""
        details = SentimentDetails()
        raw = 0.0
        total = 0.0
        negation_left = 0
        intensifier_left = 0

        for kind, token in tokenize(text or ""):
            if kind == "boundary":
                # Modifier scope never crosses a clause boundary
                negation_left = intensifier_left = 0
                continue

            if kind == "emoticon":
                _record(details.emoticons, token)
                contribution = _EMOTICONS[token.lower()][1] * lexicon.EMOTICON_WEIGHT
                raw += contribution
                total += abs(contribution)
                continue

            if token in lexicon.NEGATIONS:
                _record(details.negations, token)
                negation_left = lexicon.NEGATION_WINDOW
                continue

            if token in lexicon.INTENSIFIERS:
                _record(details.intensifiers, token)
                intensifier_left = lexicon.INTENSIFIER_WINDOW
                continue

            if token in lexicon.POSITIVE_WORDS:
                _record(details.positive_words, token)
                polarity = 1
            elif token in lexicon.NEGATIVE_WORDS:
                _record(details.negative_words, token)
                polarity = -1
            else:
                negation_left = max(0, negation_left - 1)
                intensifier_left = max(0, intensifier_left - 1)
                continue

            weight = lexicon.WORD_WEIGHT
            if intensifier_left:
                weight *= lexicon.INTENSIFIER_MULTIPLIER
            if negation_left:
                polarity = -polarity
                weight *= lexicon.NEGATION_SCALE
            raw += polarity * weight
            total += weight

            # A modifier applies to one sentiment word only
            negation_left = intensifier_left = 0

        score = _clamp(math.tanh(raw), -1.0, 1.0)
        magnitude = _clamp(total / lexicon.MAGNITUDE_SATURATION, 0.0, 1.0)

        signals = details.signal_count
        if signals:
            confidence = min(1.0, lexicon.CONFIDENCE_BASE + signals * lexicon.CONFIDENCE_STEP)
        else:
            confidence = 0.0

        logger.debug("Scored message: score=%.3f magnitude=%.3f signals=%d",
                     score, magnitude, signals)

        return SentimentResult(
            score=score,
            magnitude=magnitude,
            label=label_for_score(score),
            confidence=confidence,
            details=details,
        )

    def analyze_conversation(self, messages: Optional[Iterable[str]]) -> SentimentResult:
        """Score a conversation, weighting later messages more heavily."""
        messages = _as_messages(messages)
        if not messages:
            return SentimentResult()

        n = len(messages)
        # Relative to the newest message so long conversations underflow to 0
        # instead of overflowing
        weights = [lexicon.RECENCY_BASE ** (i - (n - 1)) for i in range(n)]
        total_weight = sum(weights)

        score = 0.0
        magnitude = 0.0
        details = SentimentDetails()
        for message, weight in zip(messages, weights):
            result = self.analyze(message)
            share = weight / total_weight
            score += result.score * share
            magnitude += result.magnitude * share
            details.merge(result.details)

        score = _clamp(score, -1.0, 1.0)
        magnitude = _clamp(magnitude, 0.0, 1.0)
        confidence = min(1.0, lexicon.CONFIDENCE_BASE + n * lexicon.CONVERSATION_CONFIDENCE_STEP)

        logger.debug("Scored conversation: messages=%d score=%.3f", n, score)

        return SentimentResult(
            score=score,
            magnitude=magnitude,
            label=label_for_score(score),
            confidence=confidence,
            details=details,
        )

    def score_messages(self, messages: Optional[Iterable[str]]) -> list[float]:
        """Per-message scores, in order."""
        return [self.analyze(m).score for m in _as_messages(messages)]

    def detect_trend(self, messages: Optional[Iterable[str]]) -> Trend:
        """Compare the first half of the conversation against the second half."""
        scores = self.score_messages(messages)
        if len(scores) < lexicon.MIN_TREND_MESSAGES:
            return Trend.STABLE

        mid = len(scores) // 2
        first_half = sum(scores[:mid]) / mid
        second_half = sum(scores[mid:]) / (len(scores) - mid)
        delta = second_half - first_half

        if delta > lexicon.TREND_EPSILON:
            return Trend.IMPROVING
        if delta < -lexicon.TREND_EPSILON:
            return Trend.DECLINING
        return Trend.STABLE

    def needs_escalation(
        self,
        text: Union[str, Iterable[str], None],
        threshold: Optional[float] = None,
    ) -> bool:
        """True when the sentiment of a message (or conversation) is at or below threshold."""
        if threshold is None:
            threshold = lexicon.DEFAULT_ESCALATION_THRESHOLD
        if text is None or isinstance(text, str):
            result = self.analyze(text)
        else:
            result = self.analyze_conversation(text)
        return result.score <= threshold


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_analyzer_instance: Optional[SentimentAnalyzer] = None


def get_sentiment_analyzer() -> SentimentAnalyzer:
    """Process-wide default analyzer."""
    global _analyzer_instance
    if _analyzer_instance is None:
        _analyzer_instance = SentimentAnalyzer()
    return _analyzer_instance


def analyze_sentiment(text: Optional[str]) -> SentimentResult:
    return get_sentiment_analyzer().analyze(text)


def analyze_conversation_sentiment(messages: Optional[Iterable[str]]) -> SentimentResult:
    return get_sentiment_analyzer().analyze_conversation(messages)


def needs_escalation(
    text: Union[str, Iterable[str], None],
    threshold: Optional[float] = None,
) -> bool:
    return get_sentiment_analyzer().needs_escalation(text, threshold)
