"""
Escalation Engine — Data Models
================================
All enums, dataclasses, and data structures shared by the sentiment
analyzer, the trigger detector and the assessment pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from detectors import lexicon


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SentimentLabel(str, Enum):
    """Five-band polarity label derived from a score in [-1, 1]."""
    VERY_POSITIVE = "very_positive"   # score > 0.5
    POSITIVE = "positive"             # 0.2 < score <= 0.5
    NEUTRAL = "neutral"               # -0.2 <= score <= 0.2
    NEGATIVE = "negative"             # -0.5 <= score < -0.2
    VERY_NEGATIVE = "very_negative"   # score < -0.5


class Trend(str, Enum):
    """Direction of sentiment across a conversation."""
    STABLE = "stable"
    IMPROVING = "improving"
    DECLINING = "declining"


class TriggerType(str, Enum):
    """Independently evaluated escalation conditions, in evaluation order."""
    SENTIMENT = "sentiment"
    TURNS = "turns"
    EXPLICIT_REQUEST = "explicit_request"
    KEYWORD = "keyword"
    FRUSTRATION = "frustration"


class Priority(str, Enum):
    """Suggested handling priority for an escalated conversation."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------

@dataclass
class SentimentDetails:
    """Matched tokens behind a score. Each list is an ordered set (first seen wins)."""
    positive_words: list[str] = field(default_factory=list)
    negative_words: list[str] = field(default_factory=list)
    negations: list[str] = field(default_factory=list)
    intensifiers: list[str] = field(default_factory=list)
    emoticons: list[str] = field(default_factory=list)

    def merge(self, other: "SentimentDetails") -> None:
        """Union another record into this one, keeping first-seen order."""
        for name in ("positive_words", "negative_words", "negations",
                     "intensifiers", "emoticons"):
            mine = getattr(self, name)
            for item in getattr(other, name):
                if item not in mine:
                    mine.append(item)

    @property
    def signal_count(self) -> int:
        """Distinct sentiment-bearing tokens (words and emoticons)."""
        return len(self.positive_words) + len(self.negative_words) + len(self.emoticons)


@dataclass
class SentimentResult:
    """Output of a single scoring call."""
    score: float = 0.0                  # -1 (very negative) to 1 (very positive)
    magnitude: float = 0.0              # 0 to 1, strength irrespective of sign
    label: SentimentLabel = SentimentLabel.NEUTRAL
    confidence: float = 0.0             # 0 to 1
    details: SentimentDetails = field(default_factory=SentimentDetails)


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------

@dataclass
class ConversationContext:
    """Snapshot of a conversation handed to the trigger detector."""
    sentiment: Optional[float] = None   # None = no sentiment signal available
    turn_count: int = 0
    last_messages: list[str] = field(default_factory=list)


@dataclass
class Trigger:
    """One evaluated escalation rule."""
    type: TriggerType
    triggered: bool
    reason: Optional[str] = None
    confidence: Optional[float] = None
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class TriggerConfig:
    """Escalation rule configuration.

    Frozen: TriggerDetector.update_config swaps in a new instance instead of
    mutating this one, so concurrent readers always see a whole config.
    """
    sentiment_threshold: float = lexicon.DEFAULT_SENTIMENT_THRESHOLD
    max_turns: int = lexicon.DEFAULT_MAX_TURNS
    keywords: tuple = lexicon.DEFAULT_KEYWORDS
    phrases: tuple = lexicon.DEFAULT_PHRASES
    explicit_requests: tuple = lexicon.EXPLICIT_REQUEST_PHRASES
    frustration_indicators: tuple = lexicon.FRUSTRATION_INDICATORS
    frustration_min_indicators: int = lexicon.FRUSTRATION_MIN_INDICATORS


# ---------------------------------------------------------------------------
# Assessment
# ---------------------------------------------------------------------------

@dataclass
class EscalationReport:
    """Complete escalation assessment for one conversation."""
    conversation_id: str
    message_count: int
    turn_count: int
    sentiment: SentimentResult = field(default_factory=SentimentResult)
    per_message_scores: list = field(default_factory=list)
    trend: Trend = Trend.STABLE
    triggers: list = field(default_factory=list)
    should_escalate: bool = False
    reason: Optional[str] = None
    priority: Priority = Priority.LOW
    metadata: dict = field(default_factory=dict)
