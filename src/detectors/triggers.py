"""
Trigger Detector — Escalation Rule Evaluation
==============================================
Evaluates a conversation snapshot against configurable escalation rules:

  sentiment         externally computed score at or below threshold
  turns             turn count at or above the limit
  explicit_request  customer asks for a person ("talk to a human", ...)
  keyword           configured keywords / phrases present
  frustration       at least N distinct frustration indicators present

Rules are independent; analyze() returns only the ones that fired, in the
order above. get_escalation_reason() picks one reason by REASON_PRIORITY.

Configuration is a frozen TriggerConfig. update_config() builds a new config
plus its compiled patterns and swaps both in as one reference, so a detector
shared across threads never exposes a half-applied update.
"""

from __future__ import annotations

import logging
import math
import re
import threading
from dataclasses import dataclass, fields, replace
from typing import Iterable, Mapping, Optional, Union

from detectors import lexicon
from models import ConversationContext, Priority, Trigger, TriggerConfig, TriggerType

logger = logging.getLogger(__name__)

ConfigInput = Union[TriggerConfig, Mapping, None]

_LIST_FIELDS = ("keywords", "phrases", "explicit_requests", "frustration_indicators")
_FIELD_NAMES = frozenset(f.name for f in fields(TriggerConfig))


# ---------------------------------------------------------------------------
# Config merge / validation
# ---------------------------------------------------------------------------

def _as_changes(config: ConfigInput) -> dict:
    if config is None:
        return {}
    if isinstance(config, TriggerConfig):
        return {name: getattr(config, name) for name in _FIELD_NAMES}
    return dict(config)


def merge_config(base: TriggerConfig, config: ConfigInput) -> TriggerConfig:
    """
    Shallow-merge changes into a config and return the new one.

    Scalars overwrite; list fields are replaced wholesale, never unioned.
    Out-of-range values are clamped with a warning. Unknown field names
    raise ValueError.
    """
    changes = _as_changes(config)
    unknown = sorted(set(changes) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"Unknown trigger config field(s): {', '.join(unknown)}")

    for name in _LIST_FIELDS:
        if name in changes:
            value = changes[name]
            if isinstance(value, str):
                value = [value]
            changes[name] = tuple(str(v) for v in (value or ()) if str(v).strip())

    if "sentiment_threshold" in changes:
        value = float(changes["sentiment_threshold"])
        if math.isnan(value):
            raise ValueError("sentiment_threshold must be a number, got NaN")
        clamped = max(-1.0, min(1.0, value))
        if clamped != value:
            logger.warning("sentiment_threshold %.3f out of range, clamped to %.1f",
                           value, clamped)
        changes["sentiment_threshold"] = clamped

    for name, floor in (("max_turns", 0), ("frustration_min_indicators", 1)):
        if name in changes:
            value = int(changes[name])
            if value < floor:
                logger.warning("%s %d out of range, clamped to %d", name, value, floor)
                value = floor
            changes[name] = value

    return replace(base, **changes)


def _compile_phrase(phrase: str) -> re.Pattern:
    """Case-insensitive, word-boundary match; any whitespace between words."""
    body = r"\s+".join(re.escape(word) for word in phrase.split())
    return re.compile(r"(?<!\w)" + body + r"(?!\w)", re.IGNORECASE)


def _compile_all(phrases: Iterable[str]) -> tuple:
    return tuple((phrase, _compile_phrase(phrase)) for phrase in phrases)


@dataclass(frozen=True)
class _RuleSet:
    """A config snapshot with its compiled patterns."""
    config: TriggerConfig
    keywords: tuple
    phrases: tuple
    explicit_requests: tuple
    frustration_indicators: tuple

    @classmethod
    def build(cls, config: TriggerConfig) -> "_RuleSet":
        return cls(
            config=config,
            keywords=_compile_all(config.keywords),
            phrases=_compile_all(config.phrases),
            explicit_requests=_compile_all(config.explicit_requests),
            frustration_indicators=_compile_all(config.frustration_indicators),
        )


def _matches(patterns: tuple, text: str) -> list[str]:
    return [phrase for phrase, pattern in patterns if pattern.search(text)]


def _recent_text(context: ConversationContext) -> str:
    messages = context.last_messages or []
    return " ".join(m for m in messages if m).replace("’", "'")


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------

class TriggerDetector:
    """
    Escalation trigger detection.

    Accepts a TriggerConfig or a mapping of field overrides; anything not
    given falls back to the defaults in detectors/lexicon.py.
    """

    # Order used to choose the single reason reported for an escalation
    REASON_PRIORITY = (
        TriggerType.EXPLICIT_REQUEST,
        TriggerType.SENTIMENT,
        TriggerType.FRUSTRATION,
        TriggerType.KEYWORD,
        TriggerType.TURNS,
    )

    def __init__(self, config: ConfigInput = None):
        self._lock = threading.Lock()
        self._rules = _RuleSet.build(merge_config(TriggerConfig(), config))

    @property
    def config(self) -> TriggerConfig:
        return self._rules.config

    def analyze(self, context: ConversationContext) -> list[Trigger]:
        """Evaluate every rule; return the fired triggers in evaluation order."""
        rules = self._rules
        text = _recent_text(context)

        candidates = [
            self._check_sentiment(context, rules),
            self._check_turn_limit(context, rules),
            self._check_explicit_request(text, rules),
            self._check_keywords(text, rules),
            self._check_frustration(text, rules),
        ]
        triggers = [t for t in candidates if t.triggered]

        if triggers:
            logger.debug("Escalation triggers fired: %s",
                         ", ".join(t.type.value for t in triggers))
        return triggers

    def should_escalate(self, context: ConversationContext) -> bool:
        return bool(self.analyze(context))

    def get_escalation_reason(self, context: ConversationContext) -> Optional[str]:
        """Reason of the highest-priority fired trigger, or None."""
        return reason_for(self.analyze(context))

    def update_config(self, config: ConfigInput = None, **overrides) -> None:
        """Shallow-merge changes; later analyze() calls see the new config."""
        changes = {**_as_changes(config), **overrides}
        with self._lock:
            self._rules = _RuleSet.build(merge_config(self._rules.config, changes))
        logger.debug("Trigger config updated: %s", ", ".join(sorted(changes)))

    # -- rules --------------------------------------------------------------

    @staticmethod
    def _check_sentiment(context: ConversationContext, rules: _RuleSet) -> Trigger:
        sentiment = context.sentiment
        # NaN compares False below, so it never fires
        if sentiment is None or not sentiment <= rules.config.sentiment_threshold:
            return Trigger(type=TriggerType.SENTIMENT, triggered=False)

        return Trigger(
            type=TriggerType.SENTIMENT,
            triggered=True,
            reason=f"Negative sentiment detected ({sentiment:.2f})",
            confidence=min(1.0, abs(sentiment)),
            metadata={"sentiment": sentiment},
        )

    @staticmethod
    def _check_turn_limit(context: ConversationContext, rules: _RuleSet) -> Trigger:
        turn_count = context.turn_count or 0
        max_turns = rules.config.max_turns
        if turn_count < max_turns:
            return Trigger(type=TriggerType.TURNS, triggered=False)

        return Trigger(
            type=TriggerType.TURNS,
            triggered=True,
            reason=f"Conversation exceeded {max_turns} turns",
            metadata={"turn_count": turn_count, "max_turns": max_turns},
        )

    @staticmethod
    def _check_explicit_request(text: str, rules: _RuleSet) -> Trigger:
        matched = _matches(rules.explicit_requests, text)
        if not matched:
            return Trigger(type=TriggerType.EXPLICIT_REQUEST, triggered=False)

        return Trigger(
            type=TriggerType.EXPLICIT_REQUEST,
            triggered=True,
            reason="Customer requested to speak with a human agent",
            confidence=1.0,
            metadata={"matched_phrase": matched[0], "matched_phrases": matched},
        )

    @staticmethod
    def _check_keywords(text: str, rules: _RuleSet) -> Trigger:
        matched_keywords = _matches(rules.keywords, text)
        matched_phrases = _matches(rules.phrases, text)
        all_matches = matched_keywords + matched_phrases
        if not all_matches:
            return Trigger(type=TriggerType.KEYWORD, triggered=False)

        return Trigger(
            type=TriggerType.KEYWORD,
            triggered=True,
            reason=f"Keywords detected: {', '.join(all_matches)}",
            confidence=min(1.0, len(all_matches) * 0.3),
            metadata={"matched_keywords": matched_keywords, "matched_phrases": matched_phrases},
        )

    @staticmethod
    def _check_frustration(text: str, rules: _RuleSet) -> Trigger:
        matched = _matches(rules.frustration_indicators, text)
        if len(matched) < rules.config.frustration_min_indicators:
            return Trigger(type=TriggerType.FRUSTRATION, triggered=False)

        return Trigger(
            type=TriggerType.FRUSTRATION,
            triggered=True,
            reason="Customer appears frustrated",
            confidence=min(1.0, len(matched) * 0.25),
            metadata={"matched_indicators": matched},
        )


# ---------------------------------------------------------------------------
# Verdict helpers
# ---------------------------------------------------------------------------

def reason_for(triggers: list[Trigger]) -> Optional[str]:
    """Pick the reason of the highest-priority fired trigger."""
    fired = [t for t in triggers if t.triggered]
    if not fired:
        return None
    for trigger_type in TriggerDetector.REASON_PRIORITY:
        for trigger in fired:
            if trigger.type == trigger_type:
                return trigger.reason or f"Triggered by {trigger_type.value}"
    return fired[0].reason or "Unknown trigger"


def determine_priority(triggers: list[Trigger]) -> Priority:
    """
    Suggested handling priority for a set of fired triggers.

      explicit request                       -> HIGH
      sentiment with confidence > 0.8        -> URGENT
      frustration                            -> HIGH
      legal / financial keyword              -> HIGH
      anything else that fired               -> MEDIUM
      nothing fired                          -> LOW
    """
    fired = {t.type: t for t in triggers if t.triggered}
    if not fired:
        return Priority.LOW

    if TriggerType.EXPLICIT_REQUEST in fired:
        return Priority.HIGH

    sentiment = fired.get(TriggerType.SENTIMENT)
    if sentiment and (sentiment.confidence or 0.0) > lexicon.URGENT_SENTIMENT_CONFIDENCE:
        return Priority.URGENT

    if TriggerType.FRUSTRATION in fired:
        return Priority.HIGH

    keyword = fired.get(TriggerType.KEYWORD)
    if keyword:
        matched = {k.lower() for k in keyword.metadata.get("matched_keywords", [])}
        if matched & lexicon.HIGH_PRIORITY_KEYWORDS:
            return Priority.HIGH

    return Priority.MEDIUM


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_detector_instance: Optional[TriggerDetector] = None


def get_trigger_detector(config: ConfigInput = None) -> TriggerDetector:
    """Process-wide detector. Passing a config replaces the shared instance."""
    global _detector_instance
    if _detector_instance is None or config is not None:
        _detector_instance = TriggerDetector(config)
    return _detector_instance


def detect_escalation_triggers(
    context: ConversationContext,
    config: ConfigInput = None,
) -> list[Trigger]:
    return TriggerDetector(config).analyze(context)


def should_escalate(context: ConversationContext, config: ConfigInput = None) -> bool:
    return TriggerDetector(config).should_escalate(context)
