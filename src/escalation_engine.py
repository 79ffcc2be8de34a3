"""
Escalation Engine — Entry Point
================================
Combines the sentiment analyzer and the trigger detector into one
assessment per conversation, loads trigger configuration from YAML, and
exposes the command-line interface.

The analyzer and detector never call each other; this module is the only
place their outputs meet.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from models import ConversationContext, EscalationReport, TriggerConfig
from parsers.chat_parser import customer_messages, parse_chat_log
from detectors.sentiment import get_sentiment_analyzer
from detectors.triggers import (
    ConfigInput,
    TriggerDetector,
    determine_priority,
    merge_config,
    reason_for,
)
from utils import format_report, report_to_json

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "escalation.yaml"

# Recent customer messages handed to the trigger detector
DEFAULT_WINDOW = 5


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def load_trigger_config(path: Optional[os.PathLike] = None) -> TriggerConfig:
    """
    Load trigger configuration from a YAML file.

    Reads the top-level "triggers" mapping. A missing default file yields the
    built-in defaults; an explicitly given path must exist.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Trigger config not found: {config_path}")
        return TriggerConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    if not isinstance(document, dict):
        raise ValueError(f"Trigger config must be a mapping: {config_path}")
    section = document.get("triggers", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'triggers' section must be a mapping: {config_path}")

    logger.info("Loaded trigger config from %s (%d overrides)", config_path, len(section))
    return merge_config(TriggerConfig(), section)


# ---------------------------------------------------------------------------
# Assessment pipeline
# ---------------------------------------------------------------------------

def assess_conversation(
    messages: list[str],
    turn_count: Optional[int] = None,
    conversation_id: str = "unknown",
    config: ConfigInput = None,
    window: int = DEFAULT_WINDOW,
    detector: Optional[TriggerDetector] = None,
) -> EscalationReport:
    """
    Full escalation assessment for a list of customer messages.

    Pipeline:
      1. Conversation sentiment (recency weighted) over every message
      2. Per-message scores and trend
      3. Context = last `window` messages, turn count, conversation score
      4. Trigger evaluation, primary reason, suggested priority

    turn_count defaults to the number of customer messages. Pass `detector`
    to reuse a long-lived TriggerDetector; otherwise one is built from
    `config`.
    """
    messages = [m for m in (messages or []) if m is not None]
    analyzer = get_sentiment_analyzer()
    detector = detector or TriggerDetector(config)

    sentiment = analyzer.analyze_conversation(messages)
    per_message = analyzer.score_messages(messages)
    trend = analyzer.detect_trend(messages)

    if turn_count is None:
        turn_count = len(messages)
    recent = messages[-window:] if window > 0 else []

    context = ConversationContext(
        sentiment=sentiment.score if messages else None,
        turn_count=turn_count,
        last_messages=recent,
    )
    triggers = detector.analyze(context)

    report = EscalationReport(
        conversation_id=conversation_id,
        message_count=len(messages),
        turn_count=turn_count,
        sentiment=sentiment,
        per_message_scores=per_message,
        trend=trend,
        triggers=triggers,
        should_escalate=bool(triggers),
        reason=reason_for(triggers),
        priority=determine_priority(triggers),
        metadata={
            "assessed_at": datetime.now().isoformat(),
            "window": window,
            "sentiment_threshold": detector.config.sentiment_threshold,
            "max_turns": detector.config.max_turns,
        },
    )

    logger.debug("Assessed %s: escalate=%s priority=%s",
                 conversation_id, report.should_escalate, report.priority.value)
    return report


def assess_transcript(
    raw_text: str,
    conversation_id: str = "unknown",
    config: ConfigInput = None,
    window: int = DEFAULT_WINDOW,
    turn_count: Optional[int] = None,
) -> EscalationReport:
    """Parse a transcript and assess its customer turns."""
    turns = parse_chat_log(raw_text)
    messages = customer_messages(turns)
    report = assess_conversation(
        messages,
        turn_count=turn_count,
        conversation_id=conversation_id,
        config=config,
        window=window,
    )
    report.metadata["total_turns"] = len(turns)
    return report


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Run an escalation assessment from the command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Escalation Engine - decide whether a support chat needs a human"
    )
    parser.add_argument("chat_file", help="Path to chat transcript (JSON or plain text)")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--id", default=None, help="Conversation identifier")
    parser.add_argument("--config", default=None, help="YAML file with a 'triggers' section")
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW,
                        help=f"Recent customer messages checked for triggers (default: {DEFAULT_WINDOW})")
    parser.add_argument("--max-turns", type=int, default=None, help="Override the turn limit")
    parser.add_argument("--threshold", type=float, default=None,
                        help="Override the sentiment threshold")
    parser.add_argument("--chart", default=None, help="Write the sentiment timeline to this HTML file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_trigger_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(f"could not load config: {e}")

    overrides = {}
    if args.max_turns is not None:
        overrides["max_turns"] = args.max_turns
    if args.threshold is not None:
        overrides["sentiment_threshold"] = args.threshold
    if overrides:
        config = merge_config(config, overrides)

    try:
        with open(args.chat_file, "r", encoding="utf-8") as f:
            raw_text = f.read()
    except OSError as e:
        parser.error(f"could not read {args.chat_file}: {e}")

    conv_id = args.id or os.path.basename(args.chat_file)
    report = assess_transcript(raw_text, conversation_id=conv_id, config=config,
                               window=args.window)

    if args.chart:
        from ui.charts import build_sentiment_line_fig
        from ui.theme import THEMES, DEFAULT_THEME

        fig = build_sentiment_line_fig(report, THEMES[DEFAULT_THEME])
        if fig is None:
            logger.warning("No customer messages; chart not written")
        else:
            fig.write_html(args.chart)

    if args.json:
        print(report_to_json(report))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
