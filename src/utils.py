"""
Escalation Engine — Report Formatting
======================================
Plain-text and JSON renderings of an EscalationReport.
"""

import json
from dataclasses import asdict

from models import EscalationReport


def _join(items: list) -> str:
    return ", ".join(items) if items else "-"


def format_report(report: EscalationReport) -> str:
    """Format an escalation report as readable text."""
    s = report.sentiment
    lines = []
    lines.append("=" * 70)
    lines.append("ESCALATION ASSESSMENT")
    lines.append("=" * 70)
    lines.append(f"Conversation: {report.conversation_id}")
    lines.append(f"Customer messages: {report.message_count}")
    lines.append(f"Turns: {report.turn_count}")
    lines.append(f"Assessed at: {report.metadata.get('assessed_at', 'N/A')}")
    lines.append("")

    lines.append("-" * 40)
    lines.append("VERDICT")
    lines.append("-" * 40)
    if report.should_escalate:
        lines.append(f"  ESCALATE [{report.priority.value.upper()}]: {report.reason}")
    else:
        lines.append("  No escalation needed.")
    lines.append("")

    lines.append("-" * 40)
    lines.append("SENTIMENT")
    lines.append("-" * 40)
    lines.append(f"  Score: {s.score:+.2f} ({s.label.value})")
    lines.append(f"  Magnitude: {s.magnitude:.2f}")
    lines.append(f"  Confidence: {s.confidence:.2f}")
    lines.append(f"  Trend: {report.trend.value}")
    lines.append(f"  Positive words: {_join(s.details.positive_words)}")
    lines.append(f"  Negative words: {_join(s.details.negative_words)}")
    lines.append(f"  Negations: {_join(s.details.negations)}")
    lines.append(f"  Intensifiers: {_join(s.details.intensifiers)}")
    lines.append(f"  Emoticons: {_join(s.details.emoticons)}")
    if report.per_message_scores:
        scores = " ".join(f"{x:+.2f}" for x in report.per_message_scores)
        lines.append(f"  Per message: {scores}")
    lines.append("")

    lines.append("-" * 40)
    lines.append(f"TRIGGERS ({len(report.triggers)} fired)")
    lines.append("-" * 40)
    if report.triggers:
        for t in report.triggers:
            conf = f" [conf {t.confidence:.2f}]" if t.confidence is not None else ""
            lines.append(f"  {t.type.value}{conf}: {t.reason}")
    else:
        lines.append("  None.")
    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)


def report_to_json(report: EscalationReport) -> str:
    """Export report as JSON for programmatic consumption."""
    data = {
        "conversation_id": report.conversation_id,
        "message_count": report.message_count,
        "turn_count": report.turn_count,
        "should_escalate": report.should_escalate,
        "reason": report.reason,
        "priority": report.priority.value,
        "trend": report.trend.value,
        "sentiment": {
            "score": report.sentiment.score,
            "magnitude": report.sentiment.magnitude,
            "label": report.sentiment.label.value,
            "confidence": report.sentiment.confidence,
            "details": asdict(report.sentiment.details),
        },
        "per_message_scores": report.per_message_scores,
        "triggers": [
            {**asdict(t), "type": t.type.value} for t in report.triggers
        ],
        "metadata": report.metadata,
    }
    return json.dumps(data, indent=2)
