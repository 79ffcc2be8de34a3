"""
Escalation Engine — Chart Builders
===================================
Plotly figure builders and the sentiment gauge HTML generator.
No UI framework dependency: takes an EscalationReport, returns go.Figure or str.
"""

from __future__ import annotations

import plotly.graph_objects as go

from ui.theme import get_plotly_layout, label_text, priority_color, sentiment_color


def _rgba(hex_color: str, alpha: float) -> str:
    return (
        f"rgba({int(hex_color[1:3], 16)},"
        f"{int(hex_color[3:5], 16)},"
        f"{int(hex_color[5:7], 16)},{alpha})"
    )


def build_sentiment_line_fig(report, t: dict) -> go.Figure | None:
    """Line chart: sentiment score per customer message, with label bands."""
    layout = get_plotly_layout(t)
    if not report.per_message_scores:
        return None

    scores = report.per_message_scores
    positions = list(range(1, len(scores) + 1))

    fig = go.Figure()

    fig.add_hrect(y0=0.2, y1=1.05, fillcolor=t["green"], opacity=0.05, line_width=0)
    fig.add_hrect(y0=-0.2, y1=0.2, fillcolor=t["accent"], opacity=0.05, line_width=0)
    fig.add_hrect(y0=-0.5, y1=-0.2, fillcolor=t["red"], opacity=0.05, line_width=0)
    fig.add_hrect(y0=-1.05, y1=-0.5, fillcolor=t["deep_red"], opacity=0.05, line_width=0)

    fig.add_trace(go.Scatter(
        x=positions,
        y=scores,
        mode="lines+markers",
        name="Sentiment",
        line=dict(color=t["accent"], width=2),
        marker=dict(size=7, color=[sentiment_color(s, t) for s in scores],
                    line=dict(width=1, color=t["border"])),
        hovertext=[f"Message {i}: {s:+.2f}" for i, s in zip(positions, scores)],
        hoverinfo="text",
        fill="tozeroy",
        fillcolor=_rgba(t["accent"], 0.06),
    ))

    fig.add_hline(
        y=report.sentiment.score, line_dash="dot",
        line_color=t["muted"], opacity=0.6,
        annotation_text=f"weighted {report.sentiment.score:+.2f}",
        annotation_position="top right",
        annotation_font=dict(size=10, color=t["muted"]),
    )

    threshold = report.metadata.get("sentiment_threshold")
    if threshold is not None:
        fig.add_hline(
            y=threshold, line_dash="dash",
            line_color=t["red"], opacity=0.5,
            annotation_text="escalation threshold",
            annotation_position="bottom right",
            annotation_font=dict(size=10, color=t["red"]),
        )

    fig.update_layout(
        **layout,
        height=280,
        xaxis=dict(title="Customer Message", gridcolor="rgba(255,255,255,0.06)", dtick=1),
        yaxis=dict(title="Sentiment", range=[-1.05, 1.05],
                   gridcolor="rgba(255,255,255,0.06)"),
        showlegend=False,
    )
    return fig


def build_trigger_breakdown_fig(report, t: dict) -> go.Figure | None:
    """Horizontal bars: confidence of each fired trigger."""
    layout = get_plotly_layout(t)
    if not report.triggers:
        return None

    names = [trigger.type.value.replace("_", " ") for trigger in report.triggers]
    # Turn-limit triggers carry no confidence; show them at full width
    values = [
        trigger.confidence if trigger.confidence is not None else 1.0
        for trigger in report.triggers
    ]

    fig = go.Figure(go.Bar(
        x=values,
        y=names,
        orientation="h",
        marker_color=priority_color(report.priority, t),
        hovertext=[trigger.reason or "" for trigger in report.triggers],
        hoverinfo="text",
    ))

    fig.update_layout(
        **layout,
        height=max(160, 48 * len(names) + 60),
        xaxis=dict(title="Confidence", range=[0, 1.05], gridcolor="rgba(255,255,255,0.06)"),
        yaxis=dict(autorange="reversed"),
        showlegend=False,
    )
    return fig


def build_sentiment_gauge(report, t: dict) -> str:
    """Return HTML/CSS for a horizontal sentiment gauge."""
    score = report.sentiment.score
    pct = min(100, max(0, (score + 1) * 50))
    color = sentiment_color(score, t)

    trend_icon = {"improving": "↑", "declining": "↓", "stable": "→"}.get(
        report.trend.value, "→"
    )
    verdict = (
        f"Escalate ({report.priority.value})" if report.should_escalate else "Automated handling"
    )

    return f"""
    <div style="background: {t["surface"]}; border: 1px solid {t["border"]};
                border-radius: 4px; padding: 20px; text-align: center;">
        <div style="color: {t["muted"]}; font-size: 0.75rem;">Customer Sentiment</div>
        <div style="
            height: 14px; margin: 14px 0 8px;
            background: {t["bg"]}; border: 1px solid {t["border"]};
            border-radius: 7px; position: relative; overflow: hidden;
        ">
            <div style="position: absolute; left: 0; height: 100%; width: {pct:.0f}%;
                        background: {color}; box-shadow: 0 0 10px {color};"></div>
        </div>
        <div style="color: {color}; font-size: 2rem;">{score:+.2f}</div>
        <div style="color: {t["text"]};">{label_text(report.sentiment.label)}</div>
        <div style="margin-top: 8px; font-family: 'JetBrains Mono', monospace;
                    font-size: 0.75rem; color: {t["muted"]};">
            {trend_icon} {report.trend.value.capitalize()} &nbsp;&middot;&nbsp; {verdict}
        </div>
    </div>
    """
