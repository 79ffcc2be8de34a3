"""
Escalation Engine — Chart Themes
=================================
Theme dicts, the shared Plotly layout, and sentiment/priority color helpers.
All pure functions. Fully testable.
"""

THEMES = {
    "Ember": {
        "label": "Ember",
        "desc": "Warm dark with amber accents",
        "bg": "#0a0807", "surface": "#12100f", "border": "#2a2623",
        "text": "#e8dfd0", "muted": "#8b7d6b", "chart_text": "#c4b8a3",
        "accent": "#f59e0b", "green": "#22c55e", "red": "#ef4444", "deep_red": "#dc2626",
    },
    "Midnight": {
        "label": "Midnight",
        "desc": "Cool blue on deep navy",
        "bg": "#0b0e14", "surface": "#111720", "border": "#1e2a3a",
        "text": "#d0dce8", "muted": "#6b7d8b", "chart_text": "#a3b8c4",
        "accent": "#3b82f6", "green": "#22c55e", "red": "#ef4444", "deep_red": "#dc2626",
    },
    "Bone": {
        "label": "Bone",
        "desc": "Light mode, paper white",
        "bg": "#faf8f5", "surface": "#ffffff", "border": "#e5e0d8",
        "text": "#1a1610", "muted": "#8b8578", "chart_text": "#5a5548",
        "accent": "#b45309", "green": "#16a34a", "red": "#dc2626", "deep_red": "#b91c1c",
    },
}

DEFAULT_THEME = "Ember"

PLOTLY_LAYOUT_BASE = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=50, r=30, t=40, b=40),
)


def get_plotly_layout(t: dict) -> dict:
    """Return a Plotly layout dict styled for the given theme."""
    return {
        **PLOTLY_LAYOUT_BASE,
        "font": dict(
            color=t["chart_text"],
            family="JetBrains Mono, DM Sans, sans-serif",
            size=12,
        ),
    }


def sentiment_color(score: float, t: dict | None = None) -> str:
    """Map a sentiment score in [-1, 1] to a themed hex color.

    Bands follow the sentiment labels: positive, neutral, negative,
    very negative. Falls back to Ember theme if no theme dict provided.
    """
    if t is None:
        t = THEMES[DEFAULT_THEME]
    if score > 0.2:
        return t["green"]
    elif score >= -0.2:
        return t["accent"]
    elif score >= -0.5:
        return t["red"]
    else:
        return t["deep_red"]


def priority_color(priority: str, t: dict | None = None) -> str:
    """Themed color for an escalation priority value."""
    if t is None:
        t = THEMES[DEFAULT_THEME]
    return {
        "low": t["green"],
        "medium": t["accent"],
        "high": t["red"],
        "urgent": t["deep_red"],
    }.get(getattr(priority, "value", priority), t["muted"])


def label_text(label: str) -> str:
    """Human-readable sentiment label (very_negative -> Very Negative)."""
    return str(getattr(label, "value", label)).replace("_", " ").title()
