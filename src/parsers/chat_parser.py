"""
Escalation Engine — Chat Parser
================================
Parses support-chat transcripts into structured turns.
Handles JSON message lists, {"chat_messages": [...]} exports, and plain text
with role markers (Customer:/User:/Agent:/Bot:).
"""

import json
import re

# Canonical role mapping
ROLE_MAP = {
    "user": "user",
    "human": "user",
    "person": "user",
    "customer": "user",
    "visitor": "user",
    "client": "user",
    "assistant": "assistant",
    "agent": "assistant",
    "model": "assistant",
    "ai": "assistant",
    "bot": "assistant",
    "chatbot": "assistant",
    "support": "assistant",
    "system": "system",
}

_ROLE_MARKER = re.compile(
    r"(?:^|\n)[ \t]*(" + "|".join(sorted(ROLE_MAP, key=len, reverse=True)) + r")[ \t]*:[ \t]*",
    re.IGNORECASE,
)


def normalize_role(raw_role) -> str:
    role = str(raw_role or "unknown").lower().strip()
    return ROLE_MAP.get(role, role)


def _content_text(content) -> str:
    if isinstance(content, list):
        # Content blocks
        return " ".join(
            block.get("text", "") for block in content
            if isinstance(block, dict) and block.get("type", "text") == "text"
        )
    return "" if content is None else str(content)


def _turns_from_messages(messages: list) -> list[dict]:
    turns = []
    for msg in messages:
        if isinstance(msg, str):
            # Bare strings are customer utterances
            turns.append({"role": "user", "content": msg, "turn": len(turns)})
            continue
        if not isinstance(msg, dict):
            continue
        role = normalize_role(msg.get("role", msg.get("sender")))
        content = _content_text(msg.get("content", msg.get("text", "")))
        turns.append({"role": role, "content": content, "turn": len(turns)})
    return turns


def parse_chat_log(raw_text: str) -> list[dict]:
    """
    Parse a chat transcript into structured turns.

    Returns list of dicts: [{"role": "user"|"assistant"|"system", "content": "...", "turn": N}]
    Empty input returns an empty list.
    """
    if not raw_text or not raw_text.strip():
        return []

    # Try JSON first
    try:
        data = json.loads(raw_text)
        if isinstance(data, list):
            return _turns_from_messages(data)
        if isinstance(data, dict):
            for key in ("chat_messages", "messages"):
                if isinstance(data.get(key), list):
                    return _turns_from_messages(data[key])
    except (json.JSONDecodeError, TypeError):
        pass

    # Plain text with role markers
    parts = _ROLE_MARKER.split(raw_text)
    if len(parts) > 1:
        # parts[0] is text before the first marker (often empty)
        turns = []
        for i in range(1, len(parts) - 1, 2):
            turns.append({
                "role": normalize_role(parts[i]),
                "content": parts[i + 1].strip(),
                "turn": len(turns),
            })
        return turns

    # Fallback: one line per customer message
    return [
        {"role": "user", "content": line.strip(), "turn": i}
        for i, line in enumerate(ln for ln in raw_text.splitlines() if ln.strip())
    ]


def customer_messages(turns: list[dict]) -> list[str]:
    """Non-empty customer utterances, in conversation order."""
    return [
        t["content"] for t in turns
        if t.get("role") == "user" and str(t.get("content", "")).strip()
    ]
