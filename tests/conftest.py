"""
Shared fixtures for escalation-engine tests.
"""

import sys
import os
import pytest

# Ensure src/ and the project root (for ui/) are importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


# ---------------------------------------------------------------------------
# Reusable conversation fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def calm_transcript():
    """Short, friendly support chat."""
    return (
        "Customer: Hi, where can I find my invoice?\n"
        "Agent: It is under Billing > Invoices.\n"
        "Customer: Found it, thanks! That was helpful.\n"
        "Agent: Glad to help."
    )


@pytest.fixture
def souring_transcript():
    """Starts positive, ends angry with an explicit request for a person."""
    return (
        "Customer: Your app is great, I love it.\n"
        "Agent: Thank you! How can I help?\n"
        "Customer: The export is broken again.\n"
        "Agent: Could you try restarting?\n"
        "Customer: I did. This is terrible and I am frustrated and angry.\n"
        "Agent: I'm sorry to hear that.\n"
        "Customer: Just let me talk to a human now!"
    )


@pytest.fixture
def json_transcript():
    """JSON message list with a refund demand."""
    return (
        '[{"role": "user", "content": "Hello"},'
        ' {"role": "assistant", "content": "Hi, how can I help?"},'
        ' {"role": "user", "content": "I want a refund for this order."}]'
    )


@pytest.fixture
def empty_transcript():
    """Edge case: empty input."""
    return ""
