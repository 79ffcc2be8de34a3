"""
Tests for src/escalation_engine.py — config loading, assessment pipeline, CLI.
"""

import json

import pytest
from escalation_engine import (
    assess_conversation, assess_transcript, load_trigger_config, main,
)
from detectors.triggers import TriggerDetector
from models import EscalationReport, Priority, Trend, TriggerConfig, TriggerType


# ---------------------------------------------------------------------------
# load_trigger_config
# ---------------------------------------------------------------------------

class TestLoadTriggerConfig:
    def test_shipped_file_matches_defaults(self):
        assert load_trigger_config() == TriggerConfig()

    def test_overrides_from_yaml(self, tmp_path):
        path = tmp_path / "triggers.yaml"
        path.write_text("triggers:\n  max_turns: 4\n  keywords: [vip]\n", encoding="utf-8")
        config = load_trigger_config(path)
        assert config.max_turns == 4
        assert config.keywords == ("vip",)
        assert config.phrases == TriggerConfig().phrases

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_trigger_config(path) == TriggerConfig()

    def test_out_of_range_clamped(self, tmp_path):
        path = tmp_path / "triggers.yaml"
        path.write_text("triggers:\n  sentiment_threshold: -3\n  max_turns: -1\n",
                        encoding="utf-8")
        config = load_trigger_config(path)
        assert config.sentiment_threshold == -1.0
        assert config.max_turns == 0

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "triggers.yaml"
        path.write_text("triggers:\n  max_turnz: 4\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_trigger_config(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "triggers.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_trigger_config(path)

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_trigger_config(tmp_path / "nope.yaml")


# ---------------------------------------------------------------------------
# assess_transcript
# ---------------------------------------------------------------------------

class TestAssessTranscript:
    def test_calm_chat_stays_automated(self, calm_transcript):
        report = assess_transcript(calm_transcript, conversation_id="calm")
        assert isinstance(report, EscalationReport)
        assert report.conversation_id == "calm"
        assert report.message_count == 2
        assert report.metadata["total_turns"] == 4
        assert report.should_escalate is False
        assert report.reason is None
        assert report.priority == Priority.LOW
        assert report.sentiment.score > 0

    def test_souring_chat_escalates(self, souring_transcript):
        report = assess_transcript(souring_transcript)
        types = [t.type for t in report.triggers]
        assert types == [TriggerType.EXPLICIT_REQUEST, TriggerType.FRUSTRATION]
        assert report.should_escalate is True
        assert report.reason == "Customer requested to speak with a human agent"
        assert report.priority == Priority.HIGH
        assert report.trend == Trend.DECLINING
        assert len(report.per_message_scores) == 4

    def test_json_refund_request(self, json_transcript):
        report = assess_transcript(json_transcript)
        assert [t.type for t in report.triggers] == [TriggerType.KEYWORD]
        assert report.reason == "Keywords detected: refund"
        assert report.priority == Priority.HIGH

    def test_empty_transcript(self, empty_transcript):
        report = assess_transcript(empty_transcript)
        assert report.message_count == 0
        assert report.triggers == []
        assert report.should_escalate is False
        assert report.sentiment.score == 0.0
        assert report.trend == Trend.STABLE

    def test_config_mapping_applied(self, calm_transcript):
        report = assess_transcript(calm_transcript, config={"max_turns": 2})
        assert [t.type for t in report.triggers] == [TriggerType.TURNS]
        assert report.reason == "Conversation exceeded 2 turns"
        assert report.priority == Priority.MEDIUM
        assert report.metadata["max_turns"] == 2


# ---------------------------------------------------------------------------
# assess_conversation
# ---------------------------------------------------------------------------

class TestAssessConversation:
    def test_turn_count_defaults_to_messages(self):
        report = assess_conversation(["hello", "anyone there"])
        assert report.turn_count == 2

    def test_explicit_turn_count(self):
        report = assess_conversation(["hello"], turn_count=12)
        assert report.turn_count == 12
        assert any(t.type == TriggerType.TURNS for t in report.triggers)

    def test_window_limits_trigger_text(self):
        messages = ["I want a refund", "ok", "still waiting"]
        assert assess_conversation(messages, window=3).should_escalate is True
        assert assess_conversation(messages, window=2).should_escalate is False

    def test_zero_window_checks_no_text(self):
        report = assess_conversation(["talk to a human"], window=0)
        assert report.should_escalate is False

    def test_none_messages_dropped(self):
        report = assess_conversation(["hi", None, "thanks"])
        assert report.message_count == 2

    def test_reuses_given_detector(self):
        detector = TriggerDetector({"keywords": ["invoice"]})
        report = assess_conversation(["where is my invoice"], detector=detector)
        assert report.reason == "Keywords detected: invoice"
        assert report.priority == Priority.MEDIUM

    def test_sentiment_trigger_from_conversation_score(self):
        report = assess_conversation(["This is terrible and awful and horrible"])
        assert report.triggers[0].type == TriggerType.SENTIMENT
        assert report.metadata["sentiment_threshold"] == -0.5


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCLI:
    def test_text_output(self, tmp_path, capsys, souring_transcript):
        chat = tmp_path / "chat.txt"
        chat.write_text(souring_transcript, encoding="utf-8")
        assert main([str(chat)]) == 0
        out = capsys.readouterr().out
        assert "ESCALATION ASSESSMENT" in out
        assert "ESCALATE [HIGH]" in out
        assert "chat.txt" in out

    def test_json_output(self, tmp_path, capsys, calm_transcript):
        chat = tmp_path / "chat.txt"
        chat.write_text(calm_transcript, encoding="utf-8")
        assert main([str(chat), "--json", "--id", "abc"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["conversation_id"] == "abc"
        assert data["should_escalate"] is False
        assert data["priority"] == "low"

    def test_max_turns_override(self, tmp_path, capsys, calm_transcript):
        chat = tmp_path / "chat.txt"
        chat.write_text(calm_transcript, encoding="utf-8")
        main([str(chat), "--json", "--max-turns", "1"])
        data = json.loads(capsys.readouterr().out)
        assert data["should_escalate"] is True
        assert data["triggers"][0]["type"] == "turns"

    def test_chart_written(self, tmp_path, capsys, souring_transcript):
        chat = tmp_path / "chat.txt"
        chat.write_text(souring_transcript, encoding="utf-8")
        chart = tmp_path / "timeline.html"
        main([str(chat), "--chart", str(chart)])
        assert chart.exists()
        assert chart.stat().st_size > 0

    def test_missing_chat_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "missing.txt")])
        assert exc.value.code == 2

    def test_bad_config_file(self, tmp_path, calm_transcript):
        chat = tmp_path / "chat.txt"
        chat.write_text(calm_transcript, encoding="utf-8")
        config = tmp_path / "bad.yaml"
        config.write_text("triggers:\n  colour: red\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main([str(chat), "--config", str(config)])
