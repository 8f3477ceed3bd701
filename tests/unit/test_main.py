"""Tests for the event replay entry point (temple_passport/main.py)"""
import json
import pytest

from temple_passport import config
from temple_passport.main import read_events, replay
from temple_passport.models.events import CheckIn, PrayerSent
from temple_passport.progression.store import JsonFileProgressionStore


def _write_events(path, events):
    path.write_text("\n".join(json.dumps(e) for e in events) + "\n\n", encoding="utf-8")


def test_read_events(tmp_path):
    """Test JSON lines decode into typed events"""
    path = tmp_path / "events.jsonl"
    _write_events(path, [
        {"type": "check_in", "temple_id": "longshan", "timestamp": "2024-03-01T02:00:00Z"},
        {"type": "prayer_sent", "to_user_id": "friend", "timestamp": "2024-03-01T03:00:00Z"},
    ])

    events = read_events(path)

    assert isinstance(events[0], CheckIn)
    assert isinstance(events[1], PrayerSent)


@pytest.mark.asyncio
async def test_replay_persists_passport(tmp_path, monkeypatch, capsys):
    """Test replay applies events, reports failures and saves the passport"""
    monkeypatch.setattr(config, "DATA_PATH", tmp_path)
    path = tmp_path / "events.jsonl"
    _write_events(path, [
        {"type": "check_in", "temple_id": "longshan", "timestamp": "2024-03-01T02:00:00Z"},
        {"type": "check_in", "temple_id": "longshan", "timestamp": "2024-03-01T05:00:00Z"},
    ])

    exit_code = await replay("user_001", path, "Asia/Taipei")

    assert exit_code == 1
    output = capsys.readouterr().out
    assert "First Steps" in output
    assert "already checked in" in output

    stored = JsonFileProgressionStore(tmp_path).load("user_001")
    assert stored.total_check_ins == 1
    assert stored.timezone == "Asia/Taipei"
