"""Replay queued life events into a stored passport

Usage:
    python -m temple_passport.main USER_ID events.jsonl [--timezone Asia/Taipei]

Each line of the events file is one JSON-encoded life event, e.g.
    {"type": "check_in", "temple_id": "longshan", "timestamp": "2024-03-01T02:00:00Z"}
"""
import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter

from temple_passport.config import validate_config, LOG_LEVEL
from temple_passport.exceptions import PassportError
from temple_passport.models.events import LifeEvent
from temple_passport.progression.store import JsonFileProgressionStore
from temple_passport.progression.summaries import format_passport_display
from temple_passport.services.progression_service import ProgressionService

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper())
)

logger = logging.getLogger(__name__)

_event_adapter = TypeAdapter(LifeEvent)


def read_events(path: Path) -> List[LifeEvent]:
    """Decode a JSON-lines file of life events, skipping blank lines"""
    events = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if line.strip():
            events.append(_event_adapter.validate_json(line))
    return events


async def replay(user_id: str, events_path: Path, timezone: Optional[str] = None) -> int:
    """Apply every event in order and print the resulting passport"""
    validate_config()

    service = ProgressionService(JsonFileProgressionStore())
    await service.get_state(user_id, timezone)

    events = read_events(events_path)
    logger.info(f"Replaying {len(events)} event(s) for user {user_id}")

    exit_code = 0
    for event in events:
        try:
            result = await service.apply_event(user_id, event)
        except PassportError as e:
            print(f"⚠️ {event.type}: {e.user_message}")
            exit_code = 1
            continue
        for message in service.build_messages(result):
            print(message)

    view = await service.get_passport_view(user_id)
    print(format_passport_display(view["state"], view["level"]))
    return exit_code


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay life events into a temple passport")
    parser.add_argument("user_id", help="Passport owner")
    parser.add_argument("events", type=Path, help="JSON-lines file of life events")
    parser.add_argument("--timezone", help="IANA timezone for a new passport")

    args = parser.parse_args()
    return asyncio.run(replay(args.user_id, args.events, args.timezone))


if __name__ == "__main__":
    raise SystemExit(main())
