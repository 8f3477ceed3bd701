"""
Progression State Stores

Persistence is owned by the caller, outside the pure apply() step. Stores
hold whole-state snapshots and replace them in one step on save, so a
concurrent reader sees either the previous or the new passport, never a
half-applied one.
"""

from pathlib import Path
from typing import Dict, Optional, Protocol
import logging
import os
import tempfile
from urllib.parse import quote

from temple_passport import config
from temple_passport.exceptions import StorageError, wrap_storage_exception
from temple_passport.models.passport import UserProgressionState

logger = logging.getLogger(__name__)


class ProgressionStore(Protocol):
    """Load/save contract for passports"""

    def load(self, user_id: str) -> Optional[UserProgressionState]:
        ...

    def save(self, state: UserProgressionState) -> None:
        ...


class InMemoryProgressionStore:
    """In-process store, used for tests and local development"""

    def __init__(self):
        self._states: Dict[str, UserProgressionState] = {}

    def load(self, user_id: str) -> Optional[UserProgressionState]:
        state = self._states.get(user_id)
        return state.model_copy(deep=True) if state is not None else None

    def save(self, state: UserProgressionState) -> None:
        self._states[state.user_id] = state.model_copy(deep=True)
        logger.debug(f"Saved passport for user {state.user_id} (in memory)")

    def user_ids(self) -> list[str]:
        return sorted(self._states)


class JsonFileProgressionStore:
    """
    One JSON document per user under a data directory

    Writes go to a temporary file in the same directory that is then
    renamed over the target, which is atomic on POSIX filesystems.
    """

    def __init__(self, data_path: Optional[Path] = None):
        self.data_path = Path(data_path or config.DATA_PATH)

    def _path_for(self, user_id: str) -> Path:
        # Percent-encoding is reversible, so distinct ids never share a file
        safe_id = quote(user_id, safe="")
        return self.data_path / "passports" / f"{safe_id}.json"

    def load(self, user_id: str) -> Optional[UserProgressionState]:
        path = self._path_for(user_id)
        if not path.exists():
            return None
        try:
            state = UserProgressionState.model_validate_json(path.read_bytes())
        except (OSError, ValueError) as e:
            raise wrap_storage_exception(
                e, operation="load_passport", user_id=user_id, context={"path": str(path)}
            )

        if state.user_id != user_id:
            raise StorageError(
                f"Passport file {path.name} belongs to user {state.user_id}, not {user_id}",
                user_id=user_id,
                operation="load_passport",
                context={"path": str(path), "stored_user_id": state.user_id},
            )
        return state

    def save(self, state: UserProgressionState) -> None:
        path = self._path_for(state.user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".passport-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(state.model_dump_json(indent=2))
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise wrap_storage_exception(
                e, operation="save_passport", user_id=state.user_id, context={"path": str(path)}
            )
        logger.debug(f"Saved passport for user {state.user_id} to {path}")
