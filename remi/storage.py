from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from remi.config import STATE_KEY, STORAGE_BUCKET, STORAGE_DIR
from remi.exceptions import StateParseError, StorageError
from remi.models import AppState, Match, Round

logger = logging.getLogger(__name__)


# =============================================================================
# Key-value stores
# =============================================================================

class KeyValueStore(ABC):
    """
    String key -> string value, full overwrite per key.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Stored value, or None when the key was never written."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Replace the value of key in one step."""


class MemoryKeyValueStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value


class FileKeyValueStore(KeyValueStore):
    """
    One bucket = one directory, one file per key.

    Writes go to a temp file in the same directory and are moved into
    place with os.replace, so readers see either the old or the new value.
    """

    def __init__(self, directory: Path = STORAGE_DIR, bucket: str = STORAGE_BUCKET):
        self.path = Path(directory) / bucket

    def _key_path(self, key: str) -> Path:
        return self.path / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        key_path = self._key_path(key)

        if not key_path.exists():
            return None

        try:
            with open(key_path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Cannot read {key_path}: {e}") from e

    def put(self, key: str, value: str) -> None:
        key_path = self._key_path(key)

        try:
            self.path.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, key_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {key_path}: {e}") from e


# =============================================================================
# JSON codec
# =============================================================================

def _require(d: Dict[str, Any], key: str, kind: type) -> Any:
    if key not in d:
        raise StateParseError(f"missing field: {key}")

    value = d[key]
    # bool is an int subclass, never accept it as a number
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise StateParseError(f"field {key} must be {kind.__name__}")

    return value


def round_to_dict(r: Round) -> Dict[str, Any]:
    return {"scores": list(r.scores)}


def round_from_dict(d: Any) -> Round:
    if not isinstance(d, dict):
        raise StateParseError("round must be an object")

    scores = _require(d, "scores", list)
    for s in scores:
        if not isinstance(s, int) or isinstance(s, bool):
            raise StateParseError("round scores must be integers")

    return Round(tuple(scores))


def match_to_dict(m: Match) -> Dict[str, Any]:
    return {
        "id": m.id,
        "name": m.name,
        "startDate": m.start_timestamp,
        "targetScore": m.target_score,
        "players": list(m.players),
        "rounds": [round_to_dict(r) for r in m.rounds],
        "finished": m.finished,
    }


def match_from_dict(d: Any) -> Match:
    if not isinstance(d, dict):
        raise StateParseError("match must be an object")

    players = _require(d, "players", list)
    if any(not isinstance(p, str) for p in players):
        raise StateParseError("players must be list[str]")

    # Payloads written without defaults omit rounds / finished
    rounds_raw = d.get("rounds", [])
    if not isinstance(rounds_raw, list):
        raise StateParseError("rounds must be a list")

    finished = d.get("finished", False)
    if not isinstance(finished, bool):
        raise StateParseError("finished must be bool")

    return Match(
        id=_require(d, "id", int),
        name=_require(d, "name", str),
        start_timestamp=_require(d, "startDate", int),
        target_score=_require(d, "targetScore", int),
        players=tuple(players),
        rounds=tuple(round_from_dict(r) for r in rounds_raw),
        finished=finished,
    )


def state_to_dict(state: AppState) -> Dict[str, Any]:
    return {
        "activeMatch": match_to_dict(state.active_match) if state.active_match else None,
        "history": [match_to_dict(m) for m in state.history],
    }


def state_from_dict(d: Any) -> AppState:
    if not isinstance(d, dict):
        raise StateParseError("state must be an object")

    active_raw = d.get("activeMatch")
    history_raw: List[Any] = d.get("history", [])
    if not isinstance(history_raw, list):
        raise StateParseError("history must be a list")

    return AppState(
        active_match=match_from_dict(active_raw) if active_raw is not None else None,
        history=tuple(match_from_dict(m) for m in history_raw),
    )


def encode_state(state: AppState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def decode_state(payload: str) -> AppState:
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise StateParseError(f"invalid JSON: {e}") from e

    try:
        return state_from_dict(data)
    except ValueError as e:
        # Model invariant violations (MatchValidationError) count as schema mismatch
        raise StateParseError(str(e)) from e


# =============================================================================
# IO
# =============================================================================

def load_state(store: KeyValueStore, key: str = STATE_KEY) -> AppState:
    payload = store.get(key)

    if payload is None:
        return AppState()

    try:
        return decode_state(payload)
    except StateParseError as e:
        logger.warning("Stored state is unreadable, starting fresh: %s", e)
        return AppState()


def save_state(store: KeyValueStore, state: AppState, key: str = STATE_KEY) -> None:
    store.put(key, encode_state(state))
