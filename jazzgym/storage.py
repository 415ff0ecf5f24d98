from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import ValidationError

from .domains import Domain
from .errors import InvalidArgument, OutOfRange, PersistenceFailure
from .models import PersistedSession, Preferences, SessionDetails, SessionItemRecord, Stats
from .preferences import validate_preferences
from .stats import compute_stats
from .theory import MAX_TIME_LIMIT, MIN_TIME_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50

# All stores in the process share one lock: chord and scale stores may point at the same file.
_FILE_LOCK = threading.RLock()


class PracticeStore(Protocol):
	def create_session(self, time_limit: int) -> int: ...

	def append_item(self, session_id: int, item_name: str) -> None: ...

	def close_session(self, session_id: int, final_item: Optional[str] = None) -> PersistedSession: ...

	def list_sessions(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[PersistedSession]: ...

	def get_session_details(self, session_id: int) -> Optional[SessionDetails]: ...

	def get_stats(self) -> Stats: ...

	def delete_session(self, session_id: int) -> None: ...

	def delete_all_sessions(self) -> None: ...

	def load_preferences(self) -> Preferences: ...

	def save_preferences(self, prefs: Preferences) -> None: ...

	def update_preferences(self, time_limit: Optional[int] = None, enabled_categories: Optional[List[str]] = None) -> Preferences: ...


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class JsonPracticeStore:
	"""Practice history and preferences for one domain, kept in a JSON file.

	The file holds one section per domain, so the chord and scale stores can
	share it. Each session record nests its item records, which makes deleting
	a session remove its items in the same write.
	"""

	def __init__(self, path: Path, domain: Domain, clock: Optional[Callable[[], datetime]] = None) -> None:
		self.path = Path(path)
		self.domain = domain
		self._clock = clock or _utcnow

	# -- raw file access -------------------------------------------------

	def _load_raw(self) -> Dict[str, Any]:
		if not self.path.exists():
			return {}
		try:
			data = json.loads(self.path.read_text(encoding="utf-8"))
		except (OSError, ValueError) as e:
			raise PersistenceFailure(f"Could not read practice data from {self.path}") from e
		if not isinstance(data, dict):
			raise PersistenceFailure(f"Practice data in {self.path} is not a JSON object")
		return data

	def _save_raw(self, data: Dict[str, Any]) -> None:
		tmp = self.path.with_name(self.path.name + ".tmp")
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
			os.replace(tmp, self.path)
		except OSError as e:
			raise PersistenceFailure(f"Could not write practice data to {self.path}") from e

	def _section(self, raw: Dict[str, Any]) -> Dict[str, Any]:
		sec = raw.get(self.domain.name)
		if not isinstance(sec, dict):
			sec = {}
			raw[self.domain.name] = sec
		sec.setdefault("sessions", [])
		sec.setdefault("next_session_id", 1)
		sec.setdefault("next_item_id", 1)
		return sec

	def _sessions(self, sec: Dict[str, Any]) -> List[SessionDetails]:
		try:
			return [SessionDetails.model_validate(obj) for obj in sec["sessions"]]
		except ValidationError as e:
			raise PersistenceFailure(f"Corrupt {self.domain.name} session data in {self.path}") from e

	def _find(self, sec: Dict[str, Any], session_id: int) -> Dict[str, Any]:
		for obj in sec["sessions"]:
			if obj.get("id") == session_id:
				return obj
		raise PersistenceFailure(f"No {self.domain.noun} session with id {session_id}")

	def _now(self) -> str:
		return self._clock().isoformat()

	# -- sessions --------------------------------------------------------

	def create_session(self, time_limit: int) -> int:
		if time_limit < MIN_TIME_LIMIT or time_limit > MAX_TIME_LIMIT:
			raise OutOfRange(f"Time limit must be between {MIN_TIME_LIMIT} and {MAX_TIME_LIMIT} seconds")
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			sid = int(sec["next_session_id"])
			sec["next_session_id"] = sid + 1
			record = SessionDetails(id=sid, started_at=self._clock(), time_limit=time_limit)
			sec["sessions"].append(record.model_dump(mode="json"))
			self._save_raw(raw)
		logger.debug("created %s session %d", self.domain.name, sid)
		return sid

	def _check_name(self, item_name: str) -> None:
		if not item_name or not item_name.strip():
			raise InvalidArgument(f"{self.domain.noun.capitalize()} name must not be empty")

	def _record_item(self, sec: Dict[str, Any], obj: Dict[str, Any], item_name: str) -> None:
		iid = int(sec["next_item_id"])
		sec["next_item_id"] = iid + 1
		rec = SessionItemRecord(id=iid, session_id=obj["id"], item_name=item_name, displayed_at=self._clock())
		obj.setdefault("items", []).append(rec.model_dump(mode="json"))
		obj["item_count"] = int(obj.get("item_count", 0)) + 1

	def append_item(self, session_id: int, item_name: str) -> None:
		self._check_name(item_name)
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			self._record_item(sec, self._find(sec, session_id), item_name)
			self._save_raw(raw)

	def close_session(self, session_id: int, final_item: Optional[str] = None) -> PersistedSession:
		"""Stamp the end time, recording ``final_item`` first when given.

		Both changes land in the same write, so a failed close leaves nothing behind.
		"""
		if final_item is not None:
			self._check_name(final_item)
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			obj = self._find(sec, session_id)
			if final_item is not None:
				self._record_item(sec, obj, final_item)
			obj["ended_at"] = self._now()
			try:
				closed = SessionDetails.model_validate(obj)
			except ValidationError as e:
				raise PersistenceFailure(f"Corrupt {self.domain.noun} session {session_id} in {self.path}") from e
			self._save_raw(raw)
		logger.debug("closed %s session %d with %d items", self.domain.name, session_id, closed.item_count)
		return PersistedSession.model_validate(closed.model_dump(exclude={"items"}))

	def list_sessions(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[PersistedSession]:
		with _FILE_LOCK:
			sessions = self._sessions(self._section(self._load_raw()))
		ended = [s for s in sessions if s.ended_at is not None]
		ended.sort(key=lambda s: (s.started_at, s.id), reverse=True)
		return [PersistedSession.model_validate(s.model_dump(exclude={"items"})) for s in ended[: max(0, limit)]]

	def get_session_details(self, session_id: int) -> Optional[SessionDetails]:
		with _FILE_LOCK:
			sessions = self._sessions(self._section(self._load_raw()))
		for s in sessions:
			if s.id == session_id:
				s.items.sort(key=lambda r: (r.displayed_at, r.id))
				return s
		return None

	def get_stats(self) -> Stats:
		with _FILE_LOCK:
			sessions = self._sessions(self._section(self._load_raw()))
		return compute_stats(sessions)

	def delete_session(self, session_id: int) -> None:
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			before = len(sec["sessions"])
			sec["sessions"] = [obj for obj in sec["sessions"] if obj.get("id") != session_id]
			if len(sec["sessions"]) == before:
				return
			self._save_raw(raw)
		logger.info("deleted %s session %d", self.domain.name, session_id)

	def delete_all_sessions(self) -> None:
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			sec["sessions"] = []
			self._save_raw(raw)
		logger.info("cleared %s practice history", self.domain.name)

	# -- preferences -----------------------------------------------------

	def load_preferences(self) -> Preferences:
		with _FILE_LOCK:
			raw = self._load_raw()
			sec = self._section(raw)
			obj = sec.get("preferences")
			if isinstance(obj, dict):
				try:
					return Preferences.model_validate(obj)
				except ValidationError as e:
					raise PersistenceFailure(f"Corrupt {self.domain.name} preferences in {self.path}") from e
			prefs = self.domain.default_preferences()
			sec["preferences"] = prefs.model_dump()
			self._save_raw(raw)
			return prefs

	def save_preferences(self, prefs: Preferences) -> None:
		with _FILE_LOCK:
			raw = self._load_raw()
			self._section(raw)["preferences"] = prefs.model_dump()
			self._save_raw(raw)

	def update_preferences(self, time_limit: Optional[int] = None, enabled_categories: Optional[List[str]] = None) -> Preferences:
		with _FILE_LOCK:
			current = self.load_preferences()
			prefs = validate_preferences(
				current.time_limit if time_limit is None else time_limit,
				current.enabled_categories if enabled_categories is None else enabled_categories,
				self.domain,
			)
			self.save_preferences(prefs)
		return prefs
