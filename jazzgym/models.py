from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .theory import DEFAULT_TIME_LIMIT, MAX_TIME_LIMIT, MIN_TIME_LIMIT


DomainName = Literal["chords", "scales"]


class Item(BaseModel):
	model_config = ConfigDict(frozen=True)

	root: str
	category: str
	display_name: str


class Chord(Item):
	quality: str


class Scale(Item):
	pass


class Preferences(BaseModel):
	time_limit: int = Field(default=DEFAULT_TIME_LIMIT, ge=MIN_TIME_LIMIT, le=MAX_TIME_LIMIT)
	enabled_categories: List[str] = Field(min_length=1)


class SessionState(BaseModel):
	"""In-memory state of one running session.

	Never mutated: every transition hands back a fresh copy.
	"""

	model_config = ConfigDict(frozen=True)

	session_id: Optional[int] = None
	current_item: Optional[Item] = None
	completed_count: int = Field(default=0, ge=0)
	is_active: bool = False
	time_limit: int = DEFAULT_TIME_LIMIT
	available_pool: Tuple[Item, ...] = ()


class PersistedSession(BaseModel):
	id: int
	started_at: datetime
	ended_at: Optional[datetime] = None
	item_count: int = Field(default=0, ge=0)
	time_limit: int


class SessionItemRecord(BaseModel):
	id: int
	session_id: int
	item_name: str = Field(min_length=1)
	displayed_at: datetime


class SessionDetails(PersistedSession):
	items: List[SessionItemRecord] = Field(default_factory=list)


class Summary(BaseModel):
	domain: DomainName
	session_id: int
	total_items: int
	duration_minutes: float
	started_at: datetime
	ended_at: datetime


class Stats(BaseModel):
	total_sessions: int = 0
	total_items: int = 0
	total_minutes: int = 0
