from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from .domains import Domain
from .errors import InvalidArgument, OutOfRange, PersistenceFailure
from .models import Preferences
from .theory import MAX_TIME_LIMIT, MIN_TIME_LIMIT

if TYPE_CHECKING:
	from .storage import PracticeStore

logger = logging.getLogger(__name__)


def validate_preferences(time_limit: int, categories: Iterable[str], domain: Optional[Domain] = None) -> Preferences:
	"""Check preference values and return them as a ``Preferences`` record.

	Raises:
		OutOfRange: time limit outside [3, 60] seconds.
		InvalidArgument: no categories, or (with a domain) unknown or repeated ones.
	"""
	if isinstance(time_limit, bool) or not isinstance(time_limit, int):
		raise InvalidArgument(f"Time limit must be a whole number of seconds, got {time_limit!r}")
	if time_limit < MIN_TIME_LIMIT or time_limit > MAX_TIME_LIMIT:
		raise OutOfRange(f"Time limit must be between {MIN_TIME_LIMIT} and {MAX_TIME_LIMIT} seconds")
	cats: List[str] = list(categories)
	if not cats:
		raise InvalidArgument("At least one category must be selected")
	if domain is not None:
		known = set(domain.library.all_categories())
		unknown = [c for c in cats if c not in known]
		if unknown:
			raise InvalidArgument(f"Unknown {domain.noun} categories: {', '.join(unknown)}")
		if len(set(cats)) != len(cats):
			raise InvalidArgument("Categories must not repeat")
	return Preferences(time_limit=time_limit, enabled_categories=cats)


def default_preferences(domain: Domain) -> Preferences:
	return domain.default_preferences()


class PreferencesEditor:
	"""Holds the displayed preferences for one domain and keeps them in step with storage.

	``update`` applies the new value locally before writing it; if the write
	fails the authoritative value is re-read so ``current`` never keeps a value
	that storage rejected.
	"""

	def __init__(self, domain: Domain, store: "PracticeStore") -> None:
		self.domain = domain
		self.store = store
		self.current: Preferences = store.load_preferences()

	def reload(self) -> Preferences:
		self.current = self.store.load_preferences()
		return self.current

	def update(self, time_limit: Optional[int] = None, enabled_categories: Optional[List[str]] = None) -> Preferences:
		proposed = validate_preferences(
			self.current.time_limit if time_limit is None else time_limit,
			self.current.enabled_categories if enabled_categories is None else enabled_categories,
			self.domain,
		)
		previous = self.current
		self.current = proposed
		try:
			self.store.save_preferences(proposed)
		except PersistenceFailure:
			logger.warning("saving %s preferences failed, reloading stored value", self.domain.name)
			self.current = previous
			try:
				self.current = self.store.load_preferences()
			except PersistenceFailure:
				logger.warning("reloading %s preferences failed, keeping previous value", self.domain.name)
			raise
		return self.current

	def reset(self) -> Preferences:
		defaults = default_preferences(self.domain)
		return self.update(defaults.time_limit, list(defaults.enabled_categories))
