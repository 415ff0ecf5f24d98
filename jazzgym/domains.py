from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import InvalidArgument
from .models import Chord, DomainName, Item, Preferences, Scale
from .theory import (
	CHORD_QUALITIES,
	CHORD_TYPES,
	DEFAULT_SCALE_TYPES,
	DEFAULT_TIME_LIMIT,
	ROOTS,
	SCALE_TYPES,
	chord_name,
	scale_name,
)


class ItemLibrary:
	"""Static catalog of practice items for one domain."""

	def __init__(self, categories: Sequence[str], catalog: Sequence[Item]) -> None:
		self._categories: Tuple[str, ...] = tuple(categories)
		self._catalog: Tuple[Item, ...] = tuple(catalog)

	def all_categories(self) -> List[str]:
		return list(self._categories)

	def all_items(self) -> List[Item]:
		return list(self._catalog)

	def available_items(self, enabled: Iterable[str]) -> List[Item]:
		"""Catalog items whose category is enabled, in catalog order.

		Raises:
			InvalidArgument: if no category is enabled.
		"""
		wanted = set(enabled)
		if not wanted:
			raise InvalidArgument("At least one category must be enabled.")
		return [item for item in self._catalog if item.category in wanted]

	def __len__(self) -> int:
		return len(self._catalog)


@dataclass(frozen=True)
class Domain:
	name: DomainName
	noun: str
	library: ItemLibrary
	default_categories: Tuple[str, ...]
	# Whether the selector skips the item that was just shown.
	avoid_repeats: bool

	def default_preferences(self) -> Preferences:
		return Preferences(time_limit=DEFAULT_TIME_LIMIT, enabled_categories=list(self.default_categories))


def build_chord_library() -> ItemLibrary:
	catalog: List[Item] = []
	for chord_type in CHORD_TYPES:
		for root in ROOTS:
			for quality, _suffix in CHORD_QUALITIES[chord_type]:
				catalog.append(
					Chord(
						root=root,
						category=chord_type,
						quality=quality,
						display_name=chord_name(root, chord_type, quality),
					)
				)
	return ItemLibrary(CHORD_TYPES, catalog)


def build_scale_library() -> ItemLibrary:
	catalog: List[Item] = [
		Scale(root=root, category=scale_type, display_name=scale_name(root, scale_type))
		for scale_type in SCALE_TYPES
		for root in ROOTS
	]
	return ItemLibrary(SCALE_TYPES, catalog)


CHORDS = Domain(
	name="chords",
	noun="chord",
	library=build_chord_library(),
	default_categories=CHORD_TYPES,
	avoid_repeats=False,
)

SCALES = Domain(
	name="scales",
	noun="scale",
	library=build_scale_library(),
	default_categories=DEFAULT_SCALE_TYPES,
	avoid_repeats=True,
)

DOMAINS: Dict[str, Domain] = {CHORDS.name: CHORDS, SCALES.name: SCALES}


def get_domain(name: str) -> Domain:
	try:
		return DOMAINS[name]
	except KeyError:
		raise InvalidArgument(f"Unknown practice domain: {name!r}") from None
