from datetime import datetime, timedelta, timezone

import pytest

from jazzgym.domains import CHORDS, SCALES
from jazzgym.storage import JsonPracticeStore


class FakeClock:
	def __init__(self, start: datetime) -> None:
		self.now = start

	def __call__(self) -> datetime:
		return self.now

	def advance(self, seconds: float) -> None:
		self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
	return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def data_path(tmp_path):
	return tmp_path / "data.json"


@pytest.fixture
def chord_store(data_path, clock):
	return JsonPracticeStore(data_path, CHORDS, clock=clock)


@pytest.fixture
def scale_store(data_path, clock):
	return JsonPracticeStore(data_path, SCALES, clock=clock)
