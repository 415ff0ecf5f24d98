import json

import pytest

from jazzgym.domains import CHORDS, SCALES
from jazzgym.errors import InvalidArgument, OutOfRange, PersistenceFailure
from jazzgym.storage import JsonPracticeStore


def test_session_lifecycle(chord_store, clock):
	sid = chord_store.create_session(10)
	clock.advance(5)
	chord_store.append_item(sid, "Cmaj7")
	clock.advance(5)
	chord_store.append_item(sid, "F#m7b5")
	clock.advance(5)
	closed = chord_store.close_session(sid)
	assert closed.item_count == 2
	assert closed.ended_at is not None
	details = chord_store.get_session_details(sid)
	assert [r.item_name for r in details.items] == ["Cmaj7", "F#m7b5"]
	assert details.items[0].displayed_at < details.items[1].displayed_at
	assert all(r.session_id == sid for r in details.items)


def test_ids_increase(chord_store):
	assert chord_store.create_session(10) == 1
	assert chord_store.create_session(10) == 2


def test_in_progress_sessions_are_not_listed(chord_store):
	sid = chord_store.create_session(10)
	assert chord_store.list_sessions() == []
	chord_store.close_session(sid)
	assert [s.id for s in chord_store.list_sessions()] == [sid]


def test_list_newest_first_with_limit(chord_store, clock):
	for _ in range(4):
		chord_store.close_session(chord_store.create_session(10))
		clock.advance(60)
	assert [s.id for s in chord_store.list_sessions()] == [4, 3, 2, 1]
	assert [s.id for s in chord_store.list_sessions(limit=2)] == [4, 3]


def test_empty_session_is_listable(scale_store):
	sid = scale_store.create_session(5)
	scale_store.close_session(sid)
	details = scale_store.get_session_details(sid)
	assert details.items == []
	assert details.item_count == 0


def test_missing_details_is_none(chord_store):
	assert chord_store.get_session_details(42) is None


def test_append_to_unknown_session_fails(chord_store):
	with pytest.raises(PersistenceFailure):
		chord_store.append_item(99, "C")
	with pytest.raises(PersistenceFailure):
		chord_store.close_session(99)


def test_empty_item_name_rejected(chord_store):
	sid = chord_store.create_session(10)
	with pytest.raises(InvalidArgument):
		chord_store.append_item(sid, "")
	with pytest.raises(InvalidArgument):
		chord_store.append_item(sid, "   ")


def test_delete_session_cascades(chord_store):
	sid = chord_store.create_session(10)
	chord_store.append_item(sid, "C7")
	chord_store.close_session(sid)
	chord_store.delete_session(sid)
	assert chord_store.get_session_details(sid) is None
	assert chord_store.list_sessions() == []


def test_delete_missing_session_is_noop(chord_store):
	sid = chord_store.create_session(10)
	chord_store.close_session(sid)
	chord_store.delete_session(12345)
	assert [s.id for s in chord_store.list_sessions()] == [sid]


def test_delete_all_keeps_preferences(chord_store):
	chord_store.update_preferences(time_limit=25)
	for _ in range(3):
		chord_store.close_session(chord_store.create_session(10))
	chord_store.delete_all_sessions()
	assert chord_store.list_sessions() == []
	assert chord_store.get_stats().total_sessions == 0
	assert chord_store.load_preferences().time_limit == 25


def test_stats_from_store(chord_store, clock):
	for count, minutes in ((2, 1.5), (3, 2.9), (4, 0.5)):
		sid = chord_store.create_session(10)
		for _ in range(count):
			chord_store.append_item(sid, "Dm7")
		clock.advance(minutes * 60)
		chord_store.close_session(sid)
	chord_store.create_session(10)  # still running
	stats = chord_store.get_stats()
	assert stats.total_sessions == 3
	assert stats.total_items == 9
	assert stats.total_minutes == 1 + 2 + 0


def test_domains_share_file_but_not_data(chord_store, scale_store, data_path):
	chord_store.close_session(chord_store.create_session(10))
	assert scale_store.list_sessions() == []
	scale_store.create_session(10)
	raw = json.loads(data_path.read_text())
	assert set(raw) == {"chords", "scales"}


def test_preferences_default_on_first_load(chord_store, scale_store):
	assert chord_store.load_preferences() == CHORDS.default_preferences()
	assert scale_store.load_preferences() == SCALES.default_preferences()


def test_update_preferences_partial(scale_store):
	prefs = scale_store.update_preferences(time_limit=30)
	assert prefs.time_limit == 30
	assert prefs.enabled_categories == list(SCALES.default_categories)
	prefs = scale_store.update_preferences(enabled_categories=["Lydian"])
	assert prefs.time_limit == 30
	assert scale_store.load_preferences().enabled_categories == ["Lydian"]


@pytest.mark.parametrize("bad", [2, 61])
def test_update_preferences_out_of_range(chord_store, bad):
	with pytest.raises(OutOfRange):
		chord_store.update_preferences(time_limit=bad)
	assert chord_store.load_preferences().time_limit == 10


def test_update_preferences_empty_categories(chord_store):
	with pytest.raises(InvalidArgument):
		chord_store.update_preferences(enabled_categories=[])


def test_corrupt_file_raises(data_path):
	data_path.write_text("{not json")
	store = JsonPracticeStore(data_path, CHORDS)
	with pytest.raises(PersistenceFailure):
		store.list_sessions()


def test_corrupt_preferences_raise(data_path):
	data_path.write_text(json.dumps({"chords": {"preferences": {"time_limit": 1, "enabled_categories": []}}}))
	store = JsonPracticeStore(data_path, CHORDS)
	with pytest.raises(PersistenceFailure):
		store.load_preferences()


def test_close_session_records_final_item(chord_store):
	sid = chord_store.create_session(10)
	chord_store.append_item(sid, "Am7")
	closed = chord_store.close_session(sid, "D7")
	assert closed.item_count == 2
	assert [r.item_name for r in chord_store.get_session_details(sid).items] == ["Am7", "D7"]


def test_close_session_rejects_empty_final_item(chord_store):
	sid = chord_store.create_session(10)
	with pytest.raises(InvalidArgument):
		chord_store.close_session(sid, "")
	assert chord_store.list_sessions() == []


def test_close_corrupt_session_raises_and_writes_nothing(data_path):
	data_path.write_text(json.dumps({"chords": {"sessions": [{"id": 1, "started_at": "yesterday", "time_limit": 10}]}}))
	before = data_path.read_text()
	store = JsonPracticeStore(data_path, CHORDS)
	with pytest.raises(PersistenceFailure):
		store.close_session(1, "C")
	assert data_path.read_text() == before


@pytest.mark.parametrize("bad", [2, 61])
def test_create_session_rejects_out_of_range_time_limit(chord_store, bad):
	with pytest.raises(OutOfRange):
		chord_store.create_session(bad)
	assert chord_store.get_session_details(1) is None
