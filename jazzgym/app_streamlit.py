import streamlit as st
import pandas as pd
import altair as alt
from typing import Any, Dict, Optional

from jazzgym.config import configure_logging, load_config
from jazzgym.domains import DOMAINS, Domain, get_domain
from jazzgym.errors import PracticeError
from jazzgym.history import HistoryManager
from jazzgym.models import SessionState, Summary
from jazzgym.preferences import PreferencesEditor
from jazzgym.storage import JsonPracticeStore
from jazzgym.theory import MAX_TIME_LIMIT, MIN_TIME_LIMIT
from jazzgym.timer import CountdownTimer
from jazzgym.trainer import PracticeSessionManager


st.set_page_config(page_title="JazzGym Flashcards", page_icon=None, layout="centered")


def get_state() -> Any:
	if "config" not in st.session_state:
		cfg = load_config()
		configure_logging(cfg.log_level)
		st.session_state.config = cfg
	if "services" not in st.session_state:
		cfg = st.session_state.config
		services: Dict[str, Dict[str, Any]] = {}
		for name, domain in DOMAINS.items():
			store = JsonPracticeStore(cfg.data_path, domain)
			services[name] = {
				"manager": PracticeSessionManager(domain, store),
				"prefs": PreferencesEditor(domain, store),
				"history": HistoryManager(store, limit=cfg.history_limit),
			}
		st.session_state.services = services
	# One slot per domain: chord and scale sessions are independent.
	if "sessions" not in st.session_state:
		st.session_state.sessions = {name: None for name in DOMAINS}
	if "timers" not in st.session_state:
		st.session_state.timers = {name: None for name in DOMAINS}
	if "summaries" not in st.session_state:
		st.session_state.summaries = {name: None for name in DOMAINS}
	if "error" not in st.session_state:
		st.session_state.error = None
	return st.session_state


def _report(err: PracticeError) -> None:
	st.session_state.error = str(err)


def sidebar_controls(state: Any, domain: Domain) -> None:
	editor: PreferencesEditor = state.services[domain.name]["prefs"]
	prefs = editor.current
	st.sidebar.header(f"{domain.noun.capitalize()} settings")
	time_limit = st.sidebar.slider(
		"Seconds per card", min_value=MIN_TIME_LIMIT, max_value=MAX_TIME_LIMIT, value=prefs.time_limit, step=1, key=f"tl-{domain.name}"
	)
	categories = st.sidebar.multiselect(
		"Categories",
		options=domain.library.all_categories(),
		default=prefs.enabled_categories,
		key=f"cats-{domain.name}",
	)
	if not categories:
		st.sidebar.warning("Select at least one category.")
	elif time_limit != prefs.time_limit or categories != prefs.enabled_categories:
		try:
			editor.update(time_limit=time_limit, enabled_categories=categories)
		except PracticeError as e:
			st.sidebar.error(str(e))
	if st.sidebar.button("Reset to defaults", key=f"reset-{domain.name}"):
		try:
			editor.reset()
		except PracticeError as e:
			st.sidebar.error(str(e))
		for k in (f"tl-{domain.name}", f"cats-{domain.name}"):
			st.session_state.pop(k, None)
		st.rerun()


def _advance(state: Any, domain: Domain) -> None:
	session: Optional[SessionState] = state.sessions[domain.name]
	if session is None:
		return
	manager: PracticeSessionManager = state.services[domain.name]["manager"]
	timer: Optional[CountdownTimer] = state.timers[domain.name]
	try:
		# Keep the old state on failure so Next can be pressed again.
		state.sessions[domain.name] = manager.advance(session)
	except PracticeError as e:
		_report(e)
		# Park the timer so auto-advance can be retried with Resume.
		if timer is not None:
			timer.reset()
			timer.pause()
		return
	if timer is not None:
		timer.reset()


def _start(state: Any, domain: Domain) -> None:
	svc = state.services[domain.name]
	prefs = svc["prefs"].current
	try:
		session = svc["manager"].start(prefs.time_limit, prefs.enabled_categories)
	except PracticeError as e:
		_report(e)
		return
	state.sessions[domain.name] = session
	state.summaries[domain.name] = None
	state.timers[domain.name] = CountdownTimer(session.time_limit, lambda: _advance(state, domain))


def _end(state: Any, domain: Domain) -> None:
	session: Optional[SessionState] = state.sessions[domain.name]
	if session is None:
		return
	timer: Optional[CountdownTimer] = state.timers[domain.name]
	if timer is not None:
		timer.pause()
	try:
		summary = state.services[domain.name]["manager"].end(session)
	except PracticeError as e:
		_report(e)
		return
	state.summaries[domain.name] = summary
	state.sessions[domain.name] = None
	state.timers[domain.name] = None


def render_summary(summary: Summary) -> None:
	noun = get_domain(summary.domain).noun
	st.success("Session complete.")
	cols = st.columns(2)
	cols[0].metric(f"{noun.capitalize()}s practised", summary.total_items)
	cols[1].metric("Minutes", f"{summary.duration_minutes:.1f}")


@st.fragment(run_every=0.2)
def countdown(state: Any, domain: Domain) -> None:
	timer: Optional[CountdownTimer] = state.timers[domain.name]
	if timer is None:
		return
	if timer.poll():
		st.rerun()
	st.progress(timer.remaining() / timer.duration, text=f"{timer.display_seconds()} s")


def practice_page(state: Any, domain: Domain) -> None:
	st.title(f"{domain.noun.capitalize()} Flashcards")
	session: Optional[SessionState] = state.sessions[domain.name]

	if session is None:
		summary = state.summaries[domain.name]
		if summary is not None:
			render_summary(summary)
		if st.button("Start Session", use_container_width=True):
			_start(state, domain)
			st.rerun()
		return

	if session.current_item is None:
		return
	st.markdown(f"<h1 style='text-align:center'>{session.current_item.display_name}</h1>", unsafe_allow_html=True)
	st.caption(f"{session.current_item.category} - {session.completed_count} done")
	countdown(state, domain)

	timer: Optional[CountdownTimer] = state.timers[domain.name]
	cols = st.columns(3)
	with cols[0]:
		if timer is not None and timer.is_running:
			if st.button("Pause", use_container_width=True):
				timer.pause()
				st.rerun()
		elif timer is not None and st.button("Resume", use_container_width=True):
			timer.resume()
			st.rerun()
	with cols[1]:
		if st.button("Next", use_container_width=True):
			_advance(state, domain)
			st.rerun()
	with cols[2]:
		if st.button("End Session", use_container_width=True):
			_end(state, domain)
			st.rerun()


def history_page(state: Any, domain: Domain) -> None:
	history: HistoryManager = state.services[domain.name]["history"]
	st.title(f"{domain.noun.capitalize()} History")
	try:
		snap = history.refresh()
	except PracticeError as e:
		st.error(str(e))
		return

	cols = st.columns(3)
	cols[0].metric("Sessions", snap.stats.total_sessions)
	cols[1].metric(f"{domain.noun.capitalize()}s", snap.stats.total_items)
	cols[2].metric("Minutes", snap.stats.total_minutes)

	if not snap.sessions:
		st.info("No sessions yet.")
		return

	df = pd.DataFrame(
		[
			{"id": s.id, "started": s.started_at, "items": s.item_count, "seconds per card": s.time_limit}
			for s in snap.sessions
		]
	)
	st.dataframe(df, hide_index=True)
	chart = alt.Chart(df).mark_bar().encode(
		x=alt.X("started:T", title="Session"),
		y=alt.Y("items:Q", title=f"{domain.noun.capitalize()}s"),
		tooltip=["id", "started", "items"],
	).properties(height=240)
	st.altair_chart(chart, use_container_width=True)

	sid = st.selectbox("Session", options=[s.id for s in snap.sessions], key=f"hist-{domain.name}")
	details = history.details(sid) if sid is not None else None
	if details is not None:
		with st.expander(f"Session {details.id} details"):
			if details.items:
				st.dataframe(
					[{"shown at": r.displayed_at, domain.noun: r.item_name} for r in details.items],
					hide_index=True,
				)
			else:
				st.write(f"No {domain.noun}s recorded.")
		if st.button("Delete session", key=f"del-{domain.name}"):
			history.delete_one(details.id)
			st.rerun()
	st.markdown("---")
	if st.button("Clear all history", key=f"clear-{domain.name}"):
		history.delete_all()
		st.rerun()


def main() -> None:
	state = get_state()
	mode = st.sidebar.radio("Mode", ["Chords", "Scales"], horizontal=True)
	page = st.sidebar.radio("Page", ["Practice", "History"])
	domain = get_domain(mode.lower())
	sidebar_controls(state, domain)

	if state.error:
		st.error(state.error)
		state.error = None

	if page == "Practice":
		practice_page(state, domain)
	else:
		history_page(state, domain)


if __name__ == "__main__":
	main()
