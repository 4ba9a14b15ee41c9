"""Tests for Music.play() scheduling, driven through the virtual Timeline."""

import math
import typing

import pytest

import rondo.constants.instruments
import rondo.language
import rondo.music
import rondo.pitch
import rondo.player
import rondo.timeline

from rondo.language import concat, forever, note, rest, together


PIANO = rondo.constants.instruments.PIANO
C = rondo.pitch.MIDDLE_C
E = rondo.pitch.Pitch.from_letter("E")
G = rondo.pitch.Pitch.from_letter("G")


class RecordingPlayer:

	"""Player that records calls without running anything."""

	def __init__ (self) -> None:

		self.calls: typing.List[typing.Tuple[typing.Any, ...]] = []
		self.callbacks: typing.List[typing.Tuple[float, typing.Callable[[], None]]] = []


	def schedule_note (self, instrument: typing.Any, pitch: rondo.pitch.Pitch, start_beat: float, num_beats: float) -> None:

		self.calls.append(("note", instrument, pitch, start_beat, num_beats))


	def schedule_callback (self, beat: float, callback: typing.Callable[[], None]) -> None:

		self.calls.append(("callback", beat))
		self.callbacks.append((beat, callback))


	def start (self) -> None:

		return None


# ---------------------------------------------------------------------------
# Per-node play() behaviour
# ---------------------------------------------------------------------------

def test_players_satisfy_the_protocol () -> None:

	"""Timeline and test doubles are SequencePlayers."""

	assert isinstance(rondo.timeline.Timeline(), rondo.player.SequencePlayer)
	assert isinstance(RecordingPlayer(), rondo.player.SequencePlayer)


def test_note_schedules_itself () -> None:

	"""A note schedules one note at the requested beat."""

	player = RecordingPlayer()
	note(2, E, PIANO).play(player, 3.5)

	assert player.calls == [("note", PIANO, E, 3.5, 2)]


def test_rest_schedules_nothing () -> None:

	"""A rest is silent."""

	player = RecordingPlayer()
	rest(4).play(player, 0)

	assert player.calls == []


def test_concat_offsets_second_part () -> None:

	"""The second part starts when the first one ends."""

	player = RecordingPlayer()
	concat(note(1.5, C, PIANO), concat(rest(1), note(1, E, PIANO))).play(player, 10)

	assert player.calls == [
		("note", PIANO, C, 10, 1.5),
		("note", PIANO, E, 12.5, 1),
	]


def test_together_starts_both_parts_at_once () -> None:

	"""Both parts of a Together start at the same beat, top first."""

	player = RecordingPlayer()
	together(note(1, C, PIANO), note(3, G, PIANO)).play(player, 2)

	assert player.calls == [
		("note", PIANO, C, 2, 1),
		("note", PIANO, G, 2, 3),
	]


def test_forever_plays_one_pass_and_one_callback () -> None:

	"""A loop schedules a single pass plus a callback where that pass ends."""

	player = RecordingPlayer()
	forever(concat(note(1, C, PIANO), note(1, E, PIANO))).play(player, 0)

	assert player.calls == [
		("note", PIANO, C, 0, 1),
		("note", PIANO, E, 1, 1),
		("callback", 2),
	]


def test_forever_callback_replays_the_loop () -> None:

	"""Running the callback plays the next pass and schedules the one after."""

	player = RecordingPlayer()
	forever(note(2, C, PIANO)).play(player, 1)

	_, callback = player.callbacks.pop()
	callback()

	assert player.calls[-2:] == [
		("note", PIANO, C, 3, 2),
		("callback", 5),
	]


def test_forever_of_nothing_does_nothing () -> None:

	"""forever(rest(0)) schedules no notes and no callbacks."""

	player = RecordingPlayer()
	forever(rest(0)).play(player, 0)
	forever(concat(rest(0), rest(0))).play(player, 0)

	assert player.calls == []


def test_forever_of_nothing_terminates_on_a_timeline () -> None:

	"""Running a timeline over an empty loop finishes immediately."""

	timeline = rondo.timeline.Timeline()
	forever(rest(0)).play(timeline, 0)
	timeline.start()

	assert timeline.notes == []
	assert timeline.pending_callbacks == 0


def test_play_does_not_modify_the_music () -> None:

	"""The same tree can be played repeatedly with identical results."""

	music = forever(concat(note(1, C, PIANO), rest(1)))
	snapshot = hash(music)

	first = rondo.timeline.Timeline()
	second = rondo.timeline.Timeline()
	music.play(first, 0)
	music.play(second, 0)
	first.start(until=10)
	second.start(until=10)

	assert first.notes == second.notes
	assert hash(music) == snapshot


# ---------------------------------------------------------------------------
# Timeline clock
# ---------------------------------------------------------------------------

def test_timeline_runs_callbacks_in_beat_order () -> None:

	"""Callbacks fire by beat; ties fire in registration order."""

	timeline = rondo.timeline.Timeline()
	order: typing.List[str] = []

	timeline.schedule_callback(3, lambda: order.append("c"))
	timeline.schedule_callback(1, lambda: order.append("a"))
	timeline.schedule_callback(3, lambda: order.append("d"))
	timeline.schedule_callback(2, lambda: order.append("b"))

	timeline.start()

	assert order == ["a", "b", "c", "d"]
	assert timeline.now == 3


def test_timeline_allows_scheduling_from_callbacks () -> None:

	"""A callback may schedule notes and further callbacks, even for the current beat."""

	timeline = rondo.timeline.Timeline()
	fired: typing.List[float] = []

	def first () -> None:
		fired.append(timeline.now)
		timeline.schedule_note(PIANO, C, timeline.now, 1)
		timeline.schedule_callback(timeline.now, lambda: fired.append(timeline.now))

	timeline.schedule_callback(4, first)
	timeline.start()

	assert fired == [4, 4]
	assert [n.start_beat for n in timeline.notes] == [4]


def test_timeline_stops_at_horizon () -> None:

	"""start(until=T) runs callbacks due at T but not after."""

	timeline = rondo.timeline.Timeline()
	fired: typing.List[int] = []

	for beat in (1, 2, 3):
		timeline.schedule_callback(beat, lambda beat=beat: fired.append(beat))

	timeline.start(until=2)

	assert fired == [1, 2]
	assert timeline.now == 2
	assert timeline.pending_callbacks == 1


def test_duplicate_notes_are_recorded_once () -> None:

	"""Scheduling an identical note twice is idempotent."""

	timeline = rondo.timeline.Timeline()
	rondo.language.round(note(1, C, PIANO), 0, 3).play(timeline, 0)

	assert len(timeline.notes) == 1


def test_unreachable_events_are_ignored () -> None:

	"""Anything sequenced after a loop is never scheduled."""

	timeline = rondo.timeline.Timeline()
	music = concat(forever(note(1, C, PIANO)), note(1, E, PIANO))

	music.play(timeline, 0)
	timeline.start(until=3)

	assert {n.pitch for n in timeline.notes} == {C}
	assert timeline.pending_callbacks == 1


def test_negative_note_length_is_rejected () -> None:

	"""A note cannot end before it starts."""

	with pytest.raises(ValueError):
		rondo.timeline.Timeline().schedule_note(PIANO, C, 0, -1)


# ---------------------------------------------------------------------------
# Lazy playback versus ahead-of-time unrolling
# ---------------------------------------------------------------------------

def _pieces () -> typing.List[rondo.music.Music]:

	"""A spread of compositions with nested, parallel and delayed loops."""

	row = rondo.language.notes("C D E/2 F/2 G2 | . G/3 A/3 B/3 C'", PIANO)
	bass = rondo.language.notes("C,2 G,,2", rondo.constants.instruments.CELLO)

	return [
		row,
		forever(row),
		rondo.language.canon(forever(row), 2, rondo.language.transposer(12), 3),
		rondo.language.accompany(rondo.language.repeat(row, 3), bass),
		concat(bass, rondo.language.accompany(forever(row), bass)),
		forever(concat(row, forever(bass))),
		together(forever(rest(0)), forever(concat(rest(1.5), note(0.5, G, PIANO)))),
	]


@pytest.mark.parametrize("horizon", [0, 7.5, 40])
@pytest.mark.parametrize("index", range(7))
def test_lazy_playback_matches_unrolling (index: int, horizon: float) -> None:

	"""The notes a timeline reaches by T are exactly the unrolled notes up to T."""

	music = _pieces()[index]

	timeline = rondo.timeline.Timeline()
	music.play(timeline, 0)
	timeline.start(until=horizon)

	lazy = {n for n in timeline.notes if n.start_beat <= horizon}
	eager = set(rondo.timeline.unroll(music, horizon))

	assert lazy == eager


def test_unroll_follows_play_order () -> None:

	"""unroll() yields notes in the order play() schedules them."""

	music = together(
		concat(note(1, C, PIANO), note(1, E, PIANO)),
		note(2, G, PIANO)
	)

	player = RecordingPlayer()
	music.play(player, 0)

	played = [(call[2], call[3]) for call in player.calls]
	unrolled = [(n.pitch, n.start_beat) for n in rondo.timeline.unroll(music, 10)]

	assert played == unrolled


def test_one_pending_callback_per_live_loop (row_your_boat: rondo.music.Music) -> None:

	"""However far the clock runs, each live loop holds exactly one callback."""

	voices = 4
	music = rondo.language.canon(
		forever(row_your_boat),
		row_your_boat.duration / voices,
		rondo.language.transposer(12),
		voices
	)

	timeline = rondo.timeline.Timeline()
	music.play(timeline, 0)

	assert timeline.pending_callbacks == voices

	for horizon in (1, 17, 100, 1000):
		timeline.start(until=horizon)
		assert timeline.pending_callbacks == voices
		assert timeline.now == horizon


def test_nested_loops_keep_one_callback_each () -> None:

	"""An inner loop under an outer one only ever has its own callback pending."""

	inner = forever(note(1, C, PIANO))
	music = together(forever(note(3, E, PIANO)), concat(rest(2), inner))

	timeline = rondo.timeline.Timeline()
	music.play(timeline, 0)
	timeline.start(until=50)

	assert timeline.pending_callbacks == 2
	assert max(n.start_beat for n in timeline.notes) <= 51


def test_unroll_of_finite_music_ignores_horizon_beyond_end () -> None:

	"""Finite music unrolls to all of its notes once the horizon passes its end."""

	music = rondo.language.notes("C D E", PIANO)

	assert len(list(rondo.timeline.unroll(music, math.inf))) == 3
	assert len(list(rondo.timeline.unroll(music, 1))) == 2
