"""A virtual-clock player and an ahead-of-time unroller.

`Timeline` implements `rondo.player.SequencePlayer` without any device or
wall clock: notes are recorded, callbacks are kept in a heap, and
``start(until=...)`` advances a virtual clock through them.  It is the
quickest way to see what a composition will do:

	```python
	timeline = rondo.timeline.Timeline()
	rondo.language.forever(row).play(timeline, 0)
	timeline.start(until=32)

	for note in timeline.notes:
		print(note.start_beat, note.pitch)
	```

`unroll` computes the same notes directly from the tree, expanding loops up
front.  The two agree for any time horizon; `Timeline` only ever holds one
pending callback per live loop, while `unroll` has to walk every pass.
"""

import heapq
import itertools
import logging
import math
import typing

import rondo.constants.instruments
import rondo.music
import rondo.pitch
import rondo.player


logger = logging.getLogger(__name__)


class Timeline:

	"""
	A `SequencePlayer` that records notes against a virtual clock.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty timeline with the clock at beat 0.
		"""

		self.now: float = 0.0

		self._notes: typing.List[rondo.player.ScheduledNote] = []
		self._seen: typing.Set[rondo.player.ScheduledNote] = set()

		self.callback_queue: typing.List[typing.Tuple[float, int, typing.Callable[[], None]]] = []
		self._callback_counter = itertools.count()


	@property
	def notes (self) -> typing.List[rondo.player.ScheduledNote]:

		"""
		Every note scheduled so far, in time order.
		"""

		return sorted(self._notes)


	@property
	def pending_callbacks (self) -> int:

		return len(self.callback_queue)


	def schedule_note (self, instrument: rondo.constants.instruments.Instrument, pitch: rondo.pitch.Pitch, start_beat: float, num_beats: float) -> None:

		"""
		Record a note. Duplicates of an already recorded note are ignored.
		"""

		if not math.isfinite(start_beat):
			logger.debug(f"Ignoring note {pitch} at unreachable beat {start_beat}")
			return

		if num_beats < 0:
			raise ValueError(f"Note length cannot be negative, got {num_beats}")

		note = rondo.player.ScheduledNote(
			start_beat = start_beat,
			num_beats = num_beats,
			pitch = pitch,
			instrument = instrument
		)

		if note in self._seen:
			return

		self._seen.add(note)
		self._notes.append(note)


	def schedule_callback (self, beat: float, callback: typing.Callable[[], None]) -> None:

		"""
		Queue ``callback`` to run when the virtual clock reaches ``beat``.
		"""

		if not math.isfinite(beat):
			logger.debug(f"Ignoring callback at unreachable beat {beat}")
			return

		counter = next(self._callback_counter)
		heapq.heappush(self.callback_queue, (beat, counter, callback))


	def start (self, until: typing.Optional[float] = None) -> None:

		"""Advance the clock, running callbacks in beat order.

		Parameters:
			until: Stop once every callback due at or before this beat has run,
				leaving the clock at ``until``.  When omitted, runs until no
				callbacks remain - which never happens for music containing a
				live `forever`.
		"""

		while self.callback_queue:

			beat = self.callback_queue[0][0]

			if until is not None and beat > until:
				break

			_, _, callback = heapq.heappop(self.callback_queue)

			self.now = max(self.now, beat)
			callback()

		if until is not None:
			self.now = max(self.now, until)


def unroll (music: rondo.music.Music, until: float, at_beat: float = 0.0) -> typing.Iterator[rondo.player.ScheduledNote]:

	"""Yield every note of ``music`` that starts at or before ``until``.

	Loops are expanded pass by pass up to the horizon.  Notes are yielded in
	the order ``music.play()`` would schedule them.
	"""

	stack: typing.List[typing.Tuple[rondo.music.Music, float]] = [(music, at_beat)]

	while stack:

		node, beat = stack.pop()

		# Everything in this subtree starts at or after ``beat``.
		if beat > until:
			continue

		if isinstance(node, rondo.music.Note):
			yield rondo.player.ScheduledNote(
				start_beat = beat,
				num_beats = node.duration,
				pitch = node.pitch,
				instrument = node.instrument
			)

		elif isinstance(node, rondo.music.Concat):
			stack.append((node.second, beat + node.first.duration))
			stack.append((node.first, beat))

		elif isinstance(node, rondo.music.Together):
			stack.append((node.bottom, beat))
			stack.append((node.top, beat))

		elif isinstance(node, rondo.music.Forever):
			if node.body.duration > 0:
				stack.append((node, beat + node.body.duration))
				stack.append((node.body, beat))
