"""The interface between compositions and whatever plays them.

`rondo.music.Music.play` walks a composition and calls into a
`SequencePlayer`.  Two players ship with rondo:

- `rondo.sequencer.Sequencer` - plays through a MIDI output in real time
- `rondo.timeline.Timeline` - records notes against a virtual clock
"""

import dataclasses
import typing

import rondo.constants.instruments
import rondo.pitch


@typing.runtime_checkable
class SequencePlayer (typing.Protocol):

	"""
	Protocol for objects that compositions can be played on.

	Calls arrive from the composition's tree walk and, for looping music,
	from inside callbacks while the player is running. Players must accept
	both.  Requests for a beat that can never be reached (``math.inf``) are
	ignored.
	"""

	def schedule_note (self, instrument: rondo.constants.instruments.Instrument, pitch: rondo.pitch.Pitch, start_beat: float, num_beats: float) -> None:

		"""
		Schedule ``pitch`` on ``instrument`` from ``start_beat`` for ``num_beats``.

		Scheduling the same note again while it is still pending has no
		further effect.
		"""

		...


	def schedule_callback (self, beat: float, callback: typing.Callable[[], None]) -> None:

		"""
		Run ``callback`` once, when the clock reaches ``beat``.

		Callbacks run in beat order; callbacks for the same beat run in the
		order they were scheduled.
		"""

		...


	def start (self) -> None:

		"""
		Play everything scheduled, blocking until no work remains.
		"""

		...


@dataclasses.dataclass(frozen=True, order=True)
class ScheduledNote:

	"""
	A note placed on the timeline.
	"""

	start_beat: float
	num_beats: float
	pitch: rondo.pitch.Pitch
	instrument: rondo.constants.instruments.Instrument


	def end_beat (self) -> float:

		return self.start_beat + self.num_beats
