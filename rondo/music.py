"""The composition algebra.

A piece of music is an immutable tree built from five node kinds:

- `Note` - a pitch played by an instrument for some beats
- `Rest` - silence for some beats
- `Concat` - two pieces played one after the other
- `Together` - two pieces started at the same time
- `Forever` - a piece looped endlessly (infinite duration)

The set is closed: `Music` cannot be subclassed outside this module.

Every node exposes the same interface:

- ``duration`` - length in beats (``math.inf`` for anything containing a
  sequential `Forever`). Computed once at construction.
- ``transpose(n)`` - a new tree with every note moved by ``n`` semitones.
- ``play(player, at_beat)`` - walk the tree and schedule it on a
  `rondo.player.SequencePlayer`.

Equality and hashing are structural, so two trees built the same way from
equal leaves compare equal and can be used as dict keys. `Concat` and
`Together` are order-sensitive: ``Concat(a, b) != Concat(b, a)``.

Trees are never modified after construction, so subtrees can be shared and
the same tree may be played any number of times.  Walks over a tree
(playing, transposing, comparing, printing) use an explicit stack, so a
piece thousands of levels deep, such as a long ``notes()`` string or
``repeat(m, 5000)``, is handled like any other.
"""

import dataclasses
import fractions
import logging
import math
import numbers
import typing

import rondo.constants.instruments
import rondo.pitch

if typing.TYPE_CHECKING:
	import rondo.player


logger = logging.getLogger(__name__)

T = typing.TypeVar("T")


class Music:

	"""
	Base class of the five composition node kinds.
	"""

	duration: float
	_hash: int


	def __init_subclass__ (cls, **kwargs: typing.Any) -> None:

		super().__init_subclass__(**kwargs)

		if cls.__module__ != __name__:
			raise TypeError(f"{cls.__name__}: Music is a closed type and cannot be extended")


	def _children (self) -> typing.Tuple["Music", ...]:

		return ()


	def transpose (self, semitones_up: int) -> "Music":

		"""
		Return a copy of this piece with every note moved by ``semitones_up``.
		"""

		return _fold(
			self,
			lambda leaf: leaf.transpose(semitones_up),
			lambda node, parts: type(node)(*parts)
		)


	def play (self, player: "rondo.player.SequencePlayer", at_beat: float) -> None:

		"""Schedule this piece on ``player`` starting at ``at_beat``.

		Notes are scheduled in tree order: the first part of a `Concat`
		before the second, the top of a `Together` before the bottom.  Each
		`Forever` schedules one pass of its body and then the callback that
		plays the next pass.
		"""

		stack: typing.List[typing.Tuple[Music, float, bool]] = [(self, at_beat, False)]

		while stack:

			node, beat, pass_ended = stack.pop()

			if pass_ended:
				typing.cast(Forever, node)._schedule_next_pass(player, beat)

			elif isinstance(node, Note):
				player.schedule_note(node.instrument, node.pitch, beat, node.duration)

			elif isinstance(node, Concat):
				stack.append((node.second, beat + node.first.duration, False))
				stack.append((node.first, beat, False))

			elif isinstance(node, Together):
				stack.append((node.bottom, beat, False))
				stack.append((node.top, beat, False))

			elif isinstance(node, Forever):

				loop_duration = node.body.duration

				if loop_duration == 0:
					logger.debug(f"Skipping forever() of an empty piece at beat {beat}")
					continue

				# The marker sits under the body, so the callback follows the pass's notes.
				stack.append((node, beat + loop_duration, True))
				stack.append((node.body, beat, False))


	def __eq__ (self, other: object) -> bool:

		if not isinstance(other, Music):
			return NotImplemented

		pairs: typing.List[typing.Tuple[Music, Music]] = [(self, other)]

		while pairs:

			a, b = pairs.pop()

			if a is b:
				continue

			if type(a) is not type(b) or a._hash != b._hash:
				return False

			children = a._children()

			if not children:
				if not _leaf_equal(a, b):
					return False
				continue

			pairs.extend(zip(children, b._children()))

		return True


	def __hash__ (self) -> int:

		return self._hash


	def __str__ (self) -> str:

		return _fold(self, str, lambda node, parts: node._format(parts))


	def __repr__ (self) -> str:

		return _fold(self, repr, lambda node, parts: f"{type(node).__name__}({', '.join(parts)})")


	def _format (self, parts: typing.Sequence[str]) -> str:

		raise NotImplementedError


def _fold (music: Music, leaf: typing.Callable[[Music], T], combine: typing.Callable[[Music, typing.List[T]], T]) -> T:

	"""
	Post-order fold over a tree: ``leaf`` maps Notes and Rests, ``combine``
	builds a node's result from its children's results.
	"""

	results: typing.List[T] = []
	stack: typing.List[typing.Tuple[Music, bool]] = [(music, False)]

	while stack:

		node, children_done = stack.pop()
		children = node._children()

		if not children:
			results.append(leaf(node))

		elif children_done:
			parts = results[-len(children):]
			del results[-len(children):]
			results.append(combine(node, parts))

		else:
			stack.append((node, True))
			stack.extend((child, False) for child in reversed(children))

	return results.pop()


def _leaf_equal (a: Music, b: Music) -> bool:

	if isinstance(a, Note) and isinstance(b, Note):
		return (a.duration, a.pitch, a.instrument) == (b.duration, b.pitch, b.instrument)

	return a.duration == b.duration


def _check_leaf_duration (duration: typing.Any) -> float:

	"""
	Validate a leaf duration and return it as a float.
	"""

	if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
		raise TypeError(f"Duration must be a number, got {duration!r}")

	duration = float(duration)

	if not math.isfinite(duration):
		raise ValueError(f"Duration must be finite, got {duration}")

	if duration < 0:
		raise ValueError(f"Duration cannot be negative, got {duration}")

	return duration


def _format_duration (duration: float) -> str:

	"""
	Write a duration the way notation does: ``2``, ``1/3``, ``3/4``.
	"""

	fraction = fractions.Fraction(duration).limit_denominator()

	if fraction.denominator == 1:
		return str(fraction.numerator)

	return f"{fraction.numerator}/{fraction.denominator}"


def _check_child (child: typing.Any, name: str) -> None:

	if not isinstance(child, Music):
		raise TypeError(f"{name} must be a Music, got {child!r}")


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Note (Music):

	"""
	A single pitch played by an instrument.
	"""

	duration: float
	pitch: rondo.pitch.Pitch
	instrument: rondo.constants.instruments.Instrument
	_hash: int = dataclasses.field(init=False, repr=False, compare=False)


	def __post_init__ (self) -> None:

		object.__setattr__(self, "duration", _check_leaf_duration(self.duration))

		if not isinstance(self.pitch, rondo.pitch.Pitch):
			raise TypeError(f"Note pitch must be a Pitch, got {self.pitch!r}")

		if self.instrument is None:
			raise TypeError("Note instrument is required")

		object.__setattr__(self, "_hash", hash((Note, self.duration, self.pitch, self.instrument)))


	def transpose (self, semitones_up: int) -> "Note":

		return Note(self.duration, self.pitch.transpose(semitones_up), self.instrument)


	def __str__ (self) -> str:

		return f"{self.pitch}{_format_duration(self.duration)}"


	def __repr__ (self) -> str:

		return f"Note({self.duration!r}, {self.pitch!r}, {self.instrument!r})"


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Rest (Music):

	"""
	Silence lasting ``duration`` beats.
	"""

	duration: float
	_hash: int = dataclasses.field(init=False, repr=False, compare=False)


	def __post_init__ (self) -> None:

		object.__setattr__(self, "duration", _check_leaf_duration(self.duration))
		object.__setattr__(self, "_hash", hash((Rest, self.duration)))


	def transpose (self, semitones_up: int) -> "Rest":

		# Nothing to transpose.
		return self


	def __str__ (self) -> str:

		return f".{_format_duration(self.duration)}"


	def __repr__ (self) -> str:

		return f"Rest({self.duration!r})"


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Concat (Music):

	"""
	Two pieces played one after the other.
	"""

	first: Music
	second: Music
	duration: float = dataclasses.field(init=False, compare=False)
	_hash: int = dataclasses.field(init=False, compare=False)


	def __post_init__ (self) -> None:

		_check_child(self.first, "Concat first")
		_check_child(self.second, "Concat second")

		object.__setattr__(self, "duration", self.first.duration + self.second.duration)
		object.__setattr__(self, "_hash", hash((Concat, self.first, self.second)))


	def _children (self) -> typing.Tuple[Music, ...]:

		return (self.first, self.second)


	def _format (self, parts: typing.Sequence[str]) -> str:

		return f"{parts[0]} {parts[1]}"


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Together (Music):

	"""
	Two pieces started at the same beat. Lasts as long as the longer one.
	"""

	top: Music
	bottom: Music
	duration: float = dataclasses.field(init=False, compare=False)
	_hash: int = dataclasses.field(init=False, compare=False)


	def __post_init__ (self) -> None:

		_check_child(self.top, "Together top")
		_check_child(self.bottom, "Together bottom")

		object.__setattr__(self, "duration", max(self.top.duration, self.bottom.duration))
		object.__setattr__(self, "_hash", hash((Together, self.top, self.bottom)))


	def _children (self) -> typing.Tuple[Music, ...]:

		return (self.top, self.bottom)


	def _format (self, parts: typing.Sequence[str]) -> str:

		return f"({parts[0]} & {parts[1]})"


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Forever (Music):

	"""A piece played over and over in an endless loop.

	Playing a `Forever` schedules one pass of the body plus a single callback
	at the beat where that pass ends. When the player's clock reaches it, the
	callback plays the loop again from there. At any moment a live `Forever`
	has exactly one callback pending, however long playback runs.

	A body of zero duration plays nothing: looping it would never advance
	the clock.
	"""

	body: Music
	duration: float = dataclasses.field(init=False, compare=False)
	_hash: int = dataclasses.field(init=False, compare=False)


	def __post_init__ (self) -> None:

		_check_child(self.body, "Forever body")

		object.__setattr__(self, "duration", math.inf)
		object.__setattr__(self, "_hash", hash((Forever, self.body)))


	def _children (self) -> typing.Tuple[Music, ...]:

		return (self.body,)


	def _format (self, parts: typing.Sequence[str]) -> str:

		return f"forever({parts[0]})"


	def _schedule_next_pass (self, player: "rondo.player.SequencePlayer", next_beat: float) -> None:

		def replay () -> None:

			self.play(player, next_beat)

		player.schedule_callback(next_beat, replay)
