"""Builders for composing music out of smaller pieces.

Every function here is pure: it returns a new tree and never modifies its
arguments. The higher-order helpers (`series`, `counterpoint`, `canon`,
`repeat`) take transformations as plain callables, and `transposer` /
`delayer` / `IDENTITY` provide the common ones.

Example:
	```python
	import rondo.constants.instruments as instruments
	import rondo.language as lang

	row = lang.notes("C C C3/4 D/4 E | E3/4 D/4 E3/4 F/4 G2", instruments.PIANO)

	# Four voices, each entering two beats after the last.
	four_part_round = lang.round(lang.forever(row), 2, 4)
	```
"""

import logging
import math
import typing

import rondo.constants.instruments
import rondo.music
import rondo.notation
import rondo.pitch


logger = logging.getLogger(__name__)

Music = rondo.music.Music
Transform = typing.Callable[[Music], Music]

T = typing.TypeVar("T")


# Parser entry point, re-exported so compositions only need this module.
notes = rondo.notation.notes


def note (duration: float, pitch: rondo.pitch.Pitch, instrument: rondo.constants.instruments.Instrument) -> Music:

	"""
	Return ``pitch`` played by ``instrument`` for ``duration`` beats.
	"""

	return rondo.music.Note(duration, pitch, instrument)


def rest (duration: float) -> Music:

	"""
	Return a rest lasting ``duration`` beats.
	"""

	return rondo.music.Rest(duration)


def IDENTITY (m: Music) -> Music:

	"""
	The transformation that leaves music unchanged.
	"""

	return m


def transposer (semitones_up: int) -> Transform:

	"""
	Return a transformation that transposes music by ``semitones_up``.
	"""

	def transform (m: Music) -> Music:
		return m.transpose(semitones_up)

	return transform


def delayer (beats: float) -> Transform:

	"""
	Return a transformation that delays music by ``beats``.
	"""

	def transform (m: Music) -> Music:
		return delay(m, beats)

	return transform


def series (initial: T, combine: typing.Callable[[T, T], T], change: typing.Callable[[T], T], n: int) -> T:

	"""Fold ``n`` successive transformations of ``initial`` into one value.

	Returns ``combine(x0, combine(x1, ... combine(x[n-2], x[n-1])))`` where
	``x0 = initial`` and ``x[i] = change(x[i-1])``. With ``n == 1`` the
	result is ``initial`` itself.

	The fold is computed iteratively from the innermost term outwards, so
	large ``n`` does not grow the call stack.

	Raises:
		ValueError: If ``n`` is less than 1.
	"""

	if n < 1:
		raise ValueError(f"series() needs at least one term, got n={n}")

	terms = [initial]

	for _ in range(n - 1):
		terms.append(change(terms[-1]))

	result = terms.pop()

	while terms:
		result = combine(terms.pop(), result)

	return result


def concat (m1: Music, m2: Music) -> Music:

	"""
	Return ``m1`` followed by ``m2``.
	"""

	return rondo.music.Concat(m1, m2)


def together (m1: Music, m2: Music) -> Music:

	"""
	Return ``m1`` played at the same time as ``m2``.
	"""

	return rondo.music.Together(m1, m2)


def transpose (m: Music, semitones_up: int) -> Music:

	"""
	Return ``m`` with every note moved by ``semitones_up`` semitones.
	"""

	return m.transpose(semitones_up)


def delay (m: Music, beats: float) -> Music:

	"""
	Return ``m`` preceded by ``beats`` of silence.
	"""

	return concat(rest(beats), m)


def counterpoint (m: Music, f: Transform, n: int) -> Music:

	"""
	Return ``n`` voices played together, where voice ``i`` is ``f`` applied ``i - 1`` times to ``m``.
	"""

	return series(m, together, f, n)


def canon (m: Music, beats: float, f: Transform, n: int) -> Music:

	"""Return an ``n``-voice canon.

	Each voice enters ``beats`` after the previous one and is additionally
	transformed by ``f`` (for example `transposer` for a canon at the octave).
	"""

	delay_voice = delayer(beats)

	def next_voice (voice: Music) -> Music:
		return f(delay_voice(voice))

	return counterpoint(m, next_voice, n)


def round (m: Music, beats: float, n: int) -> Music:

	"""
	Return an ``n``-voice round: identical voices, each entering ``beats`` after the last.
	"""

	return canon(m, beats, IDENTITY, n)


def repeat (m: Music, n: int, f: Transform = IDENTITY) -> Music:

	"""Return ``n`` repetitions of ``m`` in a single voice.

	Repetition ``i`` is ``f`` applied ``i - 1`` times to ``m``; by default
	every repetition is identical.
	"""

	return series(m, concat, f, n)


def forever (m: Music) -> Music:

	"""
	Return music that plays ``m`` in an endless loop.
	"""

	return rondo.music.Forever(m)


def accompany (m1: Music, m2: Music) -> Music:

	"""Play two pieces together so that they also end together.

	The shorter piece is repeated for as long as the longer one plays:

	- both infinite: the two are simply played together
	- one infinite: the finite one is looped with `forever`
	- both finite: the shorter one is repeated ``longer / shorter`` times,
	  rounded to the nearest whole number. Durations that are not exact
	  multiples are accepted, so the ends may not line up exactly.

	A finite piece of zero duration is played once as it is.
	"""

	if m1.duration < m2.duration:
		m1, m2 = m2, m1

	longer, shorter = m1, m2

	if shorter.duration == math.inf:
		return together(longer, shorter)

	if longer.duration == math.inf:
		return together(longer, forever(shorter))

	if shorter.duration == 0:
		return together(longer, shorter)

	ratio = longer.duration / shorter.duration
	count = max(1, int(math.floor(ratio + 0.5)))

	if count != ratio:
		logger.debug(f"accompany(): {longer.duration:g} / {shorter.duration:g} beats is not a whole multiple, repeating {count} times")

	return together(longer, repeat(shorter, count))
