"""Pitch arithmetic in 12-tone equal temperament.

A `Pitch` is an integer number of semitones above (or below) middle C, so
middle C is ``Pitch(0)``, the A above it is ``Pitch(9)`` and the C an octave
below is ``Pitch(-12)``.

Module-level constants:
- `OCTAVE`: semitones in an octave (12)
- `MIDDLE_C`: the reference pitch, ``Pitch(0)``
- `LETTER_TO_SEMITONE`: natural letters A-G in the octave starting at middle C
"""

import dataclasses
import typing

import rondo.constants


OCTAVE = 12

LETTER_TO_SEMITONE: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}

# Spelling used by str(); black keys are written as sharps.
_SEMITONE_TO_SYMBOL: typing.List[str] = [
	"C",
	"^C",
	"D",
	"^D",
	"E",
	"F",
	"^F",
	"G",
	"^G",
	"A",
	"^A",
	"B",
]


@dataclasses.dataclass(frozen=True, order=True)
class Pitch:

	"""
	An immutable pitch, measured in semitones from middle C.
	"""

	value: int


	def __post_init__ (self) -> None:

		if isinstance(self.value, bool) or not isinstance(self.value, int):
			raise TypeError(f"Pitch value must be an int, got {self.value!r}")


	@classmethod
	def from_letter (cls, letter: str) -> "Pitch":

		"""Return the natural pitch for a letter in the octave starting at middle C.

		Example:
			```python
			Pitch.from_letter("C")   # → Pitch(0), middle C
			Pitch.from_letter("A")   # → Pitch(9), A above middle C
			```

		Raises:
			ValueError: If ``letter`` is not one of ``A``-``G``.
		"""

		if letter not in LETTER_TO_SEMITONE:
			raise ValueError(f"Unknown pitch letter: {letter!r}. Expected one of A-G.")

		return cls(LETTER_TO_SEMITONE[letter])


	def transpose (self, semitones_up: int) -> "Pitch":

		"""
		Return this pitch moved by ``semitones_up`` (negative values move down).
		"""

		return Pitch(self.value + semitones_up)


	def difference (self, other: "Pitch") -> int:

		"""
		Return the number of semitones from ``other`` up to this pitch.
		"""

		return self.value - other.value


	def midi_note (self) -> int:

		"""
		Return the MIDI note number for this pitch (middle C = 60).
		"""

		return self.value + rondo.constants.MIDI_MIDDLE_C


	def __str__ (self) -> str:

		"""
		Spell the pitch in notation form, e.g. ``C``, ``^F'``, ``B,,``.
		"""

		octave, semitone = divmod(self.value, OCTAVE)
		marks = "'" * octave if octave > 0 else "," * -octave

		return _SEMITONE_TO_SYMBOL[semitone] + marks


MIDDLE_C = Pitch(0)
