import re
import typing

import rondo.constants.instruments
import rondo.music
import rondo.pitch


_SEPARATORS = re.compile(r"[\s|]+")
_SYMBOL = re.compile(r"([^/0-9]*)([0-9]+)?(/[0-9]+)?")


class NotationError (Exception):

	"""
	Raised when a notation string contains a symbol that cannot be parsed.
	"""

	def __init__ (self, message: str, token: str) -> None:

		super().__init__(message)
		self.token = token


def notes (text: str, instrument: rondo.constants.instruments.Instrument) -> rondo.music.Music:

	"""
	Parse a string of notes and rests into music played by one instrument.

	The notation is a simplified form of abc notation.  Symbols are separated
	by whitespace; ``|`` may be used to mark measures and is treated as a
	space.

	**Syntax:**
	- `C`: a note, one of the letters `A`-`G` in the octave starting at middle C.
	- `^C` / `_C`: sharp / flat (one semitone up / down).
	- `C'` / `C,`: up / down an octave. Marks may repeat, e.g. `C''`.
	- `.`: a rest.
	- Duration suffix: none for 1 beat, `n` for n beats, `/m` for 1/m beat,
	  `n/m` for n/m beats.

	Parameters:
		text: The string to parse.
		instrument: Instrument that plays every note.

	Returns:
		The symbols concatenated in order.

	Raises:
		NotationError: If any symbol is malformed.  Nothing is returned for
			the symbols that did parse.

	Example:
		```python
		notes("C D E F | G2 G2", instruments.PIANO)

		# half note high A, eighth note D flat, quarter rest
		notes("A'2 _D/2 .", instruments.VIOLIN)
		```
	"""

	music: rondo.music.Music = rondo.music.Rest(0)

	for symbol in tokenize(text):
		music = rondo.music.Concat(music, parse_symbol(symbol, instrument))

	return music


def tokenize (text: str) -> typing.List[str]:

	"""
	Split notation into symbols, dropping bar lines.
	"""

	return [symbol for symbol in _SEPARATORS.split(text) if symbol]


def parse_symbol (symbol: str, instrument: rondo.constants.instruments.Instrument) -> rondo.music.Music:

	"""
	Parse one symbol into a `Note` or a `Rest`.
	"""

	match = _SYMBOL.fullmatch(symbol)

	if match is None:
		raise NotationError(f"Couldn't understand {symbol!r}", symbol)

	pitch_symbol, numerator, denominator = match.groups()

	duration = 1.0

	if numerator is not None:
		duration *= int(numerator)

	if denominator is not None:
		divisor = int(denominator[1:])
		if divisor == 0:
			raise NotationError(f"Zero denominator in {symbol!r}", symbol)
		duration /= divisor

	if pitch_symbol == ".":
		return rondo.music.Rest(duration)

	try:
		pitch = parse_pitch(pitch_symbol)
	except NotationError as e:
		raise NotationError(f"Couldn't understand {symbol!r}: {e}", symbol) from e

	return rondo.music.Note(duration, pitch, instrument)


def parse_pitch (symbol: str) -> rondo.pitch.Pitch:

	"""
	Parse a pitch such as ``C``, ``^F'`` or ``_B,,``.

	Octave marks and accidentals are peeled off from the outside in:
	trailing ``'`` / ``,`` first, then a leading ``^`` / ``_``, leaving
	a single letter.
	"""

	# Strip marks iteratively; the total offset is the same as applying
	# them one at a time from the outside in.
	offset = 0
	remaining = symbol

	while True:

		if remaining.endswith("'"):
			offset += rondo.pitch.OCTAVE
			remaining = remaining[:-1]

		elif remaining.endswith(","):
			offset -= rondo.pitch.OCTAVE
			remaining = remaining[:-1]

		elif remaining.startswith("^"):
			offset += 1
			remaining = remaining[1:]

		elif remaining.startswith("_"):
			offset -= 1
			remaining = remaining[1:]

		else:
			break

	if len(remaining) != 1 or remaining not in rondo.pitch.LETTER_TO_SEMITONE:
		raise NotationError(f"Can't understand pitch {symbol!r}", symbol)

	return rondo.pitch.Pitch.from_letter(remaining).transpose(offset)
