import pytest

import rondo.pitch


def test_letters_map_to_the_octave_above_middle_c () -> None:

	"""Natural letters should follow the 12-TET major-scale spacing from middle C."""

	values = [rondo.pitch.Pitch.from_letter(letter).value for letter in "CDEFGAB"]

	assert values == [0, 2, 4, 5, 7, 9, 11]
	assert rondo.pitch.Pitch.from_letter("C") == rondo.pitch.MIDDLE_C


def test_unknown_letter_raises () -> None:

	"""Letters outside A-G are rejected."""

	with pytest.raises(ValueError, match="Unknown pitch letter"):
		rondo.pitch.Pitch.from_letter("H")

	with pytest.raises(ValueError):
		rondo.pitch.Pitch.from_letter("c")


def test_transpose_and_difference () -> None:

	"""transpose() adds semitones and difference() measures them."""

	a = rondo.pitch.Pitch.from_letter("A")
	high_a = a.transpose(rondo.pitch.OCTAVE)

	assert high_a.value == 21
	assert high_a.difference(a) == 12
	assert a.difference(high_a) == -12
	assert a.transpose(-9) == rondo.pitch.MIDDLE_C
	assert a.transpose(0) == a


def test_equality_hash_and_order () -> None:

	"""Pitches compare and hash by semitone value."""

	assert rondo.pitch.Pitch(4) == rondo.pitch.Pitch.from_letter("E")
	assert hash(rondo.pitch.Pitch(4)) == hash(rondo.pitch.Pitch.from_letter("E"))
	assert len({rondo.pitch.Pitch(4), rondo.pitch.Pitch(4), rondo.pitch.Pitch(5)}) == 2
	assert rondo.pitch.Pitch(-1) < rondo.pitch.MIDDLE_C < rondo.pitch.Pitch(1)


def test_pitch_value_must_be_int () -> None:

	"""Fractional semitones are not pitches."""

	with pytest.raises(TypeError):
		rondo.pitch.Pitch(1.5)  # type: ignore[arg-type]


def test_midi_note_number () -> None:

	"""Middle C is MIDI note 60 and A above it is 69."""

	assert rondo.pitch.MIDDLE_C.midi_note() == 60
	assert rondo.pitch.Pitch.from_letter("A").midi_note() == 69
	assert rondo.pitch.Pitch(-24).midi_note() == 36


def test_str_spells_in_notation () -> None:

	"""str() uses sharps and octave marks."""

	assert str(rondo.pitch.MIDDLE_C) == "C"
	assert str(rondo.pitch.Pitch(1)) == "^C"
	assert str(rondo.pitch.Pitch(21)) == "A'"
	assert str(rondo.pitch.Pitch(-13)) == "B,,"
