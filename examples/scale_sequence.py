"""Scheduling notes on a sequencer by hand, without the music language.

Each note is placed explicitly with `schedule_note`.  `describe()` lists the
resulting MIDI events before playback starts.
"""

import logging

import rondo
import rondo.constants.instruments as instruments

logging.basicConfig(level=logging.INFO)

sequencer = rondo.Sequencer(initial_bpm=120)

for beat, letter in enumerate("CDEFGAB"):
	sequencer.schedule_note(instruments.PIANO, rondo.Pitch.from_letter(letter), beat, 1)

sequencer.schedule_note(instruments.PIANO, rondo.Pitch.from_letter("C").transpose(rondo.OCTAVE), 7, 1)

for beat, letter in enumerate("BAGFEDC", start=8):
	sequencer.schedule_note(instruments.PIANO, rondo.Pitch.from_letter(letter), beat, 1)

print(sequencer.describe())

sequencer.start()
