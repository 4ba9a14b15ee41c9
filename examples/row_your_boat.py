"""Row, Row, Row Your Boat - plain, as a two-voice round, or forever.

Usage::

	python examples/row_your_boat.py          # the tune once
	python examples/row_your_boat.py twice    # a second voice enters after 4 beats
	python examples/row_your_boat.py forever  # a four-voice round that never ends

Press Ctrl+C to stop the endless version.
"""

import logging
import sys

import rondo
import rondo.constants.instruments as instruments

logging.basicConfig(level=logging.INFO)

row_your_boat = rondo.notes(
	"C C C3/4 D/4 E |"                                          # Row, row, row your boat,
	"E3/4 D/4 E3/4 F/4 G2 |"                                    # Gently down the stream.
	"C'/3 C'/3 C'/3 G/3 G/3 G/3 E/3 E/3 E/3 C/3 C/3 C/3 |"      # Merrily, merrily, merrily, merrily,
	"G3/4 F/4 E3/4 D/4 C2",                                     # Life is but a dream.
	instruments.PIANO
)

mode = sys.argv[1] if len(sys.argv) > 1 else "once"

if mode == "twice":
	music = rondo.together(row_your_boat, rondo.delay(row_your_boat, 4))

elif mode == "forever":
	voices = 4
	music = rondo.canon(rondo.forever(row_your_boat), row_your_boat.duration / voices, rondo.transposer(rondo.OCTAVE), voices)

else:
	music = row_your_boat
	print(music)

rondo.play(music)
