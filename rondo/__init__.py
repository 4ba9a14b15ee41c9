"""
rondo - an algebra of music for Python.

Music is built from notes and rests with a handful of combinators, and the
result is an ordinary immutable value: it has a duration, can be transposed,
compared and hashed, and can be played as many times as you like.

What it offers:

- **Five building blocks.** `Note`, `Rest`, `Concat` (one after the other),
  `Together` (at the same time) and `Forever` (an endless loop).
- **Combinators for form.** ``repeat()``, ``delay()``, ``counterpoint()``,
  ``canon()``, ``round()`` and ``accompany()`` build rounds, canons and
  accompaniments out of a single line.  The generic ``series()`` fold
  underlies them all.
- **Compact notation.** ``notes("C D E F | G2 G2", PIANO)`` parses a
  simplified abc notation: accidentals (``^``/``_``), octave marks
  (``'``/``,``), rests (``.``) and durations (``2``, ``/2``, ``3/4``).
- **Infinite music, played lazily.** A `Forever` schedules one pass of its
  body and a single callback for the beat where that pass ends; the player's
  clock re-expands the loop as it reaches it.  Nothing is generated ahead.
- **Pure MIDI playback.** The `Sequencer` drives any MIDI output (hardware,
  a DAW or a software synth) through mido.  The `Timeline` player records
  notes on a virtual clock for inspection and testing.

Minimal example:

	```python
	import rondo
	import rondo.constants.instruments as instruments

	row = rondo.notes(
		"C C C3/4 D/4 E | E3/4 D/4 E3/4 F/4 G2 |"
		"C'/3 C'/3 C'/3 G/3 G/3 G/3 E/3 E/3 E/3 C/3 C/3 C/3 |"
		"G3/4 F/4 E3/4 D/4 C2",
		instruments.PIANO
	)

	rondo.play(rondo.canon(rondo.forever(row), 4, rondo.transposer(12), 3))
	```

Package-level exports: the node classes, every combinator from
``rondo.language``, ``Pitch``, ``Sequencer``, ``Timeline``, ``play`` and
``render``.
"""

import rondo.language
import rondo.music
import rondo.music_player
import rondo.notation
import rondo.pitch
import rondo.sequencer
import rondo.timeline


Music = rondo.music.Music
Note = rondo.music.Note
Rest = rondo.music.Rest
Concat = rondo.music.Concat
Together = rondo.music.Together
Forever = rondo.music.Forever

Pitch = rondo.pitch.Pitch
MIDDLE_C = rondo.pitch.MIDDLE_C
OCTAVE = rondo.pitch.OCTAVE

NotationError = rondo.notation.NotationError
notes = rondo.notation.notes

note = rondo.language.note
rest = rondo.language.rest
concat = rondo.language.concat
together = rondo.language.together
transpose = rondo.language.transpose
delay = rondo.language.delay
series = rondo.language.series
counterpoint = rondo.language.counterpoint
canon = rondo.language.canon
round = rondo.language.round
repeat = rondo.language.repeat
forever = rondo.language.forever
accompany = rondo.language.accompany
IDENTITY = rondo.language.IDENTITY
transposer = rondo.language.transposer
delayer = rondo.language.delayer

Sequencer = rondo.sequencer.Sequencer
Timeline = rondo.timeline.Timeline

play = rondo.music_player.play
render = rondo.music_player.render
