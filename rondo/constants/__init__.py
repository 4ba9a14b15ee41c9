"""Constants for rondo.

- ``rondo.constants.instruments`` - General MIDI instrument (program) table

Timing constants are defined here directly.  Compositions are written in
**beats** (1.0 = one quarter note); the sequencer converts beats into integer
pulses using ``PULSES_PER_BEAT`` unless told otherwise.
"""

# Default sequencer resolution, 24 pulses per quarter note (PPQN = 24).
PULSES_PER_BEAT = 24

DEFAULT_BPM = 120

# Velocity used for every note-on.
DEFAULT_VELOCITY = 100

# Small lead-in before the first note so the output device is ready.
DEFAULT_WARMUP_BEATS = 0.125

# MIDI channel reserved for percussion by General MIDI (0-indexed).
GM_PERCUSSION_CHANNEL = 9

MIDI_CHANNELS = 16

# MIDI note number of middle C (Pitch value 0).
MIDI_MIDDLE_C = 60

# Highest MIDI note number; the lowest is 0.
MIDI_NOTE_MAX = 127
