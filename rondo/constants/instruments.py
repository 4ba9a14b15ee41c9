"""General MIDI Level 1 instrument (program) table.

Compositions refer to instruments by value; the sequencer only needs the
program number to patch a channel.  Two ways to use this module:

1. **As constants**::

       import rondo.constants.instruments as instruments

       rondo.language.notes("C D E", instruments.PIANO)

2. **By name** - look up any of the 128 GM programs::

       instruments.get_instrument("acoustic_guitar_nylon")
"""

import dataclasses
import typing


@dataclasses.dataclass(frozen=True, order=True)
class Instrument:

	"""
	A named General MIDI program.
	"""

	name: str
	program: int


	def __str__ (self) -> str:

		return self.name


# ─── Program numbers ─────────────────────────────────────────────────
#
# General MIDI Level 1 sound set, programs 0-127 in order.

GM_PROGRAM_NAMES: typing.List[str] = [
	# Piano
	"acoustic_grand_piano", "bright_acoustic_piano", "electric_grand_piano", "honky_tonk_piano",
	"electric_piano_1", "electric_piano_2", "harpsichord", "clavinet",
	# Chromatic percussion
	"celesta", "glockenspiel", "music_box", "vibraphone",
	"marimba", "xylophone", "tubular_bells", "dulcimer",
	# Organ
	"drawbar_organ", "percussive_organ", "rock_organ", "church_organ",
	"reed_organ", "accordion", "harmonica", "tango_accordion",
	# Guitar
	"acoustic_guitar_nylon", "acoustic_guitar_steel", "electric_guitar_jazz", "electric_guitar_clean",
	"electric_guitar_muted", "overdriven_guitar", "distortion_guitar", "guitar_harmonics",
	# Bass
	"acoustic_bass", "electric_bass_finger", "electric_bass_pick", "fretless_bass",
	"slap_bass_1", "slap_bass_2", "synth_bass_1", "synth_bass_2",
	# Strings
	"violin", "viola", "cello", "contrabass",
	"tremolo_strings", "pizzicato_strings", "orchestral_harp", "timpani",
	# Ensemble
	"string_ensemble_1", "string_ensemble_2", "synth_strings_1", "synth_strings_2",
	"choir_aahs", "voice_oohs", "synth_voice", "orchestra_hit",
	# Brass
	"trumpet", "trombone", "tuba", "muted_trumpet",
	"french_horn", "brass_section", "synth_brass_1", "synth_brass_2",
	# Reed
	"soprano_sax", "alto_sax", "tenor_sax", "baritone_sax",
	"oboe", "english_horn", "bassoon", "clarinet",
	# Pipe
	"piccolo", "flute", "recorder", "pan_flute",
	"blown_bottle", "shakuhachi", "whistle", "ocarina",
	# Synth lead
	"lead_square", "lead_sawtooth", "lead_calliope", "lead_chiff",
	"lead_charang", "lead_voice", "lead_fifths", "lead_bass_and_lead",
	# Synth pad
	"pad_new_age", "pad_warm", "pad_polysynth", "pad_choir",
	"pad_bowed", "pad_metallic", "pad_halo", "pad_sweep",
	# Synth effects
	"fx_rain", "fx_soundtrack", "fx_crystal", "fx_atmosphere",
	"fx_brightness", "fx_goblins", "fx_echoes", "fx_sci_fi",
	# Ethnic
	"sitar", "banjo", "shamisen", "koto",
	"kalimba", "bagpipe", "fiddle", "shanai",
	# Percussive
	"tinkle_bell", "agogo", "steel_drums", "woodblock",
	"taiko_drum", "melodic_tom", "synth_drum", "reverse_cymbal",
	# Sound effects
	"guitar_fret_noise", "breath_noise", "seashore", "bird_tweet",
	"telephone_ring", "helicopter", "applause", "gunshot",
]

GM_INSTRUMENTS: typing.Dict[str, Instrument] = {
	name: Instrument(name=name, program=program)
	for program, name in enumerate(GM_PROGRAM_NAMES)
}


def get_instrument (name: str) -> Instrument:

	"""Return the GM instrument with the given name.

	Lookup is case-insensitive and accepts spaces or hyphens in place of
	underscores, so ``"Acoustic Grand Piano"`` works too.

	Raises:
		ValueError: If the name is not a GM program.
	"""

	key = name.strip().lower().replace(" ", "_").replace("-", "_")

	if key not in GM_INSTRUMENTS:
		key = _ALIASES.get(key, key)

	if key not in GM_INSTRUMENTS:
		raise ValueError(f"Unknown instrument: {name!r}")

	return GM_INSTRUMENTS[key]


# Short names used throughout the examples.
_ALIASES: typing.Dict[str, str] = {
	"piano": "acoustic_grand_piano",
	"guitar": "acoustic_guitar_nylon",
	"bass": "acoustic_bass",
	"strings": "string_ensemble_1",
	"organ": "drawbar_organ",
	"sax": "alto_sax",
}

PIANO = GM_INSTRUMENTS["acoustic_grand_piano"]
HARPSICHORD = GM_INSTRUMENTS["harpsichord"]
MARIMBA = GM_INSTRUMENTS["marimba"]
CHURCH_ORGAN = GM_INSTRUMENTS["church_organ"]
ACOUSTIC_GUITAR = GM_INSTRUMENTS["acoustic_guitar_nylon"]
ACOUSTIC_BASS = GM_INSTRUMENTS["acoustic_bass"]
VIOLIN = GM_INSTRUMENTS["violin"]
VIOLA = GM_INSTRUMENTS["viola"]
CELLO = GM_INSTRUMENTS["cello"]
CONTRABASS = GM_INSTRUMENTS["contrabass"]
CHOIR = GM_INSTRUMENTS["choir_aahs"]
TRUMPET = GM_INSTRUMENTS["trumpet"]
FRENCH_HORN = GM_INSTRUMENTS["french_horn"]
OBOE = GM_INSTRUMENTS["oboe"]
BASSOON = GM_INSTRUMENTS["bassoon"]
CLARINET = GM_INSTRUMENTS["clarinet"]
FLUTE = GM_INSTRUMENTS["flute"]
