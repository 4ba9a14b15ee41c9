import logging
import typing

import rondo.config
import rondo.music
import rondo.sequencer
import rondo.timeline


logger = logging.getLogger(__name__)


def play (music: rondo.music.Music, settings: typing.Optional[rondo.config.PlayerSettings] = None, stop_beat: typing.Optional[float] = None) -> None:

	"""
	Play music through the MIDI output, blocking until it ends.

	Music containing a live ``forever`` plays until interrupted with Ctrl+C
	unless ``stop_beat`` is given.  Playback starts after a short warmup
	(``settings.warmup_beats``) so the first note is not clipped.
	"""

	if settings is None:
		settings = rondo.config.PlayerSettings()

	sequencer = rondo.sequencer.Sequencer(
		output_device_name = settings.device_name,
		initial_bpm = settings.bpm,
		pulses_per_beat = settings.pulses_per_beat,
		spin_wait = settings.spin_wait,
		stop_beat = stop_beat
	)

	music.play(sequencer, settings.warmup_beats)

	logger.info(f"Playing {music.duration:g} beats at {settings.bpm:g} BPM. Press Ctrl+C to stop.")

	sequencer.start()


def render (music: rondo.music.Music, beats: float) -> rondo.timeline.Timeline:

	"""
	Play music on a virtual clock for ``beats`` beats and return the timeline.

	No device is opened and nothing waits for real time, so this works for
	looping music too:

		```python
		timeline = render(forever(row), beats=64)
		len(timeline.notes)
		```
	"""

	if beats < 0:
		raise ValueError("Beats cannot be negative")

	timeline = rondo.timeline.Timeline()
	music.play(timeline, 0)
	timeline.start(until=beats)

	return timeline
