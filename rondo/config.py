"""Playback settings loaded from a YAML file.

Example ``config.yaml``::

	midi:
	  device_name: "FluidSynth virtual port"
	sequencer:
	  initial_bpm: 96
	  pulses_per_beat: 48
	  spin_wait: true
	player:
	  warmup_beats: 0.125

Every key is optional; missing keys fall back to the defaults in
`rondo.constants`.
"""

import dataclasses
import logging
import os
import typing

import yaml

import rondo.constants


logger = logging.getLogger(__name__)


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		config = yaml.safe_load(f)

	if config is None:
		return {}

	if not isinstance(config, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping, got {type(config).__name__}")

	return config


@dataclasses.dataclass
class PlayerSettings:

	"""
	Settings for playing a composition through a `rondo.sequencer.Sequencer`.
	"""

	device_name: typing.Optional[str] = None
	bpm: float = rondo.constants.DEFAULT_BPM
	pulses_per_beat: int = rondo.constants.PULSES_PER_BEAT
	warmup_beats: float = rondo.constants.DEFAULT_WARMUP_BEATS
	spin_wait: bool = True


	def __post_init__ (self) -> None:

		if self.bpm <= 0:
			raise ValueError("BPM must be positive")

		if self.pulses_per_beat <= 0:
			raise ValueError("Pulses per beat must be positive")

		if self.warmup_beats < 0:
			raise ValueError("Warmup cannot be negative")


	@classmethod
	def from_config (cls, config: typing.Dict[str, typing.Any]) -> "PlayerSettings":

		"""
		Build settings from a config mapping as returned by `load_config`.
		"""

		midi = config.get('midi') or {}
		sequencer = config.get('sequencer') or {}
		player = config.get('player') or {}

		return cls(
			device_name = midi.get('device_name'),
			bpm = sequencer.get('initial_bpm', rondo.constants.DEFAULT_BPM),
			pulses_per_beat = sequencer.get('pulses_per_beat', rondo.constants.PULSES_PER_BEAT),
			warmup_beats = player.get('warmup_beats', rondo.constants.DEFAULT_WARMUP_BEATS),
			spin_wait = sequencer.get('spin_wait', True)
		)
