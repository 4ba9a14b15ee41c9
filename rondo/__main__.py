import logging
import sys

import rondo.config
import rondo.constants.instruments
import rondo.music_player
import rondo.notation


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_NOTATION = "C D E F | G A B C'"


def main () -> None:

	"""
	Play a line of notation: ``python -m rondo ["NOTATION"] [INSTRUMENT]``.

	Device, tempo and warmup come from ``config.yaml`` in the working
	directory when it exists.
	"""

	logger.info("rondo starting...")

	config = rondo.config.load_config()
	settings = rondo.config.PlayerSettings.from_config(config)

	text = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_NOTATION
	instrument_name = sys.argv[2] if len(sys.argv) > 2 else (config.get('player') or {}).get('instrument', 'piano')

	try:
		instrument = rondo.constants.instruments.get_instrument(instrument_name)
		music = rondo.notation.notes(text, instrument)
	except (ValueError, rondo.notation.NotationError) as e:
		logger.error(str(e))
		sys.exit(2)

	rondo.music_player.play(music, settings)


if __name__ == "__main__":
	main()
