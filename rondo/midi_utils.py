import logging
import typing

import mido


logger = logging.getLogger(__name__)


def select_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Select and open a MIDI output port.

	If ``device_name`` is given, that port is opened.  Otherwise the
	available ports are listed: a single port is used automatically, and
	when there are several the user is asked to choose one on the console.

	Returns:
		A tuple of (device_name, port) or (None, None) when no port could be
		opened.  Failures are logged rather than raised so a sequencer can
		still run (silently) without a device.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None:

			if device_name not in outputs:
				logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
				return None, None

			selected_name = device_name

		elif len(outputs) == 1:
			selected_name = outputs[0]
			logger.info(f"One MIDI output found - using '{selected_name}'")

		else:
			selected_name = _prompt_for_device(outputs)

		midi_out = mido.open_output(selected_name)
		logger.info(f"Opened MIDI output: {selected_name}")

		return selected_name, midi_out

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def _prompt_for_device (outputs: typing.List[str]) -> str:

	"""
	Ask on the console which of several output ports to use.
	"""

	print("\nAvailable MIDI output devices:\n")

	for i, name in enumerate(outputs, 1):
		print(f"  {i}. {name}")

	print()

	while True:
		try:
			choice = int(input(f"Select a device (1-{len(outputs)}): "))
			if 1 <= choice <= len(outputs):
				break
		except ValueError:
			pass
		except EOFError:
			logger.warning(f"No console input - using '{outputs[0]}'")
			return outputs[0]
		print(f"Enter a number between 1 and {len(outputs)}.")

	selected_name = outputs[choice - 1]

	print(f"\nTip: To skip this prompt, set midi.device_name in config.yaml or pass it directly:\n")
	print(f"  Sequencer(output_device_name=\"{selected_name}\")\n")

	return selected_name
