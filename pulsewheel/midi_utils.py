import logging
import typing

import mido


logger = logging.getLogger(__name__)


def select_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Find and open a MIDI output port.

	Opens ``device_name`` when given, otherwise the first output mido lists.
	Nothing here prompts: a sink without a port simply stays unavailable, so
	every failure is logged and reported as ``(None, None)``.

	Returns:
		A tuple of (device_name, midi_out_object) or (None, None) on failure.
	"""

	try:
		outputs = mido.get_output_names()
	except Exception as e:
		logger.error(f"Failed to list MIDI outputs: {e}")
		return None, None

	logger.info(f"Available MIDI outputs: {outputs}")

	if not outputs:
		logger.error("No MIDI output devices found.")
		return None, None

	if device_name is None:
		device_name = outputs[0]

	elif device_name not in outputs:
		logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
		return None, None

	try:
		midi_out = mido.open_output(device_name)
	except Exception as e:
		logger.error(f"Failed to open MIDI output '{device_name}': {e}")
		return None, None

	logger.info(f"Opened MIDI output: {device_name}")

	return device_name, midi_out
