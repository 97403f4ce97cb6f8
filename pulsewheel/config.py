"""YAML configuration.

A config file describes the MIDI output, the transport and the kit. Every
key is optional::

    midi:
      device_name: "IAC Driver Bus 1"
      channel: 9
    transport:
      bpm: 112
      swing: 35
      time_signature: "7/4"
    master_volume: 80
    tracks:
      - id: kick
        steps: 16
        hits: 5
        bias: 0.3
      - id: rim
        steps: 12
        hits: 5
        rotation: 2
        note: 37

Malformed values fall back to their defaults with a warning instead of
stopping playback.
"""

import logging
import os
import typing

import yaml

import pulsewheel.constants
import pulsewheel.constants.gm_drums
import pulsewheel.tracks


logger = logging.getLogger(__name__)

T = typing.TypeVar("T", int, float)


def load_config (config_path: str = 'config.yaml') -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file.

	A missing or empty file yields an empty mapping.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		config = yaml.safe_load(f)

	if config is None:
		return {}

	if not isinstance(config, dict):
		logger.warning(f"Config file {config_path} is not a mapping. Using defaults.")
		return {}

	return config


def _section (config: typing.Dict[str, typing.Any], key: str) -> typing.Dict[str, typing.Any]:

	value = config.get(key)

	return value if isinstance(value, dict) else {}


def _number (value: typing.Any, default: T, cast: typing.Type[T], key: str) -> T:

	"""Convert a config value, falling back to ``default`` when it is missing or malformed."""

	if value is None:
		return default

	try:
		return cast(value)
	except (TypeError, ValueError):
		logger.warning(f"Invalid value {value!r} for {key} - using {default}")
		return default


def build_transport (config: typing.Dict[str, typing.Any]) -> pulsewheel.tracks.Transport:

	"""Build the transport from the ``transport`` section."""

	section = _section(config, 'transport')

	return pulsewheel.tracks.Transport(
		bpm = _number(section.get('bpm'), pulsewheel.constants.DEFAULT_BPM, float, 'transport.bpm'),
		swing = _number(section.get('swing'), pulsewheel.constants.DEFAULT_SWING, float, 'transport.swing'),
		time_signature = str(section.get('time_signature', pulsewheel.constants.DEFAULT_TIME_SIGNATURE))
	)


def build_tracks (config: typing.Dict[str, typing.Any]) -> typing.List[pulsewheel.tracks.Track]:

	"""Build the kit from the ``tracks`` list, or return the default kit.

	Entries without an ``id`` and repeats of an earlier id are skipped.
	"""

	entries = config.get('tracks')

	if not entries:
		return pulsewheel.tracks.default_tracks()

	if not isinstance(entries, list):
		logger.warning("Config 'tracks' is not a list - using the default kit")
		return pulsewheel.tracks.default_tracks()

	tracks: typing.List[pulsewheel.tracks.Track] = []
	seen: typing.Set[str] = set()

	for index, entry in enumerate(entries):

		if not isinstance(entry, dict) or not entry.get('id'):
			logger.warning(f"Track entry {index} has no id - skipped")
			continue

		track_id = str(entry['id'])

		if track_id in seen:
			logger.warning(f"Duplicate track id {track_id!r} - skipped")
			continue

		seen.add(track_id)
		key = f"tracks[{track_id}]"

		track = pulsewheel.tracks.Track.create(
			track_id,
			steps = _number(entry.get('steps'), 16, int, f"{key}.steps"),
			hits = _number(entry.get('hits'), 4, int, f"{key}.hits"),
			bias = _number(entry.get('bias'), pulsewheel.constants.BIAS_NEUTRAL, float, f"{key}.bias"),
			rotation = _number(entry.get('rotation'), 0, int, f"{key}.rotation"),
			volume = _number(entry.get('volume'), 70.0, float, f"{key}.volume"),
			muted = bool(entry.get('muted', False)),
			solo = bool(entry.get('solo', False)),
			name = str(entry.get('name', ''))
		)

		if not track.params.is_valid:
			logger.warning(f"{key} has {track.params.hits} hits over {track.params.steps} steps - the track will be silent")

		tracks.append(track)

	return tracks


def build_note_map (config: typing.Dict[str, typing.Any]) -> typing.Dict[str, int]:

	"""GM notes for the default kit, overridden by any per-track ``note``.

	A note is a MIDI number (0-127) or a GM drum name such as ``"cowbell"``.
	"""

	note_map = dict(pulsewheel.constants.gm_drums.KIT_NOTE_MAP)
	entries = config.get('tracks')

	if not isinstance(entries, list):
		return note_map

	for entry in entries:

		if not isinstance(entry, dict) or not entry.get('id') or entry.get('note') is None:
			continue

		value = entry['note']

		if isinstance(value, str) and value.lower() in pulsewheel.constants.gm_drums.DRUM_NOTE_NAMES:
			note = pulsewheel.constants.gm_drums.DRUM_NOTE_NAMES[value.lower()]
		else:
			try:
				note = int(value)
			except (TypeError, ValueError):
				note = -1

		if 0 <= note <= 127:
			note_map[str(entry['id'])] = note
		else:
			logger.warning(f"Invalid value {entry['note']!r} for tracks[{entry['id']}].note - track keeps its default note")

	return note_map


def build_midi_settings (config: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""Keyword arguments for ``MidiSink`` from the ``midi`` section and ``master_volume``."""

	section = _section(config, 'midi')
	device_name = section.get('device_name')

	return {
		'output_device_name': str(device_name) if device_name else None,
		'note_map': build_note_map(config),
		'channel': _number(section.get('channel'), pulsewheel.constants.gm_drums.GM_DRUM_CHANNEL, int, 'midi.channel'),
		'master_volume': _number(config.get('master_volume'), pulsewheel.constants.DEFAULT_MASTER_VOLUME, float, 'master_volume'),
	}
