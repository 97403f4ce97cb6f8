"""Sound sinks - where scheduled triggers end up.

The scheduler only needs an object with a ``trigger(track_id, velocity,
scheduled_time)`` method. ``MidiSink`` is the one shipped here: it maps each
track to a drum note and plays it on a MIDI output at the scheduled time, so
any drum machine, sampler or DAW can provide the sound.
"""

import logging
import typing

import mido

import pulsewheel.constants
import pulsewheel.constants.gm_drums
import pulsewheel.midi_utils
import pulsewheel.timer
import pulsewheel.tracks


logger = logging.getLogger(__name__)


@typing.runtime_checkable
class SoundSink (typing.Protocol):

	"""
	Protocol for anything that can sound a track at a given time.
	"""

	def trigger (self, track_id: str, velocity: float, scheduled_time: float) -> None:

		"""
		Sound ``track_id`` at ``scheduled_time`` (timer seconds) with ``velocity`` in 0-1.

		Fire-and-forget. Unknown track ids are ignored; this never raises.
		"""

		...


class MidiSink:

	"""
	Plays triggers as MIDI drum notes.

	Each trigger becomes a ``note_on`` at the scheduled time followed by a
	``note_off`` ``note_length`` seconds later, both deferred on the same
	timer the scheduler runs on. Velocity is scaled by the master volume.

	The sink is unavailable (``ready`` is False) until ``open()`` has found
	an output port; triggers received before then are dropped.
	"""

	def __init__ (
		self,
		output_device_name: typing.Optional[str] = None,
		note_map: typing.Optional[typing.Dict[str, int]] = None,
		channel: int = pulsewheel.constants.gm_drums.GM_DRUM_CHANNEL,
		master_volume: float = pulsewheel.constants.DEFAULT_MASTER_VOLUME,
		note_length: float = 0.05
	) -> None:

		"""Configure the sink. No port is opened until ``open()``.

		Parameters:
			output_device_name: MIDI output to open; the first available when omitted
			note_map: Track id to MIDI note; defaults to the GM map for the default kit
			channel: MIDI channel (0-15), GM drums live on 9
			master_volume: 0-100, scales every trigger velocity
			note_length: Seconds between note_on and note_off
		"""

		self.output_device_name = output_device_name
		self.note_map: typing.Dict[str, int] = dict(note_map if note_map is not None else pulsewheel.constants.gm_drums.KIT_NOTE_MAP)
		self.channel = max(0, min(15, int(channel)))
		self.master_volume = pulsewheel.tracks.clamp_volume(master_volume)
		self.note_length = note_length

		self.midi_out: typing.Any = None
		self.timer: typing.Optional[pulsewheel.timer.Timer] = None
		self._last_trigger_times: typing.Dict[str, float] = {}


	@property
	def ready (self) -> bool:

		return self.midi_out is not None and self.timer is not None


	def open (self, timer: pulsewheel.timer.Timer, midi_out: typing.Any = None) -> bool:

		"""Attach the timer and open the output port.

		Pass ``midi_out`` to use an already opened port. Returns ``ready``.
		"""

		self.timer = timer

		if midi_out is None and self.midi_out is None:
			device_name, midi_out = pulsewheel.midi_utils.select_output_device(self.output_device_name)

			if device_name:
				self.output_device_name = device_name

		if midi_out is not None:
			self.midi_out = midi_out

		return self.ready


	def close (self) -> None:

		"""Silence the channel and release the port."""

		if self.midi_out is None:
			return

		self._send(mido.Message('control_change', channel=self.channel, control=123, value=0))

		try:
			self.midi_out.close()
		except Exception:
			logger.exception("Failed to close MIDI output")

		self.midi_out = None
		self._last_trigger_times.clear()


	def set_master_volume (self, volume: float) -> None:

		"""Set the master volume (0-100, clamped)."""

		self.master_volume = pulsewheel.tracks.clamp_volume(volume)
		logger.info(f"Master volume set to {self.master_volume:g}")


	def midi_velocity (self, velocity: float) -> int:

		"""Scale a 0-1 trigger velocity by the master volume into MIDI 0-127."""

		clamped = max(0.0, min(1.0, velocity))

		return int(round(clamped * (self.master_volume / 100.0) * 127))


	def trigger (self, track_id: str, velocity: float, scheduled_time: float) -> None:

		note = self.note_map.get(track_id)

		if note is None:
			logger.debug(f"No note mapped for track {track_id!r} - trigger ignored")
			return

		if not self.ready:
			logger.debug(f"MIDI sink not ready - dropped trigger for {track_id!r}")
			return

		assert self.timer is not None

		# Two triggers for one track must never share or reverse a timestamp.
		last_time = self._last_trigger_times.get(track_id)

		if last_time is not None and scheduled_time <= last_time:
			scheduled_time = last_time + pulsewheel.constants.TRIGGER_NUDGE

		self._last_trigger_times[track_id] = scheduled_time

		midi_velocity = self.midi_velocity(velocity)

		if midi_velocity <= 0:
			return

		delay = scheduled_time - self.timer.now()

		note_on = mido.Message('note_on', channel=self.channel, note=note, velocity=midi_velocity)
		note_off = mido.Message('note_off', channel=self.channel, note=note, velocity=0)

		self.timer.schedule(lambda: self._send(note_on), delay)
		self.timer.schedule(lambda: self._send(note_off), delay + self.note_length)


	def _send (self, message: mido.Message) -> None:

		"""Send a message, logging rather than raising when the port fails."""

		if self.midi_out is None:
			return

		try:
			self.midi_out.send(message)
		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")
