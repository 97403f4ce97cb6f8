import dataclasses
import enum
import logging
import typing

import pulsewheel.constants
import pulsewheel.event_emitter
import pulsewheel.sink
import pulsewheel.timer
import pulsewheel.tracks


logger = logging.getLogger(__name__)


class TransportState (enum.Enum):

	"""
	Playback state. ``STARTING`` lasts until the first tick runs.
	"""

	STOPPED = "stopped"
	STARTING = "starting"
	RUNNING = "running"


@dataclasses.dataclass
class ScheduleState:

	"""
	Position of the playhead within the shared cycle.
	"""

	step_index: int = 0
	next_event_time: float = 0.0


class TransportScheduler:

	"""
	The engine that turns track patterns into timed triggers.

	The scheduler runs a short, non-blocking tick every ``lookahead_interval``
	seconds. Each tick fires every step whose start time falls within the
	next ``schedule_ahead`` seconds, handing the sink the exact time each
	trigger should sound. Step times are accumulated from the previous step
	rather than read from the clock, so tempo never drifts, and a tick that
	runs late fires all the steps it missed - in order, none skipped.

	Track and transport edits replace the scheduler's ``Snapshot`` as a whole.
	A tick reads the snapshot once when it begins, so an edit is heard from
	the next tick onward and never half-way through one. All edits are
	expected on the timer's thread; from another thread, hand them over with
	``loop.call_soon_threadsafe``.

	Events (register with ``on_event``):

	- ``"start"`` and ``"stop"`` - no arguments
	- ``"step"`` - ``(step_index, scheduled_time)`` for each step fired
	"""

	def __init__ (
		self,
		timer: pulsewheel.timer.Timer,
		sink: typing.Optional[pulsewheel.sink.SoundSink] = None,
		tracks: typing.Optional[typing.Iterable[pulsewheel.tracks.Track]] = None,
		transport: typing.Optional[pulsewheel.tracks.Transport] = None,
		lookahead_interval: float = pulsewheel.constants.LOOKAHEAD_INTERVAL,
		schedule_ahead: float = pulsewheel.constants.SCHEDULE_AHEAD,
		trigger_epsilon: float = pulsewheel.constants.TRIGGER_EPSILON
	) -> None:

		"""Initialize a stopped scheduler.

		Parameters:
			timer: Clock and callback timer to run on (e.g. ``AsyncioTimer``)
			sink: Where triggers go. May be attached later with ``set_sink()``;
				until then triggers are dropped.
			tracks: Initial tracks (defaults to the six-voice kit)
			transport: Initial tempo, swing and time signature
			lookahead_interval: Seconds between ticks
			schedule_ahead: How far past the current time each tick schedules
			trigger_epsilon: Minimum lead a trigger time keeps over the clock
		"""

		if lookahead_interval <= 0:
			raise ValueError("Lookahead interval must be positive")

		if schedule_ahead <= 0:
			raise ValueError("Schedule-ahead window must be positive")

		if trigger_epsilon < 0:
			raise ValueError("Trigger epsilon cannot be negative")

		self.timer = timer
		self.sink = sink
		self.lookahead_interval = lookahead_interval
		self.schedule_ahead = schedule_ahead
		self.trigger_epsilon = trigger_epsilon

		if tracks is None:
			tracks = pulsewheel.tracks.default_tracks()

		self.snapshot = pulsewheel.tracks.Snapshot(self._unique_tracks(tracks), transport or pulsewheel.tracks.Transport())
		self.state = TransportState.STOPPED
		self.schedule_state = ScheduleState()
		self.events = pulsewheel.event_emitter.EventEmitter()

		self._tick_handle: typing.Any = None
		self._generation = 0


	@staticmethod
	def _unique_tracks (tracks: typing.Iterable[pulsewheel.tracks.Track]) -> typing.Tuple[pulsewheel.tracks.Track, ...]:

		"""Check that no two tracks share an id."""

		tracks = tuple(tracks)
		seen: typing.Set[str] = set()

		for track in tracks:

			if track.track_id in seen:
				raise ValueError(f"Duplicate track id {track.track_id!r}")

			seen.add(track.track_id)

		return tracks


	@property
	def is_playing (self) -> bool:

		return self.state is not TransportState.STOPPED


	@property
	def current_step (self) -> int:

		return self.schedule_state.step_index % self.snapshot.cycle_length


	@property
	def cycle_length (self) -> int:

		return self.snapshot.cycle_length


	@property
	def tracks (self) -> typing.Tuple[pulsewheel.tracks.Track, ...]:

		return self.snapshot.tracks


	@property
	def transport (self) -> pulsewheel.tracks.Transport:

		return self.snapshot.transport


	def on_event (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""
		Register a callback for a named event.
		"""

		self.events.on(event_name, callback)


	def set_sink (self, sink: typing.Optional[pulsewheel.sink.SoundSink]) -> None:

		"""Attach (or detach, with ``None``) the sound sink."""

		self.sink = sink


	# Transport control

	def start (self) -> None:

		"""Start playback from the current step.

		Does nothing when already playing. After ``stop()`` the current step
		is 0, so playback starts from the top of the cycle.
		"""

		if self.state is not TransportState.STOPPED:
			return

		self._generation += 1
		self.schedule_state.step_index %= self.snapshot.cycle_length
		self.schedule_state.next_event_time = self.timer.now()
		self.state = TransportState.STARTING
		self._tick_handle = self.timer.schedule(self.tick, 0.0)

		logger.info(f"Transport started at {self.snapshot.transport.bpm:.2f} BPM, step {self.schedule_state.step_index}")

		self._emit("start")


	def stop (self) -> None:

		"""
		Stop playback and rewind to step 0. Calling it while stopped does nothing.

		Triggers already handed to the sink are left alone.
		"""

		if self.state is TransportState.STOPPED:
			return

		self._generation += 1
		self._cancel_tick()
		self.schedule_state.step_index = 0
		self.state = TransportState.STOPPED

		logger.info("Transport stopped")

		self._emit("stop")


	def resync (self) -> None:

		"""Re-anchor the step clock to the current time without losing the step.

		Steps missed while the host was suspended are skipped instead of
		being fired in a burst. Does nothing while stopped.
		"""

		if self.state is TransportState.STOPPED:
			return

		self._generation += 1
		self._cancel_tick()
		self.schedule_state.step_index %= self.snapshot.cycle_length
		self.schedule_state.next_event_time = self.timer.now()
		self._tick_handle = self.timer.schedule(self.tick, 0.0)

		logger.info(f"Transport resynced at step {self.schedule_state.step_index}")


	def _emit (self, event_name: str, *args: typing.Any) -> None:

		"""Notify listeners without letting a misconfigured one break the tick chain."""

		try:
			self.events.emit(event_name, *args)
		except ValueError as e:
			logger.error(f"Could not notify {event_name!r} listeners: {e}")


	def _cancel_tick (self) -> None:

		if self._tick_handle is not None:
			self.timer.cancel(self._tick_handle)
			self._tick_handle = None


	# Scheduling

	def tick (self) -> None:

		"""Fire every step due within the schedule-ahead window, then reschedule.

		Normally called by the timer. The loop catches up on any steps that
		came due while the tick was late, so each step fires exactly once at
		its intended time.
		"""

		if self.state is TransportState.STOPPED:
			return

		self._tick_handle = None
		generation = self._generation
		snapshot = self.snapshot
		state = self.schedule_state

		if self.state is TransportState.STARTING:
			self.state = TransportState.RUNNING

		# Live edits may have shortened the cycle since the last tick.
		state.step_index %= snapshot.cycle_length

		horizon = self.timer.now() + self.schedule_ahead

		while state.next_event_time < horizon:

			step_index = state.step_index
			scheduled_time = state.next_event_time

			state.step_index = (step_index + 1) % snapshot.cycle_length
			state.next_event_time += snapshot.transport.step_interval(state.step_index)

			self._fire_step(snapshot, step_index, scheduled_time)

			# A listener took over the transport; its own tick carries on.
			if self._generation != generation or self.state is TransportState.STOPPED:
				return

		self._tick_handle = self.timer.schedule(self.tick, self.lookahead_interval)


	def _fire_step (self, snapshot: pulsewheel.tracks.Snapshot, step_index: int, scheduled_time: float) -> None:

		"""Trigger every audible track with a hit on ``step_index``."""

		trigger_time = max(scheduled_time, self.timer.now() + self.trigger_epsilon)

		for track in snapshot.audible_tracks():

			if track.is_hit(step_index):
				self._trigger(track.track_id, track.volume / 100.0, trigger_time)

		logger.debug(f"Step {step_index} at {scheduled_time:.4f}")

		self._emit("step", step_index, scheduled_time)


	def _trigger (self, track_id: str, velocity: float, scheduled_time: float) -> None:

		"""Hand a trigger to the sink, dropping it when no sink is available."""

		sink = self.sink

		if sink is None or not getattr(sink, "ready", True):
			logger.debug(f"Sound sink unavailable - dropped trigger for {track_id!r}")
			return

		try:
			sink.trigger(track_id, velocity, scheduled_time)
		except Exception:
			logger.exception(f"Sound sink failed to trigger {track_id!r}")


	def trigger_track (self, track_id: str, velocity: float = pulsewheel.constants.AUDITION_VELOCITY) -> None:

		"""Sound one track immediately, outside its pattern.

		Only works while playing; ignored when stopped.
		"""

		if not self.is_playing:
			return

		self._trigger(track_id, max(0.0, min(1.0, velocity)), self.timer.now() + self.trigger_epsilon)


	# Live reconfiguration

	def _swap_snapshot (self, tracks: typing.Optional[typing.Iterable[pulsewheel.tracks.Track]] = None, transport: typing.Optional[pulsewheel.tracks.Transport] = None) -> None:

		"""Replace the snapshot in one assignment."""

		old = self.snapshot

		self.snapshot = pulsewheel.tracks.Snapshot(
			tuple(tracks) if tracks is not None else old.tracks,
			transport if transport is not None else old.transport
		)

		if self.snapshot.cycle_length != old.cycle_length:
			logger.debug(f"Cycle length {old.cycle_length} -> {self.snapshot.cycle_length}")


	def set_tracks (self, tracks: typing.Iterable[pulsewheel.tracks.Track]) -> None:

		"""Replace all tracks. Raises ``ValueError`` on duplicate ids."""

		self._swap_snapshot(tracks=self._unique_tracks(tracks))


	def update_track (self, track_id: str, **changes: typing.Any) -> typing.Optional[pulsewheel.tracks.Track]:

		"""Edit one track while playing or stopped.

		Accepts ``steps``, ``hits``, ``bias``, ``rotation``, ``volume``,
		``muted``, ``solo`` and ``name``. The pattern and the cycle length are
		recomputed; playback carries on from the current step.

		Returns the updated track, or ``None`` when ``track_id`` is unknown.

		Example:
			```python
			scheduler.update_track("snare", hits=3, rotation=2)
			scheduler.update_track("hihat", muted=True)
			```
		"""

		old = self.snapshot.find(track_id)

		if old is None:
			logger.warning(f"Unknown track {track_id!r} - update ignored")
			return None

		updated = old.with_changes(**changes)

		self._swap_snapshot(tracks=[updated if track.track_id == track_id else track for track in self.snapshot.tracks])

		return updated


	def set_bpm (self, bpm: float) -> None:

		"""Change the tempo (clamped to 40-300 BPM). Heard from the next step."""

		self._swap_snapshot(transport=dataclasses.replace(self.snapshot.transport, bpm=bpm))

		logger.info(f"BPM set to {self.snapshot.transport.bpm:.2f}")


	def set_swing (self, swing: float) -> None:

		"""Change the swing amount (clamped to 0-100 percent)."""

		self._swap_snapshot(transport=dataclasses.replace(self.snapshot.transport, swing=swing))

		logger.info(f"Swing set to {self.snapshot.transport.swing:g}%")


	def set_time_signature (self, time_signature: str) -> None:

		"""Change the time signature, realigning the cycle length."""

		self._swap_snapshot(transport=dataclasses.replace(self.snapshot.transport, time_signature=time_signature))

		logger.info(f"Time signature set to {time_signature} (cycle {self.snapshot.cycle_length} steps)")
