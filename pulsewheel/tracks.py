"""Track and transport configuration.

Everything in this module is immutable. An edit produces a new value, and
derived data (a track's pattern, the snapshot's cycle length) is recomputed
on construction, so it can never drift out of step with the parameters it
comes from. The scheduler holds one ``Snapshot`` and swaps it for a new one
between ticks.

Out-of-range volume, tempo and swing values are clamped rather than rejected.
"""

import dataclasses
import typing

import pulsewheel.constants
import pulsewheel.cycle
import pulsewheel.euclid
import pulsewheel.swing


PARAM_FIELDS = ("steps", "hits", "bias", "rotation")


def clamp_volume (volume: float) -> float:

	"""Clamp a volume to 0-100."""

	return max(pulsewheel.constants.VOLUME_MIN, min(pulsewheel.constants.VOLUME_MAX, volume))


@dataclasses.dataclass(frozen=True)
class EuclidParams:

	"""
	Parameters of one Euclidean pattern.
	"""

	steps: int = 16
	hits: int = 4
	bias: float = pulsewheel.constants.BIAS_NEUTRAL
	rotation: int = 0


	@property
	def is_valid (self) -> bool:

		"""True when ``0 <= hits <= steps`` and ``steps`` is positive."""

		return self.steps > 0 and 0 <= self.hits <= self.steps


	def generate (self) -> pulsewheel.euclid.Pattern:

		"""Build the pattern these parameters describe."""

		return pulsewheel.euclid.generate(self.steps, self.hits, self.bias, self.rotation)


@dataclasses.dataclass(frozen=True)
class Track:

	"""
	One drum voice: its pattern parameters and mix settings.

	``pattern`` is derived from ``params`` and is not passed in.
	"""

	track_id: str
	params: EuclidParams = dataclasses.field(default_factory=EuclidParams)
	volume: float = 70
	muted: bool = False
	solo: bool = False
	name: str = ""
	pattern: pulsewheel.euclid.Pattern = dataclasses.field(init=False, repr=False, compare=False)

	def __post_init__ (self) -> None:

		object.__setattr__(self, "volume", clamp_volume(self.volume))
		object.__setattr__(self, "pattern", self.params.generate())

		if not self.name:
			object.__setattr__(self, "name", self.track_id.capitalize())


	@classmethod
	def create (cls, track_id: str, steps: int = 16, hits: int = 4, bias: float = pulsewheel.constants.BIAS_NEUTRAL, rotation: int = 0, **kwargs: typing.Any) -> "Track":

		"""Build a track from flat pattern parameters."""

		return cls(track_id=track_id, params=EuclidParams(steps=steps, hits=hits, bias=bias, rotation=rotation), **kwargs)


	@property
	def steps (self) -> int:

		return self.params.steps


	def with_changes (self, **changes: typing.Any) -> "Track":

		"""Return a copy with updated fields.

		Accepts the pattern parameters (``steps``, ``hits``, ``bias``,
		``rotation``) alongside the track fields (``volume``, ``muted``,
		``solo``, ``name``). Changing any pattern parameter regenerates the
		pattern.

		Raises ``TypeError`` for an unknown field name.
		"""

		param_changes = {key: changes.pop(key) for key in PARAM_FIELDS if key in changes}

		if "track_id" in changes or "pattern" in changes:
			raise TypeError("track_id and pattern cannot be changed")

		params = dataclasses.replace(self.params, **param_changes) if param_changes else self.params

		return dataclasses.replace(self, params=params, **changes)


	def is_hit (self, step_index: int) -> bool:

		"""Whether this track sounds on ``step_index`` of the shared cycle.

		Shorter patterns repeat within the cycle.
		"""

		if not self.pattern:
			return False

		return self.pattern[step_index % len(self.pattern)]


@dataclasses.dataclass(frozen=True)
class Transport:

	"""
	Tempo, swing and time signature.
	"""

	bpm: float = pulsewheel.constants.DEFAULT_BPM
	swing: float = pulsewheel.constants.DEFAULT_SWING
	time_signature: str = pulsewheel.constants.DEFAULT_TIME_SIGNATURE

	def __post_init__ (self) -> None:

		object.__setattr__(self, "bpm", pulsewheel.swing.clamp_bpm(self.bpm))
		object.__setattr__(self, "swing", pulsewheel.swing.clamp_swing(self.swing))


	def step_interval (self, step_index: int) -> float:

		"""Seconds from the start of ``step_index`` to the next step."""

		return pulsewheel.swing.step_interval(self.bpm, self.swing, step_index)


@dataclasses.dataclass(frozen=True)
class Snapshot:

	"""
	Everything the scheduling tick reads, captured at one moment.
	"""

	tracks: typing.Tuple[Track, ...] = ()
	transport: Transport = dataclasses.field(default_factory=Transport)
	cycle_length: int = dataclasses.field(init=False)

	def __post_init__ (self) -> None:

		object.__setattr__(self, "tracks", tuple(self.tracks))
		object.__setattr__(
			self,
			"cycle_length",
			pulsewheel.cycle.aligned_cycle_length((track.steps for track in self.tracks), self.transport.time_signature)
		)


	@property
	def has_solo (self) -> bool:

		return any(track.solo for track in self.tracks)


	def audible_tracks (self) -> typing.List[Track]:

		"""Tracks that may sound: unmuted, and soloed when any track is soloed."""

		has_solo = self.has_solo

		return [track for track in self.tracks if not track.muted and (track.solo or not has_solo)]


	def find (self, track_id: str) -> typing.Optional[Track]:

		for track in self.tracks:
			if track.track_id == track_id:
				return track

		return None


def default_tracks () -> typing.List[Track]:

	"""The six-voice starter kit: kick, snare, hi-hat, crash, percussion and clap."""

	return [
		Track.create("kick", steps=16, hits=4, bias=0.5, rotation=0, volume=70, name="Kick"),
		Track.create("snare", steps=16, hits=2, bias=0.5, rotation=4, volume=70, name="Snare"),
		Track.create("hihat", steps=16, hits=8, bias=0.5, rotation=0, volume=50, name="Hi-hat"),
		Track.create("crash", steps=16, hits=1, bias=0.5, rotation=0, volume=40, name="Crash"),
		Track.create("perc", steps=16, hits=3, bias=0.3, rotation=2, volume=60, name="Perc"),
		Track.create("clap", steps=16, hits=2, bias=0.7, rotation=8, volume=65, name="Clap"),
	]
