import typing

import mido
import pytest


class FakeHandle:

	"""Pending callback in a FakeTimer."""

	def __init__ (self, due: float, order: int, callback: typing.Callable[[], typing.Any]) -> None:

		self.due = due
		self.order = order
		self.callback = callback
		self.cancelled = False


class FakeTimer:

	"""Manually driven clock and timer for deterministic scheduling tests."""

	def __init__ (self, start: float = 0.0) -> None:

		self.time = start
		self.pending: typing.List[FakeHandle] = []
		self._order = 0

	def schedule (self, callback: typing.Callable[[], typing.Any], delay: float) -> FakeHandle:

		"""Queue a callback ``delay`` seconds from now."""

		self._order += 1
		handle = FakeHandle(self.time + max(0.0, delay), self._order, callback)
		self.pending.append(handle)
		return handle

	def cancel (self, handle: FakeHandle) -> None:

		"""Mark a handle so it never runs."""

		handle.cancelled = True

	def now (self) -> float:

		return self.time

	def _pop_due (self, until: float) -> typing.Optional[FakeHandle]:

		"""Remove and return the earliest live callback due at or before ``until``."""

		live = [h for h in self.pending if not h.cancelled and h.due <= until]

		if not live:
			return None

		handle = min(live, key=lambda h: (h.due, h.order))
		self.pending.remove(handle)
		return handle

	def advance (self, seconds: float) -> None:

		"""Move the clock forward, running each callback at its due time."""

		target = self.time + seconds

		while True:
			handle = self._pop_due(target)
			if handle is None:
				break
			self.time = max(self.time, handle.due)
			handle.callback()

		self.time = target

	def jump (self, seconds: float) -> None:

		"""Move the clock forward without running anything, like a stalled host thread."""

		self.time += seconds

	def run_due (self) -> None:

		"""Run every callback already due, late, without moving the clock."""

		while True:
			handle = self._pop_due(self.time)
			if handle is None:
				break
			handle.callback()

	@property
	def live_count (self) -> int:

		return sum(1 for h in self.pending if not h.cancelled)


class RecordingSink:

	"""Sound sink that records every trigger along with the clock reading at the call."""

	def __init__ (self, timer: FakeTimer, ready: bool = True) -> None:

		self.timer = timer
		self.ready = ready
		self.triggers: typing.List[typing.Tuple[str, float, float]] = []
		self.call_times: typing.List[float] = []

	def trigger (self, track_id: str, velocity: float, scheduled_time: float) -> None:

		self.triggers.append((track_id, velocity, scheduled_time))
		self.call_times.append(self.timer.now())

	def times_for (self, track_id: str) -> typing.List[float]:

		return [t for tid, _, t in self.triggers if tid == track_id]


class FakeMidiOut:

	"""MIDI output stub that keeps every sent message."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		self.sent.append(message)

	def close (self) -> None:

		self.closed = True


_opened_outputs: typing.List[FakeMidiOut] = []


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI", "Second MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	port = FakeMidiOut()
	_opened_outputs.append(port)
	return port


@pytest.fixture
def timer () -> FakeTimer:

	return FakeTimer()


@pytest.fixture
def sink (timer: FakeTimer) -> RecordingSink:

	return RecordingSink(timer)


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> typing.List[FakeMidiOut]:

	"""Patch mido to hand out fake output ports; returns the list of ports opened."""

	_opened_outputs.clear()
	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)
	return _opened_outputs
