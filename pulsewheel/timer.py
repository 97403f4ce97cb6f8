import asyncio
import typing


@typing.runtime_checkable
class Timer (typing.Protocol):

	"""
	Protocol for the clock and callback timer the scheduler runs on.
	"""

	def schedule (self, callback: typing.Callable[[], typing.Any], delay: float) -> typing.Any:

		"""
		Run ``callback`` once after ``delay`` seconds and return a handle for ``cancel``.
		"""

		...


	def cancel (self, handle: typing.Any) -> None:

		"""
		Cancel a callback that has not run yet. Cancelling a spent handle is a no-op.
		"""

		...


	def now (self) -> float:

		"""
		Monotonically non-decreasing time in seconds.
		"""

		...


class AsyncioTimer:

	"""
	Timer backed by an asyncio event loop.

	``now()`` is the loop's monotonic clock, so trigger times handed to a
	sink can be compared directly against ``loop.time()``.
	"""

	def __init__ (self, loop: typing.Optional[asyncio.AbstractEventLoop] = None) -> None:

		"""Bind to ``loop``, or to the running loop when omitted."""

		self.loop = loop if loop is not None else asyncio.get_running_loop()


	def schedule (self, callback: typing.Callable[[], typing.Any], delay: float) -> asyncio.TimerHandle:

		return self.loop.call_later(max(0.0, delay), callback)


	def cancel (self, handle: typing.Optional[asyncio.TimerHandle]) -> None:

		if handle is not None:
			handle.cancel()


	def now (self) -> float:

		return self.loop.time()
