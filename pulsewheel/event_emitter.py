import asyncio
import logging
import typing


logger = logging.getLogger(__name__)

CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named-event listener registry for transport notifications.

	Sync listeners run inline. Coroutine listeners are started as tasks on the
	running event loop, so a slow listener never holds up the scheduling tick.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty event registry.
		"""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}
		self._tasks: typing.Set[asyncio.Task] = set()


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if event_name not in self._listeners or callback not in self._listeners[event_name]:
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener for ``event_name``.

		A listener that raises is logged and skipped; the remaining listeners
		still run. Coroutine listeners need a running event loop and raise
		``ValueError`` without one.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			if asyncio.iscoroutinefunction(callback):

				try:
					loop = asyncio.get_running_loop()
				except RuntimeError:
					raise ValueError(f"Async listener for {event_name!r} needs a running event loop") from None

				task = loop.create_task(callback(*args, **kwargs), name=f"{event_name} listener")
				self._tasks.add(task)
				task.add_done_callback(self._task_done)
				continue

			try:
				callback(*args, **kwargs)
			except Exception:
				logger.exception(f"Listener for {event_name!r} failed")


	def _task_done (self, task: asyncio.Task) -> None:

		"""Drop a finished listener task and log its error, if any."""

		self._tasks.discard(task)

		if task.cancelled():
			return

		exc = task.exception()

		if exc is not None:
			logger.error(f"Listener task {task.get_name()!r} failed", exc_info=exc)
