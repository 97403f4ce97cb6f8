import argparse
import asyncio
import logging
import typing

import pulsewheel.config
import pulsewheel.scheduler
import pulsewheel.sink
import pulsewheel.timer


logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:

	"""Parse command-line options."""

	parser = argparse.ArgumentParser(prog="pulsewheel", description="Play Euclidean drum patterns over MIDI")
	parser.add_argument("--config", default="config.yaml", help="YAML config file (default: config.yaml)")
	parser.add_argument("--device", default=None, help="MIDI output device (overrides midi.device_name)")
	parser.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds (default: run until interrupted)")
	parser.add_argument("--verbose", action="store_true", help="Log every step")

	return parser.parse_args(argv)


async def run (config: typing.Dict[str, typing.Any], device_name: typing.Optional[str] = None, seconds: typing.Optional[float] = None) -> None:

	"""Build the kit from ``config`` and play it until cancelled or ``seconds`` elapse."""

	settings = pulsewheel.config.build_midi_settings(config)

	if device_name:
		settings['output_device_name'] = device_name

	timer = pulsewheel.timer.AsyncioTimer()
	sink = pulsewheel.sink.MidiSink(**settings)

	if not sink.open(timer):
		logger.warning("No MIDI output available - running silently")

	scheduler = pulsewheel.scheduler.TransportScheduler(
		timer = timer,
		sink = sink,
		tracks = pulsewheel.config.build_tracks(config),
		transport = pulsewheel.config.build_transport(config)
	)

	for track in scheduler.tracks:
		pattern = "".join("x" if hit else "." for hit in track.pattern)
		logger.info(f"{track.name:<8} {pattern}")

	scheduler.start()

	try:
		if seconds is None:
			await asyncio.Event().wait()
		else:
			await asyncio.sleep(seconds)
	finally:
		scheduler.stop()
		# Let the last note_off messages go out before closing the port.
		await asyncio.sleep(sink.note_length + scheduler.schedule_ahead)
		sink.close()


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point for the pulsewheel player.
	"""

	args = parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	logger.info("pulsewheel starting...")

	config = pulsewheel.config.load_config(args.config)

	try:
		asyncio.run(run(config, device_name=args.device, seconds=args.seconds))
	except KeyboardInterrupt:
		logger.info("Stopping...")


if __name__ == "__main__":
	main()
