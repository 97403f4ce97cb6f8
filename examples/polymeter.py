import asyncio
import logging

import pulsewheel

logging.basicConfig(level=logging.INFO)

# Three voices of different lengths. They realign every lcm(16, 12, 7) = 336 steps.
tracks = [
	pulsewheel.Track.create("kick", steps=16, hits=4, volume=90),
	pulsewheel.Track.create("clap", steps=12, hits=5, rotation=2, volume=70),
	pulsewheel.Track.create("hihat", steps=7, hits=3, bias=0.8, volume=50),
]


async def main () -> None:

	timer = pulsewheel.AsyncioTimer()

	sink = pulsewheel.MidiSink()
	sink.open(timer)

	scheduler = pulsewheel.TransportScheduler(
		timer,
		sink,
		tracks = tracks,
		transport = pulsewheel.Transport(bpm=118, swing=40)
	)

	def on_step (step_index: int, scheduled_time: float) -> None:
		if step_index == 0:
			logging.info(f"Cycle restart at {scheduled_time:.3f}")

	scheduler.on_event("step", on_step)

	logging.info(f"Cycle length: {scheduler.cycle_length} steps")

	scheduler.start()

	try:
		await asyncio.sleep(8)

		# Live edits - heard from the next tick, no restart.
		scheduler.update_track("clap", hits=7, bias=0.2)
		scheduler.set_swing(70)
		await asyncio.sleep(8)

		scheduler.update_track("hihat", steps=9, hits=4)
		scheduler.set_bpm(132)
		await asyncio.sleep(8)

	finally:
		scheduler.stop()
		await asyncio.sleep(0.2)
		sink.close()


if __name__ == "__main__":
	asyncio.run(main())
