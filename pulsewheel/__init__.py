"""
pulsewheel - Euclidean drum patterns with a lookahead transport.

Each track is a Euclidean rhythm: ``hits`` spread as evenly as possible over
``steps``, then skewed toward the front or back half by ``bias`` and turned
by ``rotation``. Tracks of different lengths play against each other over a
shared cycle, and a lookahead scheduler hands every trigger to a sound sink
with its exact start time - swing included, with no drift.

What it does:

- **Euclidean patterns with bias.** ``pulsewheel.euclid.generate(16, 5,
  bias=0.3, rotation=2)`` - even placement, then a minimal-move
  redistribution that keeps the hit count and the spacing quality.
- **Polymeter that lines up.** Tracks of 16, 12 and 7 steps repeat inside a
  cycle sized by least-common-multiple, together with the bar the time
  signature implies.
- **Lookahead scheduling.** A short non-blocking tick schedules every step
  due in the next 100 ms. Late ticks catch up without skipping or reordering
  a single step.
- **Live edits.** Tempo, swing, time signature, pattern parameters,
  mute and solo change while playing, from the next tick, without a restart.
- **Forgiving parameters.** Out-of-range values are clamped or produce an
  empty pattern; nothing musical ever raises or stops playback.
- **MIDI out.** ``MidiSink`` plays each track as a General MIDI drum note on
  any output mido can open.

Minimal example:

    ```python
    import asyncio

    import pulsewheel

    async def main ():
        timer = pulsewheel.AsyncioTimer()
        sink = pulsewheel.MidiSink()
        sink.open(timer)

        scheduler = pulsewheel.TransportScheduler(timer, sink)
        scheduler.start()
        await asyncio.sleep(8)
        scheduler.update_track("snare", hits=3, bias=0.8)
        await asyncio.sleep(8)
        scheduler.stop()

    asyncio.run(main())
    ```

Package-level exports: ``generate``, ``aligned_cycle_length``, ``Track``,
``Transport``, ``TransportScheduler``, ``AsyncioTimer``, ``MidiSink``.
"""

import pulsewheel.cycle
import pulsewheel.euclid
import pulsewheel.scheduler
import pulsewheel.sink
import pulsewheel.timer
import pulsewheel.tracks


generate = pulsewheel.euclid.generate
aligned_cycle_length = pulsewheel.cycle.aligned_cycle_length
Track = pulsewheel.tracks.Track
Transport = pulsewheel.tracks.Transport
TransportScheduler = pulsewheel.scheduler.TransportScheduler
AsyncioTimer = pulsewheel.timer.AsyncioTimer
MidiSink = pulsewheel.sink.MidiSink
