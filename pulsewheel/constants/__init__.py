"""Constants for pulsewheel.

This package contains the ranges, timings and defaults shared by the pattern
generator, the cycle aligner and the transport scheduler:

- Parameter ranges - the edges every write is clamped to
- Scheduler timings - lookahead cadence, ahead window and trigger epsilon
- ``pulsewheel.constants.gm_drums`` - General MIDI drum notes for the default kit
"""

# Parameter ranges

BIAS_MIN = 0.0
BIAS_MAX = 1.0
BIAS_NEUTRAL = 0.5

VOLUME_MIN = 0
VOLUME_MAX = 100

SWING_MIN = 0.0
SWING_MAX = 100.0

# Maximum shuffle: at 100% swing even sixteenths are 30% longer, odd ones 30% shorter.
SWING_MAX_RATIO = 0.30

# Any tempo write is clamped to 40-300 BPM.
BPM_MIN = 40.0
BPM_MAX = 300.0

# Sixteenth-note grid: four steps per quarter-note beat.
STEPS_PER_QUARTER = 4

# Implied steps for a bar when the time signature cannot be parsed, or when
# there is nothing to align.
DEFAULT_CYCLE_STEPS = 16
WHOLE_NOTE_STEPS = 16

DEFAULT_TIME_SIGNATURE = "4/4"

# Scheduler timings (seconds)

LOOKAHEAD_INTERVAL = 0.025
SCHEDULE_AHEAD = 0.100
TRIGGER_EPSILON = 0.001

# Sink-side nudge applied when a track is triggered at or before its previous time.
TRIGGER_NUDGE = 0.0001

AUDITION_VELOCITY = 0.8

DEFAULT_BPM = 120.0
DEFAULT_SWING = 0.0
DEFAULT_MASTER_VOLUME = 80
