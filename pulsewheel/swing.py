import pulsewheel.constants


def clamp_bpm (bpm: float) -> float:

	"""Clamp a tempo to the range the engine will actually play (40-300 BPM)."""

	return max(pulsewheel.constants.BPM_MIN, min(pulsewheel.constants.BPM_MAX, float(bpm)))


def clamp_swing (swing: float) -> float:

	"""Clamp a swing amount to 0-100 percent."""

	return max(pulsewheel.constants.SWING_MIN, min(pulsewheel.constants.SWING_MAX, float(swing)))


def swing_ratio (swing: float) -> float:

	"""
	Convert a swing percentage into the fraction by which steps are stretched.

	100% swing gives the maximum shuffle of 0.30.
	"""

	return clamp_swing(swing) / 100.0 * pulsewheel.constants.SWING_MAX_RATIO


def sixteenth_duration (bpm: float) -> float:

	"""Length in seconds of one straight sixteenth note."""

	return 60.0 / clamp_bpm(bpm) / pulsewheel.constants.STEPS_PER_QUARTER


def step_interval (bpm: float, swing: float, step_index: int) -> float:

	"""
	Time in seconds until the step after ``step_index`` begins.

	``step_index`` is the step that has just become current. Even steps are
	lengthened and odd steps shortened by the swing ratio, giving a
	long-short shuffle that still averages to the straight tempo over each
	pair.
	"""

	base = sixteenth_duration(bpm)
	ratio = swing_ratio(swing)

	if step_index % 2 == 0:
		return base * (1.0 + ratio)

	return base * (1.0 - ratio)
