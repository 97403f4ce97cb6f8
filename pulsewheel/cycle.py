"""Shared playback cycle across tracks of different lengths.

Every track repeats its own pattern (``step % track.steps``), and the bar
implied by the time signature repeats too. The scheduler counts steps over
one cycle long enough for all of them to line up again - the least common
multiple of the track lengths and the bar length::

    aligned_cycle_length([16, 8], "3/4")   # 3/4 implies 12 steps -> lcm(16, 8, 12) = 48
"""

import functools
import logging
import math
import re
import typing

import pulsewheel.constants


logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_leading_int (text: str) -> typing.Optional[int]:

	"""Read the integer at the start of ``text``, ignoring any trailing junk."""

	match = _LEADING_INT.match(text)

	if match is None:
		return None

	return int(match.group(1))


def parse_time_signature (time_signature: str) -> typing.Optional[typing.Tuple[int, int]]:

	"""
	Parse an ``"N/D"`` string into ``(numerator, denominator)``.

	Returns ``None`` when either part is missing or not a number, or when the
	denominator is zero.
	"""

	if not isinstance(time_signature, str):
		return None

	parts = time_signature.split("/")

	if len(parts) < 2:
		return None

	numerator = _parse_leading_int(parts[0])
	denominator = _parse_leading_int(parts[1])

	if numerator is None or denominator is None or denominator == 0:
		return None

	return numerator, denominator


def implied_steps (time_signature: str) -> int:

	"""
	Number of sixteenth steps in one bar of ``time_signature``.

	Falls back to 16 when the signature cannot be parsed.
	"""

	parsed = parse_time_signature(time_signature)

	if parsed is None:
		logger.debug(f"Unparseable time signature {time_signature!r} - assuming {pulsewheel.constants.DEFAULT_CYCLE_STEPS} steps")
		return pulsewheel.constants.DEFAULT_CYCLE_STEPS

	numerator, denominator = parsed
	steps_per_beat = max(1, pulsewheel.constants.WHOLE_NOTE_STEPS // denominator)

	return max(1, numerator * steps_per_beat)


def aligned_cycle_length (step_counts: typing.Iterable[int], time_signature: str = pulsewheel.constants.DEFAULT_TIME_SIGNATURE) -> int:

	"""Compute the step count after which every track and the bar realign.

	Non-positive track lengths are ignored. With no tracks the cycle is one
	bar of the time signature.

	Parameters:
		step_counts: Step count of each track (duplicates are fine)
		time_signature: ``"N/D"`` string; unparseable values imply 16 steps

	Example:
		```python
		pulsewheel.cycle.aligned_cycle_length([16, 16, 16], "4/4")   # 16
		pulsewheel.cycle.aligned_cycle_length([16, 8], "3/4")        # 48
		```
	"""

	lengths = {int(steps) for steps in step_counts if steps > 0}
	lengths.add(implied_steps(time_signature))

	if not lengths:
		return pulsewheel.constants.DEFAULT_CYCLE_STEPS

	return max(1, functools.reduce(math.lcm, lengths))
