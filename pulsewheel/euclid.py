import math
import typing

import pulsewheel.constants


Pattern = typing.Tuple[bool, ...]


def generate_euclidean_sequence (steps: int, hits: int) -> typing.List[int]:

	"""
	Distribute hits across steps as evenly as possible.

	Step ``i`` is a hit when ``(i * hits) % steps < hits``. The first hit
	always lands on step 0.
	"""

	if steps <= 0:
		return []

	return [1 if (i * hits) % steps < hits else 0 for i in range(steps)]


def rotate (sequence: typing.List[int], amount: int) -> typing.List[int]:

	"""Circularly shift a sequence; positive amounts move hits to higher indices."""

	length = len(sequence)

	if length == 0:
		return list(sequence)

	shift = amount % length

	if shift == 0:
		return list(sequence)

	return sequence[-shift:] + sequence[:-shift]


def sequence_to_indices (pattern: typing.Sequence[typing.Any]) -> typing.List[int]:

	"""Positions of the active steps, e.g. ``[1, 0, 1, 0]`` gives ``[0, 2]``."""

	return [index for index, active in enumerate(pattern) if active]


def _round_half_up (value: float) -> int:

	"""Round .5 away from zero for positive values, so 1.5 -> 2 and 2.5 -> 3."""

	return int(math.floor(value + 0.5))


def _distance_to_nearest_hit (sequence: typing.List[int], index: int, start: int, length: int, exclude_self: bool) -> int:

	"""
	Distance from ``index`` to the closest hit inside ``[start, start + length)``.

	Returns ``length`` when the region holds no (other) hit.
	"""

	nearest: typing.Optional[int] = None

	for idx in range(start, start + length):

		if not sequence[idx]:
			continue

		if exclude_self and idx == index:
			continue

		distance = abs(idx - index)

		if nearest is None or distance < nearest:
			nearest = distance

	return length if nearest is None else nearest


def _most_crowded_hit (sequence: typing.List[int], start: int, length: int) -> typing.Optional[int]:

	"""The hit with the closest neighbour in the region, lowest index on ties."""

	hits = [start + idx for idx in sequence_to_indices(sequence[start:start + length])]

	if not hits:
		return None

	return min(hits, key=lambda idx: (_distance_to_nearest_hit(sequence, idx, start, length, True), idx))


def _most_open_gap (sequence: typing.List[int], start: int, length: int) -> typing.Optional[int]:

	"""The empty step furthest from any hit in the region, lowest index on ties."""

	empties = [idx for idx in range(start, start + length) if not sequence[idx]]

	if not empties:
		return None

	return min(empties, key=lambda idx: (-_distance_to_nearest_hit(sequence, idx, start, length, False), idx))


def apply_bias (sequence: typing.List[int], bias: float) -> typing.List[int]:

	"""Skew hit density toward the front or back half of a sequence.

	The front half is the lowest ``len(sequence) // 2`` steps. A bias of 0.0
	pulls every hit it can into the front half, 1.0 pushes them all to the
	back, and 0.5 leaves the sequence untouched. The total hit count never
	changes - hits are moved one at a time, the smallest number of moves
	needed to reach the target front-half count.

	Each move takes the most crowded hit out of the over-full half (the one
	closest to a neighbour) and drops it into the widest gap of the other
	half, so the spacing that is left stays as even as possible.

	Parameters:
		sequence: Binary sequence (0s and 1s)
		bias: 0.0 (front-heavy) to 1.0 (back-heavy); clamped to that range

	Example:
		```python
		seq = pulsewheel.euclid.generate_euclidean_sequence(8, 4)
		pulsewheel.euclid.apply_bias(seq, 0.0)   # [1, 1, 1, 1, 0, 0, 0, 0]
		```
	"""

	bias = max(pulsewheel.constants.BIAS_MIN, min(pulsewheel.constants.BIAS_MAX, bias))

	out = list(sequence)
	length = len(out)
	half = length // 2

	total_hits = sum(1 for v in out if v)
	target_front = _round_half_up(total_hits * (1.0 - bias))
	front_hits = sum(1 for v in out[:half] if v)

	if front_hits == target_front:
		return out

	if front_hits > target_front:
		source_start, source_len = 0, half
		dest_start, dest_len = half, length - half
	else:
		source_start, source_len = half, length - half
		dest_start, dest_len = 0, half

	for _ in range(abs(front_hits - target_front)):

		source = _most_crowded_hit(out, source_start, source_len)
		dest = _most_open_gap(out, dest_start, dest_len)

		if source is None or dest is None:
			break

		out[source] = 0
		out[dest] = 1

	return out


def generate (steps: int, hits: int, bias: float = pulsewheel.constants.BIAS_NEUTRAL, rotation: int = 0) -> Pattern:

	"""Build a trigger pattern from Euclidean parameters.

	The hits are first spread evenly, then redistributed by ``bias`` and
	finally rotated by ``rotation`` steps. Identical inputs always give the
	identical pattern.

	Invalid parameters (``steps <= 0``, ``hits < 0`` or ``hits > steps``) do
	not raise; they produce an all-false pattern of length ``max(0, steps)``.

	Parameters:
		steps: Pattern length
		hits: Number of active steps (0 to ``steps``)
		bias: 0.0 (front-heavy) to 1.0 (back-heavy), 0.5 is neutral
		rotation: Circular shift, any integer; normalized modulo ``steps``

	Example:
		```python
		# Backbeat snare: hits on steps 4 and 12
		pattern = pulsewheel.euclid.generate(16, 2, rotation=4)
		```
	"""

	if steps <= 0 or hits < 0 or hits > steps:
		return (False,) * max(0, steps)

	sequence = generate_euclidean_sequence(steps, hits)

	if bias != pulsewheel.constants.BIAS_NEUTRAL:
		sequence = apply_bias(sequence, bias)

	if rotation != 0:
		sequence = rotate(sequence, rotation)

	return tuple(bool(v) for v in sequence)
