import logging
import typing

import mido
import pytest

import pulsewheel.midi_utils

from conftest import FakeMidiOut


def test_first_output_is_used_by_default (patch_midi: typing.List[FakeMidiOut]) -> None:

	"""Without a name the first listed output is opened."""

	name, port = pulsewheel.midi_utils.select_output_device()

	assert name == "Dummy MIDI"
	assert port is patch_midi[0]


def test_named_output_is_opened (patch_midi: typing.List[FakeMidiOut]) -> None:

	"""A named output is opened when mido lists it."""

	name, port = pulsewheel.midi_utils.select_output_device("Second MIDI")

	assert name == "Second MIDI"
	assert port is not None


def test_missing_output_is_reported (patch_midi: typing.List[FakeMidiOut], caplog: pytest.LogCaptureFixture) -> None:

	"""An unknown name logs the available devices and opens nothing."""

	with caplog.at_level(logging.ERROR, logger="pulsewheel.midi_utils"):
		result = pulsewheel.midi_utils.select_output_device("Nowhere")

	assert result == (None, None)
	assert patch_midi == []
	assert "Dummy MIDI" in caplog.text


def test_no_outputs (monkeypatch: pytest.MonkeyPatch) -> None:

	"""With no outputs at all there is nothing to open."""

	monkeypatch.setattr(mido, "get_output_names", lambda: [])

	assert pulsewheel.midi_utils.select_output_device() == (None, None)


def test_open_failure_is_reported (monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:

	"""A backend error while opening is logged instead of raised."""

	def refuse (name: str) -> None:
		raise OSError("device busy")

	monkeypatch.setattr(mido, "get_output_names", lambda: ["Busy MIDI"])
	monkeypatch.setattr(mido, "open_output", refuse)

	with caplog.at_level(logging.ERROR, logger="pulsewheel.midi_utils"):
		assert pulsewheel.midi_utils.select_output_device() == (None, None)

	assert "device busy" in caplog.text
