"""General MIDI Level 1 drum notes used by the default kit.

Standard MIDI percussion assignments for channel 10 (0-indexed channel 9).
``KIT_NOTE_MAP`` maps the default track ids to a note, so a ``MidiSink``
can drive any GM-compatible drum machine or DAW without further setup::

    import pulsewheel.sink
    import pulsewheel.constants.gm_drums

    sink = pulsewheel.sink.MidiSink(note_map=pulsewheel.constants.gm_drums.KIT_NOTE_MAP)
"""

import typing


GM_DRUM_CHANNEL = 9

KICK_1 = 36
SIDE_STICK = 37
SNARE_1 = 38
HAND_CLAP = 39
HI_HAT_CLOSED = 42
HI_HAT_PEDAL = 44
HI_HAT_OPEN = 46
CRASH_1 = 49
RIDE_1 = 51
COWBELL = 56
HIGH_BONGO = 60
LOW_CONGA = 64
CLAVES = 75


KIT_NOTE_MAP: typing.Dict[str, int] = {
	"kick": KICK_1,
	"snare": SNARE_1,
	"hihat": HI_HAT_CLOSED,
	"crash": CRASH_1,
	"perc": LOW_CONGA,
	"clap": HAND_CLAP,
}


# Names accepted for a track's ``note`` in the YAML config.
DRUM_NOTE_NAMES: typing.Dict[str, int] = {
	"kick": KICK_1,
	"side_stick": SIDE_STICK,
	"snare": SNARE_1,
	"clap": HAND_CLAP,
	"hihat_closed": HI_HAT_CLOSED,
	"hihat_pedal": HI_HAT_PEDAL,
	"hihat_open": HI_HAT_OPEN,
	"crash": CRASH_1,
	"ride": RIDE_1,
	"cowbell": COWBELL,
	"high_bongo": HIGH_BONGO,
	"low_conga": LOW_CONGA,
	"claves": CLAVES,
}
