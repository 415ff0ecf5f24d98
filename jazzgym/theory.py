from typing import Dict, List, Tuple

ROOTS: Tuple[str, ...] = (
	"C", "C#", "Db",
	"D", "D#", "Eb",
	"E",
	"F", "F#", "Gb",
	"G", "G#", "Ab",
	"A", "A#", "Bb",
	"B",
)

# Quality -> display suffix. The plain major triad is shown as the bare root.
CHORD_QUALITIES: Dict[str, List[Tuple[str, str]]] = {
	"Major": [("maj", ""), ("maj7", "maj7"), ("maj9", "maj9"), ("maj13", "maj13")],
	"Minor": [("m", "m"), ("m7", "m7"), ("m9", "m9"), ("m11", "m11"), ("m13", "m13")],
	"Dominant": [
		("7", "7"),
		("9", "9"),
		("13", "13"),
		("7#9", "7#9"),
		("7b9", "7b9"),
		("7#5", "7#5"),
		("7b5", "7b5"),
		("alt", "alt"),
	],
	"Diminished": [("dim", "dim"), ("dim7", "dim7"), ("m7b5", "m7b5")],
	"Augmented": [("aug", "aug"), ("maj7#5", "maj7#5")],
	"Suspended": [("sus2", "sus2"), ("sus4", "sus4"), ("7sus4", "7sus4")],
	# Selectable, but no voicings are catalogued for it yet.
	"Extended": [],
}

CHORD_TYPES: Tuple[str, ...] = tuple(CHORD_QUALITIES.keys())

SCALE_TYPES: Tuple[str, ...] = (
	"Major",
	"Natural Minor",
	"Harmonic Minor",
	"Melodic Minor",
	"Dorian",
	"Mixolydian",
	"Altered",
	"Lydian",
	"Phrygian",
	"Locrian",
)

DEFAULT_SCALE_TYPES: Tuple[str, ...] = SCALE_TYPES[:7]

DEFAULT_TIME_LIMIT = 10
MIN_TIME_LIMIT = 3
MAX_TIME_LIMIT = 60


def chord_name(root: str, chord_type: str, quality: str) -> str:
	for q, suffix in CHORD_QUALITIES[chord_type]:
		if q == quality:
			return f"{root}{suffix}"
	raise KeyError(f"unknown quality {quality!r} for {chord_type}")


def scale_name(root: str, scale_type: str) -> str:
	return f"{root} {scale_type}"
