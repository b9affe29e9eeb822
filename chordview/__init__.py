"""chordview — chord diagram layout for fretted instruments."""

__version__ = "0.1.0"
