"""Game tool launcher core — tool model, command synthesis and Heroic detection."""

__version__ = "0.1.0"
