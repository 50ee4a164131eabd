"""MyVoice Studio backend package."""

__version__ = "1.0.0"
