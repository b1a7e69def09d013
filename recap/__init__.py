"""Audio recording to transcript to summary pipeline."""

__version__ = "0.1.0"
