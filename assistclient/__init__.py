"""Client for assistant-style HTTP APIs: threads, runs, vector stores, moderation, speech and event streams."""

__version__ = "0.1.0"