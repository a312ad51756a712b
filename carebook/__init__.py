"""Doctor discovery, appointment booking and review moderation core."""

__version__ = "0.1.0"
