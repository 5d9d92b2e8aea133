"""mcwrap - configuration persistence and live reload for a server wrapper."""

__version__ = "0.1.0"
