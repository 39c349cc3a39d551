"""Pulse Stage: social posting backend with vote, tip and reputation bookkeeping."""

__version__ = "0.1.0"
