"""Playroom: чат и крестики-нолики с эфемерным хранением в памяти."""

__version__ = "0.3.0"
