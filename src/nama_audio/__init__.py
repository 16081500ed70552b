"""Chant-playback counting engine: play Nama recordings and submit verified counts."""

__version__ = "0.1.0"
