"""Gear: a gesture-controlled stopwatch and countdown timer."""

__version__ = "0.1.0"
