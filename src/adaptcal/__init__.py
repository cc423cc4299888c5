"""Adaptive maintenance calorie estimation and weight projection."""

__version__ = "0.1.0"
