"""Fact Up: bite-sized trivia facts in the terminal."""

__version__ = "0.1.0"
