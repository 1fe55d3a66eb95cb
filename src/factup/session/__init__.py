"""Fact navigation and the session view-model."""

from .history import LIVE, FactHistory
from .viewmodel import FactSession

__all__ = ["LIVE", "FactHistory", "FactSession"]
