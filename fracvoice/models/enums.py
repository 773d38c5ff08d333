"""Enumeration types for the stage models."""

from enum import Enum


class HighlightState(str, Enum):
    """Visual status of a stage relative to the liquid benchmark."""

    WHITE = "white"
    YELLOW = "yellow"
    RED = "red"
