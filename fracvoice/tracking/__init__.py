"""Derived volume tracking and capacity display."""

from .engine import compute_benchmark, recompute_stages
from .segments import render_segments
from .wellbore import wellbore_volume

__all__ = ["compute_benchmark", "recompute_stages", "render_segments", "wellbore_volume"]
