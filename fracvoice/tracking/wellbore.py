"""Wellbore volume from pipe geometry."""

from fracvoice.models import round_volume

PI = 3.1415926


def wellbore_volume(depth: float, outer_diameter: float, wall_thickness: float) -> float:
    """Internal volume of a pipe section in cubic meters.

    Args:
        depth: Section depth in meters.
        outer_diameter: Outer diameter in millimeters.
        wall_thickness: Wall thickness in millimeters.

    Returns:
        Volume rounded to one decimal, 0.0 when the bore is closed.
    """
    inner_diameter = outer_diameter - wall_thickness * 2
    if depth <= 0 or inner_diameter <= 0:
        return 0.0
    return round_volume(PI * depth * (inner_diameter / 2000) ** 2)
