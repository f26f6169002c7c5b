"""Antenna directivity: raised-cosine main lobe with a side-lobe floor."""

from typing import Optional

import numpy as np

from echozero.core.config import AntennaType
from echozero.core.data_structures import AntennaPattern, Position

SIDE_LOBE_SCALE = 0.2
SIDE_LOBE_FLOOR = 0.01


def bearing_degrees(origin: Position, target: Position) -> float:
    """Bearing from origin to target in the x/y plane, in [0, 360)."""
    angle = np.degrees(np.arctan2(target.y - origin.y, target.x - origin.x))
    return float((angle + 360.0) % 360.0)


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two headings, in [0, 180]."""
    difference = abs(a - b) % 360.0
    if difference > 180.0:
        difference = 360.0 - difference
    return difference


def gain_factor(offset_degrees: float, beam_width: float) -> float:
    """
    Fraction of the antenna's peak gain seen at an angular offset.

    Inside half the beam width the main lobe follows cos^2(pi*offset/beam_width),
    which is 1 on boresight. Outside it the side lobe is
    max(0.01, 0.2*cos^2(pi*offset/beam_width)).
    """
    lobe = float(np.cos(np.pi * offset_degrees / beam_width) ** 2)
    if offset_degrees <= beam_width / 2:
        return lobe
    return max(SIDE_LOBE_FLOOR, SIDE_LOBE_SCALE * lobe)


def antenna_gain_db(antenna: Optional[AntennaType],
                    heading: float,
                    tx_position: Position,
                    rx_position: Position) -> float:
    """Gain in dB a transmitter's antenna contributes toward a receiver.

    Unknown antennas contribute nothing. OMNI antennas contribute their full
    gain in every direction.
    """
    if antenna is None:
        return 0.0
    if antenna.pattern is AntennaPattern.OMNI:
        return antenna.gain_dbi
    offset = angular_difference(bearing_degrees(tx_position, rx_position), heading)
    return antenna.gain_dbi * gain_factor(offset, antenna.beam_width)
