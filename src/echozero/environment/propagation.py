"""RF Propagation Models.

Distances are in world units (metres) and converted to kilometres; frequencies
are in MHz. All models return a positive loss in dB.
"""

import numpy as np

from echozero.core.data_structures import Position, PropagationModelType
from echozero.core.interfaces import IPropagationModel
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

FSPL_CONSTANT_DB = 32.45          # 20*log10(4*pi/c) for d in km, f in MHz
TWO_RAY_MIN_DISTANCE = 1000.0     # below this the two-ray model is unstable
MIN_ANTENNA_HEIGHT = 1.0
LOG_DISTANCE_REFERENCE_KM = 1.0
URBAN_PATH_LOSS_EXPONENT = 2.8    # 2 = free space, 2.7-3.5 = urban, 4-6 = indoor


def fspl_db(distance: float, frequency_mhz: float) -> float:
    """
    Free-space path loss.

    Args:
        distance: Separation in metres. Must be positive.
        frequency_mhz: Carrier frequency in MHz.

    Returns:
        Loss in dB: 20*log10(d_km) + 20*log10(f_MHz) + 32.45
    """
    distance_km = distance / 1000.0
    return float(20 * np.log10(distance_km) + 20 * np.log10(frequency_mhz) + FSPL_CONSTANT_DB)


class FreeSpacePropagationModel(IPropagationModel):
    """Line-of-sight Free Space Path Loss (FSPL)."""

    def calculate_path_loss(self,
                            tx_position: Position,
                            rx_position: Position,
                            frequency_mhz: float) -> float:
        distance = tx_position.distance_to(rx_position)
        if distance <= 0:
            return 0.0
        loss = fspl_db(distance, frequency_mhz)
        logger.debug(f"FSPL: dist={distance:.2f}m, freq={frequency_mhz:.2f}MHz -> Loss={loss:.2f}dB")
        return loss


class TwoRayGroundPropagationModel(IPropagationModel):
    """
    Two-ray ground reflection model.

    Falls back to FSPL below TWO_RAY_MIN_DISTANCE. Antenna heights are the z
    coordinates of each end, floored at 1 m so the logarithms stay finite.
    The frequency only matters in the FSPL fallback.
    """

    def __init__(self, min_distance: float = TWO_RAY_MIN_DISTANCE):
        self.min_distance = min_distance

    def calculate_path_loss(self,
                            tx_position: Position,
                            rx_position: Position,
                            frequency_mhz: float) -> float:
        distance = tx_position.distance_to(rx_position)
        if distance <= 0:
            return 0.0
        if distance < self.min_distance:
            return fspl_db(distance, frequency_mhz)

        height_tx = max(MIN_ANTENNA_HEIGHT, tx_position.z)
        height_rx = max(MIN_ANTENNA_HEIGHT, rx_position.z)
        distance_km = distance / 1000.0
        loss = float(40 * np.log10(distance_km)
                     - 20 * np.log10(height_tx)
                     - 20 * np.log10(height_rx))
        logger.debug(
            f"Two-ray: dist={distance:.2f}m, h_tx={height_tx:.1f}m, h_rx={height_rx:.1f}m -> Loss={loss:.2f}dB"
        )
        return loss


class LogDistancePropagationModel(IPropagationModel):
    """Log-distance path loss with a 1 km reference distance."""

    def __init__(self,
                 exponent: float = URBAN_PATH_LOSS_EXPONENT,
                 reference_km: float = LOG_DISTANCE_REFERENCE_KM):
        self.exponent = exponent
        self.reference_km = reference_km

    def calculate_path_loss(self,
                            tx_position: Position,
                            rx_position: Position,
                            frequency_mhz: float) -> float:
        distance = tx_position.distance_to(rx_position)
        if distance <= 0:
            return 0.0
        distance_km = distance / 1000.0
        pl0 = 20 * np.log10(self.reference_km) + 20 * np.log10(frequency_mhz) + FSPL_CONSTANT_DB
        loss = float(pl0 + 10 * self.exponent * np.log10(distance_km / self.reference_km))
        logger.debug(f"Log-distance: dist={distance:.2f}m, n={self.exponent} -> Loss={loss:.2f}dB")
        return loss


def create_propagation_model(model_type: PropagationModelType) -> IPropagationModel:
    """Instantiate the path-loss model selected in configuration."""
    if model_type is PropagationModelType.FSPL:
        return FreeSpacePropagationModel()
    if model_type is PropagationModelType.TWO_RAY:
        return TwoRayGroundPropagationModel()
    if model_type is PropagationModelType.LOG_DISTANCE:
        return LogDistancePropagationModel()
    raise ValueError(f"Unsupported propagation model: {model_type}")
