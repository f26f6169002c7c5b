"""RF environment: path-loss models and antenna gain."""

from echozero.environment.propagation import (
    FreeSpacePropagationModel,
    TwoRayGroundPropagationModel,
    LogDistancePropagationModel,
    create_propagation_model,
    fspl_db,
)
from echozero.environment.antenna import (
    bearing_degrees,
    angular_difference,
    gain_factor,
    antenna_gain_db,
)

__all__ = [
    'FreeSpacePropagationModel',
    'TwoRayGroundPropagationModel',
    'LogDistancePropagationModel',
    'create_propagation_model',
    'fspl_db',
    'bearing_degrees',
    'angular_difference',
    'gain_factor',
    'antenna_gain_db',
]
