"""
kalmanjax is a small, fixed-dimension linear Kalman filter implemented in JAX.
"""

from .config import set_dtype, get_dtype, get_singular_tolerance
from .errors import TransitionError

from .estimation import (
    FilterDimensions,
    LinearModel,
    FilterState,
    Observation,
    FilterResult,
    KalmanFilter,
    kf_predict,
    kf_update,
    is_singular,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    "get_singular_tolerance",
    # Errors
    "TransitionError",
    # Estimation
    "FilterDimensions",
    "LinearModel",
    "FilterState",
    "Observation",
    "FilterResult",
    "KalmanFilter",
    "kf_predict",
    "kf_update",
    "is_singular",
]
