"""Linear Kalman filter for fixed-dimension state estimation.

Provides pure predict/update functions and a stateful filter that runs
one predict/update cycle per call.

Available components:

- :class:`FilterDimensions` -- State, measurement, and control sizes
- :class:`LinearModel` -- Transition, measurement, noise, and control matrices
- :class:`FilterState` -- Filter state (estimate and covariance)
- :class:`Observation` -- Measurement and its noise covariance
- :class:`FilterResult` -- Update result with diagnostics
- :class:`KalmanFilter` -- Stateful filter with atomic ``step``
- :func:`kf_predict` -- Time update with ``dt``-scaled transition
- :func:`kf_update` -- Measurement update
- :func:`is_singular` -- Condition-number singularity test
"""

from kalmanjax.estimation._types import (
    FilterDimensions,
    FilterResult,
    FilterState,
    LinearModel,
    Observation,
)
from kalmanjax.estimation.filter import KalmanFilter
from kalmanjax.estimation.kalman import is_singular, kf_predict, kf_update

__all__ = [
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
