"""Stateful linear Kalman filter.

:class:`KalmanFilter` owns a :class:`LinearModel` and the committed
``(x, P)`` pair, and runs one predict/update cycle per :meth:`~KalmanFilter.step`.
The model is fixed at construction; ``with_state`` and
``with_control_input_model`` return reconfigured copies and are meant to
be used before the first step.

A filter instance is not safe to share between threads.  Track each
object with its own filter.
"""

from __future__ import annotations

import logging

from jax import Array
from jax.typing import ArrayLike

from kalmanjax.estimation._types import (
    FilterDimensions,
    FilterState,
    LinearModel,
    Observation,
)
from kalmanjax.estimation.kalman import kf_predict, kf_update

logger = logging.getLogger(__name__)


class KalmanFilter:
    """Fixed-dimension linear Kalman filter.

    The state, measurement, and control dimensions are inferred from the
    model matrices and cannot change afterwards.  The initial state is a
    zero vector with identity covariance and the control input model is
    an ``(n, 1)`` zero matrix.

    Args:
        transition_model: Per-unit-time transition matrix ``F`` ``(n, n)``.
        measurement_model: Measurement matrix ``H`` ``(m, n)``.
        process_noise: Process noise covariance ``Q`` ``(n, n)``.

    Raises:
        ValueError: If the model matrix shapes are inconsistent.

    Examples:
        ```python
        import jax.numpy as jnp
        from kalmanjax import KalmanFilter, Observation

        kf = KalmanFilter(
            transition_model=[[1.0, 1.0], [0.0, 1.0]],
            measurement_model=[[1.0, 0.0]],
            process_noise=jnp.eye(2) * 1e-3,
        )
        x, P = kf.step(0.1, Observation(z=[0.2], R=[[0.5]]))
        ```
    """

    def __init__(
        self,
        transition_model: ArrayLike,
        measurement_model: ArrayLike,
        process_noise: ArrayLike,
    ):
        self._model = LinearModel.from_arrays(
            F=transition_model, H=measurement_model, Q=process_noise
        )
        self._state = FilterState.initial(self._model.dimensions.n)

    @classmethod
    def _from_parts(cls, model: LinearModel, filter_state: FilterState) -> KalmanFilter:
        kf = cls.__new__(cls)
        kf._model = model
        kf._state = filter_state
        return kf

    def with_state(self, state: ArrayLike, covariance: ArrayLike) -> KalmanFilter:
        """Return a copy of this filter starting from the given estimate.

        Args:
            state: Initial state vector ``(n,)``.
            covariance: Initial covariance ``(n, n)``.

        Returns:
            KalmanFilter: New filter with the same model.

        Raises:
            ValueError: If the shapes do not match the state dimension.
        """
        filter_state = self._model.check_state(FilterState(x=state, P=covariance))
        return KalmanFilter._from_parts(self._model, filter_state)

    def with_control_input_model(self, model: ArrayLike) -> KalmanFilter:
        """Return a copy of this filter using the given control input matrix.

        The control dimension ``k`` becomes ``model.shape[1]``.

        Args:
            model: Control input matrix ``B`` ``(n, k)``.

        Returns:
            KalmanFilter: New filter with the same state and other models.

        Raises:
            ValueError: If ``model`` does not have ``n`` rows.
        """
        current = self._model
        new_model = LinearModel.from_arrays(F=current.F, H=current.H, Q=current.Q, B=model)
        return KalmanFilter._from_parts(new_model, self._state)

    @property
    def model(self) -> LinearModel:
        """Model matrices ``(F, H, Q, B)``."""
        return self._model

    @property
    def dimensions(self) -> FilterDimensions:
        """State, measurement, and control sizes ``(n, m, k)``."""
        return self._model.dimensions

    @property
    def filter_state(self) -> FilterState:
        """Last committed ``(x, P)`` pair."""
        return self._state

    @property
    def state(self) -> Array:
        """Last committed state estimate."""
        return self._state.x

    @property
    def covariance(self) -> Array:
        """Last committed covariance."""
        return self._state.P

    def predict(
        self, filter_state: FilterState, dt: float, u: ArrayLike | None = None
    ) -> FilterState:
        """Time update of *filter_state* using this filter's model.

        Does not modify the filter. See
        :func:`~kalmanjax.estimation.kalman.kf_predict`.
        """
        return kf_predict(filter_state, self._model, dt, u)

    def update(self, filter_state: FilterState, observation: Observation) -> FilterState:
        """Measurement update of *filter_state* using this filter's model.

        Does not modify the filter. See
        :func:`~kalmanjax.estimation.kalman.kf_update`.
        """
        return kf_update(filter_state, self._model, observation).state

    def step(
        self, dt: float, observation: Observation, u: ArrayLike | None = None
    ) -> FilterState:
        """Run one predict/update cycle and commit the result.

        The committed state is replaced only if both stages succeed.  If
        either raises, the exception propagates and the filter keeps its
        previous state.

        Args:
            dt: Time elapsed since the last committed state. Must be
                strictly positive.
            observation: Measurement and noise covariance for this cycle.
            u: Optional control vector ``(k,)``.

        Returns:
            FilterState: The newly committed ``(x, P)``.

        Raises:
            TransitionError: If ``dt <= 0`` or the innovation covariance is
                singular.
            ValueError: If ``observation`` or ``u`` have the wrong shape.
        """
        predicted = self.predict(self._state, dt, u)
        corrected = self.update(predicted, observation)

        self._state = corrected
        logger.debug("Committed step dt=%s for state dimension %d", dt, corrected.x.shape[0])
        return corrected

    def __repr__(self) -> str:
        n, m, k = self.dimensions
        return f"KalmanFilter(n={n}, m={m}, k={k})"
