"""Type definitions for the linear Kalman filter.

Provides the core data types used by the predict/update functions and the
:class:`~kalmanjax.estimation.filter.KalmanFilter` orchestrator:

- :class:`FilterDimensions`: State, measurement, and control sizes
  ``(n, m, k)`` of a filter.
- :class:`LinearModel`: Immutable model matrices (transition, measurement,
  process noise, control input).
- :class:`FilterState`: Current state estimate and covariance matrix.
- :class:`Observation`: A measurement vector paired with its noise
  covariance.
- :class:`FilterResult`: Output of a measurement update, containing the
  updated state plus diagnostic information for filter tuning.

All types are :class:`~typing.NamedTuple` instances, which JAX treats as
pytrees automatically.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from kalmanjax.config import get_dtype


def _as_array(name: str, value: ArrayLike, shape: tuple[int, ...]) -> Array:
    """Coerce *value* to the configured dtype and check its shape.

    Args:
        name: Name used in the error message.
        value: Array-like input.
        shape: Required shape.

    Returns:
        Array: *value* as a JAX array of the configured dtype.

    Raises:
        ValueError: If the shape of *value* differs from *shape*.
    """
    arr = jnp.asarray(value, dtype=get_dtype())
    if arr.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {arr.shape}")
    return arr


def _as_matrix(name: str, value: ArrayLike) -> Array:
    """Coerce *value* to a 2-D array of the configured dtype."""
    arr = jnp.asarray(value, dtype=get_dtype())
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix, got shape {arr.shape}")
    return arr


class FilterDimensions(NamedTuple):
    """Fixed sizes of a linear Kalman filter.

    Attributes:
        n: State dimension.
        m: Measurement dimension.
        k: Control input dimension.
    """

    n: int
    m: int
    k: int


class FilterState(NamedTuple):
    """State of a Kalman filter.

    Holds the current state estimate and error covariance matrix.  Unpacks
    as ``x, P = filter_state``.

    Attributes:
        x: State estimate vector of shape ``(n,)``.
        P: Error covariance matrix of shape ``(n, n)``. Should be symmetric
            positive semi-definite.
    """

    x: Array
    P: Array

    @staticmethod
    def initial(n: int) -> FilterState:
        """Create the default initial state: zero estimate, identity covariance.

        Args:
            n: State dimension.

        Returns:
            FilterState: ``(zeros(n), eye(n))`` in the configured dtype.

        Examples:
            ```python
            from kalmanjax.estimation import FilterState
            fs = FilterState.initial(4)
            fs.P.shape
            ```
        """
        if n < 1:
            raise ValueError(f"State dimension must be positive, got {n}")
        dtype = get_dtype()
        return FilterState(x=jnp.zeros(n, dtype=dtype), P=jnp.eye(n, dtype=dtype))


class Observation(NamedTuple):
    """A single measurement and its noise covariance.

    The noise covariance may differ from one observation to the next.

    Attributes:
        z: Measurement vector of shape ``(m,)``.
        R: Measurement noise covariance matrix of shape ``(m, m)``.
    """

    z: Array
    R: Array


class LinearModel(NamedTuple):
    """Model matrices of a linear Kalman filter.

    Construct with :meth:`from_arrays`, which coerces every matrix to the
    configured dtype and checks that their shapes agree.

    Attributes:
        F: Per-unit-time state transition matrix of shape ``(n, n)``.
            Scaled by ``dt`` at each prediction.
        H: Measurement matrix of shape ``(m, n)``.
        Q: Process noise covariance of shape ``(n, n)``.
        B: Control input matrix of shape ``(n, k)``.
    """

    F: Array
    H: Array
    Q: Array
    B: Array

    @staticmethod
    def from_arrays(
        F: ArrayLike,
        H: ArrayLike,
        Q: ArrayLike,
        B: ArrayLike | None = None,
    ) -> LinearModel:
        """Build a model from array-likes, validating dimensions.

        The state dimension ``n`` is taken from ``F``, the measurement
        dimension ``m`` from the rows of ``H``, and the control dimension
        ``k`` from the columns of ``B``.  When ``B`` is omitted it
        defaults to an ``(n, 1)`` zero matrix, so any control vector is
        ignored.

        Args:
            F: Transition matrix ``(n, n)``.
            H: Measurement matrix ``(m, n)``.
            Q: Process noise covariance ``(n, n)``.
            B: Optional control input matrix ``(n, k)``.

        Returns:
            LinearModel: Validated model.

        Raises:
            ValueError: If any matrix is not 2-D or its shape is
                inconsistent with the others.

        Examples:
            ```python
            from kalmanjax.estimation import LinearModel
            model = LinearModel.from_arrays(
                F=[[1.0, 1.0], [0.0, 1.0]],
                H=[[1.0, 0.0]],
                Q=[[0.1, 0.0], [0.0, 0.1]],
            )
            model.dimensions
            ```
        """
        F = _as_matrix("Transition model", F)
        n = F.shape[0]
        if F.shape != (n, n):
            raise ValueError(f"Transition model must be square, got shape {F.shape}")

        H = _as_matrix("Measurement model", H)
        if H.shape[1] != n:
            raise ValueError(
                f"Measurement model must have {n} columns to match the state "
                f"dimension, got shape {H.shape}"
            )
        if H.shape[0] < 1:
            raise ValueError(
                f"Measurement model must have at least one row, got shape {H.shape}"
            )

        Q =_as_array("Process noise", Q, (n, n))

        if B is None:
            B = jnp.zeros((n, 1), dtype=get_dtype())
        else:
            B = _as_matrix("Control input model", B)
            if B.shape[0] != n:
                raise ValueError(
                    f"Control input model must have {n} rows to match the state "
                    f"dimension, got shape {B.shape}"
                )

        return LinearModel(F=F, H=H, Q=Q, B=B)

    @property
    def dimensions(self) -> FilterDimensions:
        """Sizes ``(n, m, k)`` implied by the model matrices."""
        return FilterDimensions(n=self.F.shape[0], m=self.H.shape[0], k=self.B.shape[1])

    def check_state(self, filter_state: FilterState) -> FilterState:
        """Coerce *filter_state* to this model's state dimension.

        Raises:
            ValueError: If ``x`` is not ``(n,)`` or ``P`` is not ``(n, n)``.
        """
        n = self.F.shape[0]
        return FilterState(
            x=_as_array("State", filter_state.x, (n,)),
            P=_as_array("Covariance", filter_state.P, (n, n)),
        )

    def check_observation(self, observation: Observation) -> Observation:
        """Coerce *observation* to this model's measurement dimension.

        Raises:
            ValueError: If ``z`` is not ``(m,)`` or ``R`` is not ``(m, m)``.
        """
        m = self.H.shape[0]
        z, R = observation
        return Observation(
            z=_as_array("Measurement", z, (m,)),
            R=_as_array("Measurement noise", R, (m, m)),
        )

    def check_control(self, u: ArrayLike | None) -> Array:
        """Coerce *u* to this model's control dimension, zeros when ``None``.

        Raises:
            ValueError: If ``u`` is not ``(k,)``.
        """
        k = self.B.shape[1]
        if u is None:
            return jnp.zeros(k, dtype=get_dtype())
        return _as_array("Control input", u, (k,))


class FilterResult(NamedTuple):
    """Result of a filter measurement update step.

    Returned by ``kf_update``. Contains the updated filter state along
    with diagnostic quantities useful for filter tuning and health
    monitoring.

    Attributes:
        state: Updated :class:`FilterState` after incorporating the
            measurement.
        innovation: Measurement residual ``z - H x`` of shape ``(m,)``.
            Should be zero-mean and consistent with ``innovation_covariance``
            for a healthy filter.
        innovation_covariance: Innovation covariance ``S`` of shape
            ``(m, m)``. The normalized innovation squared
            ``innovation.T @ S^{-1} @ innovation`` should follow a
            chi-squared distribution with ``m`` degrees of freedom.
        kalman_gain: Kalman gain matrix ``K`` of shape ``(n, m)``.
    """

    state: FilterState
    innovation: Array
    innovation_covariance: Array
    kalman_gain: Array
