"""Linear Kalman filter predict and update functions.

Implements the standard discrete-time linear Kalman filter with a
transition model expressed per unit time.  At every prediction the
transition matrix is scaled by the elapsed time ``dt``, so a single model
can be driven by irregular sampling intervals instead of a fixed tick.

Both functions are pure: they take a :class:`FilterState` and return a
new one without touching their inputs.  Preconditions (positive ``dt``,
non-singular innovation covariance, array shapes) are checked eagerly in
Python and reported as exceptions, so the public functions are not meant
to be traced by ``jax.jit``.  The linear-algebra kernels they call are
JIT compiled.
"""

from __future__ import annotations

import logging
import math

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from kalmanjax.config import get_dtype, get_singular_tolerance
from kalmanjax.errors import TransitionError
from kalmanjax.estimation._types import FilterResult, FilterState, LinearModel, Observation

logger = logging.getLogger(__name__)


@jax.jit
def _propagate(
    F: Array, B: Array, Q: Array, x: Array, P: Array, u: Array, dt: Array
) -> tuple[Array, Array]:
    # Transition over the elapsed interval
    F_dt = F * dt

    # Propagate state
    x_pred = F_dt @ x + B @ u

    # Propagate covariance
    P_pred = F_dt @ P @ F_dt.T + Q
    return x_pred, P_pred


@jax.jit
def _innovation(H: Array, x: Array, P: Array, z: Array, R: Array) -> tuple[Array, Array]:
    # Innovation
    y = z - H @ x

    # Innovation covariance
    S = H @ P @ H.T + R
    return y, S


@jax.jit
def _correct(
    H: Array, x: Array, P: Array, y: Array, S: Array
) -> tuple[Array, Array, Array]:
    # Kalman gain: K = P H^T S^{-1}
    # Computed as K^T = S^{-T} (H P^T)
    K = jnp.linalg.solve(S.T, H @ P.T).T

    # State update
    x_upd = x + K @ y

    # Covariance update: P = (I - K H) P
    P_upd = (jnp.eye(x.shape[0], dtype=P.dtype) - K @ H) @ P
    return x_upd, P_upd, K


@jax.jit
def _equilibrate(S: Array) -> Array:
    # Symmetric diagonal scaling D^{-1/2} S D^{-1/2}; rows with a zero
    # diagonal are left unscaled
    d = jnp.abs(jnp.diag(S))
    scale = jnp.where(d > 0.0, 1.0 / jnp.sqrt(jnp.where(d > 0.0, d, 1.0)), 1.0)
    return S * scale[:, None] * scale[None, :]


def is_singular(S: ArrayLike) -> bool:
    """Return whether a square matrix is numerically singular.

    The matrix is first scaled symmetrically by the square roots of its
    diagonal, ``D^{-1/2} S D^{-1/2}``, so that measurements expressed in
    very different units (e.g. metres and radians) do not look
    ill-conditioned.  The scaled matrix is singular when its 2-norm
    condition number is not finite (an exactly singular or non-finite
    matrix) or exceeds :func:`~kalmanjax.config.get_singular_tolerance`
    for the configured dtype.

    Args:
        S: Square matrix of shape ``(m, m)``.

    Returns:
        bool: ``True`` if ``S`` cannot be reliably inverted.

    Examples:
        ```python
        import jax.numpy as jnp
        from kalmanjax.estimation import is_singular
        is_singular(jnp.zeros((2, 2)))
        is_singular(jnp.diag(jnp.array([101.0, 2e-6])))
        ```
    """
    S = jnp.asarray(S, dtype=get_dtype())
    if not bool(jnp.all(jnp.isfinite(S))):
        return True
    cond = float(jnp.linalg.cond(_equilibrate(S)))
    return not math.isfinite(cond) or cond >= get_singular_tolerance()


def kf_predict(
    filter_state: FilterState,
    model: LinearModel,
    dt: float,
    u: ArrayLike | None = None,
) -> FilterState:
    """Propagate the filter state forward by ``dt``.

    Scales the per-unit-time transition matrix by the elapsed time,
    ``F_dt = F * dt``, then computes::

        x_pred = F_dt @ x + B @ u
        P_pred = F_dt @ P @ F_dt.T + Q

    The control input only affects the state estimate, never the
    covariance.

    Args:
        filter_state: Current filter state ``(x, P)``.
        model: Filter model matrices.
        dt: Elapsed time since ``filter_state``. Must be strictly positive.
        u: Control vector of shape ``(k,)``. Defaults to zeros.

    Returns:
        FilterState: Predicted state and covariance ``(x_pred, P_pred)``.

    Raises:
        TransitionError: If ``dt <= 0`` (or is NaN).
        ValueError: If ``filter_state`` or ``u`` do not match the model
            dimensions.

    Examples:
        ```python
        import jax.numpy as jnp
        from kalmanjax.estimation import FilterState, LinearModel, kf_predict

        model = LinearModel.from_arrays(
            F=[[1.0, 1.0], [0.0, 1.0]],
            H=[[1.0, 0.0]],
            Q=jnp.eye(2) * 1e-3,
        )
        fs = FilterState(x=jnp.array([0.0, 1.0]), P=jnp.eye(2))
        fs_pred = kf_predict(fs, model, dt=0.5)
        ```
    """
    dt = float(dt)
    if not dt > 0.0:
        logger.debug("Rejecting prediction with non-positive dt=%s", dt)
        raise TransitionError(f"Time step must be strictly positive, got dt={dt}")

    x, P = model.check_state(filter_state)
    u = model.check_control(u)

    x_pred, P_pred = _propagate(
        model.F, model.B, model.Q, x, P, u, jnp.asarray(dt, dtype=get_dtype())
    )
    return FilterState(x=x_pred, P=P_pred)


def kf_update(
    filter_state: FilterState,
    model: LinearModel,
    observation: Observation,
) -> FilterResult:
    """Incorporate a measurement into the filter state.

    Computes the innovation and its covariance::

        y = z - H @ x
        S = H @ P @ H.T + R

    and, if ``S`` is invertible, the Kalman gain and corrected estimate::

        K = P @ H.T @ inv(S)
        x_upd = x + K @ y
        P_upd = (I - K @ H) @ P

    Args:
        filter_state: Predicted filter state ``(x_pred, P_pred)``,
            typically from ``kf_predict``.
        model: Filter model matrices.
        observation: Measurement ``z`` of shape ``(m,)`` and its noise
            covariance ``R`` of shape ``(m, m)``.

    Returns:
        FilterResult: Updated state, innovation, innovation covariance,
            and Kalman gain.

    Raises:
        TransitionError: If the innovation covariance ``S`` is
            numerically singular (see :func:`is_singular`).
        ValueError: If ``filter_state`` or ``observation`` do not match
            the model dimensions.

    Examples:
        ```python
        import jax.numpy as jnp
        from kalmanjax.estimation import FilterState, LinearModel, Observation, kf_update

        model = LinearModel.from_arrays(
            F=jnp.eye(2), H=[[1.0, 1.0]], Q=jnp.eye(2)
        )
        fs = FilterState(x=jnp.array([1.0, 2.0]), P=jnp.eye(2))
        result = kf_update(fs, model, Observation(z=[2.0], R=[[2.0]]))
        result.state.x
        ```
    """
    x, P = model.check_state(filter_state)
    z, R = model.check_observation(observation)

    y, S = _innovation(model.H, x, P, z, R)
    if is_singular(S):
        logger.debug("Rejecting update with singular innovation covariance")
        raise TransitionError("Innovation covariance is singular")

    x_upd, P_upd, K = _correct(model.H, x, P, y, S)

    return FilterResult(
        state=FilterState(x=x_upd, P=P_upd),
        innovation=y,
        innovation_covariance=S,
        kalman_gain=K,
    )
