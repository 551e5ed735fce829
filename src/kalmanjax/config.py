"""Float precision used by the Kalman filter.

Every array kalmanjax creates or accepts (model matrices, state and
covariance, observations, control vectors) is coerced to a single
package-wide float dtype.  It defaults to ``jnp.float32``; selecting
``jnp.float64`` also switches on JAX's 64-bit mode.

The dtype also sets how ill-conditioned an innovation covariance may be
before an update is rejected, see :func:`get_singular_tolerance`.

Change the dtype before building filters.  A :class:`~kalmanjax.KalmanFilter`
keeps the dtype its arrays were coerced to, and its JIT-compiled kernels
retrace when they see a new input dtype.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Select the float dtype for new filter arrays.

    Affects arrays coerced after the call: models built with
    :meth:`~kalmanjax.LinearModel.from_arrays`, initial states, and the
    observations and control vectors passed to predict/update.

    Args:
        dtype: ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``, or
            ``jnp.float64``. ``jnp.float64`` enables ``jax_enable_x64``.

    Raises:
        ValueError: If *dtype* is not one of the supported float types.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the float dtype filter arrays are coerced to (default ``jnp.float32``)."""
    return _dtype


def get_singular_tolerance() -> float:
    """Return the condition number above which a matrix is treated as singular.

    Applied to the diagonally scaled innovation covariance.  The threshold
    is the reciprocal of the machine epsilon of the configured dtype:

    - ``float16``:  ~1.0e3
    - ``bfloat16``: ~1.3e2
    - ``float32``:  ~8.4e6
    - ``float64``:  ~4.5e15

    Returns:
        float: Maximum acceptable condition number.
    """
    return 1.0 / float(jnp.finfo(_dtype).eps)
