import jax.numpy as jnp
import pytest

from kalmanjax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Run every test in float64.

    The worked filter examples compare against exact decimal values, which
    float32 only reproduces to ~1e-7.  test_config.py overrides this with
    its own autouse fixture that resets to float32.
    """
    set_dtype(jnp.float64)
