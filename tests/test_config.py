"""Tests for the kalmanjax.config module."""

import jax
import jax.numpy as jnp
import pytest

from kalmanjax.config import get_dtype, get_singular_tolerance, set_dtype
from kalmanjax.estimation import FilterState, LinearModel, Observation, kf_predict, kf_update

pytestmark = pytest.mark.order("first")


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float32 before and after each test."""
    set_dtype(jnp.float32)
    yield
    set_dtype(jnp.float32)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float32

    def test_set_float64(self):
        set_dtype(jnp.float64)
        assert get_dtype() == jnp.float64

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestSingularTolerance:
    def test_float32_tolerance(self):
        assert get_singular_tolerance() == pytest.approx(2.0**23)

    def test_float64_tolerance(self):
        set_dtype(jnp.float64)
        assert get_singular_tolerance() == pytest.approx(2.0**52)

    def test_float16_tolerance(self):
        set_dtype(jnp.float16)
        assert get_singular_tolerance() == pytest.approx(2.0**10)

    def test_bfloat16_tolerance(self):
        set_dtype(jnp.bfloat16)
        assert get_singular_tolerance() == pytest.approx(2.0**7)

    def test_tolerance_tightens_with_precision(self):
        tol_32 = get_singular_tolerance()
        set_dtype(jnp.float64)
        assert get_singular_tolerance() > tol_32


class TestDtypeSwitchingOutputs:
    """Verify that output dtypes match the configured dtype."""

    @staticmethod
    def _model():
        return LinearModel.from_arrays(
            F=[[1.0, 1.0], [0.0, 1.0]],
            H=[[1.0, 0.0]],
            Q=[[0.1, 0.0], [0.0, 0.1]],
        )

    def test_initial_state_dtype_float32(self):
        fs = FilterState.initial(3)
        assert fs.x.dtype == jnp.float32
        assert fs.P.dtype == jnp.float32

    def test_model_dtype_float64(self):
        set_dtype(jnp.float64)
        model = self._model()
        assert model.F.dtype == jnp.float64
        assert model.B.dtype == jnp.float64

    def test_predict_dtype_float64(self):
        set_dtype(jnp.float64)
        fs = FilterState.initial(2)
        fs_pred = kf_predict(fs, self._model(), 0.5)
        assert fs_pred.x.dtype == jnp.float64
        assert fs_pred.P.dtype == jnp.float64

    def test_update_dtype_float32(self):
        fs = FilterState.initial(2)
        result = kf_update(fs, self._model(), Observation(z=[1.0], R=[[1.0]]))
        assert result.state.x.dtype == jnp.float32
        assert result.kalman_gain.dtype == jnp.float32
