# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "kalmanjax"]
#
# [tool.uv.sources]
# kalmanjax = { path = ".." }
# ///
"""Track a 1-D constant-velocity target from noisy position fixes.

Simulates a target moving at constant speed, observed once per sensor frame
with Gaussian position noise.  Some frames are delivered twice (same frame
index), which gives a zero time step; the filter rejects those with a
``TransitionError`` and the script skips them.

Requires kalmanjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/track_constant_velocity.py [OPTIONS]

Examples:
    # Default: 50 frames, 10% duplicated
    uv run examples/track_constant_velocity.py

    # Noisier sensor, more frames
    uv run examples/track_constant_velocity.py --frames 200 --noise 2.0
"""

import logging
from typing import Annotated

import jax
import jax.numpy as jnp
import typer

from kalmanjax import KalmanFilter, Observation, TransitionError, set_dtype

set_dtype(jnp.float64)  # Must be before any JIT compilation


def main(
    frames: Annotated[int, typer.Option(help="Number of sensor frames")] = 50,
    velocity: Annotated[float, typer.Option(help="True target velocity per frame")] = 1.5,
    noise: Annotated[float, typer.Option(help="Position noise standard deviation")] = 0.5,
    duplicate_rate: Annotated[
        float, typer.Option(help="Fraction of frames delivered twice")
    ] = 0.1,
    seed: Annotated[int, typer.Option(help="Random seed")] = 0,
    verbose: Annotated[bool, typer.Option(help="Enable debug logging")] = False,
) -> None:
    """Run the filter over a simulated constant-velocity track."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    # Per-frame constant-velocity model: F_dt = F for dt = 1 frame
    kf = KalmanFilter(
        transition_model=[[1.0, 1.0], [0.0, 1.0]],
        measurement_model=[[1.0, 0.0]],
        process_noise=jnp.eye(2) * 1e-3,
    ).with_state(jnp.zeros(2), jnp.eye(2) * 100.0)
    R = jnp.array([[noise**2]])

    key = jax.random.PRNGKey(seed)
    key, dup_key = jax.random.split(key)
    duplicated = jax.random.uniform(dup_key, (frames,)) < duplicate_rate

    schedule = []
    for frame in range(1, frames + 1):
        schedule.append(frame)
        if bool(duplicated[frame - 1]):
            schedule.append(frame)

    last_frame = 0
    n_skipped = 0
    print(f"{'frame':>6} {'truth':>9} {'meas':>9} {'pos':>9} {'vel':>7} {'sigma':>7}")
    for frame in schedule:
        key, sub = jax.random.split(key)
        truth = velocity * frame
        z = jnp.array([truth]) + noise * jax.random.normal(sub, (1,))

        try:
            x, P = kf.step(float(frame - last_frame), Observation(z=z, R=R))
        except TransitionError:
            n_skipped += 1
            continue
        last_frame = frame

        print(
            f"{frame:>6d} {truth:>9.3f} {float(z[0]):>9.3f} "
            f"{float(x[0]):>9.3f} {float(x[1]):>7.3f} {float(jnp.sqrt(P[0, 0])):>7.3f}"
        )

    print(f"\nSkipped {n_skipped} duplicated frames")
    print(f"Final velocity estimate: {float(kf.state[1]):.4f} (truth {velocity})")


if __name__ == "__main__":
    typer.run(main)
