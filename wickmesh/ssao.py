"""Sample data for screen-space ambient occlusion: hemisphere kernel and rotation noise."""

from __future__ import annotations

import numpy as np


def lerp(a: float, b: float, f: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a + f * (b - a)


def _normalize_rows(v: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(v, axis=1, keepdims=True)
    safe = np.where(norms > 0.0, norms, 1.0)
    return v / safe


def generate_ssao_kernel(kernel_size: int = 64, rng=None) -> np.ndarray:
    """Kernel of ``kernel_size`` sample vectors (x, y, z, 1), growing in length with index.

    ``rng`` is a numpy Generator, a seed, or None for fresh entropy.
    """
    if kernel_size < 0:
        raise ValueError("kernel size must be non-negative")
    gen = np.random.default_rng(rng)
    samples = gen.uniform(-1.0, 1.0, size=(kernel_size, 3))
    samples[:, :2] = samples[:, :2] * 2.0 - 1.0
    samples = _normalize_rows(samples)
    samples *= gen.uniform(0.0, 1.0, size=(kernel_size, 1))

    t = np.arange(kernel_size, dtype=np.float64) / float(kernel_size) if kernel_size else np.zeros(0)
    samples *= lerp(0.1, 10.0, t * t)[:, None]

    kernel = np.ones((kernel_size, 4), dtype=np.float32)
    kernel[:, :3] = samples
    return kernel


def generate_noise_values(tex_size: int, rng=None) -> np.ndarray:
    """``tex_size ** 2`` random unit 2D vectors as half floats, shape (n, 2)."""
    if tex_size < 0:
        raise ValueError("texture size must be non-negative")
    gen = np.random.default_rng(rng)
    count = tex_size * tex_size
    samples = 2.0 * gen.uniform(0.0, 1.0, size=(count, 2)) - 1.0
    return _normalize_rows(samples).astype(np.float16)