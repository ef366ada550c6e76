import numpy as np
import pytest

from wickmesh.pixels import bgra_to_rgba


def test_bytes_swap_red_and_blue():
    assert bgra_to_rgba(b"\x01\x02\x03\x04") == b"\x03\x02\x01\x04"


def test_packed_value():
    out = bgra_to_rgba(np.array([0xAABBCCDD], dtype=np.uint32))
    assert out.tolist() == [0xAADDCCBB]


def test_is_an_involution():
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 2**32, size=100, dtype=np.uint32)
    assert np.array_equal(bgra_to_rgba(bgra_to_rgba(pixels)), pixels)


def test_green_and_alpha_preserved():
    rng = np.random.default_rng(4)
    pixels = rng.integers(0, 2**32, size=50, dtype=np.uint32)
    out = bgra_to_rgba(pixels)
    mask = np.uint32(0xFF00FF00)
    assert np.array_equal(out & mask, pixels & mask)


def test_bytes_match_array_path():
    rng = np.random.default_rng(5)
    pixels = rng.integers(0, 2**32, size=16, dtype=np.uint32).astype("<u4")
    as_bytes = bgra_to_rgba(pixels.tobytes())
    assert as_bytes == bgra_to_rgba(pixels).astype("<u4").tobytes()


def test_shape_preserved():
    pixels = np.arange(12, dtype=np.uint32).reshape(3, 4)
    assert bgra_to_rgba(pixels).shape == (3, 4)


def test_bad_inputs():
    with pytest.raises(ValueError):
        bgra_to_rgba(b"\x00\x01\x02")
    with pytest.raises(TypeError):
        bgra_to_rgba(np.array([1.5, 2.5]))