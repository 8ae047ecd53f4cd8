"""Tests for the pygame frontend helpers that need no display."""

import numpy as np
from chip8vm.frontend import KEY_MAP, square_wave


def test_key_map_covers_keypad():
    assert sorted(KEY_MAP.values()) == list(range(16))


def test_square_wave():
    wave = square_wave(frequency=100, sample_rate=1000, volume=0.5)

    assert wave.dtype == np.int16
    assert wave.shape == (1000,)
    assert set(np.unique(wave)) == {-16383, 16383}
