import numpy as np
import pytest

from mhn_globe.charsets import (
    BLANK,
    PALETTES,
    Charset,
    densities_to_chars,
    density_to_char,
    heaviest_glyph,
    next_charset,
)

ALL_CHARSETS = list(Charset)


def weight_rank(charset, glyph):
    """0 for blank, increasing with visual weight."""
    ascending = [BLANK] + [g for _, g in reversed(PALETTES[charset])]
    return ascending.index(glyph)


@pytest.mark.parametrize("charset", ALL_CHARSETS)
def test_palette_size(charset):
    # 8-11 weight levels including blank
    assert 8 <= len(PALETTES[charset]) + 1 <= 11


@pytest.mark.parametrize("charset", ALL_CHARSETS)
def test_thresholds_strictly_decreasing(charset):
    thresholds = [t for t, _ in PALETTES[charset]]
    assert thresholds == sorted(thresholds, reverse=True)
    assert len(set(thresholds)) == len(thresholds)


@pytest.mark.parametrize("charset", ALL_CHARSETS)
@pytest.mark.parametrize("density", [1.0001, 1.4, 2.0, 50.0])
def test_over_one_is_heaviest(charset, density):
    assert density_to_char(density, charset) == heaviest_glyph(charset)


@pytest.mark.parametrize("charset", ALL_CHARSETS)
def test_monotonic(charset):
    previous = -1
    for density in np.linspace(0.0, 1.5, 3001):
        rank = weight_rank(charset, density_to_char(float(density), charset))
        assert rank >= previous
        previous = rank


@pytest.mark.parametrize("charset", ALL_CHARSETS)
def test_zero_is_blank(charset):
    assert density_to_char(0.0, charset) == BLANK


def test_thresholds_are_strict():
    assert density_to_char(0.8, Charset.ASCII) == "%"
    assert density_to_char(0.80001, Charset.ASCII) == "#"
    assert density_to_char(1.0, Charset.ASCII) == "#"
    assert density_to_char(0.05, Charset.ASCII) == BLANK
    assert density_to_char(0.125, Charset.BLOCKS) == BLANK
    assert density_to_char(0.13, Charset.BLOCKS) == "▁"


@pytest.mark.parametrize("charset", ALL_CHARSETS)
def test_vectorized_matches_scalar(charset):
    values = np.array([0.0, 0.05, 0.1, 0.12, 0.2, 0.25, 0.45, 0.8, 0.9, 1.0, 1.2])
    chars = densities_to_chars(values.reshape(1, -1), charset)
    assert chars.shape == (1, len(values))
    assert list(chars[0]) == [density_to_char(v, charset) for v in values]


def test_charset_accepts_names():
    assert density_to_char(2.0, "blocks") == "█"
    assert density_to_char(2.0, "braille") == "⣿"


def test_next_charset_cycles():
    assert next_charset(Charset.ASCII) == Charset.BLOCKS
    assert next_charset(Charset.BLOCKS) == Charset.BRAILLE
    assert next_charset(Charset.BRAILLE) == Charset.ASCII
