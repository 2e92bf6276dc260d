import math

import numpy as np
import pytest

from escapeview.colorer import (
    COLORERS,
    SineChannel,
    SineRGB,
    get_colorer,
    get_default_colorer,
    list_colorer_names,
    saturate_channel,
)
from escapeview.ematrix import EscapeMatrix
from escapeview.functions import Mandelbrot


@pytest.mark.parametrize("name", list(COLORERS))
def test_none_is_black(name):
    assert get_colorer(name).rgb(None) == (0, 0, 0)


@pytest.mark.parametrize("escape", [-1e9, -55.2, -0.3, 0.0, 0.7, 12.5, 99.99, 1e6, 1e300])
def test_channels_stay_in_range(escape):
    for name in list_colorer_names():
        rgb = get_colorer(name).rgb(escape)
        assert all(0 <= level <= 255 for level in rgb)


@pytest.mark.parametrize("escape", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_escape_is_black(escape):
    colorer = get_default_colorer()
    assert colorer.rgb(escape) == (0, 0, 0)
    img = EscapeMatrix.from_array(np.array([[escape, 3.5]])).to_img(colorer)
    assert tuple(img[0, 0]) == (0, 0, 0)


def test_far_out_point_colors_without_error():
    escape = Mandelbrot().escape(complex(1e160, 0.0), 10)
    assert all(0 <= level <= 255 for level in SineRGB().rgb(escape))


def test_saturate_clamps_instead_of_wrapping():
    assert saturate_channel(-28.0) == 0
    assert saturate_channel(300.0) == 255
    assert saturate_channel(255.0) == 255
    assert saturate_channel(127.9) == 127
    assert saturate_channel(float("nan")) == 0


def test_channel_compute():
    loud = SineChannel(coef=1000.0, freq=0.0, phase=math.pi / 2.0, offset=0.0)
    assert loud.compute(1.0) == 255
    quiet = SineChannel(coef=-1000.0, freq=0.0, phase=math.pi / 2.0, offset=0.0)
    assert quiet.compute(1.0) == 0


def test_default_is_sunset():
    colorer = get_default_colorer()
    assert colorer == SineRGB()
    assert colorer == get_colorer('Sunset')
    # red: 140 * sin(3pi/2) + 112 = -28 -> 0
    assert colorer.rgb(0.0)[0] == 0


def test_sunset_phases_are_sixty_degrees_apart():
    red, green, blue = SineRGB().channels
    assert green.phase - red.phase == pytest.approx(math.pi / 3.0)
    assert blue.phase - green.phase == pytest.approx(math.pi / 3.0)


def test_params_array():
    params = SineRGB().params()
    assert params.shape == (3, 4)
    assert params.dtype == np.float64
    assert params[0, 0] == 140.0
    assert params[0, 3] == 112.0


def test_unknown_colorer():
    with pytest.raises(KeyError):
        get_colorer('Nope')


def test_needs_three_channels():
    with pytest.raises(ValueError):
        SineRGB([SineChannel(1.0, 1.0, 0.0, 0.0)])


def test_dict_round_trip():
    for name in list_colorer_names():
        colorer = get_colorer(name)
        assert SineRGB.from_dict(colorer.to_dict()) == colorer
