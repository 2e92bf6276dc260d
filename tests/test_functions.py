import math

import pytest

from escapeview.compute import complex_powf
from escapeview.functions import (
    DEFAULT_EXPONENT,
    DEFAULT_JULIA_OFFSET,
    MIN_EXPONENT,
    Julia,
    Mandelbrot,
    function_from_dict,
    function_to_dict,
)


def _smoothed(i, norm_sqr, exp):
    return i - math.log(math.log(norm_sqr) / math.log(8.0)) / math.log(exp)


@pytest.mark.parametrize("limit", [1, 10, 100, 1000])
def test_mandelbrot_origin_never_escapes(limit):
    assert Mandelbrot(exp=2.0).escape(0j, limit) is None


def test_mandelbrot_three_escapes_on_first_iteration():
    # 0^2 + 3 = 3, |3|^2 = 9 > 8
    escape = Mandelbrot(exp=2.0).escape(complex(3.0, 0.0), 100)
    assert escape == pytest.approx(_smoothed(0, 9.0, 2.0))


def test_mandelbrot_smoothing_on_later_iteration():
    # 0 -> 1.5 -> 3.75, |3.75|^2 = 14.0625 escapes on iteration index 1
    escape = Mandelbrot(exp=2.0).escape(complex(1.5, 0.0), 100)
    assert escape == pytest.approx(_smoothed(1, 3.75 ** 2, 2.0))


def test_zero_limit_never_escapes():
    assert Mandelbrot().escape(complex(3.0, 0.0), 0) is None


def test_mandelbrot_interior_period_two():
    assert Mandelbrot().escape(complex(-1.0, 0.0), 500) is None


def test_julia_starts_from_sampled_point():
    julia = Julia(exp=2.0, c_offset=0j)
    assert julia.escape(0j, 100) is None
    # 3^2 + 0 = 9, |9|^2 = 81
    assert julia.escape(complex(3.0, 0.0), 100) == pytest.approx(_smoothed(0, 81.0, 2.0))


def test_julia_defaults():
    julia = Julia()
    assert julia.exp == DEFAULT_EXPONENT
    assert julia.c_offset == DEFAULT_JULIA_OFFSET


def test_complex_powf():
    assert complex_powf(0.0, 0.0, 2.5) == (0.0, 0.0)
    zr, zi = complex_powf(0.0, 1.0, 2.0)
    assert zr == pytest.approx(-1.0)
    assert zi == pytest.approx(0.0, abs=1e-12)
    zr, zi = complex_powf(4.0, 0.0, 0.5 + 1.0)
    assert zr == pytest.approx(8.0)


def test_exponent_accessors_shared_by_both_families():
    for function in (Mandelbrot(), Julia()):
        function.shift_exponent(0.5)
        assert function.exp == pytest.approx(2.5)
        function.set_exponent(3.0)
        assert function.exp == 3.0


@pytest.mark.parametrize("exp, expected", [
    (1.0, 1.001),
    (1.0000001, 1.001),
    (0.9998, 0.999),
    (0.0, MIN_EXPONENT),
    (-2.0, MIN_EXPONENT),
])
def test_exponent_moved_away_from_one(exp, expected):
    assert Mandelbrot(exp=exp).exp == pytest.approx(expected)
    julia = Julia()
    julia.set_exponent(exp)
    assert julia.exp == pytest.approx(expected)


@pytest.mark.parametrize("exp", [0.5, 0.999, 1.001, 1.5])
def test_exponents_outside_the_band_are_kept(exp):
    assert Mandelbrot(exp=exp).exp == exp
    assert function_from_dict({"Mandelbrot": {"exp": exp}}).exp == exp


def test_shifting_steps_over_one():
    function = Mandelbrot(exp=1.002)
    function.shift_exponent(-0.001)
    assert function.exp == pytest.approx(1.001)
    function.shift_exponent(-0.001)
    assert function.exp == pytest.approx(0.999)
    function.shift_exponent(0.001)
    assert function.exp == pytest.approx(1.001)


def test_non_finite_exponent_resets_to_default():
    assert Mandelbrot(exp=float("nan")).exp == DEFAULT_EXPONENT
    assert Julia(exp=float("inf")).exp == DEFAULT_EXPONENT


def test_clamped_exponent_still_evaluates():
    escape = Mandelbrot(exp=1.0).escape(complex(3.0, 0.0), 100)
    assert escape is not None
    assert math.isfinite(escape)


def test_fractional_exponent_evaluates():
    # 0^0.5 + 3 = 3 escapes straight away, ln(0.5) flips the smoothing sign
    escape = Mandelbrot(exp=0.5).escape(complex(3.0, 0.0), 100)
    assert escape == pytest.approx(_smoothed(0, 9.0, 0.5))


@pytest.mark.parametrize("function", [Mandelbrot(exp=2.0), Mandelbrot(exp=7.5), Julia()])
def test_overflowing_orbit_escapes_with_raw_count(function):
    # |z|^2 overflows to inf on the first step
    assert function.escape(complex(1e160, 0.0), 10) == 0.0
    # |1e100j|^2 is still finite, the smoothing term stays finite too
    assert math.isfinite(function.escape(complex(0.0, 1e100), 10))


def test_conversions_keep_exponent():
    julia = Julia.from_mandelbrot(Mandelbrot(exp=3.25), complex(-0.1, 0.65))
    assert julia.exp == 3.25
    assert julia.c_offset == complex(-0.1, 0.65)
    assert Mandelbrot.from_julia(julia) == Mandelbrot(exp=3.25)


def test_families_are_not_equal():
    assert Mandelbrot(exp=2.0) != Julia(exp=2.0)


def test_function_dict_round_trip():
    for function in (Mandelbrot(exp=2.75), Julia(exp=4.0, c_offset=complex(0.285, 0.01))):
        assert function_from_dict(function_to_dict(function)) == function


def test_function_dict_shape():
    assert function_to_dict(Mandelbrot()) == {"Mandelbrot": {"exp": 2.0}}
    assert function_to_dict(Julia(c_offset=complex(0.5, -0.5))) == {
        "Julia": {"exp": 2.0, "c_offset": [0.5, -0.5]}
    }


def test_function_from_dict_rejects_unknown_family():
    with pytest.raises(ValueError):
        function_from_dict({"Newton": {"exp": 3.0}})
    with pytest.raises(ValueError):
        function_from_dict({})
