import cmath
import math

import pytest

from fractal_engine.core.complex_numbers import ComplexNumber, ONE, ZERO

SAMPLES = [
    ComplexNumber(3.0, -4.0),
    ComplexNumber(0.5, 0.25),
    ComplexNumber(-1.75, 2.5),
    ComplexNumber(1e-3, -7.0),
    ComplexNumber(-2.0, 0.0),
]


def approx_equal(z, expected, rel=1e-9, abs_tol=1e-12):
    expected = complex(expected)
    return (z.real == pytest.approx(expected.real, rel=rel, abs=abs_tol)
            and z.imag == pytest.approx(expected.imag, rel=rel, abs=abs_tol))


def test_components_are_floats():
    z = ComplexNumber(3, 4)
    assert isinstance(z.real, float)
    assert isinstance(z.imag, float)
    assert ComplexNumber(2.5).imag == 0.0


def test_value_is_immutable():
    z = ComplexNumber(1.0, 2.0)
    with pytest.raises(AttributeError):
        z.real = 5.0


def test_operations_do_not_mutate_operands():
    a = ComplexNumber(1.0, 2.0)
    b = ComplexNumber(3.0, -1.0)
    a.add(b)
    a.mul(b)
    a.div(b)
    a.pow(3)
    assert a == ComplexNumber(1.0, 2.0)
    assert b == ComplexNumber(3.0, -1.0)


def test_add_and_sub():
    a = ComplexNumber(1.0, 2.0)
    b = ComplexNumber(3.0, 5.0)
    assert a.add(b) == ComplexNumber(4.0, 7.0)
    assert a.sub(b) == ComplexNumber(-2.0, -3.0)
    assert a.add(1.5) == ComplexNumber(2.5, 2.0)
    assert a.sub(1.0) == ComplexNumber(0.0, 2.0)


def test_sub_subtracts_imaginary_part():
    z = ComplexNumber(2.0, 3.0)
    assert z.sub(z).is_zero()


def test_mul():
    a = ComplexNumber(1.0, 2.0)
    b = ComplexNumber(3.0, 4.0)
    assert a.mul(b) == ComplexNumber(-5.0, 10.0)
    assert a.mul(2.0) == ComplexNumber(2.0, 4.0)


def test_div():
    a = ComplexNumber(-5.0, 10.0)
    b = ComplexNumber(3.0, 4.0)
    assert approx_equal(a.div(b), complex(1.0, 2.0))
    assert a.div(5.0) == ComplexNumber(-1.0, 2.0)


@pytest.mark.parametrize("z", SAMPLES)
def test_arithmetic_identities(z):
    assert z.add(ZERO) == z
    assert z.mul(ONE) == z
    assert z.conj().conj() == z
    assert z.abs() == z.conj().abs()
    assert approx_equal(z.div(z), 1.0)


@pytest.mark.parametrize("z", SAMPLES)
def test_mul_conjugate_is_squared_modulus(z):
    product = z.mul(z.conj())
    assert product.imag == 0.0
    assert product.real == pytest.approx(z.abs() ** 2)


def test_exact_self_division():
    z = ComplexNumber(3.0, -4.0)
    assert z.div(z) == ONE


def test_division_by_zero_propagates_ieee_values():
    z = ComplexNumber(1.0, -1.0)
    scaled = z.div(0.0)
    assert scaled.real == math.inf
    assert scaled.imag == -math.inf

    quotient = z.div(ZERO)
    assert math.isnan(quotient.real)
    assert math.isnan(quotient.imag)
    assert not quotient.is_finite()


def test_integer_pow():
    z = ComplexNumber(0.5, -1.5)
    assert z.pow(0) == ONE
    assert z.pow(1) == z
    assert z.pow(2) == z.mul(z)
    assert z.pow(3) == z.mul(z).mul(z)
    assert approx_equal(z.pow(-1).mul(z), 1.0)
    assert approx_equal(z.pow(-2), complex(0.5, -1.5) ** -2)


def test_zero_to_integer_power():
    assert ZERO.pow(0) == ONE
    assert ZERO.pow(3) == ZERO


@pytest.mark.parametrize("base, exponent", [
    (complex(1, 1), complex(2, 0)),
    (complex(0.3, -0.7), complex(0.5, 1.5)),
    (complex(-2, 0.5), complex(-1.25, 0.0)),
    (complex(4, 0), complex(0.5, 0)),
])
def test_complex_pow_matches_principal_branch(base, exponent):
    result = ComplexNumber.from_complex(base).pow(ComplexNumber.from_complex(exponent))
    assert approx_equal(result, base ** exponent)


def test_complex_pow_of_zero():
    assert ZERO.pow(ComplexNumber(2.0, 0.0)) == ZERO
    assert ZERO.pow(ComplexNumber(0.0, 0.0)) == ONE


def test_real_exponent_uses_polar_form():
    result = ComplexNumber(4.0, 0.0).pow(0.5)
    assert approx_equal(result, 2.0)


def test_exp():
    assert approx_equal(ComplexNumber(0.0, math.pi).exp(), -1.0)
    assert approx_equal(ComplexNumber(1.0, 0.0).exp(), math.e)


def test_exp_overflow_does_not_raise():
    assert ComplexNumber(1000.0, 0.0).exp().real == math.inf


@pytest.mark.parametrize("z", SAMPLES)
def test_exp_inverts_ln(z):
    assert approx_equal(z.ln().exp(), z.to_complex())


def test_ln_and_log():
    z = ComplexNumber(-1.0, 1.0)
    assert approx_equal(z.ln(), cmath.log(complex(-1.0, 1.0)))
    assert approx_equal(ComplexNumber(100.0, 0.0).log(10), 2.0)


def test_ln_of_zero_is_negative_infinity():
    assert ZERO.ln().real == -math.inf


def test_abs_is_stable_for_large_components():
    assert ComplexNumber(3e200, 4e200).abs() == pytest.approx(5e200)


def test_arg_range():
    assert ComplexNumber(-1.0, 0.0).arg() == pytest.approx(math.pi)
    assert ComplexNumber(0.0, -1.0).arg() == pytest.approx(-math.pi / 2)
    assert ComplexNumber(1.0, 0.0).arg() == 0.0


def test_is_zero():
    assert ZERO.is_zero()
    assert ComplexNumber(-0.0, 0.0).is_zero()
    assert not ComplexNumber(1e-300, 0.0).is_zero()


def test_equality_is_exact():
    assert ComplexNumber(0.1 + 0.2, 0.0) != ComplexNumber(0.3, 0.0)
    assert ComplexNumber(1.0, 2.0).equals(ComplexNumber(1.0, 2.0))
    nan = ComplexNumber(math.nan, 0.0)
    assert nan != nan


def test_operators():
    a = ComplexNumber(1.0, 2.0)
    b = ComplexNumber(3.0, 4.0)
    assert a + b == a.add(b)
    assert a - b == a.sub(b)
    assert a * b == a.mul(b)
    assert a / b == a.div(b)
    assert a ** 2 == a.pow(2)
    assert 2 * a == a.mul(2)
    assert 1 - a == ComplexNumber(0.0, -2.0)
    assert -a == ComplexNumber(-1.0, -2.0)
    assert abs(b) == 5.0
    assert complex(a) == complex(1.0, 2.0)


def test_copy_and_str():
    z = ComplexNumber(1.5, -2.0)
    assert z.copy() == z
    assert str(z) == "Complex(1.5, -2.0i)"
