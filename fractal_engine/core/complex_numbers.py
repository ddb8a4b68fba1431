"""
Complex number arithmetic for escape-time iteration.

This module provides an immutable complex value type over float64
components. Every operation returns a new instance. Domain errors such as
division by zero, the logarithm of zero or an overflowing exponential follow
IEEE-754 semantics and yield infinities or NaNs instead of raising, so the
iteration loop never has to handle exceptions.
"""

import math
import logging
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

Real = Union[int, float]

# Plain Python floats raise on these, numpy float64 follows IEEE-754.
_IEEE = {'divide': 'ignore', 'invalid': 'ignore', 'over': 'ignore'}


def _real_div(numerator: float, denominator: float) -> float:
    with np.errstate(**_IEEE):
        return float(np.float64(numerator) / np.float64(denominator))


@dataclass(frozen=True, eq=False)
class ComplexNumber:
    """
    Complex number with float64 real and imaginary components.

    Equality is an exact component-wise comparison with no tolerance, so two
    results that differ only by rounding compare unequal.
    """
    
    real: float
    imag: float = 0.0
    
    def __post_init__(self):
        """Normalize both components to Python floats."""
        object.__setattr__(self, 'real', float(self.real))
        object.__setattr__(self, 'imag', float(self.imag))
    
    @classmethod
    def from_complex(cls, value: complex) -> 'ComplexNumber':
        """Create a complex number from a builtin complex value."""
        value = complex(value)
        return cls(value.real, value.imag)
    
    def to_complex(self) -> complex:
        """Convert to the builtin complex type."""
        return complex(self.real, self.imag)
    
    def to_tuple(self) -> Tuple[float, float]:
        """Convert to a (real, imag) tuple."""
        return (self.real, self.imag)
    
    # Arithmetic
    
    def add(self, other: Union['ComplexNumber', Real]) -> 'ComplexNumber':
        """
        Add a complex number or a real scalar.
        
        Args:
            other: Complex or real addend
            
        Returns:
            z1 + z2 = (a1 + a2) + (b1 + b2)i
        """
        other = _coerce(other)
        return ComplexNumber(self.real + other.real, self.imag + other.imag)
    
    def sub(self, other: Union['ComplexNumber', Real]) -> 'ComplexNumber':
        """
        Subtract a complex number or a real scalar.
        
        Args:
            other: Complex or real subtrahend
            
        Returns:
            z1 - z2 = (a1 - a2) + (b1 - b2)i
        """
        other = _coerce(other)
        return ComplexNumber(self.real - other.real, self.imag - other.imag)
    
    def mul(self, other: Union['ComplexNumber', Real]) -> 'ComplexNumber':
        """
        Multiply by a complex number or scale by a real factor.
        
        Args:
            other: Complex or real multiplier
            
        Returns:
            (a1*a2 - b1*b2) + (a1*b2 + a2*b1)i for a complex multiplier,
            component-wise scaling for a real one
        """
        if isinstance(other, ComplexNumber):
            return ComplexNumber(
                self.real * other.real - self.imag * other.imag,
                self.real * other.imag + self.imag * other.real
            )
        return ComplexNumber(self.real * other, self.imag * other)
    
    def div(self, other: Union['ComplexNumber', Real]) -> 'ComplexNumber':
        """
        Divide by a complex number or a real scalar.
        
        Complex division is z1 * conj(z2) scaled by 1 / (a2^2 + b2^2).
        Division by an exact zero produces infinities or NaNs.
        
        Args:
            other: Complex or real divisor
            
        Returns:
            The quotient
        """
        if isinstance(other, ComplexNumber):
            numerator = self.mul(other.conj())
            return numerator.div(other.real * other.real + other.imag * other.imag)
        return ComplexNumber(_real_div(self.real, other), _real_div(self.imag, other))
    
    def pow(self, other: Union['ComplexNumber', Real]) -> 'ComplexNumber':
        """
        Raise to an integer or complex power.
        
        Integer exponents use repeated multiplication, by the multiplicative
        inverse when negative. Any other exponent uses the polar form
        exp(w * ln|z|) * exp(i * w * arg(z)).
        
        Args:
            other: Integer, real or complex exponent
            
        Returns:
            The power
        """
        if isinstance(other, (int, np.integer)):
            return self._int_pow(int(other))
        return self._complex_pow(_coerce(other))
    
    def _int_pow(self, exponent: int) -> 'ComplexNumber':
        if exponent >= 0:
            factor = self
        else:
            conjugate = self.conj()
            factor = conjugate.div(self.mul(conjugate))
        
        result = ONE
        for _ in range(abs(exponent)):
            result = result.mul(factor)
        return result
    
    def _complex_pow(self, exponent: 'ComplexNumber') -> 'ComplexNumber':
        if self.is_zero():
            # The polar form is undefined at the origin (ln 0 = -inf)
            if exponent.is_zero():
                return ONE
            if exponent.real > 0:
                return ZERO
        
        with np.errstate(**_IEEE):
            log_modulus = float(np.log(np.float64(self.real * self.real + self.imag * self.imag))) / 2
        magnitude = exponent.mul(log_modulus).exp()
        rotation = I.mul(exponent).mul(self.arg()).exp()
        return magnitude.mul(rotation)
    
    def exp(self) -> 'ComplexNumber':
        """Return e^z = e^a * (cos(b) + i*sin(b))."""
        with np.errstate(**_IEEE):
            modulus = np.exp(np.float64(self.real))
            angle = np.float64(self.imag)
            return ComplexNumber(
                float(modulus * np.cos(angle)),
                float(modulus * np.sin(angle))
            )
    
    def ln(self) -> 'ComplexNumber':
        """Return the principal natural logarithm ln|z| + i*arg(z)."""
        with np.errstate(**_IEEE):
            log_abs = float(np.log(np.float64(self.abs())))
        return ComplexNumber(log_abs, self.arg())
    
    def log(self, base: Real) -> 'ComplexNumber':
        """Return the logarithm to an arbitrary real base."""
        with np.errstate(**_IEEE):
            log_base = float(np.log(np.float64(base)))
        return self.ln().div(log_base)
    
    def abs(self) -> float:
        """Return the modulus |z| = sqrt(a^2 + b^2)."""
        return math.hypot(self.real, self.imag)
    
    def conj(self) -> 'ComplexNumber':
        """Return the complex conjugate a - bi."""
        return ComplexNumber(self.real, -self.imag)
    
    def arg(self) -> float:
        """Return the argument atan2(b, a) in (-pi, pi]."""
        return math.atan2(self.imag, self.real)
    
    def is_zero(self) -> bool:
        """Check whether both components are exactly zero."""
        return self.real == 0 and self.imag == 0
    
    def is_finite(self) -> bool:
        """Check whether both components are finite."""
        return math.isfinite(self.real) and math.isfinite(self.imag)
    
    def equals(self, other: 'ComplexNumber') -> bool:
        """Exact component-wise equality."""
        return self.real == other.real and self.imag == other.imag
    
    def copy(self) -> 'ComplexNumber':
        return ComplexNumber(self.real, self.imag)
    
    # Python protocol
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, ComplexNumber):
            return NotImplemented
        return self.equals(other)
    
    def __hash__(self) -> int:
        return hash((self.real, self.imag))
    
    def __add__(self, other):
        if not isinstance(other, (ComplexNumber, int, float)):
            return NotImplemented
        return self.add(other)
    
    __radd__ = __add__
    
    def __sub__(self, other):
        if not isinstance(other, (ComplexNumber, int, float)):
            return NotImplemented
        return self.sub(other)
    
    def __rsub__(self, other):
        if not isinstance(other, (int, float)):
            return NotImplemented
        return ComplexNumber(other).sub(self)
    
    def __mul__(self, other):
        if not isinstance(other, (ComplexNumber, int, float)):
            return NotImplemented
        return self.mul(other)
    
    __rmul__ = __mul__
    
    def __truediv__(self, other):
        if not isinstance(other, (ComplexNumber, int, float)):
            return NotImplemented
        return self.div(other)
    
    def __rtruediv__(self, other):
        if not isinstance(other, (int, float)):
            return NotImplemented
        return ComplexNumber(other).div(self)
    
    def __pow__(self, other):
        if not isinstance(other, (ComplexNumber, int, float)):
            return NotImplemented
        return self.pow(other)
    
    def __neg__(self) -> 'ComplexNumber':
        return ComplexNumber(-self.real, -self.imag)
    
    def __abs__(self) -> float:
        return self.abs()
    
    def __complex__(self) -> complex:
        return self.to_complex()
    
    def __str__(self) -> str:
        return f"Complex({self.real}, {self.imag}i)"


def _coerce(value: Union[ComplexNumber, Real]) -> ComplexNumber:
    """Promote a real scalar to a complex number with zero imaginary part."""
    if isinstance(value, ComplexNumber):
        return value
    return ComplexNumber(value, 0.0)


ZERO = ComplexNumber(0.0, 0.0)
ONE = ComplexNumber(1.0, 0.0)
I = ComplexNumber(0.0, 1.0)
