"""
Polynomials with complex coefficients.

Coefficients are stored in ascending order of degree, so index i holds the
coefficient of z^i and the constant term comes first.
"""

import logging
from typing import Iterable, Tuple, Union

from .complex_numbers import ComplexNumber, ZERO
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ComplexPolynomial:
    """Immutable polynomial over ComplexNumber coefficients."""
    
    def __init__(self, coefficients: Iterable[Union[ComplexNumber, int, float]]):
        """
        Initialize polynomial.
        
        Args:
            coefficients: Coefficients in ascending degree order; real values
                become complex numbers with a zero imaginary part
        """
        self._coefficients: Tuple[ComplexNumber, ...] = tuple(
            c if isinstance(c, ComplexNumber) else ComplexNumber(c, 0.0)
            for c in coefficients
        )
        
        if not self._coefficients:
            raise ConfigurationError("Polynomial must have at least one coefficient")
        
        if not all(c.is_finite() for c in self._coefficients):
            raise ConfigurationError("Polynomial coefficients must be finite")
    
    @property
    def coefficients(self) -> Tuple[ComplexNumber, ...]:
        """Coefficients in ascending degree order."""
        return self._coefficients
    
    def degree(self) -> int:
        """Number of coefficients minus one."""
        return len(self._coefficients) - 1
    
    def evaluate(self, z: ComplexNumber) -> ComplexNumber:
        """
        Evaluate the polynomial at z.
        
        Computes the sum of coefficient[i] * z^i directly. Terms whose
        coefficient is exactly zero are skipped.
        
        Args:
            z: Point to evaluate at
            
        Returns:
            Polynomial value at z
        """
        result = ZERO
        for power, coefficient in enumerate(self._coefficients):
            if coefficient.is_zero():
                continue
            result = result.add(z.pow(power).mul(coefficient))
        return result
    
    __call__ = evaluate
    
    def derive(self) -> 'ComplexPolynomial':
        """
        Return the derivative as a new polynomial.
        
        The derivative of a constant is the zero polynomial.
        """
        if len(self._coefficients) == 1:
            return ComplexPolynomial([ZERO])
        return ComplexPolynomial(
            self._coefficients[i + 1].mul(i + 1)
            for i in range(len(self._coefficients) - 1)
        )
    
    def __len__(self) -> int:
        return len(self._coefficients)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, ComplexPolynomial):
            return NotImplemented
        return self._coefficients == other._coefficients
    
    def __hash__(self) -> int:
        return hash(self._coefficients)
    
    def __repr__(self) -> str:
        terms = ', '.join(str(c) for c in self._coefficients)
        return f"ComplexPolynomial([{terms}])"
