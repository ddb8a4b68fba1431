"""
Fractal type definitions and parameter management.

Each fractal family is a tagged variant: a FractalKind plus an immutable
parameter object. A single FractalFunction value carries the kind, its
parameters and the starting value z0, and dispatches to the update and
bailout rules registered for its kind. Instances hold no per-point state and
can be shared freely across threads and processes.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

from .complex_numbers import ComplexNumber, ZERO
from .math_functions import beyond_radius, escape_time
from .polynomial import ComplexPolynomial
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class FractalKind(Enum):
    """Closed set of supported fractal families."""
    
    MULTIBROT = 'multibrot'
    INTEGERBROT = 'integerbrot'
    JULIA = 'julia'
    POLYNOMIAL = 'polynomial'
    NEWTON = 'newton'


def _require_finite(name: str, *values: float) -> None:
    if not all(isinstance(v, (int, float)) and math.isfinite(v) for v in values):
        raise ConfigurationError(f"{name} must be finite and numeric")


@dataclass(frozen=True)
class FractalParameters(ABC):
    """Base class for fractal parameters with validation."""
    
    def validate(self) -> None:
        """Validate parameter values."""
        pass
    
    @property
    @abstractmethod
    def bailout_radius(self) -> float:
        """Modulus beyond which an orbit counts as escaped."""
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a JSON-friendly dictionary."""
        return {}


@dataclass(frozen=True)
class MultibrotParameters(FractalParameters):
    """Parameters for the power map z^w + c with a complex exponent w."""
    
    exponent: ComplexNumber = ComplexNumber(2.0, 0.0)
    
    def validate(self) -> None:
        """Validate Multibrot parameters."""
        if not isinstance(self.exponent, ComplexNumber):
            raise ConfigurationError("exponent must be a ComplexNumber")
        _require_finite("exponent", self.exponent.real, self.exponent.imag)
        if self.exponent.is_zero():
            raise ConfigurationError("exponent cannot be zero")
    
    @property
    def bailout_radius(self) -> float:
        return self.exponent.abs()
    
    def to_dict(self) -> Dict[str, Any]:
        return {'exponent_real': self.exponent.real, 'exponent_imag': self.exponent.imag}


@dataclass(frozen=True)
class IntegerbrotParameters(FractalParameters):
    """Parameters for the power map z^n + c with an integer exponent n."""
    
    exponent: int = 2
    
    def validate(self) -> None:
        """Validate Integerbrot parameters."""
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, int):
            raise ConfigurationError("exponent must be an integer")
        if self.exponent == 0:
            raise ConfigurationError("exponent cannot be zero")
    
    @property
    def bailout_radius(self) -> float:
        return float(abs(self.exponent))
    
    def to_dict(self) -> Dict[str, Any]:
        return {'exponent': self.exponent}


@dataclass(frozen=True)
class JuliaParameters(FractalParameters):
    """Parameters for Julia set generation."""
    
    c_real: float = -0.75
    c_imag: float = 0.1
    
    def validate(self) -> None:
        """Validate Julia parameters."""
        _require_finite("c_real", self.c_real)
        _require_finite("c_imag", self.c_imag)
    
    @property
    def c(self) -> ComplexNumber:
        """Get the Julia constant as a complex number."""
        return ComplexNumber(self.c_real, self.c_imag)
    
    @property
    def bailout_radius(self) -> float:
        return 2.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {'c_real': self.c_real, 'c_imag': self.c_imag}


@dataclass(frozen=True)
class PolynomialParameters(FractalParameters):
    """Parameters for iterating a fixed complex polynomial."""
    
    polynomial: ComplexPolynomial = field(
        default_factory=lambda: ComplexPolynomial([-1.0, 0.0, 0.0, 1.0]))
    
    def validate(self) -> None:
        if not isinstance(self.polynomial, ComplexPolynomial):
            raise ConfigurationError("polynomial must be a ComplexPolynomial")
    
    @property
    def bailout_radius(self) -> float:
        return float(self.polynomial.degree())
    
    def to_dict(self) -> Dict[str, Any]:
        return {'coefficients': [[c.real, c.imag] for c in self.polynomial.coefficients]}


@dataclass(frozen=True)
class NewtonParameters(PolynomialParameters):
    """Polynomial parameters plus the derivative used by the Newton step."""
    
    derivative: ComplexPolynomial = field(init=False, repr=False, compare=False)
    
    def __post_init__(self):
        """Precompute the derivative once."""
        if isinstance(self.polynomial, ComplexPolynomial):
            object.__setattr__(self, 'derivative', self.polynomial.derive())
    
    def validate(self) -> None:
        super().validate()
        if self.polynomial.degree() < 1:
            raise ConfigurationError("Newton's method needs a polynomial of degree 1 or more")


# Update rules: (parameters, z, x, y) -> next z

def _power_step(params, z: ComplexNumber, x: float, y: float) -> ComplexNumber:
    return z.pow(params.exponent).add(ComplexNumber(x, y))


def _julia_step(params: JuliaParameters, z: ComplexNumber, x: float, y: float) -> ComplexNumber:
    return z.mul(z).add(params.c)


def _polynomial_step(params: PolynomialParameters, z: ComplexNumber,
                     x: float, y: float) -> ComplexNumber:
    return params.polynomial.evaluate(z)


def _newton_step(params: NewtonParameters, z: ComplexNumber, x: float, y: float) -> ComplexNumber:
    value = _polynomial_step(params, z, x, y)
    return value.div(params.derivative.evaluate(z)).add(z)


def _radius_bailout(params: FractalParameters, z: ComplexNumber, x: float, y: float) -> bool:
    return beyond_radius(z, params.bailout_radius)


@dataclass(frozen=True)
class _Rules:
    parameter_type: type
    update: Callable
    bailout: Callable
    pixel_seeded: bool
    description: str


_RULES: Dict[FractalKind, _Rules] = {
    FractalKind.MULTIBROT: _Rules(
        MultibrotParameters, _power_step, _radius_bailout, False,
        "Multibrot: z_{n+1} = z_n^w + c, bailout |z| >= |w|"),
    FractalKind.INTEGERBROT: _Rules(
        IntegerbrotParameters, _power_step, _radius_bailout, False,
        "Integerbrot: z_{n+1} = z_n^n + c, bailout |z| >= |n|"),
    FractalKind.JULIA: _Rules(
        JuliaParameters, _julia_step, _radius_bailout, True,
        "Julia set: z_{n+1} = z_n^2 + c for a fixed c, bailout |z| >= 2"),
    FractalKind.POLYNOMIAL: _Rules(
        PolynomialParameters, _polynomial_step, _radius_bailout, True,
        "Polynomial: z_{n+1} = p(z_n), bailout |z| >= deg p"),
    FractalKind.NEWTON: _Rules(
        NewtonParameters, _newton_step, _radius_bailout, True,
        "Newton: z_{n+1} = p(z_n) / p'(z_n) + z_n, bailout |z| >= deg p"),
}


@dataclass(frozen=True)
class FractalFunction:
    """
    Immutable fractal configuration.
    
    Attributes:
        kind: Fractal family
        parameters: Family-specific parameters
        z0: Starting value of every orbit unless iterate() is given one
    """
    
    kind: FractalKind
    parameters: FractalParameters
    z0: ComplexNumber = ZERO
    
    def __post_init__(self):
        """Validate the variant and its parameters."""
        if not isinstance(self.kind, FractalKind):
            raise ConfigurationError(f"Unknown fractal kind: {self.kind!r}")
        
        expected = _RULES[self.kind].parameter_type
        if type(self.parameters) is not expected:
            raise ConfigurationError(
                f"{self.kind.value} fractal needs {expected.__name__}, "
                f"got {type(self.parameters).__name__}")
        self.parameters.validate()
        
        if not isinstance(self.z0, ComplexNumber) or not self.z0.is_finite():
            raise ConfigurationError("z0 must be a finite ComplexNumber")
        
        logger.debug(f"Created {self.kind.value} fractal: {self.parameters}")
    
    # Construction helpers
    
    @classmethod
    def multibrot(cls, exponent: Union[ComplexNumber, complex, float]) -> 'FractalFunction':
        """Power map with a general complex exponent."""
        if not isinstance(exponent, ComplexNumber):
            exponent = ComplexNumber.from_complex(exponent)
        return cls(FractalKind.MULTIBROT, MultibrotParameters(exponent))
    
    @classmethod
    def integerbrot(cls, exponent: int) -> 'FractalFunction':
        """Power map with an integer exponent."""
        return cls(FractalKind.INTEGERBROT, IntegerbrotParameters(exponent))
    
    @classmethod
    def mandelbrot(cls) -> 'FractalFunction':
        """The classic z^2 + c."""
        return cls.integerbrot(2)
    
    @classmethod
    def julia(cls, c_real: float, c_imag: float) -> 'FractalFunction':
        return cls(FractalKind.JULIA, JuliaParameters(c_real, c_imag))
    
    @classmethod
    def polynomial(cls, polynomial: Union[ComplexPolynomial, Sequence]) -> 'FractalFunction':
        if not isinstance(polynomial, ComplexPolynomial):
            polynomial = ComplexPolynomial(polynomial)
        return cls(FractalKind.POLYNOMIAL, PolynomialParameters(polynomial))
    
    @classmethod
    def newton(cls, polynomial: Union[ComplexPolynomial, Sequence]) -> 'FractalFunction':
        if not isinstance(polynomial, ComplexPolynomial):
            polynomial = ComplexPolynomial(polynomial)
        return cls(FractalKind.NEWTON, NewtonParameters(polynomial))
    
    def with_z0(self, z0: ComplexNumber) -> 'FractalFunction':
        """Return a copy of this configuration with a different starting value."""
        return replace(self, z0=z0)
    
    # Iteration contract
    
    @property
    def name(self) -> str:
        return self.kind.value
    
    @property
    def pixel_seeded(self) -> bool:
        """Whether a render pass should start each orbit at the pixel position."""
        return _RULES[self.kind].pixel_seeded
    
    def func(self, z: ComplexNumber, x: float, y: float) -> ComplexNumber:
        """Apply one step of this fractal's update rule."""
        return _RULES[self.kind].update(self.parameters, z, x, y)
    
    def bailout(self, z: ComplexNumber, x: float, y: float) -> bool:
        """Check this fractal's divergence condition."""
        return _RULES[self.kind].bailout(self.parameters, z, x, y)
    
    def iterate(self, x: float, y: float, max_iterations: int,
                start: Optional[ComplexNumber] = None) -> int:
        """
        Iterate the point (x, y) until bailout or until the budget runs out.
        
        Args:
            x, y: Plane coordinates of the point
            max_iterations: Iteration budget
            start: Starting value for this call only; defaults to z0
            
        Returns:
            Step at which the orbit escaped, or -1 if it stayed bounded
        """
        z = self.z0 if start is None else start
        return escape_time(self.func, self.bailout, z, x, y, max_iterations)
    
    def get_description(self) -> str:
        return _RULES[self.kind].description
    
    def to_dict(self) -> Dict[str, Any]:
        """Serializable description of this configuration."""
        return {
            'fractal': self.kind.value,
            'z0_real': self.z0.real,
            'z0_imag': self.z0.imag,
            **self.parameters.to_dict(),
        }


def _parse_coefficients(raw: Iterable) -> ComplexPolynomial:
    """Accept numbers, builtin complex values or [real, imag] pairs."""
    coefficients = []
    for item in raw:
        if isinstance(item, ComplexNumber):
            coefficients.append(item)
        elif isinstance(item, complex):
            coefficients.append(ComplexNumber.from_complex(item))
        elif isinstance(item, (list, tuple)):
            if len(item) != 2:
                raise ConfigurationError(f"Invalid coefficient: {item!r}")
            coefficients.append(ComplexNumber(item[0], item[1]))
        elif isinstance(item, (int, float)):
            coefficients.append(ComplexNumber(item, 0.0))
        else:
            raise ConfigurationError(f"Invalid coefficient: {item!r}")
    return ComplexPolynomial(coefficients)


class FractalRegistry:
    """Registry of named fractal configurations."""
    
    _factories: Dict[str, Callable[..., FractalFunction]] = {
        'mandelbrot': lambda: FractalFunction.mandelbrot(),
        'integerbrot': lambda exponent=2: FractalFunction.integerbrot(exponent),
        'multibrot': lambda exponent_real=2.0, exponent_imag=0.0: FractalFunction.multibrot(
            ComplexNumber(exponent_real, exponent_imag)),
        'julia': lambda c_real=-0.75, c_imag=0.1: FractalFunction.julia(c_real, c_imag),
        'polynomial': lambda coefficients=(-1.0, 0.0, 0.0, 1.0): FractalFunction.polynomial(
            _parse_coefficients(coefficients)),
        'newton': lambda coefficients=(-1.0, 0.0, 0.0, 1.0): FractalFunction.newton(
            _parse_coefficients(coefficients)),
    }
    
    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Get a dictionary of available fractals and their descriptions."""
        return {name: factory().get_description() for name, factory in cls._factories.items()}
    
    @classmethod
    def create_fractal(cls, name: str, **kwargs) -> FractalFunction:
        """
        Create a fractal configuration by name.
        
        Args:
            name: Fractal identifier
            **kwargs: Family parameters plus optional z0_real / z0_imag
            
        Returns:
            Configured fractal
        """
        factory = cls._factories.get(name.lower())
        if factory is None:
            available = ', '.join(cls._factories.keys())
            raise ConfigurationError(f"Unknown fractal type '{name}'. Available: {available}")
        
        z0_real = kwargs.pop('z0_real', 0.0)
        z0_imag = kwargs.pop('z0_imag', 0.0)
        _require_finite("z0", z0_real, z0_imag)
        
        try:
            fractal = factory(**kwargs)
        except TypeError as e:
            raise ConfigurationError(f"Invalid parameters for {name}: {e}") from e
        
        if z0_real or z0_imag:
            fractal = fractal.with_z0(ComplexNumber(z0_real, z0_imag))
        return fractal


# Predefined interesting Julia set constants
JULIA_PRESETS: Dict[str, Tuple[float, float]] = {
    'dragon': (-0.75, 0.1),
    'spiral': (-0.4, 0.6),
    'dendrite': (-0.235125, 0.827215),
    'lightning': (-0.8, 0.156),
    'rabbit': (-0.123, 0.745),
    'airplane': (-1.25, 0.0),
    'san_marco': (-0.75, 0.0),
    'siegel_disk': (-0.391, -0.587),
}
