"""Numerical core: complex arithmetic, polynomials and fractal iteration."""
