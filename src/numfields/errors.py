# src/numfields/errors.py
from __future__ import annotations

from typing import Any


class UserInputError(Exception):
    pass


class UnsupportedNumberDomainError(Exception):
    """
    Raised when an operation is asked to work in a ring it does not model
    (higher-degree rings, radicand combinations outside the inference rule).
    No rounding recovery is attempted for this condition.
    """

    def __init__(self, message: str, domain: Any, *numbers: Any):
        super().__init__(message)
        if domain is None:
            raise ValueError("Ring parameter must not be None")
        self.causing_domain = domain
        self.causing_numbers: tuple[Any, ...] = tuple(numbers)


class AlgebraicDegreeOverflowError(ArithmeticError):
    """The result of an operation would leave the quadratic integers (degree 4)."""

    def __init__(self, message: str, max_degree: int, number_a: Any, number_b: Any):
        super().__init__(message)
        self.max_expected_degree = max_degree
        self.causing_numbers = (number_a, number_b)
        self.necessary_degree = number_a.algebraic_degree() * number_b.algebraic_degree()


class NonEuclideanDomainError(ArithmeticError):
    """
    The Euclidean algorithm on |N| is not available for these two numbers,
    usually because their ring is not norm-Euclidean.
    """

    def __init__(self, message: str, number_a: Any, number_b: Any):
        super().__init__(message)
        self.attempted_numbers = (number_a, number_b)
