"""
Random polynomials over Z_order used for Shamir style sharing.

The constant term is the secret being shared, every other coefficient is uniformly random,
so any `threshold` evaluations determine the polynomial and fewer reveal nothing about the secret.
"""

from collections import namedtuple
from typing import List

from .curve import order, random_scalar

# coeff[0] is the secret. len(coeff) == threshold.
PrimaryPolynomial = namedtuple("PrimaryPolynomial", ["coeff", "threshold"])

# index is the recipient node's index, value is the polynomial evaluated there.
PrimaryShare = namedtuple("PrimaryShare", ["index", "value"])


def generate_zero_polynomial(secret: int, threshold: int) -> PrimaryPolynomial:
    if threshold <= 0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    coeff = [secret % order] + [random_scalar() for _ in range(threshold - 1)]
    return PrimaryPolynomial(coeff=tuple(coeff), threshold=threshold)


def evaluate(polynomial: PrimaryPolynomial, index: int) -> int:
    """
    Horner's rule. For y = ax^2 + bx + c the coefficients are stored as [c, b, a]:
        y = a
        y = a*x + b
        y = (a*x + b)*x + c
    """
    index %= order
    y = 0
    for c in reversed(polynomial.coeff):
        y = (y * index + c) % order
    return y


def get_shares(polynomial: PrimaryPolynomial, nodes) -> List[PrimaryShare]:
    return [PrimaryShare(index=node.index, value=evaluate(polynomial, node.index)) for node in nodes]
