"""
Feldman and Pedersen commitments to polynomial coefficients.

commit:      C_i = G * [a_i]
commit_alt:  C'_i = H * [b_i]
combine:     C_i + C'_i = G * [a_i] + H * [b_i]   (Pedersen)

Refer to Gennaro, Jarecki, Krawczyk, Rabin - Secure Distributed Key Generation
for Discrete-Log Based Cryptosystems (2006), section 4.
"""

from typing import List

from .curve import H, Point, ec_add, ec_scalar_mul, generator
from .polynomial import PrimaryPolynomial


def _commit_with_base(base: Point, polynomial: PrimaryPolynomial) -> List[Point]:
    return [ec_scalar_mul(base, c) for c in polynomial.coeff]


def commit(polynomial: PrimaryPolynomial) -> List[Point]:
    return _commit_with_base(generator, polynomial)


def commit_alt(polynomial: PrimaryPolynomial) -> List[Point]:
    return _commit_with_base(H, polynomial)


def combine(commit_a: List[Point], commit_b: List[Point]) -> List[Point]:
    if len(commit_a) != len(commit_b):
        raise ValueError(f"commitment lengths differ: {len(commit_a)} != {len(commit_b)}")
    return [ec_add(x, y) for x, y in zip(commit_a, commit_b)]
