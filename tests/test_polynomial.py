"""
Tests
"""

import random

import pytest

from dkgnode.curve import order
from dkgnode.polynomial import PrimaryPolynomial, evaluate, generate_zero_polynomial, get_shares
from dkgnode.pvss import Node


@pytest.mark.parametrize("threshold", [1, 2, 5, 13])
def test_constant_term_is_secret(threshold):
    secret = random.randint(0, order - 1)
    poly = generate_zero_polynomial(secret, threshold)
    assert len(poly.coeff) == threshold
    assert poly.threshold == threshold
    assert evaluate(poly, 0) == secret


def test_secret_reduced_mod_order():
    poly = generate_zero_polynomial(order + 5, 3)
    assert evaluate(poly, 0) == 5


def test_bad_threshold():
    with pytest.raises(ValueError):
        generate_zero_polynomial(1, 0)
    with pytest.raises(ValueError):
        generate_zero_polynomial(1, -2)


def test_evaluate_matches_naive_sum():
    poly = generate_zero_polynomial(random.randint(0, order - 1), 6)
    for index in [1, 2, 7, random.randint(1, order - 1)]:
        naive = sum(c * pow(index, i, order) for i, c in enumerate(poly.coeff)) % order
        assert evaluate(poly, index) == naive


def test_small_known_polynomial():
    # y = 3x^2 + 2x + 1
    poly = PrimaryPolynomial(coeff=(1, 2, 3), threshold=3)
    assert evaluate(poly, 2) == 17


def test_independent_draws():
    a = generate_zero_polynomial(7, 4)
    b = generate_zero_polynomial(7, 4)
    assert a.coeff[1:] != b.coeff[1:]


def test_get_shares_one_per_node():
    poly = generate_zero_polynomial(42, 3)
    nodes = [Node(index=i, pub_key=None) for i in range(1, 6)]
    shares = get_shares(poly, nodes)
    assert [s.index for s in shares] == [1, 2, 3, 4, 5]
    assert all(s.value == evaluate(poly, s.index) for s in shares)
