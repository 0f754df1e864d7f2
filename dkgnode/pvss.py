"""
Pedersen VSS share dealing and the public verification equations.

Every check has the same shape, evaluation of the committed polynomial in the exponent:

    LHS == sum_i C_i * [index^i mod order]

verify_share:                LHS = G * [s]
verify_pederson_commitment:  LHS = G * [s] + H * [s']          (eq. 4 in Gennaro et al. 2006)
verify_share_commitment:     LHS = the claimed share commitment point

Points are compared by x coordinate only. A failed check is a normal outcome and
returns False, the caller decides to reject the share or the dealer.
"""

from collections import namedtuple
from typing import List

from .commitment import combine, commit, commit_alt
from .curve import H, O, Point, ec_add, ec_scalar_mul, generator, order, random_scalar
from .polynomial import PrimaryShare, generate_zero_polynomial, get_shares

Node = namedtuple("Node", ["index", "pub_key"])

DealerOutput = namedtuple("DealerOutput", ["shares", "shares_prime", "pub_poly", "ci"])


def create_shares(nodes: List[Node], secret: int, threshold: int) -> DealerOutput:
    """
    Deal `secret` to `nodes`. shares[k] and shares_prime[k] go privately to nodes[k],
    pub_poly and ci are broadcast.
    """
    polynomial = generate_zero_polynomial(secret, threshold)
    # blinding polynomial for the pedersen commitment
    polynomial_prime = generate_zero_polynomial(random_scalar(), threshold)

    shares = get_shares(polynomial, nodes)
    shares_prime = get_shares(polynomial_prime, nodes)

    pub_poly = commit(polynomial)
    ci = combine(pub_poly, commit_alt(polynomial_prime))
    return DealerOutput(shares=shares, shares_prime=shares_prime, pub_poly=pub_poly, ci=ci)


def _eval_in_exponent(commitments: List[Point], index: int) -> Point:
    rhs = O
    for i, c in enumerate(commitments):
        rhs = ec_add(rhs, ec_scalar_mul(c, pow(index, i, order)))
    return rhs


def _matches(lhs: Point, commitments: List[Point], index: int) -> bool:
    try:
        return lhs.x == _eval_in_exponent(commitments, index).x
    except ValueError:
        # a commitment point that is not on the curve can't verify anything
        return False


def verify_share(share: PrimaryShare, pub_poly: List[Point], index: int) -> bool:
    lhs = ec_scalar_mul(generator, share.value)
    return _matches(lhs, pub_poly, index)


def verify_pederson_commitment(share: PrimaryShare, share_prime: PrimaryShare, ci: List[Point], index: int) -> bool:
    lhs = ec_add(ec_scalar_mul(generator, share.value), ec_scalar_mul(H, share_prime.value))
    return _matches(lhs, ci, index)


def verify_share_commitment(share_commitment: Point, pub_poly: List[Point], index: int) -> bool:
    return _matches(share_commitment, pub_poly, index)
