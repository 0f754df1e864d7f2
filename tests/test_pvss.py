"""
Tests
"""

import random

import pytest

from dkgnode.curve import Point, ec_scalar_mul, generator, order, pub_key_from_priv
from dkgnode.polynomial import PrimaryShare
from dkgnode.pvss import (
    Node, create_shares, verify_pederson_commitment, verify_share, verify_share_commitment,
)


def make_nodes(n):
    return [Node(index=i, pub_key=pub_key_from_priv(i + 1000)) for i in range(1, n + 1)]


@pytest.mark.parametrize("t,n", [(1, 3), (3, 5), (4, 7)])
def test_every_share_verifies(t, n):
    nodes = make_nodes(n)
    secret = random.randint(0, order - 1)
    out = create_shares(nodes, secret, t)
    assert len(out.shares) == len(out.shares_prime) == n
    assert len(out.pub_poly) == len(out.ci) == t
    assert out.pub_poly[0] == pub_key_from_priv(secret)
    for node, share, share_prime in zip(nodes, out.shares, out.shares_prime):
        assert share.index == node.index
        assert verify_share(share, out.pub_poly, node.index)
        assert verify_pederson_commitment(share, share_prime, out.ci, node.index)


def test_flipped_bit_fails():
    nodes = make_nodes(4)
    out = create_shares(nodes, random.randint(0, order - 1), 3)
    share = out.shares[1]
    for bit in [0, 7, 100, 255]:
        bad = PrimaryShare(index=share.index, value=share.value ^ (1 << bit))
        assert not verify_share(bad, out.pub_poly, share.index)
        assert not verify_pederson_commitment(bad, out.shares_prime[1], out.ci, share.index)


def test_share_at_wrong_index_fails():
    nodes = make_nodes(4)
    out = create_shares(nodes, 99, 3)
    assert not verify_share(out.shares[0], out.pub_poly, nodes[1].index)


def test_swapped_share_prime_fails():
    nodes = make_nodes(5)
    out = create_shares(nodes, random.randint(0, order - 1), 3)
    assert not verify_pederson_commitment(out.shares[0], out.shares_prime[2], out.ci, nodes[0].index)


def test_share_commitment():
    nodes = make_nodes(4)
    out = create_shares(nodes, random.randint(0, order - 1), 2)
    share = out.shares[3]
    commitment = ec_scalar_mul(generator, share.value)
    assert verify_share_commitment(commitment, out.pub_poly, share.index)
    assert not verify_share_commitment(pub_key_from_priv(share.value + 1), out.pub_poly, share.index)


def test_verification_never_raises_on_garbage():
    nodes = make_nodes(3)
    out = create_shares(nodes, 5, 2)
    garbage = [out.pub_poly[0], Point(1, 1)]
    assert verify_share(out.shares[0], garbage, nodes[0].index) is False
