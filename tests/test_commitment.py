"""
Tests
"""

import pytest

from dkgnode.commitment import combine, commit, commit_alt
from dkgnode.curve import H, ec_add, ec_scalar_mul, pub_key_from_priv
from dkgnode.polynomial import generate_zero_polynomial


def test_commit_each_coefficient():
    poly = generate_zero_polynomial(12345, 4)
    commits = commit(poly)
    assert len(commits) == 4
    assert commits[0] == pub_key_from_priv(12345)
    assert all(c == pub_key_from_priv(a) for c, a in zip(commits, poly.coeff))


def test_commit_alt_uses_h():
    poly = generate_zero_polynomial(9, 3)
    assert commit_alt(poly) == [ec_scalar_mul(H, a) for a in poly.coeff]
    assert commit_alt(poly)[0] != commit(poly)[0]


def test_combine_is_pedersen():
    poly = generate_zero_polynomial(5, 3)
    blind = generate_zero_polynomial(6, 3)
    ci = combine(commit(poly), commit_alt(blind))
    for c, a, b in zip(ci, poly.coeff, blind.coeff):
        assert c == ec_add(pub_key_from_priv(a), ec_scalar_mul(H, b))


def test_combine_length_mismatch():
    with pytest.raises(ValueError):
        combine(commit(generate_zero_polynomial(1, 3)), commit(generate_zero_polynomial(1, 2)))
