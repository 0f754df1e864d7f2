"""
secp256k1 group operations used by the DKG node.
Utilities for:
    1. EC point addition and scalar multiplication (delegated to the ecdsa library)
    2. The second, independent generator H used for Pedersen commitments
    3. keccak256 and Ethereum address derivation for points
    4. Random scalar sampling mod order

    H is derived "nothing up my sleeve" style by hashing the x coordinate of G
    onto the curve with try-and-increment:
    https://en.wikipedia.org/wiki/Nothing-up-my-sleeve_number

    Address derivation is the usual Ethereum one:
    https://ethereum.org/en/developers/docs/accounts/#account-creation
"""

import secrets
from collections import namedtuple

from ecdsa import SECP256k1
from ecdsa.ellipticcurve import PointJacobi, INFINITY
from web3 import Web3

Point = namedtuple("Point", "x y")

# Affine encoding of the point at infinity. Never on the curve, so it can't collide.
O = Point(0, 0)


# SECP256K1 domain params
curve = SECP256k1.curve
p = curve.p()
a = curve.a()
b = curve.b()
order = SECP256k1.order
generator = Point(SECP256k1.generator.x(), SECP256k1.generator.y())
#############################


def valid(P):
    """
    Determine whether we have a valid representation of a point
    on our curve (the identity counts as valid).
    """
    if P == O:
        return True
    return 0 <= P.x < p and 0 <= P.y < p and curve.contains_point(P.x, P.y)


def _to_jacobi(P):
    if P == O:
        return INFINITY
    return PointJacobi(curve, P.x, P.y, 1, order)


def _from_jacobi(J):
    if J == INFINITY:
        return O
    affine = J.to_affine()
    return Point(affine.x(), affine.y())


def ec_add(P, Q):
    if not (valid(P) and valid(Q)):
        raise ValueError("Invalid inputs")
    if P == O:
        return Q
    if Q == O:
        return P
    return _from_jacobi(_to_jacobi(P) + _to_jacobi(Q))


def ec_scalar_mul(P, scalar):
    if not valid(P):
        raise ValueError("Invalid input point")
    scalar %= order
    if scalar == 0 or P == O:
        return O
    return _from_jacobi(_to_jacobi(P) * scalar)


def pub_key_from_priv(private):
    return ec_scalar_mul(generator, private)


def random_scalar():
    """Uniform scalar in [1, order)."""
    return secrets.randbelow(order - 1) + 1


def keccak256(data: bytes) -> bytes:
    return bytes(Web3.keccak(data))


def hash_to_point(data: bytes) -> Point:
    """
    Try-and-increment: start with x = keccak256(data) and bump x until
    x^3 + 7 has a square root mod p. p = 3 mod 4 so the root is beta^((p+1)/4).
    """
    x = int.from_bytes(keccak256(data), byteorder="big") % p
    sqrt_exponent = (p + 1) // 4
    while True:
        beta = (pow(x, 3, p) + a * x + b) % p
        y = pow(beta, sqrt_exponent, p)
        if pow(y, 2, p) == beta:
            return Point(x, y)
        x = (x + 1) % p


H = hash_to_point(generator.x.to_bytes(32, byteorder="big"))


def point_to_hex(point):
    """Unpadded lowercase hex of both coordinates, the way peers publish keys."""
    return format(point.x, "x"), format(point.y, "x")


def point_from_hex(x_hex: str, y_hex: str) -> Point:
    point = Point(int(x_hex, 16), int(y_hex, 16))
    if point == O or not valid(point):
        raise ValueError("point is not on secp256k1")
    return point


def point_to_eth_address(point) -> str:
    if point == O:
        raise ValueError("the identity has no address")
    raw = point.x.to_bytes(32, byteorder="big") + point.y.to_bytes(32, byteorder="big")
    return Web3.to_checksum_address("0x" + keccak256(raw)[-20:].hex())
