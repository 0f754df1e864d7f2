"""
Node identity key. Nodes sign commitment transcripts with deterministic ECDSA
(RFC 6979) over the keccak256 digest of the transcript:
https://en.wikipedia.org/wiki/Elliptic_Curve_Digital_Signature_Algorithm
https://tools.ietf.org/html/rfc6979

Signatures travel as hex of the 64 byte r || s string.
"""

from hashlib import sha256

from ecdsa import SECP256k1, SigningKey, VerifyingKey, BadSignatureError, BadDigestError, MalformedPointError
from ecdsa.util import sigencode_string, sigdecode_string, MalformedSignature

from .curve import Point, keccak256, point_to_eth_address, point_to_hex, pub_key_from_priv, random_scalar


class NodeKey:
    def __init__(self, private: int):
        self.private = private
        self.pub = pub_key_from_priv(private)
        self._sk = SigningKey.from_secret_exponent(private, curve=SECP256k1, hashfunc=sha256)

    @classmethod
    def generate(cls):
        return cls(random_scalar())

    @property
    def pub_hex(self):
        return point_to_hex(self.pub)

    @property
    def address(self) -> str:
        return point_to_eth_address(self.pub)

    def sign(self, data: bytes) -> str:
        sig = self._sk.sign_digest_deterministic(keccak256(data), hashfunc=sha256, sigencode=sigencode_string)
        return sig.hex()


def verify_signature(pub: Point, data: bytes, signature_hex: str) -> bool:
    """False on any bad signature, bad encoding or bad key."""
    try:
        raw_pub = pub.x.to_bytes(32, byteorder="big") + pub.y.to_bytes(32, byteorder="big")
        vk = VerifyingKey.from_string(raw_pub, curve=SECP256k1, hashfunc=sha256)
        return vk.verify_digest(bytes.fromhex(signature_hex), keccak256(data), sigdecode=sigdecode_string)
    except (BadSignatureError, BadDigestError, MalformedPointError, MalformedSignature, ValueError, OverflowError):
        return False
