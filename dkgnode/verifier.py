"""
Identity verifiers (OAuth providers and the like) are external. The node only needs
two things from them: how to normalise a raw token before hashing it, and a yes/no on
the request's identity claims.
"""

from abc import ABC, abstractmethod
from typing import Dict

from .errors import UnknownVerifierError


class Verifier(ABC):
    @abstractmethod
    def clean_token(self, raw: str) -> str:
        ...

    @abstractmethod
    def verify(self, params: dict) -> bool:
        """Raise on transport / provider failures, return False on a rejected identity."""
        ...


class VerifierRegistry:
    def __init__(self, verifiers: Dict[str, Verifier] = None):
        self._verifiers = dict(verifiers or {})

    def register(self, identifier: str, verifier: Verifier):
        self._verifiers[identifier] = verifier

    def __contains__(self, identifier):
        return identifier in self._verifiers

    def lookup(self, identifier: str) -> Verifier:
        try:
            return self._verifiers[identifier]
        except KeyError:
            raise UnknownVerifierError(f"Verifier {identifier!r} not found") from None
