"""
Node configuration. Everything comes from DKG_* environment variables with defaults
matching the deployed network.
"""

import os
import time
from dataclasses import dataclass, field
from typing import Callable


def _env_int(environ, name, default):
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(environ, name, default):
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class NodeConfig:
    threshold: int = 3
    message_prefix: str = "mug00"
    # seconds a client timestamp stays acceptable
    timestamp_expiry: int = 60
    # seconds a token commitment is remembered per verifier
    replay_window: float = 60.0
    # minimum number of pre-created but unassigned indexes
    assignment_margin: int = 20
    assignment_timeout: float = 30.0
    subscription_buffer: int = 1
    clock: Callable[[], float] = field(default=time.time, compare=False, repr=False)

    def __post_init__(self):
        if self.threshold < 1:
            raise ValueError("threshold must be at least 1")
        if self.timestamp_expiry < 0 or self.replay_window <= 0:
            raise ValueError("expiry windows must be positive")
        if self.assignment_margin < 0:
            raise ValueError("assignment margin can't be negative")
        if self.assignment_timeout <= 0:
            raise ValueError("assignment timeout must be positive")
        if self.subscription_buffer < 1:
            raise ValueError("subscription buffer must hold at least one event")

    @classmethod
    def from_env(cls, environ=None, **overrides):
        environ = os.environ if environ is None else environ
        values = dict(
            threshold=_env_int(environ, "DKG_THRESHOLD", 3),
            message_prefix=environ.get("DKG_MESSAGE_PREFIX") or "mug00",
            timestamp_expiry=_env_int(environ, "DKG_TIMESTAMP_EXPIRY", 60),
            replay_window=_env_float(environ, "DKG_REPLAY_WINDOW", 60.0),
            assignment_margin=_env_int(environ, "DKG_ASSIGNMENT_MARGIN", 20),
            assignment_timeout=_env_float(environ, "DKG_ASSIGNMENT_TIMEOUT", 30.0),
            subscription_buffer=_env_int(environ, "DKG_SUBSCRIPTION_BUFFER", 1),
        )
        values.update(overrides)
        return cls(**values)
