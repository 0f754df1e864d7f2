"""
The replicated log the node network agrees on assignments through.

Only its interface matters here: broadcast a transaction, query application state,
subscribe to confirmation events. InMemoryConsensusLog is a single process stand-in
that keeps the same contract.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import namedtuple
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Dict

logger = logging.getLogger(__name__)

GET_EMAIL_INDEX = "GetEmailIndex"


class AssignmentTx(namedtuple("AssignmentTx", ["email", "epoch"])):
    __slots__ = ()

    def encode(self) -> bytes:
        return json.dumps({"type": "assignment", "email": self.email, "epoch": self.epoch},
                          sort_keys=True, separators=(",", ":")).encode()


def tx_hash(tx: AssignmentTx) -> str:
    return sha256(tx.encode()).hexdigest().upper()


def tx_query(hash_hex: str) -> str:
    return f"tx.hash='{hash_hex}'"


@dataclass
class AssignmentState:
    email_mapping: Dict[str, int] = field(default_factory=dict)
    last_created_index: int = 0
    last_unassigned_index: int = 0
    epoch: int = 0

    def free_slots(self) -> int:
        return self.last_created_index - self.last_unassigned_index


class BroadcastError(Exception):
    pass


class Subscription:
    """Events pushed for one query. Always close() it once done."""

    def __init__(self, query: str, buffer_size: int, on_close=None):
        self.query = query
        self._queue = asyncio.Queue(maxsize=buffer_size)
        self._on_close = on_close
        self.closed = False

    def push(self, event: dict) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("subscription %s is full, dropping event", self.query)
            return False
        return True

    async def get(self) -> dict:
        return await self._queue.get()

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close(self)


class ConsensusLog(ABC):
    @abstractmethod
    async def broadcast(self, tx: AssignmentTx) -> str:
        """Submit tx, returns its hash. Raises BroadcastError when the log refuses it."""

    @abstractmethod
    async def query(self, path: str, data: bytes) -> str:
        ...

    @abstractmethod
    def subscribe(self, query: str, buffer_size: int) -> Subscription:
        ...


class InMemoryConsensusLog(ConsensusLog):
    def __init__(self, state: AssignmentState = None):
        self.state = state or AssignmentState()
        self.broadcasts = []
        self._subscriptions = []

    async def broadcast(self, tx: AssignmentTx) -> str:
        self.broadcasts.append(tx)
        hash_hex = tx_hash(tx)
        self._apply(tx)
        # every event goes to every subscriber, like a shared websocket
        event = {"query": tx_query(hash_hex), "hash": hash_hex}
        for sub in list(self._subscriptions):
            sub.push(event)
        return hash_hex

    def _apply(self, tx: AssignmentTx):
        state = self.state
        if tx.epoch != state.epoch:
            logger.info("ignoring assignment for %s from stale epoch %d", tx.email, tx.epoch)
            return
        if tx.email in state.email_mapping:
            return
        state.email_mapping[tx.email] = state.last_unassigned_index
        state.last_unassigned_index += 1

    async def query(self, path: str, data: bytes) -> str:
        if path != GET_EMAIL_INDEX:
            raise ValueError(f"unknown query path {path}")
        index = self.state.email_mapping.get(data.decode())
        return "" if index is None else str(index)

    def subscribe(self, query: str, buffer_size: int) -> Subscription:
        sub = Subscription(query, buffer_size, on_close=self._subscriptions.remove)
        self._subscriptions.append(sub)
        return sub

    @property
    def open_subscriptions(self) -> int:
        return len(self._subscriptions)
