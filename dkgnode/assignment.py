"""
Resolve a user identifier (an email) to the share index the network assigned it.

Already assigned identifiers are answered from the replicated state. New ones are assigned
by broadcasting an AssignmentTx and waiting for the log to confirm it; the log, not this
node, guarantees one index per identifier.
"""

import asyncio
import logging
from collections import namedtuple

from .consensus import GET_EMAIL_INDEX, AssignmentTx, BroadcastError, tx_hash, tx_query
from .curve import point_to_eth_address, point_to_hex
from .errors import (
    AssignmentTimeoutError,
    InternalError,
    InvalidParamsError,
    OverloadedError,
)

logger = logging.getLogger(__name__)

AssignmentResult = namedtuple("AssignmentResult", ["index", "pub_x", "pub_y", "address"])


def retrieve_user_pub_key(caches, index: int):
    pub_keys = caches.user_pub_keys.get()
    try:
        return pub_keys[index]
    except KeyError:
        raise InternalError(f"no public key for index {index}") from None


class AssignmentCoordinator:
    def __init__(self, config, consensus, state, caches):
        """
        state: zero argument callable returning the current AssignmentState of the replicated app
        """
        self.config = config
        self.consensus = consensus
        self.state = state
        self.caches = caches

    def _result(self, index: int) -> AssignmentResult:
        pub = retrieve_user_pub_key(self.caches, index)
        try:
            address = point_to_eth_address(pub)
        except ValueError as e:
            raise InternalError(f"derived user pub key has issues with address: {e}") from e
        pub_x, pub_y = point_to_hex(pub)
        return AssignmentResult(index=index, pub_x=pub_x, pub_y=pub_y, address=address)

    async def assign(self, email: str, correlation_id=None) -> AssignmentResult:
        if not email:
            raise InvalidParamsError("Email is empty")

        state = self.state()
        previous = state.email_mapping.get(email)
        if previous is not None:
            logger.debug("[%s] %s already assigned index %d", correlation_id, email, previous)
            return self._result(previous)

        if state.last_created_index < state.last_unassigned_index + self.config.assignment_margin:
            logger.warning("[%s] only %d unassigned indexes left, refusing assignment",
                           correlation_id, state.free_slots())
            raise OverloadedError()

        tx = AssignmentTx(email=email, epoch=state.epoch)
        expected_hash = tx_hash(tx)
        query = tx_query(expected_hash)
        # subscribe before broadcasting so a fast confirmation can't be missed
        subscription = self.consensus.subscribe(query, self.config.subscription_buffer)
        try:
            try:
                hash_hex = await self.consensus.broadcast(tx)
            except BroadcastError as e:
                raise InternalError(f"Unable to broadcast: {e}") from e
            if hash_hex != expected_hash:
                raise InternalError(f"broadcast returned hash {hash_hex}, expected {expected_hash}")
            logger.debug("[%s] broadcast assignment for %s, waiting on %s", correlation_id, email, query)

            try:
                await asyncio.wait_for(self._confirmation(subscription, query), self.config.assignment_timeout)
            except asyncio.TimeoutError:
                raise AssignmentTimeoutError(f"no confirmation for {query}") from None
        finally:
            subscription.close()

        index = await self.lookup_index(email)
        logger.info("[%s] assigned index %d to %s", correlation_id, index, email)
        return self._result(index)

    @staticmethod
    async def _confirmation(subscription, query: str):
        while True:
            event = await subscription.get()
            if event.get("query") == query:
                return event

    async def lookup_index(self, email: str) -> int:
        try:
            value = await self.consensus.query(GET_EMAIL_INDEX, email.encode())
        except Exception as e:
            raise InternalError(f"Could not get email index: {e}") from e
        if value == "":
            raise InternalError("No index assigned to this email")
        try:
            return int(value, 10)
        except ValueError:
            raise InternalError(f"Failed to parse returned assignment index: {value!r}") from None
