"""
JSON-RPC methods served by a DKG node, independent of the transport carrying them.

    CommitmentRequest  sign a client's token commitment
    Ping               node address
    ShareRequest       reveal the token, get this node's share of the user's key
    SecretAssign       get (or create) the user's share index and public key

Field names on the wire follow the deployed network.
"""

import asyncio
import functools
import logging
import uuid
from typing import List

from .assignment import AssignmentCoordinator
from .cache import CacheSuite
from .errors import DKGNodeError, InternalError, InvalidParamsError, METHOD_NOT_FOUND, INTERNAL_ERROR
from .quorum import CommitmentIssuer, CommitmentRequest, ShareRequestGate
from .transcript import SignedRecord

logger = logging.getLogger(__name__)


def _require_str(params: dict, name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str):
        raise InvalidParamsError(f"{name} must be a string")
    return value


def _records(params: dict) -> List[SignedRecord]:
    items = params.get("item")
    if not isinstance(items, list):
        raise InvalidParamsError("item must be a list of node signatures")
    records = []
    for item in items:
        if not isinstance(item, dict):
            raise InvalidParamsError("node signature must be an object")
        records.append(SignedRecord(
            data=_require_str(item, "data"),
            signature=_require_str(item, "signature"),
            node_pub_x=_require_str(item, "nodepubx"),
            node_pub_y=_require_str(item, "nodepuby"),
        ))
    return records


class NodeService:
    def __init__(self, config, node_key, nodes, verifiers, consensus, state, caches: CacheSuite = None):
        self.config = config
        self.node_key = node_key
        self.caches = caches or CacheSuite(clock=config.clock)
        self.issuer = CommitmentIssuer(config, node_key, self.caches, verifiers)
        self.gate = ShareRequestGate(config, nodes, verifiers)
        self.coordinator = AssignmentCoordinator(config, consensus, state, self.caches)
        self._methods = {
            "CommitmentRequest": self.commitment_request,
            "Ping": self.ping,
            "ShareRequest": self.share_request,
            "SecretAssign": self.secret_assign,
        }

    async def dispatch(self, method: str, params=None, request_id=None) -> dict:
        response = {"jsonrpc": "2.0", "id": request_id}
        handler = self._methods.get(method)
        if handler is None:
            response["error"] = {"code": METHOD_NOT_FOUND, "message": "Method not found", "data": method}
            return response
        if params is None:
            params = {}
        if not isinstance(params, dict):
            response["error"] = InvalidParamsError("params must be an object").to_rpc()
            return response

        correlation_id = uuid.uuid4().hex[:12]
        try:
            response["result"] = await handler(params, correlation_id)
        except DKGNodeError as e:
            logger.info("[%s] %s rejected: %s", correlation_id, method, e)
            response["error"] = e.to_rpc()
        except Exception:
            logger.exception("[%s] %s failed", correlation_id, method)
            response["error"] = {"code": INTERNAL_ERROR, "message": "Internal error", "data": ""}
        return response

    async def commitment_request(self, params: dict, correlation_id=None) -> dict:
        req = CommitmentRequest(
            message_prefix=_require_str(params, "messageprefix"),
            token_commitment=_require_str(params, "tokencommitment"),
            temp_pub_x=_require_str(params, "temppubx"),
            temp_pub_y=_require_str(params, "temppuby"),
            timestamp=_require_str(params, "timestamp"),
            verifier_identifier=_require_str(params, "verifieridentifier"),
        )
        record = self.issuer.issue(req, correlation_id)
        return {
            "signature": record.signature,
            "data": record.data,
            "nodepubx": record.node_pub_x,
            "nodepuby": record.node_pub_y,
        }

    async def ping(self, params: dict, correlation_id=None) -> dict:
        return {"message": self.node_key.address}

    async def share_request(self, params: dict, correlation_id=None) -> dict:
        records = _records(params)
        token = _require_str(params, "token")
        email = _require_str(params, "id")
        # signature checks and the identity provider call block, keep them off the event loop
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, functools.partial(self.gate.authenticate, records, token, params, correlation_id))

        si_mapping = self.caches.si_mapping.get()
        index = await self.coordinator.lookup_index(email)
        share = si_mapping.get(index)
        if share is None:
            raise InternalError(f"Could not find share for index {index}")
        return {"index": share.index, "hexshare": format(share.value, "x")}

    async def secret_assign(self, params: dict, correlation_id=None) -> dict:
        email = params.get("email")
        if email is not None and not isinstance(email, str):
            raise InvalidParamsError("email must be a string")
        result = await self.coordinator.assign(email or "", correlation_id)
        return {
            "id": result.index,
            "pubshareX": result.pub_x,
            "pubshareY": result.pub_y,
            "address": result.address,
        }
