"""
Commitment-reveal gating of share requests.

Producer side: a client commits to keccak256(token) with every node. Each node checks the
prefix, freshness and novelty of the commitment and signs the transcript.

Consumer side: the client reveals the token together with the signed transcripts. The node
keeps the transcripts with valid signatures from known nodes, takes the transcript a
majority signed, checks it against the token and the identity provider, and only then
lets the share be looked up.
"""

import logging
import re
from collections import Counter, namedtuple
from typing import List

from .errors import (
    BadPrefixError,
    DuplicateTokenError,
    IdentityVerificationError,
    InsufficientSignaturesError,
    InvalidParamsError,
    TimestampError,
    TokenCommitmentMismatchError,
)
from .curve import keccak256
from .transcript import CommitmentRequestResultData, SignedRecord, ValidatedNodeSignature, validate_records

logger = logging.getLogger(__name__)

CommitmentRequest = namedtuple(
    "CommitmentRequest",
    ["message_prefix", "token_commitment", "temp_pub_x", "temp_pub_y", "timestamp", "verifier_identifier"],
)

# what the consumer side agreed on
AgreedTranscript = namedtuple("AgreedTranscript", ["transcript", "signatures"])

# plain decimal seconds, no sign other than "-", no spaces or underscores
_TIMESTAMP = re.compile(r"-?[0-9]+")


def check_timestamp(timestamp: str, now: float, expiry: int):
    """Accept timestamps up to `expiry` seconds old, inclusive."""
    if not isinstance(timestamp, str) or not _TIMESTAMP.fullmatch(timestamp):
        raise TimestampError("Could not parse timestamp")
    sec = int(timestamp, 10)
    if now > sec + expiry:
        raise TimestampError(f"Expired token (> {expiry} seconds)")


def token_commitment_of(cleaned_token: str) -> str:
    return keccak256(cleaned_token.encode()).hex()


class CommitmentIssuer:
    def __init__(self, config, node_key, caches, verifiers):
        self.config = config
        self.node_key = node_key
        self.caches = caches
        self.verifiers = verifiers

    def issue(self, req: CommitmentRequest, correlation_id=None) -> SignedRecord:
        if req.message_prefix != self.config.message_prefix:
            raise BadPrefixError("Incorrect message prefix")
        if req.verifier_identifier not in self.verifiers:
            raise InvalidParamsError(f"Unknown verifier {req.verifier_identifier!r}")

        now = self.config.clock()
        check_timestamp(req.timestamp, now, self.config.timestamp_expiry)

        token_cache = self.caches.token_cache(req.verifier_identifier)
        if not token_cache.add(req.token_commitment, True, ttl=self.config.replay_window):
            logger.info("[%s] duplicate token commitment for verifier %s", correlation_id, req.verifier_identifier)
            raise DuplicateTokenError("Duplicate token found")

        data = CommitmentRequestResultData(
            req.message_prefix,
            req.token_commitment,
            req.temp_pub_x,
            req.temp_pub_y,
            req.timestamp,
            req.verifier_identifier,
            str(int(now)),
        ).to_string()
        pub_x, pub_y = self.node_key.pub_hex
        return SignedRecord(data=data, signature=self.node_key.sign(data.encode()), node_pub_x=pub_x, node_pub_y=pub_y)


def select_majority(signatures: List[ValidatedNodeSignature]):
    """
    Group by vote key and take the biggest group.
    Ties go to the lexicographically smallest vote key so every node picks the same one.
    """
    counts = Counter(sig.transcript.vote_key() for sig in signatures)
    if not counts:
        return None, []
    winner = min(counts, key=lambda k: (-counts[k], k))
    return winner, [sig for sig in signatures if sig.transcript.vote_key() == winner]


class ShareRequestGate:
    def __init__(self, config, nodes, verifiers):
        self.config = config
        self.nodes = nodes
        self.verifiers = verifiers

    def authenticate(self, records: List[SignedRecord], token: str, params: dict, correlation_id=None) -> AgreedTranscript:
        threshold = self.config.threshold

        def discard(record):
            logger.warning("[%s] discarding invalid node signature from %s,%s",
                           correlation_id, record.node_pub_x, record.node_pub_y)

        valid = validate_records(records, self.nodes, on_invalid=discard)
        if len(valid) < threshold:
            raise InsufficientSignaturesError(
                f"Not enough valid signatures. Only {len(valid)} valid signatures found.")

        # valid signatures on the wrong data must not count towards the quorum
        winner, common = select_majority(valid)
        if len(common) < threshold:
            raise InsufficientSignaturesError(
                f"Not enough valid signatures on the same data, {len(common)} valid signatures.")
        logger.debug("[%s] agreed on transcript %s with %d signatures", correlation_id, winner, len(common))
        transcript = common[0].transcript

        verifier = self.verifiers.lookup(transcript.verifier_identifier)
        if token_commitment_of(verifier.clean_token(token)) != transcript.token_commitment:
            logger.info("[%s] token does not match commitment %s", correlation_id, transcript.token_commitment)
            raise TokenCommitmentMismatchError("Token commitment and token are not compatible")

        check_timestamp(transcript.timestamp, self.config.clock(), self.config.timestamp_expiry)

        try:
            verified = verifier.verify(params)
        except Exception as e:
            raise IdentityVerificationError(f"oauth is invalid, err: {e}") from e
        if not verified:
            raise IdentityVerificationError("oauth is invalid")
        return AgreedTranscript(transcript=transcript, signatures=common)
