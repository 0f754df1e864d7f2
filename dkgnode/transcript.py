"""
Commitment transcripts signed by nodes and handed back to them by clients.
"""

from collections import namedtuple
from typing import List, Optional

from .curve import point_from_hex
from .signing import verify_signature

DELIMITER = "\x1c"

_FIELDS = [
    "message_prefix",
    "token_commitment",
    "temp_pub_x",
    "temp_pub_y",
    "timestamp",
    "verifier_identifier",
    "node_sign_timestamp",
]


class CommitmentRequestResultData(namedtuple("CommitmentRequestResultData", _FIELDS)):
    __slots__ = ()

    def to_string(self) -> str:
        return DELIMITER.join(self)

    @classmethod
    def from_string(cls, data: str):
        parts = data.split(DELIMITER)
        if len(parts) != len(_FIELDS):
            raise ValueError(f"expected {len(_FIELDS)} transcript fields, got {len(parts)}")
        return cls(*parts)

    def vote_key(self) -> tuple:
        """The part of the transcript every honest node signs identically."""
        return (self.message_prefix, self.token_commitment, self.timestamp, self.verifier_identifier)


# what a node returns from CommitmentRequest and a client sends back in ShareRequest
SignedRecord = namedtuple("SignedRecord", ["data", "signature", "node_pub_x", "node_pub_y"])

ValidatedNodeSignature = namedtuple("ValidatedNodeSignature", ["record", "transcript", "node_index"])


def validate_record(record: SignedRecord, nodes) -> Optional[ValidatedNodeSignature]:
    """
    Check the record was signed by one of `nodes`. Returns None when it wasn't,
    when the key is unknown or when the data isn't a transcript.
    """
    try:
        pub = point_from_hex(record.node_pub_x, record.node_pub_y)
        transcript = CommitmentRequestResultData.from_string(record.data)
    except (ValueError, TypeError):
        return None
    node = next((n for n in nodes if n.pub_key == pub), None)
    if node is None:
        return None
    if not verify_signature(pub, record.data.encode(), record.signature):
        return None
    return ValidatedNodeSignature(record=record, transcript=transcript, node_index=node.index)


def validate_records(records: List[SignedRecord], nodes, on_invalid=None) -> List[ValidatedNodeSignature]:
    """At most one signature per node, the first valid one it sent."""
    valid = []
    signers = set()
    for record in records:
        checked = validate_record(record, nodes)
        if checked is None:
            if on_invalid is not None:
                on_invalid(record)
            continue
        if checked.node_index in signers:
            continue
        signers.add(checked.node_index)
        valid.append(checked)
    return valid
