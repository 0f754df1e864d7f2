"""
Errors raised by request handlers. Each carries the JSON-RPC code the node answers with;
rpc.py is the only place they are turned into error objects.
"""

INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_BUSY = -32604
METHOD_NOT_FOUND = -32601


class DKGNodeError(Exception):
    code = INTERNAL_ERROR
    message = "Internal error"

    def __init__(self, data=""):
        super().__init__(data or self.message)
        self.data = data

    def to_rpc(self):
        return {"code": self.code, "message": self.message, "data": self.data}


class InvalidParamsError(DKGNodeError):
    code = INVALID_PARAMS
    message = "Invalid params"


class BadPrefixError(DKGNodeError):
    pass


class TimestampError(DKGNodeError):
    pass


class DuplicateTokenError(DKGNodeError):
    pass


class InsufficientSignaturesError(DKGNodeError):
    code = INVALID_PARAMS


class TokenCommitmentMismatchError(DKGNodeError):
    code = INVALID_PARAMS


class IdentityVerificationError(DKGNodeError):
    code = INVALID_PARAMS
    message = "Invalid identity"


class OverloadedError(DKGNodeError):
    code = SERVER_BUSY
    message = "System is under heavy load for assignments, please try again later"


class AssignmentTimeoutError(DKGNodeError):
    code = SERVER_BUSY
    message = "Assignment was not confirmed in time, please try again later"


class InternalError(DKGNodeError):
    pass


class CacheStructureMissingError(InternalError):
    pass


class UnknownVerifierError(InternalError):
    pass
