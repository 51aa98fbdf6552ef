"""Service errors and the mapping of DAX error code sequences onto them."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

ERR_CODE_NOT_IMPLEMENTED = "NotImplemented"
ERR_CODE_VALIDATION_EXCEPTION = "ValidationException"
ERR_CODE_SERVICE_UNAVAILABLE = "ServiceUnavailable"
ERR_CODE_UNKNOWN = "Unknown"
ERR_CODE_THROTTLING_EXCEPTION = "ThrottlingException"
ERR_CODE_INTERNAL_SERVER_ERROR = "InternalServerError"
ERR_CODE_RESPONSE_TIMEOUT = "ResponseTimeout"
ERR_CODE_UNKNOWN_ERROR = "UnknownError"

_NETWORK_ERRORS = (ConnectionError, TimeoutError, socket.gaierror, socket.herror)


class ServiceError(Exception):
    """An error reported by the service, with code, message and request metadata."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 0,
        request_id: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        self.cause = cause

    def _fields(self) -> tuple:
        return (self.code, self.message, self.status_code, self.request_id, self.cause)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return id(self)

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.status_code or self.request_id:
            text += f"\n\tstatus code: {self.status_code}, request id: {self.request_id}"
        if self.cause is not None:
            text += f"\ncaused by: {self.cause}"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r}, {self.status_code!r}, {self.request_id!r})"


class DaxRequestFailure(ServiceError):
    """A failure returned by a DAX node, carrying the server's error code sequence."""

    def __init__(
        self,
        codes: Sequence[int],
        code: str,
        message: str,
        request_id: str = "",
        status_code: int = 0,
    ) -> None:
        super().__init__(code, message, status_code, request_id)
        self.codes = tuple(codes)

    @property
    def code_sequence(self) -> tuple[int, ...]:
        return self.codes

    def _fields(self) -> tuple:
        return super()._fields() + (self.codes,)

    def recoverable(self) -> bool:
        """True when the cluster reports a recoverable failure."""
        return bool(self.codes) and self.codes[0] == 2

    def auth_error(self) -> bool:
        """True when the failure concerns authentication."""
        return (
            len(self.codes) > 3
            and self.codes[1] == 23
            and self.codes[2] == 31
            and self.codes[3] in (32, 33, 34)
        )


@dataclass
class CancellationReason:
    """Why one item of a transaction was cancelled."""

    code: Optional[str] = None
    message: Optional[str] = None
    item: Optional[dict[str, Any]] = None


class TransactionCanceledFailure(DaxRequestFailure):
    """A DAX failure for a cancelled transaction, with per-item reasons."""

    def __init__(
        self,
        codes: Sequence[int],
        code: str,
        message: str,
        request_id: str = "",
        status_code: int = 0,
        reason_codes: Sequence[Optional[str]] = (),
        reason_messages: Sequence[Optional[str]] = (),
        reason_items: bytes = b"",
        cancellation_reasons: Optional[list[CancellationReason]] = None,
    ) -> None:
        super().__init__(codes, code, message, request_id, status_code)
        self.reason_codes = list(reason_codes)
        self.reason_messages = list(reason_messages)
        self.reason_items = bytes(reason_items)
        self.cancellation_reasons = cancellation_reasons

    def _fields(self) -> tuple:
        return super()._fields() + (
            self.reason_codes,
            self.reason_messages,
            self.reason_items,
            self.cancellation_reasons,
        )


class _DynamoDBError(ServiceError):
    CODE = ""

    def __init__(self, message: str, status_code: int = 0, request_id: str = "") -> None:
        super().__init__(self.CODE, message, status_code, request_id)


class ResourceNotFoundException(_DynamoDBError):
    CODE = "ResourceNotFoundException"


class ResourceInUseException(_DynamoDBError):
    CODE = "ResourceInUseException"


class ProvisionedThroughputExceededException(_DynamoDBError):
    CODE = "ProvisionedThroughputExceededException"


class ConditionalCheckFailedException(_DynamoDBError):
    CODE = "ConditionalCheckFailedException"


class InternalServerError(_DynamoDBError):
    CODE = "InternalServerError"


class ItemCollectionSizeLimitExceededException(_DynamoDBError):
    CODE = "ItemCollectionSizeLimitExceededException"


class LimitExceededException(_DynamoDBError):
    CODE = "LimitExceededException"


class TransactionConflictException(_DynamoDBError):
    CODE = "TransactionConflictException"


class TransactionCanceledException(_DynamoDBError):
    CODE = "TransactionCanceledException"

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        request_id: str = "",
        cancellation_reasons: Optional[list[CancellationReason]] = None,
    ) -> None:
        super().__init__(message, status_code, request_id)
        self.cancellation_reasons = cancellation_reasons

    def _fields(self) -> tuple:
        return super()._fields() + (self.cancellation_reasons,)


class TransactionInProgressException(_DynamoDBError):
    CODE = "TransactionInProgressException"


class IdempotentParameterMismatchException(_DynamoDBError):
    CODE = "IdempotentParameterMismatchException"


_BY_FIFTH_CODE = {
    40: ProvisionedThroughputExceededException,
    41: ResourceNotFoundException,
    43: ConditionalCheckFailedException,
    45: ResourceInUseException,
    47: InternalServerError,
    48: ItemCollectionSizeLimitExceededException,
    49: LimitExceededException,
    57: TransactionConflictException,
    59: TransactionInProgressException,
    60: IdempotentParameterMismatchException,
}

_GENERIC_FIFTH_CODE = {
    46: ERR_CODE_VALIDATION_EXCEPTION,
    50: ERR_CODE_THROTTLING_EXCEPTION,
}


def translate_error(err: Optional[BaseException]) -> Optional[ServiceError]:
    """Wrap any exception as a ServiceError; service errors pass through unchanged."""
    if err is None:
        return None
    if isinstance(err, ServiceError):
        return err
    if isinstance(err, _NETWORK_ERRORS):
        code = ERR_CODE_INTERNAL_SERVER_ERROR
        if isinstance(err, (TimeoutError, socket.timeout)):
            code = ERR_CODE_RESPONSE_TIMEOUT
        return ServiceError(code, "network error", cause=err)
    return ServiceError(ERR_CODE_UNKNOWN_ERROR, "unknown error", cause=err)


def _generic(code: str, err: DaxRequestFailure) -> ServiceError:
    return ServiceError(code, err.message, err.status_code, err.request_id)


def convert_dax_error(err: DaxRequestFailure) -> ServiceError:
    """Map a DAX failure onto the specific error its code sequence names."""
    codes = err.code_sequence
    if len(codes) < 2:
        return err

    def specific(cls: type[_DynamoDBError]) -> ServiceError:
        return cls(err.message, err.status_code, err.request_id)

    if codes[1] == 23:
        if len(codes) > 2:
            if codes[2] == 24:
                return specific(ResourceNotFoundException)
            if codes[2] == 35:
                return specific(ResourceInUseException)
    elif codes[1] == 37 and len(codes) > 3:
        if codes[3] == 39 and len(codes) > 4:
            fifth = codes[4]
            if fifth in _BY_FIFTH_CODE:
                return specific(_BY_FIFTH_CODE[fifth])
            if fifth in _GENERIC_FIFTH_CODE:
                return _generic(_GENERIC_FIFTH_CODE[fifth], err)
            if fifth == 58 and isinstance(err, TransactionCanceledFailure):
                return TransactionCanceledException(
                    err.message,
                    err.status_code,
                    err.request_id,
                    cancellation_reasons=err.cancellation_reasons,
                )
        elif codes[3] == 44:
            return _generic(ERR_CODE_NOT_IMPLEMENTED, err)
    return _generic(ERR_CODE_UNKNOWN, err)


def infer_status_code(codes: Sequence[int]) -> int:
    """Guess an HTTP status from the first error code: 400 for client errors, else 500."""
    if not codes:
        return 0
    return 400 if codes[0] == 4 else 500


__all__ = [
    "CancellationReason",
    "ConditionalCheckFailedException",
    "DaxRequestFailure",
    "IdempotentParameterMismatchException",
    "InternalServerError",
    "ItemCollectionSizeLimitExceededException",
    "LimitExceededException",
    "ProvisionedThroughputExceededException",
    "ResourceInUseException",
    "ResourceNotFoundException",
    "ServiceError",
    "TransactionCanceledException",
    "TransactionCanceledFailure",
    "TransactionConflictException",
    "TransactionInProgressException",
    "convert_dax_error",
    "infer_status_code",
    "translate_error",
]

_unused = field  # dataclass field helper kept available for subclasses