"""Concrete SCTP parameters built on the shared parameter header."""

import secrets
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Union

from .paramheader import ParamHeader
from .paramtype import ParamType

STATE_COOKIE_LENGTH = 32


class ParamError(ValueError):
    """Raised when a parameter value is malformed."""


class ReconfigResult(IntEnum):
    """Outcome codes of a re-configuration request."""

    SUCCESS_NOP = 0
    SUCCESS_PERFORMED = 1
    DENIED = 2
    ERROR_WRONG_SSN = 3
    ERROR_REQUEST_ALREADY_IN_PROGRESS = 4
    ERROR_BAD_SEQUENCE_NUMBER = 5
    IN_PROGRESS = 6

    def __str__(self) -> str:
        return _RESULT_LABELS[self]


_RESULT_LABELS = {
    ReconfigResult.SUCCESS_NOP: "0: Success - Nothing to do",
    ReconfigResult.SUCCESS_PERFORMED: "1: Success - Performed",
    ReconfigResult.DENIED: "2: Denied",
    ReconfigResult.ERROR_WRONG_SSN: "3: Error - Wrong SSN",
    ReconfigResult.ERROR_REQUEST_ALREADY_IN_PROGRESS: "4: Error - Request already in progress",
    ReconfigResult.ERROR_BAD_SEQUENCE_NUMBER: "5: Error - Bad Sequence Number",
    ReconfigResult.IN_PROGRESS: "6: In progress",
}


def _describe_result(value: int) -> str:
    try:
        return str(ReconfigResult(value))
    except ValueError:
        return f"Unknown reconfigResult: {int(value)}"


@dataclass
class ReconfigResponseParam:
    """Re-configuration Response parameter (type 16)."""

    sequence_number: int
    result: Union[ReconfigResult, int]

    def to_bytes(self) -> bytes:
        value = struct.pack(">II", self.sequence_number, int(self.result))
        return ParamHeader(ParamType.RECONFIG_RESP, value).to_bytes()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ReconfigResponseParam":
        header = ParamHeader.from_bytes(raw)
        if len(header.raw) < 8:
            raise ParamError("reconfig response parameter too short")
        sequence_number, result = struct.unpack_from(">II", header.raw)
        try:
            result = ReconfigResult(result)
        except ValueError:
            pass
        return cls(sequence_number, result)

    def describe_result(self) -> str:
        """Return the human-readable result."""
        return _describe_result(self.result)


class HmacAlgorithm(IntEnum):
    """HMAC algorithm identifiers."""

    RESERVED1 = 0
    SHA128 = 1
    RESERVED2 = 2
    SHA256 = 3

    def __str__(self) -> str:
        return _HMAC_LABELS[self]


_HMAC_LABELS = {
    HmacAlgorithm.RESERVED1: "HMAC Reserved (0x00)",
    HmacAlgorithm.SHA128: "HMAC SHA-128",
    HmacAlgorithm.RESERVED2: "HMAC Reserved (0x02)",
    HmacAlgorithm.SHA256: "HMAC SHA-256",
}

_ACCEPTED_HMAC = (HmacAlgorithm.SHA128, HmacAlgorithm.SHA256)


def _describe_hmac(value: int) -> str:
    try:
        return str(HmacAlgorithm(value))
    except ValueError:
        return f"Unknown HMAC Algorithm type: {int(value)}"


@dataclass
class RequestedHmacAlgorithmParam:
    """Requested HMAC Algorithm parameter (0x8004)."""

    available_algorithms: List[HmacAlgorithm] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        value = b"".join(struct.pack(">H", int(a)) for a in self.available_algorithms)
        return ParamHeader(ParamType.REQ_HMAC_ALGO, value).to_bytes()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "RequestedHmacAlgorithmParam":
        header = ParamHeader.from_bytes(raw)
        if len(header.raw) % 2:
            raise ParamError("requested HMAC algorithm parameter has odd length")
        algorithms = []
        for (value,) in struct.iter_unpack(">H", header.raw):
            if value not in _ACCEPTED_HMAC:
                raise ParamError(f"invalid algorithm type: {_describe_hmac(value)}")
            algorithms.append(HmacAlgorithm(value))
        return cls(algorithms)


@dataclass
class StateCookieParam:
    """State Cookie parameter (type 7)."""

    cookie: bytes = b""

    def to_bytes(self) -> bytes:
        return ParamHeader(ParamType.STATE_COOKIE, self.cookie).to_bytes()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "StateCookieParam":
        return cls(ParamHeader.from_bytes(raw).raw)

    @classmethod
    def random(cls) -> "StateCookieParam":
        """Create a cookie of 32 cryptographically random bytes."""
        return cls(secrets.token_bytes(STATE_COOKIE_LENGTH))

    def __str__(self) -> str:
        header = ParamHeader(ParamType.STATE_COOKIE, self.cookie)
        return f"{header}: {self.cookie.decode('utf-8', errors='replace')}"


@dataclass
class SupportedExtensionsParam:
    """Supported Extensions parameter (0x8008), listing chunk types."""

    chunk_types: List[int] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        return ParamHeader(ParamType.SUPPORTED_EXT, bytes(self.chunk_types)).to_bytes()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "SupportedExtensionsParam":
        return cls(list(ParamHeader.from_bytes(raw).raw))