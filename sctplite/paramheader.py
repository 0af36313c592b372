"""The four-byte type/length header shared by all SCTP parameters."""

import struct
from dataclasses import dataclass
from typing import Optional, Union

from .paramtype import ParamPacketTooShortError, ParamType, describe_param_type, parse_param_type

PARAM_HEADER_LENGTH = 4
_MAX_LENGTH = 0xFFFF


class ParamHeaderError(ValueError):
    """Raised when a parameter header cannot be encoded or decoded."""


def _hex_dump(data: bytes) -> str:
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset:offset + 16]
        cells = [f"{b:02x}" for b in chunk] + ["  "] * (16 - len(chunk))
        text = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        lines.append(
            f"{offset:08x}  {' '.join(cells[:8])}  {' '.join(cells[8:])}  |{text}|\n"
        )
    return "".join(lines)


@dataclass
class ParamHeader:
    """A parameter type, its self-reported length and its value bytes."""

    param_type: Union[ParamType, int]
    raw: bytes = b""
    length: Optional[int] = None

    def __post_init__(self) -> None:
        self.raw = bytes(self.raw)
        if self.length is None:
            self.length = PARAM_HEADER_LENGTH + len(self.raw)

    def to_bytes(self) -> bytes:
        """Encode header and value; the length field is recomputed from ``raw``."""
        total = PARAM_HEADER_LENGTH + len(self.raw)
        if total > _MAX_LENGTH:
            raise ParamHeaderError(f"param length ({total}) does not fit in 16 bits")
        return struct.pack(">HH", int(self.param_type), total) + self.raw

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ParamHeader":
        """Decode a header and its value from the start of ``raw``."""
        if len(raw) < PARAM_HEADER_LENGTH:
            raise ParamHeaderError("param header too short")
        (declared,) = struct.unpack_from(">H", raw, 2)
        if declared < PARAM_HEADER_LENGTH:
            raise ParamHeaderError(
                f"param self reported length ({declared}) shorter than "
                f"header length ({PARAM_HEADER_LENGTH})"
            )
        if len(raw) < declared:
            raise ParamHeaderError(
                f"param length ({len(raw)}) shorter than its self reported length ({declared})"
            )
        try:
            param_type = parse_param_type(raw)
        except ParamPacketTooShortError as exc:
            raise ParamHeaderError(f"failed to parse param type: {exc}") from exc
        return cls(param_type, bytes(raw[PARAM_HEADER_LENGTH:declared]), declared)

    def __str__(self) -> str:
        return f"{describe_param_type(self.param_type)} ({self.length}): {_hex_dump(self.raw)}"