"""DATA chunk payloads and the gap-ack blocks reported in SACKs."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union


class PayloadProtocolIdentifier(IntEnum):
    """Payload protocol identifiers used by WebRTC data channels."""

    WEBRTC_DCEP = 50
    WEBRTC_STRING = 51
    WEBRTC_BINARY = 53
    WEBRTC_STRING_EMPTY = 56
    WEBRTC_BINARY_EMPTY = 57


@dataclass(eq=False)
class PayloadData:
    """One DATA chunk: a fragment of a user message with its sequencing fields.

    Instances compare by identity, as each one stands for a distinct chunk.
    """

    tsn: int = 0
    user_data: bytes = b""
    unordered: bool = False
    beginning_fragment: bool = False
    ending_fragment: bool = False
    immediate_sack: bool = False
    payload_type: Union[PayloadProtocolIdentifier, int] = 0
    stream_identifier: int = 0
    stream_sequence_number: int = 0
    stream_version: int = 0
    head: Optional["PayloadData"] = None
    acked: bool = False
    retransmit: bool = False
    _abandoned: bool = field(default=False, init=False, repr=False)

    @property
    def abandoned(self) -> bool:
        """Whether the message this fragment belongs to has been abandoned."""
        owner = self.head if self.head is not None else self
        return owner._abandoned

    @abandoned.setter
    def abandoned(self, value: bool) -> None:
        owner = self.head if self.head is not None else self
        owner._abandoned = value


@dataclass(frozen=True)
class GapAckBlock:
    """A run of received TSNs, as offsets from the cumulative TSN."""

    start: int
    end: int