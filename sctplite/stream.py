"""One SCTP stream: reassembly of inbound messages and fragmentation of outbound ones."""

import logging
import threading
from datetime import datetime
from enum import IntEnum
from typing import Callable, List, Optional, Tuple, Type, Union

from .data import PayloadData, PayloadProtocolIdentifier
from .reassembly_queue import ReassemblyQueue, ShortBufferError, TryAgainError

_MASK16 = 0xFFFF
DEFAULT_MAX_PAYLOAD_SIZE = 1200

_log = logging.getLogger(__name__)


class ReliabilityType(IntEnum):
    """How persistently a stream's messages are retransmitted."""

    RELIABLE = 0
    REXMIT = 1
    TIMED = 2


class StreamState(IntEnum):
    """Life-cycle state of a stream."""

    OPEN = 0
    CLOSING = 1
    CLOSED = 2

    def __str__(self) -> str:
        return self.name.lower()


class StreamClosedError(Exception):
    """Raised when a stream is used after it was closed."""


class ReadDeadlineExceededError(TimeoutError):
    """Raised when a read is still waiting at its deadline."""


_ERROR_MESSAGES = {
    EOFError: "EOF",
    ReadDeadlineExceededError: "read deadline exceeded",
}


class Stream:
    """The receiving and sending state of one stream of an association.

    Reads block until a complete message is available. Once the peer resets
    the stream, reads raise EOFError after the queued messages are drained.
    """

    def __init__(
        self,
        stream_identifier: int = 0,
        *,
        default_payload_type: Union[PayloadProtocolIdentifier, int] = 0,
        max_payload_size: int = DEFAULT_MAX_PAYLOAD_SIZE,
        name: Optional[str] = None,
        version: int = 0,
    ) -> None:
        if max_payload_size <= 0:
            raise ValueError("max_payload_size must be positive")
        self.stream_identifier = stream_identifier
        self.default_payload_type = default_payload_type
        self.max_payload_size = max_payload_size
        self.name = name if name is not None else f"stream-{stream_identifier}"
        self.version = version
        self.unordered = False
        self.reliability_type = ReliabilityType.RELIABLE
        self.reliability_value = 0
        self._cond = threading.Condition(threading.Lock())
        self._reassembly_queue = ReassemblyQueue(stream_identifier)
        self._sequence_number = 0
        self._read_err: Optional[Type[BaseException]] = None
        self._deadline_timer: Optional[threading.Timer] = None
        self._buffered_amount = 0
        self._buffered_amount_low = 0
        self._on_buffered_amount_low: Optional[Callable[[], None]] = None
        self._state = StreamState.OPEN

    def set_reliability_params(
        self, unordered: bool, rel_type: Union[ReliabilityType, int], rel_val: int
    ) -> None:
        """Set ordering and partial-reliability parameters."""
        with self._cond:
            _log.debug(
                "[%s] reliability params: ordered=%s type=%d value=%d",
                self.name, not unordered, int(rel_type), rel_val,
            )
            self.unordered = unordered
            self.reliability_type = rel_type
            self.reliability_value = rel_val

    def read(self, size: int) -> bytes:
        """Read one message of at most ``size`` bytes, dropping its PPI."""
        data, _ = self.read_sctp(size)
        return data

    def read_sctp(self, size: int) -> Tuple[bytes, Union[PayloadProtocolIdentifier, int]]:
        """Read one message of at most ``size`` bytes with its payload protocol identifier.

        Raises EOFError when the stream was reset, ReadDeadlineExceededError when
        the deadline passed, and ShortBufferError when the message exceeds ``size``.
        """
        with self._cond:
            try:
                while True:
                    try:
                        return self._reassembly_queue.read(size)
                    except TryAgainError:
                        pass
                    if self._read_err is not None:
                        raise self._read_err(_ERROR_MESSAGES[self._read_err])
                    self._cond.wait()
            finally:
                if self._deadline_timer is not None and self._read_err is not None:
                    self._deadline_timer.cancel()
                    self._deadline_timer = None

    def set_read_deadline(self, deadline: Optional[datetime]) -> None:
        """Make pending and future reads fail at ``deadline``; None removes it."""
        with self._cond:
            if self._deadline_timer is not None:
                self._deadline_timer.cancel()
                self._deadline_timer = None

            if self._read_err is not None:
                if self._read_err is not ReadDeadlineExceededError:
                    return
                self._read_err = None

            if deadline is None:
                return

            delay = max((deadline - datetime.now(deadline.tzinfo)).total_seconds(), 0.0)

            def fire() -> None:
                with self._cond:
                    if self._deadline_timer is not timer:
                        return
                    if self._read_err is None:
                        self._read_err = ReadDeadlineExceededError
                    self._deadline_timer = None
                    self._cond.notify()

            timer = threading.Timer(delay, fire)
            timer.daemon = True
            self._deadline_timer = timer
            timer.start()

    def handle_data(self, chunk: PayloadData) -> None:
        """Accept an inbound DATA chunk and wake a reader if a message is complete."""
        with self._cond:
            if self._reassembly_queue.push(chunk):
                readable = self._reassembly_queue.is_readable()
                _log.debug("[%s] reassemblyQueue readable=%s", self.name, readable)
                if readable:
                    self._cond.notify()

    def handle_forward_tsn_for_ordered(self, ssn: int) -> None:
        """Skip ordered messages up to ``ssn``; ignored on unordered streams."""
        with self._cond:
            if self.unordered:
                return
            self._reassembly_queue.forward_tsn_for_ordered(ssn)
            if self._reassembly_queue.is_readable():
                self._cond.notify()

    def handle_forward_tsn_for_unordered(self, new_cumulative_tsn: int) -> None:
        """Drop unordered fragments up to the TSN; ignored on ordered streams."""
        with self._cond:
            if not self.unordered:
                return
            self._reassembly_queue.forward_tsn_for_unordered(new_cumulative_tsn)
            if self._reassembly_queue.is_readable():
                self._cond.notify()

    def packetize(
        self, raw: bytes, ppi: Union[PayloadProtocolIdentifier, int]
    ) -> List[PayloadData]:
        """Split a message into DATA chunks and count it as buffered."""
        with self._cond:
            # Data channel establishment messages are always ordered and reliable.
            unordered = ppi != PayloadProtocolIdentifier.WEBRTC_DCEP and self.unordered
            data = bytes(raw)
            chunks: List[PayloadData] = []
            head: Optional[PayloadData] = None
            for offset in range(0, len(data), self.max_payload_size):
                fragment = data[offset:offset + self.max_payload_size]
                chunk = PayloadData(
                    user_data=fragment,
                    unordered=unordered,
                    beginning_fragment=offset == 0,
                    ending_fragment=offset + len(fragment) == len(data),
                    immediate_sack=False,
                    payload_type=ppi,
                    stream_identifier=self.stream_identifier,
                    stream_sequence_number=self._sequence_number,
                    stream_version=self.version,
                    head=head,
                )
                if head is None:
                    head = chunk
                chunks.append(chunk)

            # Unordered chunks do not advance the stream sequence number.
            if not unordered:
                self._sequence_number = (self._sequence_number + 1) & _MASK16

            self._buffered_amount += len(data)
            _log.debug("[%s] bufferedAmount = %d", self.name, self._buffered_amount)
            return chunks

    def buffered_amount(self) -> int:
        """Bytes queued for sending and not yet acknowledged."""
        with self._cond:
            return self._buffered_amount

    def buffered_amount_low_threshold(self) -> int:
        """The buffered amount regarded as low; 0 by default."""
        with self._cond:
            return self._buffered_amount_low

    def set_buffered_amount_low_threshold(self, threshold: int) -> None:
        with self._cond:
            self._buffered_amount_low = threshold

    def on_buffered_amount_low(self, callback: Optional[Callable[[], None]]) -> None:
        """Call ``callback`` whenever the buffered amount drops to the threshold or below."""
        with self._cond:
            self._on_buffered_amount_low = callback

    def on_buffer_released(self, n_bytes_released: int) -> None:
        """Account for ``n_bytes_released`` outbound bytes delivered to the peer."""
        if n_bytes_released <= 0:
            return
        with self._cond:
            from_amount = self._buffered_amount
            if self._buffered_amount < n_bytes_released:
                _log.error(
                    "[%s] released buffer size %d should be <= %d",
                    self.name, n_bytes_released, self._buffered_amount,
                )
                self._buffered_amount = 0
            else:
                self._buffered_amount -= n_bytes_released
            _log.debug("[%s] bufferedAmount = %d", self.name, self._buffered_amount)
            callback = self._on_buffered_amount_low
            fire = (
                callback is not None
                and from_amount > self._buffered_amount_low
                and self._buffered_amount <= self._buffered_amount_low
            )
        if fire:
            callback()

    def num_bytes_in_reassembly_queue(self) -> int:
        """Inbound bytes waiting to be read."""
        return self._reassembly_queue.num_bytes()

    def on_inbound_stream_reset(self) -> None:
        """The peer reset its outgoing side: move to closing and unblock readers."""
        with self._cond:
            _log.debug("[%s] onInboundStreamReset: state=%s", self.name, self._state)
            if self._state == StreamState.OPEN:
                _log.debug("[%s] state change: open => closing", self.name)
                self._state = StreamState.CLOSING
            self._read_err = EOFError
            self._cond.notify_all()

    def state(self) -> StreamState:
        """The current state."""
        return self._state

    def set_state(self, new_state: StreamState) -> None:
        self._state = StreamState(new_state)