import threading
import time
from datetime import datetime, timedelta

import pytest

from sctplite.data import PayloadData, PayloadProtocolIdentifier
from sctplite.reassembly_queue import ShortBufferError
from sctplite.stream import (
    ReadDeadlineExceededError,
    ReliabilityType,
    Stream,
    StreamState,
)

PPI = PayloadProtocolIdentifier


def _chunk(tsn, data, ssn=0, sid=0, unordered=False):
    return PayloadData(
        tsn=tsn,
        user_data=data,
        beginning_fragment=True,
        ending_fragment=True,
        payload_type=PPI.WEBRTC_BINARY,
        stream_identifier=sid,
        stream_sequence_number=ssn,
        unordered=unordered,
    )


def test_buffered_amount():
    s = Stream()
    assert s.buffered_amount() == 0
    assert s.buffered_amount_low_threshold() == 0

    s.packetize(bytes(8192), PPI.WEBRTC_BINARY)
    s.set_buffered_amount_low_threshold(2048)
    assert s.buffered_amount() == 8192
    assert s.buffered_amount_low_threshold() == 2048


def test_on_buffered_amount_low():
    s = Stream()
    s.packetize(bytes(4096), PPI.WEBRTC_BINARY)
    s.set_buffered_amount_low_threshold(2048)
    calls = []
    s.on_buffered_amount_low(lambda: calls.append(1))

    s.on_buffer_released(-32)
    assert s.buffered_amount() == 4096
    assert len(calls) == 0

    s.on_buffer_released(1024)
    assert s.buffered_amount() == 3072
    assert len(calls) == 0

    s.on_buffer_released(1024)
    assert s.buffered_amount() == 2048
    assert len(calls) == 1

    s.on_buffer_released(1024)
    assert s.buffered_amount() == 1024
    assert len(calls) == 1

    s.on_buffer_released(1024)
    assert s.buffered_amount() == 0
    assert len(calls) == 1

    s.on_buffer_released(1024)
    assert s.buffered_amount() == 0
    assert len(calls) == 1


def test_packetize_fragments():
    s = Stream(7, max_payload_size=4)
    chunks = s.packetize(b"0123456789", PPI.WEBRTC_STRING)
    assert [c.user_data for c in chunks] == [b"0123", b"4567", b"89"]
    assert [c.beginning_fragment for c in chunks] == [True, False, False]
    assert [c.ending_fragment for c in chunks] == [False, False, True]
    assert chunks[0].head is None
    assert chunks[1].head is chunks[0]
    assert chunks[2].head is chunks[0]
    assert all(c.stream_identifier == 7 for c in chunks)
    assert all(c.stream_sequence_number == 0 for c in chunks)
    assert all(c.payload_type == PPI.WEBRTC_STRING for c in chunks)

    second = s.packetize(b"x", PPI.WEBRTC_STRING)
    assert second[0].stream_sequence_number == 1
    assert s.buffered_amount() == 11


def test_packetize_unordered_does_not_advance_ssn_and_dcep_forces_ordered():
    s = Stream()
    s.set_reliability_params(True, ReliabilityType.REXMIT, 3)
    first = s.packetize(b"abc", PPI.WEBRTC_BINARY)
    assert first[0].unordered is True
    second = s.packetize(b"abc", PPI.WEBRTC_BINARY)
    assert second[0].stream_sequence_number == 0

    dcep = s.packetize(b"abc", PPI.WEBRTC_DCEP)
    assert dcep[0].unordered is False
    after = s.packetize(b"abc", PPI.WEBRTC_DCEP)
    assert after[0].stream_sequence_number == 1


def test_handle_data_then_read():
    s = Stream()
    s.handle_data(_chunk(1, b"HELLO"))
    assert s.num_bytes_in_reassembly_queue() == 5
    data, ppi = s.read_sctp(1500)
    assert data == b"HELLO"
    assert ppi == PPI.WEBRTC_BINARY
    assert s.num_bytes_in_reassembly_queue() == 0


def test_read_short_buffer():
    s = Stream()
    s.handle_data(_chunk(1, b"0123456789"))
    with pytest.raises(ShortBufferError):
        s.read(8)
    assert s.num_bytes_in_reassembly_queue() == 0


def test_read_blocks_until_data_arrives():
    s = Stream()
    timer = threading.Timer(0.05, s.handle_data, args=(_chunk(1, b"late"),))
    timer.start()
    assert s.read(100) == b"late"
    timer.join()


def test_inbound_reset_drains_then_eof():
    s = Stream()
    s.handle_data(_chunk(1, b"last"))
    s.on_inbound_stream_reset()
    assert s.state() == StreamState.CLOSING
    assert s.read(100) == b"last"
    with pytest.raises(EOFError):
        s.read(100)


def test_inbound_reset_keeps_closed_state():
    s = Stream()
    s.set_state(StreamState.CLOSED)
    s.on_inbound_stream_reset()
    assert s.state() == StreamState.CLOSED


def test_read_deadline_exceeded_then_cleared():
    s = Stream()
    s.set_read_deadline(datetime.now() + timedelta(milliseconds=50))
    started = time.monotonic()
    with pytest.raises(ReadDeadlineExceededError):
        s.read(100)
    assert time.monotonic() - started >= 0.04

    s.set_read_deadline(None)
    s.handle_data(_chunk(1, b"ok"))
    assert s.read(100) == b"ok"


def test_read_deadline_does_not_clear_eof():
    s = Stream()
    s.on_inbound_stream_reset()
    s.set_read_deadline(None)
    with pytest.raises(EOFError):
        s.read(100)


def test_forward_tsn_ordered_ignored_on_unordered_stream():
    s = Stream()
    incomplete = PayloadData(tsn=5, user_data=b"abc", beginning_fragment=True, stream_sequence_number=0)
    s.handle_data(incomplete)
    assert s.num_bytes_in_reassembly_queue() == 3

    s.set_reliability_params(True, ReliabilityType.RELIABLE, 0)
    s.handle_forward_tsn_for_ordered(0)
    assert s.num_bytes_in_reassembly_queue() == 3

    s.set_reliability_params(False, ReliabilityType.RELIABLE, 0)
    s.handle_forward_tsn_for_ordered(0)
    assert s.num_bytes_in_reassembly_queue() == 0


def test_forward_tsn_unordered():
    s = Stream()
    s.set_reliability_params(True, ReliabilityType.RELIABLE, 0)
    s.handle_data(PayloadData(tsn=11, user_data=b"ABC", unordered=True, beginning_fragment=True))
    s.handle_data(PayloadData(tsn=14, user_data=b"SOS", unordered=True, beginning_fragment=True))
    assert s.num_bytes_in_reassembly_queue() == 6
    s.handle_forward_tsn_for_unordered(13)
    assert s.num_bytes_in_reassembly_queue() == 3


def test_stream_state_strings():
    s = Stream()
    assert str(s.state()) == "open"
    s.on_inbound_stream_reset()
    assert str(s.state()) == "closing"
    s.set_state(StreamState.CLOSED)
    assert str(s.state()) == "closed"


def test_invalid_max_payload_size():
    with pytest.raises(ValueError):
        Stream(max_payload_size=0)