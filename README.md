# sctplite

Pure-Python building blocks for an SCTP (RFC 4960) endpoint. It has no
dependencies outside the standard library.

## Modules

- `sctplite.serial`: `get_padding`, `pad_bytes` and RFC 1982 serial number
  arithmetic for 32 and 16 bit values (`sna32_lt`, `sna32_lte`, `sna32_gt`,
  `sna32_gte`, `sna32_eq` and their `sna16_*` counterparts).
- `sctplite.paramtype`: the `ParamType` enum, `parse_param_type` (raises
  `ParamPacketTooShortError` on fewer than two bytes) and
  `describe_param_type`.
- `sctplite.paramheader`: `ParamHeader`, the type-length-value header, with
  `to_bytes`, `from_bytes` and a hex-dump `str()`. Malformed input raises
  `ParamHeaderError`.
- `sctplite.params`: `ReconfigResponseParam` with `ReconfigResult`,
  `RequestedHmacAlgorithmParam` with `HmacAlgorithm`, `StateCookieParam`
  (with `StateCookieParam.random()` for a 32-byte random cookie) and
  `SupportedExtensionsParam`. Each has `to_bytes` and `from_bytes`; a bad
  value raises `ParamError`.
- `sctplite.data`: `PayloadData` (one DATA chunk), `PayloadProtocolIdentifier`
  and `GapAckBlock`.
- `sctplite.payload_queue`: `PayloadQueue`, chunks keyed by TSN, with
  duplicate tracking (`pop_duplicates`), gap-ack blocks (`gap_ack_blocks`,
  `gap_ack_blocks_string`), acknowledgement and retransmission marking.
- `sctplite.pending_queue`: `PendingBaseQueue` and `PendingQueue`, the outbound
  queue that lets unordered messages go first but keeps the fragments of one
  message together. Popping out of order raises `PendingQueueError`.
- `sctplite.reassembly_queue`: `ChunkSet` and `ReassemblyQueue`, per-stream
  reassembly of ordered and unordered messages, including FORWARD-TSN
  handling. `read` raises `TryAgainError` when nothing is ready and
  `ShortBufferError` when the message is larger than the size asked for.
- `sctplite.rtx_timer`: `RTOManager` (RTO calculation, RFC 4960 section
  6.3.1), `calculate_next_timeout`, the `RtxTimerObserver` protocol and
  `RtxTimer`, a thread-based retransmission timer with exponential back-off.
- `sctplite.stream`: `Stream`, with blocking reads (`read`, `read_sctp`,
  `set_read_deadline`), inbound handling (`handle_data`,
  `handle_forward_tsn_for_ordered`, `handle_forward_tsn_for_unordered`,
  `on_inbound_stream_reset`), outbound fragmentation (`packetize`) and
  buffered-amount tracking with a low-threshold callback. Also
  `ReliabilityType`, `StreamState`, `StreamClosedError` and
  `ReadDeadlineExceededError`.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Examples

Serial number arithmetic wraps around:

```python
from sctplite.serial import sna32_lt

assert sna32_lt(0xFFFFFFFF, 0)
```

Parsing and writing a Re-configuration Response parameter:

```python
from sctplite.params import ReconfigResponseParam, ReconfigResult

raw = bytes([0x00, 0x10, 0x00, 0x0C, 0, 0, 0, 1, 0, 0, 0, 1])
param = ReconfigResponseParam.from_bytes(raw)
assert param.result is ReconfigResult.SUCCESS_PERFORMED
assert param.to_bytes() == raw
```

Reassembling a fragmented message:

```python
from sctplite.data import PayloadData, PayloadProtocolIdentifier
from sctplite.reassembly_queue import ReassemblyQueue

queue = ReassemblyQueue(0)
ppi = PayloadProtocolIdentifier.WEBRTC_BINARY
queue.push(PayloadData(tsn=1, beginning_fragment=True, user_data=b"ABC", payload_type=ppi))
queue.push(PayloadData(tsn=2, ending_fragment=True, user_data=b"DEFG", payload_type=ppi))
data, ppi = queue.read(16)
assert data == b"ABCDEFG"
```

Splitting an outbound message on a stream and tracking what is buffered:

```python
from sctplite.data import PayloadProtocolIdentifier
from sctplite.stream import Stream

stream = Stream(1, max_payload_size=4)
chunks = stream.packetize(b"HELLO WORLD", PayloadProtocolIdentifier.WEBRTC_STRING)
assert [c.user_data for c in chunks] == [b"HELL", b"O WO", b"RLD"]
assert stream.buffered_amount() == 11
stream.on_buffer_released(11)
assert stream.buffered_amount() == 0
```

Computing retransmission timeouts:

```python
from sctplite.rtx_timer import RTOManager, calculate_next_timeout

manager = RTOManager()
manager.set_new_rtt(600)
print(manager.rto())                   # 1800.0 msec
print(calculate_next_timeout(1.0, 2))  # 4.0 msec
```

## What it does not do

sctplite holds the pieces an endpoint is built from, not an endpoint. There is
no association: no handshake, no packet or chunk encoding beyond the
parameters listed above, no congestion control and no network I/O. A `Stream`
turns messages into `PayloadData` chunks with `packetize` and accepts inbound
chunks with `handle_data`, but sending those chunks and feeding received ones
back in is left to the caller.