"""Reassembly of received DATA fragments into user messages for one stream."""

from functools import cmp_to_key
from typing import List, Optional, Tuple, Union

from .data import PayloadData, PayloadProtocolIdentifier
from .serial import sna16_gt, sna16_lt, sna16_lte, sna32_gt, sna32_lt

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF


class TryAgainError(Exception):
    """Raised when no complete message is ready to be read."""


class ShortBufferError(Exception):
    """Raised when a message is larger than the space the reader offered."""


def _make_order(lt):
    def order(a: int, b: int) -> int:
        if lt(a, b):
            return -1
        if lt(b, a):
            return 1
        return 0

    return cmp_to_key(order)


_tsn_key = _make_order(sna32_lt)
_ssn_key = _make_order(sna16_lt)


def _sort_by_tsn(chunks: List[PayloadData]) -> None:
    chunks.sort(key=lambda c: _tsn_key(c.tsn))


class ChunkSet:
    """Fragments that share one stream sequence number."""

    def __init__(
        self,
        ssn: int,
        ppi: Union[PayloadProtocolIdentifier, int],
        chunks: Optional[List[PayloadData]] = None,
    ) -> None:
        self.ssn = ssn
        self.ppi = ppi
        self.chunks: List[PayloadData] = list(chunks) if chunks else []

    def push(self, chunk: PayloadData) -> bool:
        """Add ``chunk`` unless its TSN is present; return whether the set is complete."""
        if any(c.tsn == chunk.tsn for c in self.chunks):
            return False
        self.chunks.append(chunk)
        _sort_by_tsn(self.chunks)
        return self.is_complete()

    def is_complete(self) -> bool:
        """Begins with a first fragment, ends with a last one, with no TSN gap."""
        if not self.chunks:
            return False
        if not self.chunks[0].beginning_fragment:
            return False
        if not self.chunks[-1].ending_fragment:
            return False
        return all(
            cur.tsn == (prev.tsn + 1) & _MASK32
            for prev, cur in zip(self.chunks, self.chunks[1:])
        )


class ReassemblyQueue:
    """Collects fragments of one stream and hands out complete messages."""

    def __init__(self, stream_identifier: int) -> None:
        self.stream_identifier = stream_identifier
        # Stream sequence numbers start at 0 when the association is set up.
        self.next_ssn = 0
        self.ordered: List[ChunkSet] = []
        self.unordered: List[ChunkSet] = []
        self.unordered_chunks: List[PayloadData] = []
        self._n_bytes = 0

    def push(self, chunk: PayloadData) -> bool:
        """Accept a fragment; return whether it completed a message."""
        if chunk.stream_identifier != self.stream_identifier:
            return False

        if chunk.unordered:
            self.unordered_chunks.append(chunk)
            self._n_bytes += len(chunk.user_data)
            _sort_by_tsn(self.unordered_chunks)
            cset = self._find_complete_unordered_chunk_set()
            if cset is None:
                return False
            self.unordered.append(cset)
            return True

        if sna16_lt(chunk.stream_sequence_number, self.next_ssn):
            return False

        cset = next(
            (s for s in self.ordered if s.ssn == chunk.stream_sequence_number), None
        )
        if cset is None:
            cset = ChunkSet(chunk.stream_sequence_number, chunk.payload_type)
            self.ordered.append(cset)
            self.ordered.sort(key=lambda s: _ssn_key(s.ssn))

        self._n_bytes += len(chunk.user_data)
        return cset.push(chunk)

    def _find_complete_unordered_chunk_set(self) -> Optional[ChunkSet]:
        start = -1
        count = 0
        last_tsn = 0
        found = False
        for i, c in enumerate(self.unordered_chunks):
            if c.beginning_fragment:
                start, count, last_tsn = i, 1, c.tsn
                if c.ending_fragment:
                    found = True
                    break
                continue
            if start < 0:
                continue
            if c.tsn != (last_tsn + 1) & _MASK32:
                start = -1
                continue
            last_tsn = c.tsn
            count += 1
            if c.ending_fragment:
                found = True
                break

        if not found:
            return None

        chunks = self.unordered_chunks[start:start + count]
        del self.unordered_chunks[start:start + count]
        return ChunkSet(0, chunks[0].payload_type, chunks)

    def is_readable(self) -> bool:
        """Whether ``read`` would return a message now."""
        if self.unordered:
            return True
        if self.ordered:
            cset = self.ordered[0]
            return cset.is_complete() and sna16_lte(cset.ssn, self.next_ssn)
        return False

    def read(self, size: int) -> Tuple[bytes, Union[PayloadProtocolIdentifier, int]]:
        """Take the next complete message, unordered ones first.

        Raises TryAgainError when none is ready, and ShortBufferError when the
        message exceeds ``size`` bytes; the message is consumed either way.
        """
        if self.unordered:
            cset = self.unordered.pop(0)
        elif self.ordered:
            cset = self.ordered[0]
            if not cset.is_complete() or sna16_gt(cset.ssn, self.next_ssn):
                raise TryAgainError("try again")
            self.ordered.pop(0)
            if cset.ssn == self.next_ssn:
                self.next_ssn = (self.next_ssn + 1) & _MASK16
        else:
            raise TryAgainError("try again")

        for c in cset.chunks:
            self._subtract_num_bytes(len(c.user_data))
        data = b"".join(c.user_data for c in cset.chunks)
        if len(data) > size:
            raise ShortBufferError("short buffer")
        return data, cset.ppi

    def forward_tsn_for_ordered(self, last_ssn: int) -> None:
        """Drop incomplete ordered sets up to ``last_ssn`` and move past it."""
        keep = []
        for cset in self.ordered:
            if sna16_lte(cset.ssn, last_ssn) and not cset.is_complete():
                for c in cset.chunks:
                    self._subtract_num_bytes(len(c.user_data))
                continue
            keep.append(cset)
        self.ordered = keep

        if sna16_lte(self.next_ssn, last_ssn):
            self.next_ssn = (last_ssn + 1) & _MASK16

    def forward_tsn_for_unordered(self, new_cumulative_tsn: int) -> None:
        """Drop pending unordered fragments at or before ``new_cumulative_tsn``."""
        cut = 0
        for c in self.unordered_chunks:
            if sna32_gt(c.tsn, new_cumulative_tsn):
                break
            cut += 1
        for c in self.unordered_chunks[:cut]:
            self._subtract_num_bytes(len(c.user_data))
        del self.unordered_chunks[:cut]

    def _subtract_num_bytes(self, n_bytes: int) -> None:
        self._n_bytes = max(self._n_bytes - n_bytes, 0)

    def num_bytes(self) -> int:
        """User data bytes currently held."""
        return self._n_bytes