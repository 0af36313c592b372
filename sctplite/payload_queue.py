"""Queue of DATA chunks keyed by TSN, used for both sending and receiving."""

from functools import cmp_to_key
from typing import Dict, List, Optional

from .data import GapAckBlock, PayloadData
from .serial import sna32_lt, sna32_lte

_MASK16 = 0xFFFF


def _tsn_order(a: int, b: int) -> int:
    if sna32_lt(a, b):
        return -1
    if sna32_lt(b, a):
        return 1
    return 0


class PayloadQueue:
    """Chunks indexed by TSN, with duplicate tracking and gap-ack reporting."""

    def __init__(self) -> None:
        self._chunks: Dict[int, PayloadData] = {}
        self._sorted: Optional[List[int]] = None
        self._dup_tsns: List[int] = []
        self._n_bytes = 0

    def _sorted_keys(self) -> List[int]:
        if self._sorted is None:
            self._sorted = sorted(self._chunks, key=cmp_to_key(_tsn_order))
        return self._sorted

    def _insert(self, chunk: PayloadData) -> None:
        self._chunks[chunk.tsn] = chunk
        self._n_bytes += len(chunk.user_data)
        self._sorted = None

    def can_push(self, chunk: PayloadData, cumulative_tsn: int) -> bool:
        """Whether ``chunk`` is new and newer than ``cumulative_tsn``."""
        return not (chunk.tsn in self._chunks or sna32_lte(chunk.tsn, cumulative_tsn))

    def push_no_check(self, chunk: PayloadData) -> None:
        """Store ``chunk`` without checking for duplicates."""
        self._insert(chunk)

    def push(self, chunk: PayloadData, cumulative_tsn: int) -> bool:
        """Store ``chunk``; a duplicate or stale TSN is recorded and refused."""
        if not self.can_push(chunk, cumulative_tsn):
            self._dup_tsns.append(chunk.tsn)
            return False
        self._insert(chunk)
        return True

    def pop(self, tsn: int) -> Optional[PayloadData]:
        """Remove and return the oldest chunk, only if its TSN is ``tsn``."""
        keys = self._sorted_keys()
        if self._chunks and keys[0] == tsn:
            self._sorted = keys[1:]
            chunk = self._chunks.pop(tsn, None)
            if chunk is not None:
                self._n_bytes -= len(chunk.user_data)
                return chunk
        return None

    def get(self, tsn: int) -> Optional[PayloadData]:
        """Return the chunk with ``tsn``, or None."""
        return self._chunks.get(tsn)

    def pop_duplicates(self) -> List[int]:
        """Return and forget the TSNs seen as duplicates."""
        dups, self._dup_tsns = self._dup_tsns, []
        return dups

    def gap_ack_blocks(self, cumulative_tsn: int) -> List[GapAckBlock]:
        """Runs of contiguous TSNs held, as offsets from ``cumulative_tsn``."""
        if not self._chunks:
            return []
        blocks: List[GapAckBlock] = []
        start = end = None
        for tsn in self._sorted_keys():
            diff = (tsn - cumulative_tsn) & _MASK16
            if start is None:
                start = end = diff
            elif (end + 1) & _MASK16 == diff:
                end = diff
            else:
                blocks.append(GapAckBlock(start, end))
                start = end = diff
        blocks.append(GapAckBlock(start, end))
        return blocks

    def gap_ack_blocks_string(self, cumulative_tsn: int) -> str:
        """Describe the gap-ack blocks relative to ``cumulative_tsn``."""
        parts = [f"cumTSN={cumulative_tsn}"]
        parts.extend(f"{b.start}-{b.end}" for b in self.gap_ack_blocks(cumulative_tsn))
        return ",".join(parts)

    def mark_as_acked(self, tsn: int) -> int:
        """Mark a chunk acknowledged, drop its data and return its size."""
        chunk = self._chunks.get(tsn)
        if chunk is None:
            return 0
        chunk.acked = True
        chunk.retransmit = False
        n_acked = len(chunk.user_data)
        self._n_bytes -= n_acked
        chunk.user_data = b""
        return n_acked

    def last_tsn_received(self) -> Optional[int]:
        """The newest TSN held, or None when empty."""
        keys = self._sorted_keys()
        return keys[-1] if keys else None

    def mark_all_to_retransmit(self) -> None:
        """Flag every chunk that is neither acked nor abandoned for retransmission."""
        for chunk in self._chunks.values():
            if chunk.acked or chunk.abandoned:
                continue
            chunk.retransmit = True

    def num_bytes(self) -> int:
        """Total user data bytes held."""
        return self._n_bytes

    def __len__(self) -> int:
        return len(self._chunks)