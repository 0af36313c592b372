import pytest

from sctplite.data import PayloadData
from sctplite.pending_queue import PendingBaseQueue, PendingQueue, PendingQueueError

NO_FRAGMENT, FRAG_BEGIN, FRAG_MIDDLE, FRAG_END = range(4)


def make_data_chunk(tsn, unordered, frag):
    return PayloadData(
        tsn=tsn,
        unordered=unordered,
        beginning_fragment=frag in (NO_FRAGMENT, FRAG_BEGIN),
        ending_fragment=frag in (NO_FRAGMENT, FRAG_END),
        user_data=bytes(10),
    )


def test_base_push_and_pop():
    pq = PendingBaseQueue()
    for tsn in range(3):
        pq.push(make_data_chunk(tsn, False, NO_FRAGMENT))

    for i in range(3):
        c = pq.get(i)
        assert c is not None
        assert c.tsn == i

    for i in range(3):
        c = pq.pop()
        assert c is not None
        assert c.tsn == i

    pq.push(make_data_chunk(3, False, NO_FRAGMENT))
    pq.push(make_data_chunk(4, False, NO_FRAGMENT))

    for i in range(3, 5):
        assert pq.pop().tsn == i


def test_base_out_of_bounds():
    pq = PendingBaseQueue()
    assert pq.pop() is None
    assert pq.get(0) is None

    pq.push(make_data_chunk(0, False, NO_FRAGMENT))
    assert pq.get(-1) is None
    assert pq.get(1) is None
    assert len(pq) == 1


def test_push_and_pop():
    pq = PendingQueue()
    pq.push(make_data_chunk(0, False, NO_FRAGMENT))
    assert pq.num_bytes() == 10
    pq.push(make_data_chunk(1, False, NO_FRAGMENT))
    assert pq.num_bytes() == 20
    pq.push(make_data_chunk(2, False, NO_FRAGMENT))
    assert pq.num_bytes() == 30

    for i in range(3):
        c = pq.peek()
        pq.pop(c)
        assert c.tsn == i

    assert pq.num_bytes() == 0

    pq.push(make_data_chunk(3, False, NO_FRAGMENT))
    assert pq.num_bytes() == 10
    pq.push(make_data_chunk(4, False, NO_FRAGMENT))
    assert pq.num_bytes() == 20

    for i in range(3, 5):
        c = pq.peek()
        pq.pop(c)
        assert c.tsn == i

    assert pq.num_bytes() == 0
    assert len(pq) == 0


def test_unordered_wins():
    pq = PendingQueue()
    pq.push(make_data_chunk(0, False, NO_FRAGMENT))
    assert pq.num_bytes() == 10
    pq.push(make_data_chunk(1, True, NO_FRAGMENT))
    assert pq.num_bytes() == 20
    pq.push(make_data_chunk(2, False, NO_FRAGMENT))
    assert pq.num_bytes() == 30
    pq.push(make_data_chunk(3, True, NO_FRAGMENT))
    assert pq.num_bytes() == 40

    for expected in (1, 3, 0, 2):
        c = pq.peek()
        pq.pop(c)
        assert c.tsn == expected

    assert pq.num_bytes() == 0


def test_fragments():
    pq = PendingQueue()
    pq.push(make_data_chunk(0, False, FRAG_BEGIN))
    pq.push(make_data_chunk(1, False, FRAG_MIDDLE))
    pq.push(make_data_chunk(2, False, FRAG_END))
    pq.push(make_data_chunk(3, True, FRAG_BEGIN))
    pq.push(make_data_chunk(4, True, FRAG_MIDDLE))
    pq.push(make_data_chunk(5, True, FRAG_END))

    for expected in (3, 4, 5, 0, 1, 2):
        c = pq.peek()
        pq.pop(c)
        assert c.tsn == expected


def test_selection_persistence():
    pq = PendingQueue()
    pq.push(make_data_chunk(0, False, FRAG_BEGIN))

    c = pq.peek()
    pq.pop(c)
    assert c.tsn == 0

    pq.push(make_data_chunk(1, True, NO_FRAGMENT))
    pq.push(make_data_chunk(2, False, FRAG_MIDDLE))
    pq.push(make_data_chunk(3, False, FRAG_END))

    for expected in (2, 3, 1):
        c = pq.peek()
        pq.pop(c)
        assert c.tsn == expected


def test_pop_wrong_chunk_raises():
    pq = PendingQueue()
    pq.push(make_data_chunk(0, False, NO_FRAGMENT))
    stranger = make_data_chunk(9, False, NO_FRAGMENT)
    with pytest.raises(PendingQueueError):
        pq.pop(stranger)


def test_pop_middle_fragment_unselected_raises():
    pq = PendingQueue()
    middle = make_data_chunk(0, False, FRAG_MIDDLE)
    pq.push(middle)
    with pytest.raises(PendingQueueError):
        pq.pop(middle)