"""Padding helpers and serial number arithmetic (RFC 1982) for 16 and 32 bit values."""

PADDING_MULTIPLE = 4

_MASK32 = 0xFFFFFFFF
_HALF32 = 1 << 31
_MASK16 = 0xFFFF
_HALF16 = 1 << 15


def get_padding(length: int) -> int:
    """Return how many bytes pad ``length`` up to a multiple of four."""
    return (PADDING_MULTIPLE - (length % PADDING_MULTIPLE)) % PADDING_MULTIPLE


def pad_bytes(data: bytes, count: int) -> bytes:
    """Return ``data`` followed by ``count`` zero bytes (none if ``count`` is negative)."""
    return bytes(data) + bytes(max(count, 0))


def _lt(a: int, b: int, mask: int, half: int) -> bool:
    a &= mask
    b &= mask
    return (a < b and b - a < half) or (a > b and a - b > half)


def _gt(a: int, b: int, mask: int, half: int) -> bool:
    a &= mask
    b &= mask
    return (a < b and b - a >= half) or (a > b and a - b <= half)


def sna32_lt(a: int, b: int) -> bool:
    """Serial-number "less than" for 32 bit values."""
    return _lt(a, b, _MASK32, _HALF32)


def sna32_lte(a: int, b: int) -> bool:
    """Serial-number "less than or equal" for 32 bit values."""
    return sna32_eq(a, b) or sna32_lt(a, b)


def sna32_gt(a: int, b: int) -> bool:
    """Serial-number "greater than" for 32 bit values."""
    return _gt(a, b, _MASK32, _HALF32)


def sna32_gte(a: int, b: int) -> bool:
    """Serial-number "greater than or equal" for 32 bit values."""
    return sna32_eq(a, b) or sna32_gt(a, b)


def sna32_eq(a: int, b: int) -> bool:
    """Serial-number equality for 32 bit values."""
    return (a & _MASK32) == (b & _MASK32)


def sna16_lt(a: int, b: int) -> bool:
    """Serial-number "less than" for 16 bit values."""
    return _lt(a, b, _MASK16, _HALF16)


def sna16_lte(a: int, b: int) -> bool:
    """Serial-number "less than or equal" for 16 bit values."""
    return sna16_eq(a, b) or sna16_lt(a, b)


def sna16_gt(a: int, b: int) -> bool:
    """Serial-number "greater than" for 16 bit values."""
    return _gt(a, b, _MASK16, _HALF16)


def sna16_gte(a: int, b: int) -> bool:
    """Serial-number "greater than or equal" for 16 bit values."""
    return sna16_eq(a, b) or sna16_gt(a, b)


def sna16_eq(a: int, b: int) -> bool:
    """Serial-number equality for 16 bit values."""
    return (a & _MASK16) == (b & _MASK16)