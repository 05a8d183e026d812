import dataclasses
from typing import NamedTuple, Optional, Tuple, Union

from .alphabet import (
    ALPHABET,
    ALPHABET_BYTES,
    DECODE_TABLE,
    PADDING_BYTE,
    PADDING_SYMBOL,
)
from .errors import ErrorCode, InvalidSymbolError
from .log import get_logger

logger = get_logger(__name__)

GROUP_BYTES = 5
GROUP_SYMBOLS = 8
BITS_PER_SYMBOL = 5
SYMBOL_MASK = 0x1F

BytesLike = Union[bytes, bytearray, memoryview]
SymbolsLike = Union[str, bytes, bytearray, memoryview]


class GroupLayout(NamedTuple):
    data_bytes: int
    symbols: int
    padding: int


# Quintet size -> how many of its eight output slots carry data
GROUP_LAYOUTS = {
    1: GroupLayout(data_bytes=1, symbols=2, padding=6),
    2: GroupLayout(data_bytes=2, symbols=4, padding=4),
    3: GroupLayout(data_bytes=3, symbols=5, padding=3),
    4: GroupLayout(data_bytes=4, symbols=7, padding=1),
    5: GroupLayout(data_bytes=5, symbols=8, padding=0),
}

# Value symbols present in an octet group -> whole bytes they determine
_BYTES_FOR_SYMBOLS = tuple(k * BITS_PER_SYMBOL // 8 for k in range(GROUP_SYMBOLS + 1))

_FIELD_SHIFTS = tuple(
    (GROUP_SYMBOLS - 1 - k) * BITS_PER_SYMBOL for k in range(GROUP_SYMBOLS)
)


@dataclasses.dataclass(frozen=True)
class DecodeResult:
    code: ErrorCode
    written: int = 0

    @property
    def ok(self) -> bool:
        return self.code == ErrorCode.OK


def encoded_length(data_size: int, terminator: bool = True) -> int:
    if data_size < 0:
        raise ValueError("data_size must be >= 0")
    groups = (data_size + GROUP_BYTES - 1) // GROUP_BYTES
    return groups * GROUP_SYMBOLS + (1 if terminator else 0)


def max_decoded_size(encoded_length: int) -> int:
    # Upper bound; padding in the last group lowers the real count
    if encoded_length < 0:
        raise ValueError("encoded_length must be >= 0")
    return (encoded_length // GROUP_SYMBOLS) * GROUP_BYTES


def _encode_group(chunk: BytesLike) -> bytes:
    layout = GROUP_LAYOUTS[len(chunk)]
    scratch = bytearray(GROUP_BYTES)
    scratch[: len(chunk)] = chunk
    block = int.from_bytes(scratch, byteorder="big", signed=False)
    symbols = bytearray(GROUP_SYMBOLS)
    for k in range(layout.symbols):
        symbols[k] = ALPHABET_BYTES[(block >> _FIELD_SHIFTS[k]) & SYMBOL_MASK]
    for k in range(layout.symbols, GROUP_SYMBOLS):
        symbols[k] = PADDING_BYTE
    return bytes(symbols)


def _encode_bytes(data: BytesLike) -> bytes:
    view = memoryview(data).cast("B")
    groups = [
        _encode_group(view[i : i + GROUP_BYTES])
        for i in range(0, len(view), GROUP_BYTES)
    ]
    return b"".join(groups)


def encode(data: BytesLike) -> str:
    """Encode ``data`` as padded RFC 4648 base32 text."""
    view = memoryview(data).cast("B")
    encoded = _encode_bytes(view).decode("ascii")
    logger.debug("encoded %d bytes into %d symbols", len(view), len(encoded))
    return encoded


def encode_into(data: BytesLike, out: Union[bytearray, memoryview]) -> ErrorCode:
    """Write the NUL-terminated encoding of ``data`` into ``out``.

    ``out`` must hold at least ``encoded_length(len(data))`` bytes; a smaller
    buffer is left untouched and ``OUTPUT_LIMIT_REACHED`` is returned.
    """
    view = memoryview(data).cast("B")
    required = encoded_length(len(view))
    if len(out) < required:
        logger.debug("output buffer of %d bytes, need %d", len(out), required)
        return ErrorCode.OUTPUT_LIMIT_REACHED
    encoded = _encode_bytes(view)
    out[: len(encoded)] = encoded
    out[len(encoded)] = 0
    return ErrorCode.OK


def _symbol_codes(symbols: SymbolsLike) -> Tuple[int, ...]:
    if isinstance(symbols, str):
        return tuple(ord(ch) for ch in symbols)
    return tuple(memoryview(symbols).cast("B"))


def _decode_group(codes: Tuple[int, ...], start: int) -> Tuple[int, int, int]:
    """Classify one octet group starting at ``start``.

    Returns the packed 40-bit block, the number of value symbols seen and the
    position just past the group. Raises ``InvalidSymbolError``.
    """
    block = 0
    values = 0
    padding_reached = False
    pos = start
    end = min(start + GROUP_SYMBOLS, len(codes))
    while pos < end:
        code = codes[pos]
        if code == 0:
            break
        if code < len(DECODE_TABLE):
            value = DECODE_TABLE[code]
        else:
            value = ErrorCode.INVALID_SYMBOL
        if value == ErrorCode.INVALID_SYMBOL:
            raise InvalidSymbolError(chr(code), pos)
        if value == ErrorCode.PADDING_ENCOUNTERED:
            padding_reached = True
        elif padding_reached:
            raise InvalidSymbolError(chr(code), pos, after_padding=True)
        else:
            block |= value << _FIELD_SHIFTS[pos - start]
            values += 1
        pos += 1
    return block, values, pos


def _decode(
    codes: Tuple[int, ...],
    out: Union[bytearray, memoryview],
    out_limit: Optional[int],
) -> int:
    written = 0
    pos = 0
    while pos < len(codes) and codes[pos] != 0:
        if out_limit is not None and written >= out_limit:
            break
        block, values, pos = _decode_group(codes, pos)
        count = _BYTES_FOR_SYMBOLS[values]
        if out_limit is not None:
            count = min(count, out_limit - written)
        group = block.to_bytes(GROUP_BYTES, byteorder="big", signed=False)
        out[written : written + count] = group[:count]
        written += count
    return written


def decode_into(
    symbols: SymbolsLike,
    out: Union[bytearray, memoryview],
    out_limit: Optional[int] = None,
) -> DecodeResult:
    """Decode base32 ``symbols`` into the caller-owned buffer ``out``.

    Decoding stops at a NUL terminator, at the end of ``symbols`` or once
    ``out_limit`` bytes (default ``len(out)``) have been written, whichever
    comes first. Errors are reported through ``DecodeResult.code`` with
    ``written == 0``; bytes already placed in ``out`` must not be used.
    """
    if out_limit is None:
        out_limit = len(out)
    if out_limit < 0 or out_limit > len(out):
        return DecodeResult(ErrorCode.OUTPUT_LIMIT_REACHED)
    try:
        written = _decode(_symbol_codes(symbols), out, out_limit)
    except InvalidSymbolError as exc:
        logger.debug("decode failed: %s", exc)
        return DecodeResult(exc.code)
    return DecodeResult(ErrorCode.OK, written)


def decode(symbols: SymbolsLike, out_limit: Optional[int] = None) -> bytes:
    """Decode base32 ``symbols`` and return the bytes.

    Raises ``InvalidSymbolError`` on characters outside the alphabet or on a
    value symbol following padding within a group.
    """
    if out_limit is not None and out_limit < 0:
        raise ValueError("out_limit must be >= 0")
    codes = _symbol_codes(symbols)
    out = bytearray(max_decoded_size(len(codes) + GROUP_SYMBOLS - 1))
    written = _decode(codes, out, out_limit)
    logger.debug("decoded %d symbols into %d bytes", len(codes), written)
    return bytes(out[:written])


__all__ = [
    "ALPHABET",
    "PADDING_SYMBOL",
    "DecodeResult",
    "GROUP_LAYOUTS",
    "GroupLayout",
    "decode",
    "decode_into",
    "encode",
    "encode_into",
    "encoded_length",
    "max_decoded_size",
]
