from typing import Tuple, Union

from .errors import ErrorCode

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
PADDING_SYMBOL = "="

ALPHABET_BYTES = ALPHABET.encode("ascii")
PADDING_BYTE = ord(PADDING_SYMBOL)
TERMINATOR = "\x00"


def _build_decode_table() -> Tuple[int, ...]:
    table = [int(ErrorCode.INVALID_SYMBOL)] * 256
    for value, symbol in enumerate(ALPHABET):
        table[ord(symbol)] = value
    table[PADDING_BYTE] = int(ErrorCode.PADDING_ENCOUNTERED)
    return tuple(table)


# Indexed by character code 0..255
DECODE_TABLE = _build_decode_table()


def classify_symbol(ch: Union[str, int]) -> int:
    """Map one encoded character to its 5-bit value.

    Returns 0..31 for alphabet symbols, ``ErrorCode.PADDING_ENCOUNTERED`` for
    the padding symbol and ``ErrorCode.INVALID_SYMBOL`` for anything else.
    """
    if isinstance(ch, str):
        if len(ch) != 1:
            raise TypeError(f"expected a single character, got {ch!r}")
        code = ord(ch)
    else:
        code = int(ch)
    if code < 0 or code >= len(DECODE_TABLE):
        return ErrorCode.INVALID_SYMBOL
    value = DECODE_TABLE[code]
    if value < 0:
        return ErrorCode(value)
    return value


__all__ = [
    "ALPHABET",
    "ALPHABET_BYTES",
    "DECODE_TABLE",
    "PADDING_BYTE",
    "PADDING_SYMBOL",
    "TERMINATOR",
    "classify_symbol",
]
