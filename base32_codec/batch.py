"""
Tensor-backed base32 for many payloads at once.

Every quintet of every payload becomes one row of a ``(groups, 5)`` tensor,
so the field extraction and the inverse packing run as a handful of
vectorized shift/mask operations instead of a Python loop per group. Results
are identical to calling :func:`base32_codec.encode` / :func:`base32_codec.decode`
on each item.
"""

from typing import List, Optional, Sequence, Tuple, Union

import torch

from .alphabet import ALPHABET_BYTES, DECODE_TABLE, PADDING_BYTE
from .codec import (
    BITS_PER_SYMBOL,
    GROUP_BYTES,
    GROUP_LAYOUTS,
    GROUP_SYMBOLS,
    SYMBOL_MASK,
    BytesLike,
    SymbolsLike,
)
from .errors import ErrorCode, InvalidSymbolError
from .log import get_logger

logger = get_logger(__name__)

DeviceLike = Optional[Union[str, torch.device]]


def _resolve_device(device: DeviceLike) -> torch.device:
    if device is None:
        return torch.device("cpu")
    return torch.device(device)


def _field_shifts(device: torch.device) -> torch.Tensor:
    return (
        torch.arange(GROUP_SYMBOLS - 1, -1, -1, dtype=torch.int64, device=device)
        * BITS_PER_SYMBOL
    )


def _byte_shifts(device: torch.device) -> torch.Tensor:
    return torch.arange(GROUP_BYTES - 1, -1, -1, dtype=torch.int64, device=device) * 8


def _split(flat: Sequence, counts: Sequence[int]) -> List:
    parts = []
    offset = 0
    for count in counts:
        parts.append(flat[offset : offset + count])
        offset += count
    return parts


def encode_batch(payloads: Sequence[BytesLike], device: DeviceLike = None) -> List[str]:
    """
    Encodes each payload as padded base32 text.

    Args:
        payloads: Sequence of bytes-like objects
        device: Device for the intermediate tensors (default: cpu)

    Returns:
        List of encoded strings, one per payload
    """
    dev = _resolve_device(device)
    chunks: List[bytes] = []
    group_counts: List[int] = []
    valid_symbols: List[int] = []

    for payload in payloads:
        data = bytes(payload)
        groups, tail = divmod(len(data), GROUP_BYTES)
        valid_symbols.extend([GROUP_SYMBOLS] * groups)
        if tail:
            # Zero-extend the final quintet; its layout decides the padding
            valid_symbols.append(GROUP_LAYOUTS[tail].symbols)
            data += bytes(GROUP_BYTES - tail)
            groups += 1
        chunks.append(data)
        group_counts.append(groups)

    if not valid_symbols:
        return ["" for _ in group_counts]

    raw = b"".join(chunks)
    quintets = torch.tensor(list(raw), dtype=torch.int64, device=dev).view(
        -1, GROUP_BYTES
    )
    blocks = (quintets << _byte_shifts(dev)).sum(dim=1)
    fields = (blocks.unsqueeze(1) >> _field_shifts(dev)) & SYMBOL_MASK

    alphabet = torch.tensor(list(ALPHABET_BYTES), dtype=torch.int64, device=dev)
    symbols = alphabet[fields]
    slots = torch.arange(GROUP_SYMBOLS, dtype=torch.int64, device=dev).unsqueeze(0)
    valid = torch.tensor(valid_symbols, dtype=torch.int64, device=dev).unsqueeze(1)
    symbols = torch.where(slots < valid, symbols, torch.full_like(symbols, PADDING_BYTE))

    text = bytes(symbols.reshape(-1).cpu().tolist()).decode("ascii")
    logger.debug(
        "batch-encoded %d payloads into %d groups", len(group_counts), len(valid_symbols)
    )
    return _split(text, [groups * GROUP_SYMBOLS for groups in group_counts])


def _symbol_bytes(text: SymbolsLike) -> Tuple[bytes, SymbolsLike]:
    if isinstance(text, str):
        # One byte per character; anything past 0xff becomes an invalid '?'
        raw = text.encode("latin-1", errors="replace")
    else:
        raw = bytes(text)
        text = raw
    return raw.split(b"\x00", 1)[0], text


def _raise_first_error(
    bad: torch.Tensor,
    invalid: torch.Tensor,
    owners: List[int],
    starts: List[int],
    originals: List[SymbolsLike],
) -> None:
    flat = int(torch.nonzero(bad.reshape(-1))[0].item())
    group, slot = divmod(flat, GROUP_SYMBOLS)
    owner = owners[group]
    position = (group - starts[owner]) * GROUP_SYMBOLS + slot
    original = originals[owner]
    symbol = original[position] if isinstance(original, str) else chr(original[position])
    after_padding = not bool(invalid.reshape(-1)[flat].item())
    raise InvalidSymbolError(symbol, position, after_padding=after_padding)


def decode_batch(texts: Sequence[SymbolsLike], device: DeviceLike = None) -> List[bytes]:
    """
    Decodes each base32 text back to bytes.

    Args:
        texts: Sequence of str or ASCII bytes-like objects
        device: Device for the intermediate tensors (default: cpu)

    Returns:
        List of decoded payloads, one per text

    Raises:
        InvalidSymbolError: for the first bad symbol in batch order
    """
    dev = _resolve_device(device)
    rows: List[bytes] = []
    owners: List[int] = []
    starts: List[int] = []
    group_counts: List[int] = []
    originals: List[SymbolsLike] = []

    for index, text in enumerate(texts):
        raw, original = _symbol_bytes(text)
        groups = -(-len(raw) // GROUP_SYMBOLS)
        # Missing trailing slots behave exactly like padding
        raw += bytes([PADDING_BYTE]) * (groups * GROUP_SYMBOLS - len(raw))
        starts.append(len(owners))
        owners.extend([index] * groups)
        group_counts.append(groups)
        originals.append(original)
        rows.append(raw)

    if not owners:
        return [b"" for _ in group_counts]

    codes = torch.tensor(list(b"".join(rows)), dtype=torch.int64, device=dev).view(
        -1, GROUP_SYMBOLS
    )
    table = torch.tensor(DECODE_TABLE, dtype=torch.int64, device=dev)
    values = table[codes]

    invalid = values == int(ErrorCode.INVALID_SYMBOL)
    padding = values == int(ErrorCode.PADDING_ENCOUNTERED)
    present = values >= 0
    padded_before = torch.cumsum(padding.to(torch.int64), dim=1) > 0
    bad = invalid | (present & padded_before)
    if bool(bad.any()):
        _raise_first_error(bad, invalid, owners, starts, originals)

    blocks = (values.clamp(min=0) << _field_shifts(dev)).sum(dim=1)
    octets = (blocks.unsqueeze(1) >> _byte_shifts(dev)) & 0xFF
    byte_counts = torch.div(
        present.sum(dim=1) * BITS_PER_SYMBOL, 8, rounding_mode="floor"
    )
    slots = torch.arange(GROUP_BYTES, dtype=torch.int64, device=dev).unsqueeze(0)
    keep = slots < byte_counts.unsqueeze(1)
    payload = bytes(octets[keep].cpu().tolist())

    per_group = byte_counts.cpu().tolist()
    per_text = [sum(counts) for counts in _split(per_group, group_counts)]
    logger.debug("batch-decoded %d texts into %d bytes", len(texts), len(payload))
    return _split(payload, per_text)


__all__ = ["decode_batch", "encode_batch"]
