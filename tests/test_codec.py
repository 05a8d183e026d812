import array
import logging
import os

import pytest

import base32_codec
from base32_codec import ErrorCode, InvalidSymbolError

RFC4648_VECTORS = [
    (b"", ""),
    (b"f", "MY======"),
    (b"fo", "MZXQ===="),
    (b"foo", "MZXW6==="),
    (b"foob", "MZXW6YQ="),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI======"),
]

# Expected trailing '=' count by len(data) % 5
PADDING_BY_REMAINDER = {0: 0, 1: 6, 2: 4, 3: 3, 4: 1}


@pytest.mark.parametrize("payload,expected", RFC4648_VECTORS)
def test_rfc4648_vectors(payload: bytes, expected: str) -> None:
    assert base32_codec.encode(payload) == expected
    assert base32_codec.decode(expected) == payload


@pytest.mark.parametrize("length", [0, 1, 2, 3, 4, 5, 6, 16, 37, 128])
def test_round_trip(length: int) -> None:
    payload = os.urandom(length)
    assert base32_codec.decode(base32_codec.encode(payload)) == payload


@pytest.mark.slow
def test_large_round_trip() -> None:
    payload = os.urandom(256 * 1024 + 3)
    encoded = base32_codec.encode(payload)
    assert len(encoded) == base32_codec.encoded_length(len(payload), terminator=False)
    assert base32_codec.decode(encoded) == payload


def test_length_and_padding_laws() -> None:
    for length in range(1, 41):
        encoded = base32_codec.encode(bytes(range(length)))
        assert len(encoded) == base32_codec.encoded_length(length) - 1
        assert len(encoded) % 8 == 0
        padding = len(encoded) - len(encoded.rstrip("="))
        assert padding == PADDING_BY_REMAINDER[length % 5]


def test_group_layouts_cover_every_quintet_size() -> None:
    assert sorted(base32_codec.GROUP_LAYOUTS) == [1, 2, 3, 4, 5]
    for size, layout in base32_codec.GROUP_LAYOUTS.items():
        assert layout.data_bytes == size
        assert layout.symbols + layout.padding == 8
        # Only fields holding at least one real data bit are emitted
        assert layout.symbols == -(-size * 8 // 5)


def test_size_calculators() -> None:
    assert base32_codec.encoded_length(0) == 1
    assert base32_codec.encoded_length(0, terminator=False) == 0
    assert base32_codec.encoded_length(5) == 9
    assert base32_codec.encoded_length(6) == 17
    assert base32_codec.max_decoded_size(0) == 0
    assert base32_codec.max_decoded_size(15) == 5
    assert base32_codec.max_decoded_size(16) == 10
    with pytest.raises(ValueError):
        base32_codec.encoded_length(-1)
    with pytest.raises(ValueError):
        base32_codec.max_decoded_size(-8)


def test_classify_symbol_alphabet() -> None:
    assert base32_codec.classify_symbol("A") == 0
    assert base32_codec.classify_symbol("Z") == 25
    assert base32_codec.classify_symbol("2") == 26
    assert base32_codec.classify_symbol("7") == 31
    assert base32_codec.classify_symbol("=") == ErrorCode.PADDING_ENCOUNTERED
    for value, symbol in enumerate(base32_codec.ALPHABET):
        assert base32_codec.classify_symbol(symbol) == value
        assert base32_codec.classify_symbol(ord(symbol)) == value


@pytest.mark.parametrize("symbol", ["a", "z", "0", "1", "8", "9", ".", " ", "\x00", "\xe9", "€"])
def test_classify_symbol_invalid(symbol: str) -> None:
    assert base32_codec.classify_symbol(symbol) == ErrorCode.INVALID_SYMBOL


def test_classify_symbol_is_total() -> None:
    results = [base32_codec.classify_symbol(code) for code in range(256)]
    values = [r for r in results if r >= 0]
    assert sorted(values) == list(range(32))
    assert results.count(ErrorCode.PADDING_ENCOUNTERED) == 1
    assert all(
        r in (ErrorCode.PADDING_ENCOUNTERED, ErrorCode.INVALID_SYMBOL)
        for r in results
        if r < 0
    )
    assert base32_codec.classify_symbol(-1) == ErrorCode.INVALID_SYMBOL
    assert base32_codec.classify_symbol(300) == ErrorCode.INVALID_SYMBOL


def test_classify_symbol_rejects_strings() -> None:
    with pytest.raises(TypeError):
        base32_codec.classify_symbol("AB")


@pytest.mark.parametrize(
    "text,position",
    [
        ("mzxw6===", 0),
        ("MZXW1===", 4),
        ("MZXW0YTB", 4),
        ("MZXW6YT8", 7),
        ("MZ.W6===", 2),
        ("MZXW6YTBOI=====-", 15),
    ],
)
def test_invalid_symbols_rejected(text: str, position: int) -> None:
    with pytest.raises(InvalidSymbolError) as excinfo:
        base32_codec.decode(text)
    assert excinfo.value.position == position
    assert excinfo.value.symbol == text[position]
    assert not excinfo.value.after_padding
    assert excinfo.value.code == ErrorCode.INVALID_SYMBOL


def test_value_after_padding_rejected() -> None:
    with pytest.raises(InvalidSymbolError, match="follows padding") as excinfo:
        base32_codec.decode("M=Y=====")
    assert excinfo.value.position == 2
    assert excinfo.value.after_padding
    assert isinstance(excinfo.value, ValueError)


def test_padding_placement() -> None:
    assert base32_codec.decode("MY======") == base32_codec.decode(
        base32_codec.encode(b"f")
    )
    assert base32_codec.decode("MY======") == b"\x66"


def test_decode_short_final_group() -> None:
    assert base32_codec.decode("MZXW6YTBOI") == b"foobar"
    assert base32_codec.decode("MZX") == b"f"
    assert base32_codec.decode("M") == b""
    assert base32_codec.decode("") == b""


def test_decode_concatenated_groups() -> None:
    assert base32_codec.decode("MY======MZXQ====") == b"ffo"


def test_decode_accepts_ascii_bytes() -> None:
    assert base32_codec.decode(b"MZXW6===") == b"foo"
    assert base32_codec.decode(memoryview(b"MZXW6YQ=")) == b"foob"
    assert base32_codec.encode(bytearray(b"foo")) == "MZXW6==="


def test_encode_rejects_text() -> None:
    with pytest.raises(TypeError):
        base32_codec.encode("foo")


def test_decode_out_limit() -> None:
    assert base32_codec.decode("MZXW6YTBOI======", out_limit=4) == b"foob"
    assert base32_codec.decode("MZXW6YTBOI======", out_limit=0) == b""
    assert base32_codec.decode("MZXW6YTBOI======", out_limit=100) == b"foobar"
    with pytest.raises(ValueError):
        base32_codec.decode("MY======", out_limit=-1)


def test_decode_stops_at_nul_terminator() -> None:
    assert base32_codec.decode("MZXQ====\x00MY======") == b"fo"


def test_encode_into_writes_terminated_symbols() -> None:
    out = bytearray(b"~" * 16)
    assert base32_codec.encode_into(b"f", out) == ErrorCode.OK
    assert bytes(out[:9]) == b"MY======\x00"
    assert bytes(out[9:]) == b"~" * 7


def test_encode_into_rejects_small_buffer() -> None:
    out = bytearray(b"~" * 8)
    assert base32_codec.encode_into(b"f", out) == ErrorCode.OUTPUT_LIMIT_REACHED
    assert out == bytearray(b"~" * 8)


def test_encode_into_empty_payload() -> None:
    out = bytearray(b"~")
    assert base32_codec.encode_into(b"", out) == ErrorCode.OK
    assert out == bytearray(b"\x00")


def test_decode_into_stops_early_at_end_of_input() -> None:
    out = bytearray(10)
    result = base32_codec.decode_into("MY======", out)
    assert result.ok
    assert result.written == 1
    assert bytes(out[:1]) == b"f"


def test_decode_into_respects_out_limit() -> None:
    out = bytearray(10)
    result = base32_codec.decode_into("MZXW6YTBOI======", out, out_limit=4)
    assert result == base32_codec.DecodeResult(ErrorCode.OK, 4)
    assert bytes(out[:4]) == b"foob"
    assert bytes(out[4:]) == bytes(6)


def test_decode_into_rejects_out_limit_beyond_buffer() -> None:
    out = bytearray(2)
    result = base32_codec.decode_into("MZXW6===", out, out_limit=3)
    assert result.code == ErrorCode.OUTPUT_LIMIT_REACHED
    assert result.written == 0
    assert out == bytearray(2)


def test_decode_into_reports_invalid_symbol() -> None:
    out = bytearray(10)
    result = base32_codec.decode_into("MZXW6===mzxw6===", out)
    assert not result.ok
    assert result.code == ErrorCode.INVALID_SYMBOL
    assert result.written == 0

    result = base32_codec.decode_into("M=Y=====", out)
    assert result.code == ErrorCode.INVALID_SYMBOL


def test_decode_into_failure_is_logged(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="base32_codec")
    base32_codec.decode_into("M=Y=====", bytearray(5))
    assert any("decode failed" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    "plain",
    [
        "",
        "f",
        "fo",
        "foo",
        "foob",
        "fooba",
        "foobar",
        "Hello, World!",
        "asdqwd",
        "MY======",
        "MZXQ====",
        "MZXW6===",
        "MZXW6YQ=",
        "MZXW6YTB",
        "MZXW6YTBOI======",
        "mmmmm",
        "AZXW6YTBOI======1",
        "sizeof() returns the size in bytes of its operand, "
        "but its meaning depends on what the operand is",
    ],
)
def test_buffer_round_trip(plain: str) -> None:
    payload = plain.encode("ascii")
    encoded = bytearray(b"~" * 1024)
    decoded = bytearray(b"~" * 1024)

    assert base32_codec.encode_into(payload, encoded) == ErrorCode.OK
    result = base32_codec.decode_into(encoded, decoded)

    assert result.ok
    assert bytes(decoded[: result.written]) == payload


def test_buffer_api_accepts_memoryview_output() -> None:
    encoded = memoryview(bytearray(b"~" * 20))
    assert base32_codec.encode_into(b"foobar", encoded) == ErrorCode.OK
    assert bytes(encoded[:17]) == b"MZXW6YTBOI======\x00"

    decoded = memoryview(bytearray(8))
    result = base32_codec.decode_into(encoded, decoded)
    assert result == base32_codec.DecodeResult(ErrorCode.OK, 6)
    assert bytes(decoded[:6]) == b"foobar"


def test_decode_into_rejects_negative_out_limit() -> None:
    out = bytearray(b"~" * 5)
    result = base32_codec.decode_into("MZXW6===", out, out_limit=-1)
    assert result == base32_codec.DecodeResult(ErrorCode.OUTPUT_LIMIT_REACHED, 0)
    assert out == bytearray(b"~" * 5)


def test_encode_logs_byte_count_of_wide_buffers(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="base32_codec")
    wide = array.array("H", [0x6666, 0x6F6F])
    encoded = base32_codec.encode(memoryview(wide))
    assert encoded == base32_codec.encode(wide.tobytes())
    assert any(
        record.getMessage() == "encoded 4 bytes into 8 symbols"
        for record in caplog.records
    )
