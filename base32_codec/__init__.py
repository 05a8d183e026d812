"""RFC 4648 base32 encoding for embedding binary payloads in text."""

from .alphabet import ALPHABET, PADDING_SYMBOL, classify_symbol
from .batch import decode_batch, encode_batch
from .codec import (
    GROUP_LAYOUTS,
    DecodeResult,
    GroupLayout,
    decode,
    decode_into,
    encode,
    encode_into,
    encoded_length,
    max_decoded_size,
)
from .config import CodecConfig, load_codec_config, save_codec_config
from .errors import Base32Error, ErrorCode, InvalidSymbolError
from .log import configure_logging, get_logger

__all__ = [
    "ALPHABET",
    "GROUP_LAYOUTS",
    "PADDING_SYMBOL",
    "Base32Error",
    "CodecConfig",
    "DecodeResult",
    "ErrorCode",
    "GroupLayout",
    "InvalidSymbolError",
    "classify_symbol",
    "configure_logging",
    "decode",
    "decode_batch",
    "decode_into",
    "encode",
    "encode_batch",
    "encode_into",
    "encoded_length",
    "get_logger",
    "load_codec_config",
    "max_decoded_size",
    "save_codec_config",
]

__version__ = "0.1.0"
