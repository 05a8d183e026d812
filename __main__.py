"""CLI shim for running the codec directly from the repository checkout."""

from base32_codec.cli import main
from base32_codec.codec import (
    decode,
    decode_into,
    encode,
    encode_into,
    encoded_length,
    max_decoded_size,
)

__all__ = [
    "decode",
    "decode_into",
    "encode",
    "encode_into",
    "encoded_length",
    "main",
    "max_decoded_size",
]


if __name__ == "__main__":
    main()
