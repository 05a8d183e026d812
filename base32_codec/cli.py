import argparse
import os
import sys
from typing import List, Optional

from .codec import decode, encode
from .config import CodecConfig, load_codec_config, save_codec_config
from .log import LOG_LEVELS, configure_logging, get_logger

logger = get_logger(__name__)


def _read_bytes(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_bytes(path: str, data: bytes) -> None:
    if path == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        with open(path, "wb") as f:
            f.write(data)


def _write_text(path: str, text: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RFC 4648 base32 encoder/decoder")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        help="Path to a JSON codec config providing defaults for the flags below",
    )
    common.add_argument(
        "--save-config",
        action="store_true",
        help="Write the effective settings back to --config",
    )
    common.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
    )

    enc = subparsers.add_parser("encode", parents=[common])
    enc.add_argument("--input-bytes", required=True)
    enc.add_argument("--output-text", required=True)
    enc.add_argument(
        "--newline",
        action="store_true",
        default=None,
        help="Terminate the encoded text with a newline",
    )

    dec = subparsers.add_parser("decode", parents=[common])
    dec.add_argument("--input-text", required=True)
    dec.add_argument("--output-bytes", required=True)
    dec.add_argument(
        "--out-limit",
        type=int,
        default=None,
        help="Stop after this many decoded bytes",
    )

    return parser


def _load_config(args) -> CodecConfig:
    if args.config is not None and os.path.exists(args.config):
        return load_codec_config(args.config)
    if args.config is None and args.save_config:
        raise ValueError("--save-config requires --config")
    return CodecConfig()


def _finish_config(args, cfg: CodecConfig) -> None:
    if args.save_config:
        save_codec_config(cfg, args.config)
        logger.info("saved codec config to %s", args.config)


def run_encode(args) -> None:
    cfg = _load_config(args)
    if args.newline is not None:
        cfg.newline = args.newline
    if args.log_level is not None:
        cfg.log_level = args.log_level
    configure_logging(cfg.log_level)

    payload = _read_bytes(args.input_bytes)
    text = encode(payload)
    logger.info("encoded %d bytes into %d symbols", len(payload), len(text))
    _write_text(args.output_text, text + ("\n" if cfg.newline else ""))
    _finish_config(args, cfg)


def run_decode(args) -> None:
    cfg = _load_config(args)
    if args.out_limit is not None:
        if args.out_limit < 0:
            raise ValueError("--out-limit must be >= 0")
        cfg.out_limit = args.out_limit
    if args.log_level is not None:
        cfg.log_level = args.log_level
    configure_logging(cfg.log_level)

    encoded_text = _read_text(args.input_text).strip()
    data = decode(encoded_text, out_limit=cfg.out_limit)
    logger.info("decoded %d symbols into %d bytes", len(encoded_text), len(data))
    _write_bytes(args.output_bytes, data)
    _finish_config(args, cfg)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "encode":
            run_encode(args)
        elif args.command == "decode":
            run_decode(args)
        else:
            parser.error("Unknown command")
    except ValueError as exc:
        parser.error(str(exc))


__all__ = ["build_arg_parser", "run_encode", "run_decode", "main"]
