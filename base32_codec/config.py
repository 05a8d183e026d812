import dataclasses
import json
from typing import Optional

from .log import parse_log_level


@dataclasses.dataclass
class CodecConfig:
    out_limit: Optional[int] = None
    newline: bool = False
    log_level: str = "WARNING"
    version: str = "v1"

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "out_limit": self.out_limit,
            "newline": self.newline,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CodecConfig":
        version = data.get("version", "v1")
        if version != "v1":
            raise ValueError(f"Unsupported codec config version: {version}")
        out_limit_raw = data.get("out_limit")
        if isinstance(out_limit_raw, str) and out_limit_raw.lower() == "none":
            out_limit = None
        else:
            out_limit = None if out_limit_raw is None else int(out_limit_raw)
        if out_limit is not None and out_limit < 0:
            raise ValueError("out_limit must be >= 0")
        newline = data.get("newline", False)
        if not isinstance(newline, bool):
            raise ValueError(f"newline must be true or false, got {newline!r}")
        log_level = str(data.get("log_level", "WARNING")).upper()
        parse_log_level(log_level)
        return cls(
            out_limit=out_limit,
            newline=newline,
            log_level=log_level,
            version=version,
        )


def save_codec_config(cfg: CodecConfig, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, indent=2)
        f.write("\n")


def load_codec_config(path: str) -> CodecConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return CodecConfig.from_dict(raw)


__all__ = ["CodecConfig", "load_codec_config", "save_codec_config"]
