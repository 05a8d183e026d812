import enum


class ErrorCode(enum.IntEnum):
    OK = 0
    # Classifier outcome only, never returned from encode_into/decode_into
    PADDING_ENCOUNTERED = -1
    INVALID_SYMBOL = -2
    OUTPUT_LIMIT_REACHED = -3


class Base32Error(ValueError):
    code: ErrorCode = ErrorCode.INVALID_SYMBOL


class InvalidSymbolError(Base32Error):
    code = ErrorCode.INVALID_SYMBOL

    def __init__(self, symbol: str, position: int, after_padding: bool = False):
        self.symbol = symbol
        self.position = position
        self.after_padding = after_padding
        if after_padding:
            message = f"Symbol {symbol!r} at position {position} follows padding"
        else:
            message = f"Invalid base32 symbol {symbol!r} at position {position}"
        super().__init__(message)


__all__ = ["ErrorCode", "Base32Error", "InvalidSymbolError"]
