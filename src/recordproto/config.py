"""Codec configuration.

This module provides the CodecConfig dataclass that tunes the wire codec
without changing its format: any configuration can decode data written by
any other configuration.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for encode/decode.

    Attributes:
        compression_level: zlib compression level, -1 (zlib default) to 9.
            0 stores the payload uncompressed inside a zlib container.
        trim_trailing_absent: Drop trailing absent (None) slots from value
            tuples (default True). Decoders treat missing trailing slots as
            absent, so trimmed and untrimmed data decode identically.
        max_depth: Maximum record nesting depth (default 32). Deeper
            structures raise EncodeError / DecodeError.

    Examples:
        ```python
        from recordproto import CodecConfig, encode

        # Favour speed over size
        fast = CodecConfig(compression_level=1)
        data = encode(user, converter, config=fast)

        # Keep every slot, e.g. for byte-level inspection
        verbose = CodecConfig(trim_trailing_absent=False)
        ```
    """

    compression_level: int = -1
    trim_trailing_absent: bool = True
    max_depth: int = 32

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not -1 <= self.compression_level <= 9:
            raise ValueError(
                f"compression_level must be -1..9, got {self.compression_level}"
            )

        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")


DEFAULT_CONFIG = CodecConfig()
