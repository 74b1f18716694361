r"""Utility functions for decoding and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "decode_json",
    "decode_xml",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

from recast.utils.decoding import decode_json, decode_xml
from recast.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
