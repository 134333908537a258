"""Persistence of validation results between the validate and report passes."""

from license_validator.storage.results import (
    ResultsReader,
    ResultsStore,
    ResultsWriter,
    decode_result,
    encode_result,
    read_settings,
    write_settings,
)

__all__ = [
    "ResultsReader",
    "ResultsStore",
    "ResultsWriter",
    "decode_result",
    "encode_result",
    "read_settings",
    "write_settings",
]
