"""
sendmany - Batch inscription transfers

Builds one transaction moving many inscriptions to their new owners, with
a single cardinal output paying the fee.
"""

__version__ = "0.3.0"

from sendmany.builder import BuildStage, SendManyBuilder, SendManyResult
from sendmany.errors import (
    ConsistencyError,
    InsufficientValueError,
    RequestFormatError,
    SendManyError,
)
from sendmany.fees import FeeRate
from sendmany.request_file import parse_requests, read_request_file

__all__ = [
    "BuildStage",
    "ConsistencyError",
    "FeeRate",
    "InsufficientValueError",
    "RequestFormatError",
    "SendManyBuilder",
    "SendManyError",
    "SendManyResult",
    "parse_requests",
    "read_request_file",
]
