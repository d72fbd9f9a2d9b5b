"""Test fakes for testing without real infrastructure.

This module provides in-memory implementations of:
- the boto3 S3 client calls used by S3Getter
- the hg command runner used by HgGetter

Example:
    from tests.fakes import FakeS3Client, FakeHgRunner

    getter = S3Getter(client_factory=lambda location: FakeS3Client({"k": b"v"}))
"""

from .hg import FakeHgRunner
from .s3 import FakeBody, FakeS3Client

__all__ = [
    "FakeBody",
    "FakeHgRunner",
    "FakeS3Client",
]
