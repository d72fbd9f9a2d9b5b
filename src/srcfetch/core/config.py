"""Configuration management for srcfetch."""

import os
from dataclasses import dataclass, field

DEFAULT_METADATA_URL = "http://169.254.169.254:80/latest"


@dataclass
class S3Config:
    """S3 and S3-compatible storage configuration."""

    default_region: str = "us-east-1"
    # Instance metadata service root used for credential discovery
    metadata_url: str = DEFAULT_METADATA_URL
    metadata_timeout: float = 1.0
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_attempts: int = 5


@dataclass
class HgConfig:
    """Mercurial client configuration."""

    binary: str = "hg"
    # How often a running hg process is checked against the cancellation token
    poll_interval: float = 0.1


@dataclass
class CopyConfig:
    """Streaming copy configuration."""

    buffer_size: int = 32 * 1024


@dataclass
class Config:
    """Main library configuration."""

    s3: S3Config = field(default_factory=S3Config)
    hg: HgConfig = field(default_factory=HgConfig)
    copy: CopyConfig = field(default_factory=CopyConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        # S3 configuration
        if url := os.environ.get("AWS_METADATA_URL"):
            config.s3.metadata_url = url
        if region := os.environ.get("SRCFETCH_DEFAULT_REGION"):
            config.s3.default_region = region

        # Mercurial configuration
        if binary := os.environ.get("SRCFETCH_HG_BINARY"):
            config.hg.binary = binary

        if size := os.environ.get("SRCFETCH_COPY_BUFFER_SIZE"):
            config.copy.buffer_size = int(size)

        return config
