"""Configuration for the provider client and its components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .systems import ProvingSystemId

ADDRESS_ZERO = bytes(20)

# Active market contract address.
UNIVERSAL_BOMBETTA_ADDRESS = bytes.fromhex("e05e737478E4f0b886981aD85CF9a59D55413e8b")


@dataclass
class ValidationConfig:
    """Limits applied when validating incoming requests."""

    minimum_allowed_proving_time: int = 30
    maximum_start_delay: int = 300
    maximum_allowed_stake: int = 1_000_000_000_000_000_000_000


@dataclass
class AnalyzerConfig:
    market_address: bytes
    supported_proving_systems: list[ProvingSystemId]
    validation: ValidationConfig = field(default_factory=ValidationConfig)


@dataclass
class BidderConfig:
    market_address: bytes = ADDRESS_ZERO
    min_bid_delay: int = 0
    max_bid_attempts: int = 3


@dataclass
class ResolverConfig:
    market_address: bytes = ADDRESS_ZERO
    confirmation_blocks: int = 1


@dataclass
class ApiConfig:
    server_url: str = "http://localhost:8080"
    request_timeout: int = 30
    max_retries: int = 3


@dataclass
class WorkerConfig:
    supported_proving_systems: list[ProvingSystemId]
    max_concurrent_jobs: int


@dataclass
class ProviderConfig:
    """Connection details shared by all provider components."""

    rpc_provider: Any
    market_address: bytes
    server_url: str