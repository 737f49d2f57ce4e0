"""Step-by-step construction of a ProviderClient."""

from __future__ import annotations

from typing import Any

from .analyzer import RequestAnalyzer
from .api import ProviderApi
from .bidder import RequestBidder
from .client import ProviderClient
from .config import (
    AnalyzerConfig,
    ApiConfig,
    BidderConfig,
    ProviderConfig,
    ResolverConfig,
    ValidationConfig,
)
from .errors import BuilderError
from .resolver import RequestResolver
from .systems import ProvingSystemId, parse_proving_system_id
from .worker import ComputeWorker, WorkerManager


class ProviderClientBuilder:
    """Collects workers and component settings, then builds the client."""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config
        self.workers: dict[ProvingSystemId, ComputeWorker] = {}
        self.validation_config = ValidationConfig()
        self.bidder_config = BidderConfig(market_address=config.market_address)
        self.resolver_config = ResolverConfig(market_address=config.market_address)
        self.api_config = ApiConfig(server_url=config.server_url)

    def with_worker(self, proving_system: Any, worker: ComputeWorker) -> ProviderClientBuilder:
        """Register ``worker`` for a proving system given by id or name."""
        if isinstance(proving_system, ProvingSystemId):
            system_id = proving_system
        elif isinstance(proving_system, str):
            try:
                system_id = parse_proving_system_id(proving_system)
            except ValueError as exc:
                raise BuilderError(str(exc)) from exc
        else:
            raise BuilderError(f"Invalid proving system: {proving_system!r}")
        self.workers[system_id] = worker
        return self

    def with_validation_config(
        self,
        minimum_allowed_proving_time: int,
        maximum_start_delay: int,
        maximum_allowed_stake: int,
    ) -> ProviderClientBuilder:
        self.validation_config = ValidationConfig(
            minimum_allowed_proving_time=minimum_allowed_proving_time,
            maximum_start_delay=maximum_start_delay,
            maximum_allowed_stake=maximum_allowed_stake,
        )
        return self

    def with_bidder_config(self, min_bid_delay: int, max_bid_attempts: int) -> ProviderClientBuilder:
        self.bidder_config.min_bid_delay = min_bid_delay
        self.bidder_config.max_bid_attempts = max_bid_attempts
        return self

    def with_resolver_config(self, confirmation_blocks: int) -> ProviderClientBuilder:
        self.resolver_config.confirmation_blocks = confirmation_blocks
        return self

    def with_api_config(self, request_timeout: int, max_retries: int) -> ProviderClientBuilder:
        self.api_config.request_timeout = request_timeout
        self.api_config.max_retries = max_retries
        return self

    def build(self) -> ProviderClient:
        """Create the client; at least one worker must be registered."""
        if not self.workers:
            raise BuilderError(
                "No workers registered. Provider must support at least one system."
            )
        analyzer_config = AnalyzerConfig(
            market_address=self.config.market_address,
            supported_proving_systems=list(self.workers),
            validation=self.validation_config,
        )
        rpc = self.config.rpc_provider
        return ProviderClient(
            config=self.config,
            api=ProviderApi(self.api_config),
            analyzer=RequestAnalyzer(rpc, analyzer_config),
            bidder=RequestBidder(rpc, self.bidder_config),
            resolver=RequestResolver(rpc, self.resolver_config),
            worker_manager=WorkerManager(self.workers),
        )