"""The provider client: listens for requests, bids, proves and resolves."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .analyzer import RequestAnalyzer
from .api import ProviderApi
from .bidder import RequestBidder
from .config import ProviderConfig
from .errors import (
    PrimitivesError,
    ProviderError,
    RequestAnalysisError,
    RequestParsingError,
    RpcRequestError,
    ServerRequestError,
    TransactionFailure,
    WorkerExecutionFailed,
)
from .request import OnChainProofRequest, Request
from .resolver import RequestResolver
from .worker import WorkerManager

logger = logging.getLogger(__name__)


class ChainRpc(Protocol):
    """Chain access the client itself needs beyond bidding and resolving."""

    def latest_block_timestamp(self) -> int | None: ...

    def compute_request_id(
        self, onchain_proof_request: OnChainProofRequest, signature: bytes
    ) -> bytes: ...


class ProviderClient:
    """Processes every request streamed by the market server."""

    def __init__(
        self,
        config: ProviderConfig,
        api: ProviderApi,
        analyzer: RequestAnalyzer,
        bidder: RequestBidder,
        resolver: RequestResolver,
        worker_manager: WorkerManager,
    ) -> None:
        self.config = config
        self.api = api
        self.analyzer = analyzer
        self.bidder = bidder
        self.resolver = resolver
        self.worker_manager = worker_manager

    def run(self) -> None:
        """Subscribe to the server and handle requests until the stream ends."""
        try:
            stream = self.api.subscribe_to_markets()
        except ProviderError as exc:
            raise ServerRequestError(str(exc)) from exc
        logger.info("subscribed to markets, waiting for incoming requests")
        for item in stream:
            if isinstance(item, RequestParsingError):
                logger.error("Error receiving event: %s", item)
            else:
                self._handle(item)
            logger.info("request processed")

    def _handle(self, request: Request) -> None:
        try:
            request_id = self.config.rpc_provider.compute_request_id(
                request.onchain_proof_request, request.signature
            )
        except Exception as exc:
            logger.error("Failed to compute request id: %s", exc)
            return
        logger.info(
            "Incoming proof request - proving system id: %s, onchain proof request: %r, "
            "request ID: 0x%s",
            request.proving_system_id,
            request.onchain_proof_request,
            bytes(request_id).hex(),
        )
        try:
            self.process_request(request_id, request)
        except ProviderError as exc:
            logger.error("Failed to process proof request: %s", exc)

    def _latest_timestamp(self) -> int:
        try:
            timestamp = self.config.rpc_provider.latest_block_timestamp()
        except Exception as exc:
            raise RpcRequestError(str(exc)) from exc
        if timestamp is None:
            raise RpcRequestError("Block header not found")
        return timestamp

    def process_request(self, request_id: bytes, request: Request) -> Any:
        """Analyse, bid on, prove and resolve one request; return the resolve receipt."""
        current_ts = self._latest_timestamp()
        logger.info("latest block timesetamp fetched: %d", current_ts)

        try:
            self.analyzer.analyze(request, current_ts)
        except (PrimitivesError, ProviderError) as exc:
            raise RequestAnalysisError(str(exc)) from exc
        logger.info("analysis done")

        onchain = request.onchain_proof_request
        try:
            self.bidder.submit_bid(
                onchain, request.signature, onchain.min_reward_amount, current_ts, request_id
            )
        except ProviderError as exc:
            raise TransactionFailure(f"bid txs failed: {exc}") from exc
        logger.info("bid transaction submitted")

        try:
            work_result = self.worker_manager.execute(request)
        except (PrimitivesError, ProviderError) as exc:
            raise WorkerExecutionFailed(str(exc)) from exc
        logger.info("worker executed")

        try:
            receipt = self.resolver.resolve_request(
                request_id, work_result.opaque_submission, work_result.partial_commitment
            )
        except ProviderError as exc:
            raise TransactionFailure(f"resolve txs failed: {exc}") from exc
        logger.info("resolve transaction submitted")
        return receipt