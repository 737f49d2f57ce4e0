"""Resolves won auctions by submitting the proof to the market contract."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .bidder import PendingTransaction
from .config import ResolverConfig
from .errors import TransactionError, TransactionFailure

logger = logging.getLogger(__name__)


class ResolveMarket(Protocol):
    """The market contract call the resolver relies on."""

    def resolve(
        self,
        market_address: bytes,
        request_id: bytes,
        opaque_submission: bytes,
        partial_commitment: bytes,
    ) -> PendingTransaction: ...


class RequestResolver:
    """Sends resolve transactions for completed proof requests."""

    def __init__(self, rpc_provider: ResolveMarket, config: ResolverConfig) -> None:
        self.rpc_provider = rpc_provider
        self.config = config

    def resolve_request(
        self,
        request_id: bytes,
        opaque_submission: bytes,
        submitted_partial_commitment: bytes,
    ) -> Any:
        """Submit the proof for ``request_id`` and return the transaction receipt."""
        try:
            pending = self.rpc_provider.resolve(
                self.config.market_address,
                request_id,
                opaque_submission,
                submitted_partial_commitment,
            )
        except Exception as exc:
            raise TransactionError(str(exc)) from exc
        logger.info("resolve call_return done, getting txs recipt")
        try:
            receipt = pending.get_receipt()
        except Exception as exc:
            raise TransactionFailure(str(exc)) from exc
        logger.info("resolve txs receipt: %r", receipt)
        return receipt