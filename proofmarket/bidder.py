"""Submits bids on proof requests in the market's reverse Dutch auction."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from .config import ADDRESS_ZERO, BidderConfig
from .errors import TransactionError, TransactionFailure, TransactionSetupError
from .request import OnChainProofRequest

logger = logging.getLogger(__name__)

_SCALE = 10**18
_U64_MAX = (1 << 64) - 1


class PendingTransaction(Protocol):
    """A sent transaction whose receipt can be awaited."""

    def get_receipt(self) -> Any: ...


class BidMarket(Protocol):
    """The market contract calls the bidder relies on."""

    def active_job_requester(self, market_address: bytes, request_id: bytes) -> bytes: ...

    def bid(
        self,
        market_address: bytes,
        onchain_proof_request: OnChainProofRequest,
        signature: bytes,
        value: int,
    ) -> PendingTransaction: ...


def calculate_current_reward(
    current_timestamp: int,
    start_timestamp: int,
    end_timestamp: int,
    min_reward: int,
    max_reward: int,
) -> int:
    """Reward offered at ``current_timestamp``, rising linearly from min to max."""
    elapsed = current_timestamp - start_timestamp
    total = end_timestamp - start_timestamp
    increase_factor = elapsed * _SCALE // total
    increase_amount = increase_factor * (max_reward - min_reward) // _SCALE
    return min_reward + increase_amount


def calculate_target_timestamp(
    target_amount: int,
    start_timestamp: int,
    end_timestamp: int,
    min_reward: int,
    max_reward: int,
) -> int:
    """Timestamp at which the auction reward reaches ``target_amount``."""
    if target_amount < min_reward or target_amount > max_reward:
        raise TransactionSetupError("Target amount is out of bounds")
    total = end_timestamp - start_timestamp
    elapsed = total * (target_amount - min_reward) // (max_reward - min_reward)
    target = start_timestamp + elapsed
    if not 0 <= target <= _U64_MAX:
        raise TransactionSetupError(
            f"Failed to convert target timestamp: {target} does not fit in 64 bits"
        )
    return target


class RequestBidder:
    """Waits for the desired reward and places a bid on the market contract."""

    def __init__(
        self,
        rpc_provider: BidMarket,
        config: BidderConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rpc_provider = rpc_provider
        self.config = config
        self._sleep = sleep

    def submit_bid(
        self,
        onchain_proof_request: OnChainProofRequest,
        signature: bytes,
        target_amount: int,
        current_block_ts: int,
        request_id: bytes,
    ) -> Any:
        """Bid on the request once its reward reaches ``target_amount``; return the receipt."""
        start = onchain_proof_request.start_auction_timestamp
        end = onchain_proof_request.end_auction_timestamp
        if current_block_ts < start:
            raise TransactionSetupError("Auction has not started based on current block ts")
        if current_block_ts > end:
            raise TransactionSetupError("Auction has expired")
        logger.info("bidder: check timestamps done")

        min_reward = onchain_proof_request.min_reward_amount
        max_reward = onchain_proof_request.max_reward_amount
        current_amount = calculate_current_reward(
            current_block_ts, start, end, min_reward, max_reward
        )
        if current_amount < target_amount:
            target_ts = calculate_target_timestamp(
                target_amount, start, end, min_reward, max_reward
            )
            self._sleep(max(0, target_ts - current_block_ts))
        logger.info("bidder: calculate target ts for target amount")

        market = self.config.market_address
        try:
            requester = self.rpc_provider.active_job_requester(market, request_id)
        except Exception as exc:
            raise TransactionSetupError(str(exc)) from exc
        if requester != ADDRESS_ZERO:
            raise TransactionSetupError("Another Bid has already submitted for this Auction")
        logger.info("bidder: requester address = 0x%s", bytes(requester).hex())

        try:
            pending = self.rpc_provider.bid(
                market, onchain_proof_request, signature, onchain_proof_request.minimum_stake
            )
        except Exception as exc:
            raise TransactionError(str(exc)) from exc
        try:
            return pending.get_receipt()
        except Exception as exc:
            raise TransactionFailure(str(exc)) from exc