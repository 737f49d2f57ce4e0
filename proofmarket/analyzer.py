"""Decides whether an incoming proof request is worth bidding on."""

from __future__ import annotations

from typing import Any

from .config import AnalyzerConfig
from .request import Request
from .validation import validate_request


class RequestAnalyzer:
    """Checks incoming requests against the provider's configured limits."""

    def __init__(self, rpc_provider: Any, config: AnalyzerConfig) -> None:
        self._rpc_provider = rpc_provider
        self.config = config

    def analyze(self, request: Request, latest_timestamp: int) -> None:
        """Raise a ValidationError if the request must not be bid on."""
        validation = self.config.validation
        validate_request(
            request,
            latest_timestamp,
            self.config.market_address,
            validation.minimum_allowed_proving_time,
            validation.maximum_start_delay,
            validation.maximum_allowed_stake,
            self.config.supported_proving_systems,
        )