"""Provider-side library for a proof request market: requests, validation, bidding, proving and resolution."""

__version__ = "0.1.0"