import pytest

from proofmarket.config import ResolverConfig
from proofmarket.errors import TransactionError, TransactionFailure
from proofmarket.resolver import RequestResolver

MARKET = b"\x11" * 20
REQUEST_ID = b"\x42" * 32
COMMITMENT = bytes(32)


class FakePending:
    def __init__(self, receipt, error=None):
        self.receipt = receipt
        self.error = error

    def get_receipt(self):
        if self.error:
            raise self.error
        return self.receipt


class FakeMarket:
    def __init__(self, send_error=None, receipt_error=None):
        self.send_error = send_error
        self.receipt_error = receipt_error
        self.calls = []

    def resolve(self, market_address, request_id, opaque_submission, partial_commitment):
        if self.send_error:
            raise self.send_error
        self.calls.append((market_address, request_id, opaque_submission, partial_commitment))
        return FakePending({"tx": request_id}, self.receipt_error)


def make_resolver(market):
    return RequestResolver(market, ResolverConfig(market_address=MARKET))


def test_resolve_returns_receipt_and_passes_arguments():
    market = FakeMarket()
    receipt = make_resolver(market).resolve_request(REQUEST_ID, b"proof", COMMITMENT)
    assert receipt == {"tx": REQUEST_ID}
    assert market.calls == [(MARKET, REQUEST_ID, b"proof", COMMITMENT)]


def test_resolve_uses_configured_market():
    market = FakeMarket()
    other = b"\x77" * 20
    RequestResolver(market, ResolverConfig(market_address=other)).resolve_request(
        REQUEST_ID, b"", COMMITMENT
    )
    assert market.calls[0][0] == other


def test_send_failure_is_transaction_error():
    resolver = make_resolver(FakeMarket(send_error=RuntimeError("insufficient funds")))
    with pytest.raises(TransactionError) as exc:
        resolver.resolve_request(REQUEST_ID, b"proof", COMMITMENT)
    assert exc.value.message == "insufficient funds"


def test_receipt_failure_is_transaction_failure():
    resolver = make_resolver(FakeMarket(receipt_error=RuntimeError("reverted")))
    with pytest.raises(TransactionFailure) as exc:
        resolver.resolve_request(REQUEST_ID, b"proof", COMMITMENT)
    assert str(exc.value) == "Transaction failed: reverted"