import json

import pytest
import responses

from proofmarket.abi import VerifierDetails
from proofmarket.analyzer import RequestAnalyzer
from proofmarket.api import ProviderApi
from proofmarket.bidder import RequestBidder
from proofmarket.client import ProviderClient
from proofmarket.config import (
    ADDRESS_ZERO,
    UNIVERSAL_BOMBETTA_ADDRESS,
    AnalyzerConfig,
    ApiConfig,
    BidderConfig,
    ProviderConfig,
    ResolverConfig,
)
from proofmarket.errors import (
    RequestAnalysisError,
    RequestParsingError,
    RpcRequestError,
    ServerRequestError,
    TransactionFailure,
    WorkerExecutionFailed,
)
from proofmarket.request import OnChainProofRequest, Request
from proofmarket.resolver import RequestResolver
from proofmarket.systems import GnarkConfig, GnarkProofParams, ProvingSystemId
from proofmarket.worker import ComputeWorker, WorkerManager, WorkResult

SERVER_URL = "http://localhost:8080"
REQUEST_ID = b"\x11" * 32


class FakePending:
    def __init__(self, receipt):
        self.receipt = receipt

    def get_receipt(self):
        return self.receipt


class FakeRpc:
    def __init__(self, timestamp=1000, requester=ADDRESS_ZERO):
        self.timestamp = timestamp
        self.requester = requester
        self.bids = []
        self.resolves = []

    def latest_block_timestamp(self):
        if isinstance(self.timestamp, Exception):
            raise self.timestamp
        return self.timestamp

    def compute_request_id(self, onchain_proof_request, signature):
        return REQUEST_ID

    def active_job_requester(self, market_address, request_id):
        return self.requester

    def bid(self, market_address, onchain_proof_request, signature, value):
        self.bids.append((market_address, signature, value))
        return FakePending("bid-receipt")

    def resolve(self, market_address, request_id, opaque_submission, partial_commitment):
        self.resolves.append((market_address, request_id, opaque_submission, partial_commitment))
        return FakePending("resolve-receipt")


class RecordingWorker(ComputeWorker):
    def __init__(self):
        self.seen = []

    def execute(self, request):
        self.seen.append(request)
        return WorkResult(opaque_submission=b"proof-bytes", partial_commitment=bytes(32))


class StubApi:
    def __init__(self, items):
        self.items = items

    def subscribe_to_markets(self):
        return iter(self.items)


def _extra_data() -> bytes:
    return VerifierDetails(
        verifier=bytes(20),
        selector=bytes(4),
        is_sha_commitment=False,
        public_inputs_offset=0,
        public_inputs_length=0,
        has_partial_commitment_result_check=False,
        submitted_partial_commitment_result_offset=0,
        submitted_partial_commitment_result_length=0,
        predetermined_partial_commitment=bytes(32),
    ).abi_encode()


def _request(market=UNIVERSAL_BOMBETTA_ADDRESS) -> Request:
    params = GnarkProofParams(
        config=GnarkConfig.Groth16Bn254, r1cs=b"\x01\x02", public_inputs={"a": 1}, input={"b": 2}
    )
    onchain = OnChainProofRequest(
        market=market,
        signer=bytes(20),
        start_auction_timestamp=1000,
        end_auction_timestamp=2000,
        proving_time=60,
        min_reward_amount=10,
        max_reward_amount=20,
        minimum_stake=5,
        extra_data=_extra_data(),
    )
    return Request(
        proving_system_id=ProvingSystemId.GNARK,
        proving_system_information=params,
        onchain_proof_request=onchain,
        signature=bytes(65),
    )


def _client(rpc, workers=None, api=None):
    worker = RecordingWorker()
    if workers is None:
        workers = {ProvingSystemId.GNARK: worker}
    config = ProviderConfig(rpc, UNIVERSAL_BOMBETTA_ADDRESS, SERVER_URL)
    client = ProviderClient(
        config=config,
        api=api or ProviderApi(ApiConfig(server_url=SERVER_URL)),
        analyzer=RequestAnalyzer(
            rpc, AnalyzerConfig(UNIVERSAL_BOMBETTA_ADDRESS, list(workers))
        ),
        bidder=RequestBidder(rpc, BidderConfig(market_address=UNIVERSAL_BOMBETTA_ADDRESS)),
        resolver=RequestResolver(rpc, ResolverConfig(market_address=UNIVERSAL_BOMBETTA_ADDRESS)),
        worker_manager=WorkerManager(workers),
    )
    return client, worker


def test_process_request_happy_path():
    rpc = FakeRpc()
    client, worker = _client(rpc)
    request = _request()
    receipt = client.process_request(REQUEST_ID, request)
    assert receipt == "resolve-receipt"
    assert rpc.bids == [(UNIVERSAL_BOMBETTA_ADDRESS, request.signature, 5)]
    assert rpc.resolves == [(UNIVERSAL_BOMBETTA_ADDRESS, REQUEST_ID, b"proof-bytes", bytes(32))]
    assert worker.seen == [request]


def test_missing_block_is_rpc_error():
    client, _ = _client(FakeRpc(timestamp=None))
    with pytest.raises(RpcRequestError) as info:
        client.process_request(REQUEST_ID, _request())
    assert "Block header not found" in str(info.value)


def test_rpc_failure_is_rpc_error():
    client, _ = _client(FakeRpc(timestamp=ConnectionError("down")))
    with pytest.raises(RpcRequestError):
        client.process_request(REQUEST_ID, _request())


def test_analysis_failure():
    rpc = FakeRpc()
    client, _ = _client(rpc)
    with pytest.raises(RequestAnalysisError) as info:
        client.process_request(REQUEST_ID, _request(market=bytes(20)))
    assert "market address invalid" in str(info.value)
    assert rpc.bids == []


def test_bid_failure_is_transaction_failure():
    rpc = FakeRpc(requester=b"\x01" * 20)
    client, worker = _client(rpc)
    with pytest.raises(TransactionFailure) as info:
        client.process_request(REQUEST_ID, _request())
    assert "bid txs failed" in str(info.value)
    assert worker.seen == []


def test_missing_worker():
    rpc = FakeRpc()
    client, _ = _client(rpc, workers={ProvingSystemId.RISC0: RecordingWorker()})
    client.analyzer.config.supported_proving_systems.append(ProvingSystemId.GNARK)
    with pytest.raises(WorkerExecutionFailed) as info:
        client.process_request(REQUEST_ID, _request())
    assert "worker not set" in str(info.value)
    assert rpc.resolves == []


def test_resolve_failure_is_transaction_failure():
    class BrokenResolveRpc(FakeRpc):
        def resolve(self, *args):
            raise RuntimeError("reverted")

    client, _ = _client(BrokenResolveRpc())
    with pytest.raises(TransactionFailure) as info:
        client.process_request(REQUEST_ID, _request())
    assert "resolve txs failed" in str(info.value)


def test_run_skips_errors_and_processes_requests():
    rpc = FakeRpc()
    items = [RequestParsingError("bad event"), _request(market=bytes(20)), _request()]
    client, worker = _client(rpc, api=StubApi(items))
    client.run()
    assert len(rpc.bids) == 1
    assert len(rpc.resolves) == 1
    assert len(worker.seen) == 1


def test_run_invalid_server_url():
    rpc = FakeRpc()
    client, _ = _client(rpc, api=ProviderApi(ApiConfig(server_url="ftp://nowhere")))
    with pytest.raises(ServerRequestError):
        client.run()


def test_run_over_event_stream():
    request = _request()
    body = "data: " + json.dumps(request.to_json()) + "\n\n"
    rpc = FakeRpc()
    client, worker = _client(rpc)
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            SERVER_URL + "/subscribe",
            body=body,
            content_type="text/event-stream",
        )
        client.run()
    assert rpc.resolves == [(UNIVERSAL_BOMBETTA_ADDRESS, REQUEST_ID, b"proof-bytes", bytes(32))]
    assert worker.seen[0].proving_system_information == request.proving_system_information