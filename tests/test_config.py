from proofmarket.config import (
    ADDRESS_ZERO,
    UNIVERSAL_BOMBETTA_ADDRESS,
    AnalyzerConfig,
    ApiConfig,
    BidderConfig,
    ProviderConfig,
    ResolverConfig,
    ValidationConfig,
    WorkerConfig,
)
from proofmarket.systems import ProvingSystemId


def test_validation_defaults():
    config = ValidationConfig()
    assert config.minimum_allowed_proving_time == 30
    assert config.maximum_start_delay == 300
    assert config.maximum_allowed_stake == 1000000000000000000000


def test_bidder_and_resolver_defaults():
    bidder = BidderConfig()
    resolver = ResolverConfig()
    assert bidder.market_address == ADDRESS_ZERO
    assert bidder.max_bid_attempts == 3
    assert bidder.min_bid_delay == 0
    assert resolver.confirmation_blocks == 1
    assert resolver.market_address == bytes(20)


def test_api_defaults():
    config = ApiConfig()
    assert config.server_url == "http://localhost:8080"
    assert config.request_timeout == 30
    assert config.max_retries == 3


def test_analyzer_config_gets_own_validation_default():
    first = AnalyzerConfig(UNIVERSAL_BOMBETTA_ADDRESS, [ProvingSystemId.SP1])
    second = AnalyzerConfig(UNIVERSAL_BOMBETTA_ADDRESS, [])
    first.validation.maximum_start_delay = 1
    assert second.validation.maximum_start_delay == ValidationConfig().maximum_start_delay
    assert first.supported_proving_systems == [ProvingSystemId.SP1]


def test_provider_and_worker_config_hold_values():
    provider = ProviderConfig(rpc_provider="rpc", market_address=ADDRESS_ZERO, server_url="http://localhost:9000")
    worker = WorkerConfig(supported_proving_systems=[ProvingSystemId.GNARK], max_concurrent_jobs=2)
    assert provider.server_url == "http://localhost:9000"
    assert provider.rpc_provider == "rpc"
    assert worker.supported_proving_systems == [ProvingSystemId.GNARK]