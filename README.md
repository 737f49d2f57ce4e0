# proofmarket

`proofmarket` is a library for the provider side of a proof request market.
A provider reads proof requests from a market server's server-sent event
stream, checks each one, bids for it in an on-chain reverse Dutch auction,
produces the proof with a worker for the request's proving system, and
resolves the request on chain.

## Installation

```
pip install proofmarket
```

With the test dependencies:

```
pip install "proofmarket[test]"
```

## Modules

- `proofmarket.systems` — `ProvingSystemId` (`aligned-layer`, `arkworks`,
  `gnark`, `risc0`, `sp1`), `parse_proving_system_id` (case-insensitive),
  `VerifierConstraints`, and the parameter and configuration types
  `ArkworksProofParams`, `GnarkProofParams`, `Risc0ProofParams`,
  `Sp1ProofParams`, `ArkworksConfig`, `GnarkConfig`, `Risc0Config`,
  `Sp1Config`. Parameter types have `validate_inputs`, `proof_configuration`,
  `proving_system_id`, `to_json` and `from_json`.
- `proofmarket.aligned_layer` — `AlignedLayerProofParams` and
  `AlignedLayerConfig`, wrapping RISC Zero, SP1 or gnark parameters.
- `proofmarket.registry` — `parse_params(system_id, data)` for JSON bytes of
  one system, and `params_to_json` / `params_from_json` for the form tagged
  with the system name.
- `proofmarket.abi` — `VerifierDetails` with `abi_encode()`, and
  `decode_verifier_details(data)`.
- `proofmarket.request` — `OnChainProofRequest` and `Request`, read from and
  written to the server's JSON with `from_json` / `to_json`. A signature is
  65 bytes (`r`, `s`, parity).
- `proofmarket.validation` — `validate_request` runs, in order: proving
  system structure (supported, consistent, `extraData` decodes as
  `VerifierDetails`, inputs valid), market address, reward and stake amounts,
  auction timing, nonce. It raises `ValidationError` at the first failure.
- `proofmarket.config` — `ValidationConfig` (defaults: 30 s minimum proving
  time, 300 s maximum start delay, 1000 ether maximum stake),
  `AnalyzerConfig`, `BidderConfig`, `ResolverConfig`, `ApiConfig`
  (default server `http://localhost:8080`), `WorkerConfig`,
  `ProviderConfig`, and `UNIVERSAL_BOMBETTA_ADDRESS`.
- `proofmarket.api` — `ProviderApi.subscribe_to_markets()` returns an
  iterator over `GET <server>/subscribe`; each item is a `Request` or a
  `RequestParsingError`. `iter_sse_events` and `parse_event_data` are usable
  on their own.
- `proofmarket.analyzer` — `RequestAnalyzer.analyze(request, latest_timestamp)`.
- `proofmarket.bidder` — `RequestBidder.submit_bid(...)`, plus
  `calculate_current_reward` and `calculate_target_timestamp` for the
  auction's linear reward curve. If the current reward is below the target,
  the bidder sleeps until the target timestamp before bidding.
- `proofmarket.resolver` — `RequestResolver.resolve_request(...)`.
- `proofmarket.worker` — `ComputeWorker` (abstract `execute(request)`),
  `WorkResult`, `ResourceRequirements`, and `WorkerManager`, which routes a
  request to the worker registered for its system.
- `proofmarket.gnark_worker` — `GnarkWorker`, which writes the parameters
  (see `build_prover_input`) to a temporary JSON file and runs
  `gnark-prover --params <file> --output <file>`.
- `proofmarket.builder` / `proofmarket.client` — `ProviderClientBuilder` and
  `ProviderClient`.

## The RPC provider object

The package has no chain client of its own. `ProviderConfig.rpc_provider` is
any object with these methods:

- `latest_block_timestamp() -> int | None`
- `compute_request_id(onchain_proof_request, signature) -> bytes`
- `active_job_requester(market_address, request_id) -> bytes` — the
  requester address of an existing bid, or 20 zero bytes if there is none
- `bid(market_address, onchain_proof_request, signature, value)` — returns an
  object with `get_receipt()`
- `resolve(market_address, request_id, opaque_submission, partial_commitment)`
  — returns an object with `get_receipt()`

## Example

```python
from proofmarket.builder import ProviderClientBuilder
from proofmarket.config import ProviderConfig, UNIVERSAL_BOMBETTA_ADDRESS
from proofmarket.gnark_worker import GnarkWorker

config = ProviderConfig(
    rpc_provider=my_rpc_provider,  # your object with the methods above
    market_address=UNIVERSAL_BOMBETTA_ADDRESS,
    server_url="http://localhost:8080",
)

client = (
    ProviderClientBuilder(config)
    .with_worker("gnark", GnarkWorker())
    .with_validation_config(60, 300, 10**21)
    .build()
)
client.run()
```

`build()` raises `BuilderError` if no worker is registered. `run()` handles
requests until the stream ends; each request is analysed, bid on at its
minimum reward, proved and resolved, and failures are logged rather than
raised. `process_request(request_id, request)` does the same for one request
and returns the resolve receipt.

## What the package does not do

- It does not talk to a blockchain: request ids, bids, job lookups and
  resolve transactions all go through the RPC provider object you supply.
- `validate_request` does not check the request's signature or nonce
  reuse, and the per-system `validate` methods accept any decoded
  `VerifierDetails` without comparing them to the system's constraints.
- `GnarkWorker` is the only worker included. Arkworks, RISC Zero, SP1 and
  Aligned Layer requests can be parsed and validated, but you must supply
  your own `ComputeWorker` to prove them.
- `GnarkWorker` returns 32 zero bytes as its submission and partial
  commitment; it does not format gnark proofs for on-chain verification.
- There is no command-line program.

## Errors

All failures are exceptions. Primitive and validation errors derive from
`PrimitivesError` (e.g. `ValidationError`, `ProverInputsError`,
`EncodingError`); provider pipeline errors derive from `ProviderError`
(e.g. `TransactionSetupError`, `BuilderError`, `WorkerExecutionFailed`),
all in `proofmarket.errors`.