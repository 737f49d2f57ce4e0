"""Checks a provider runs on an incoming proof request before bidding."""

from __future__ import annotations

from collections.abc import Iterable

from .abi import decode_verifier_details
from .errors import PrimitivesError, ValidationError
from .request import Request
from .systems import ProvingSystemId


def validate_request(
    request: Request,
    latest_timestamp: int,
    market_address: bytes,
    minimum_proving_time: int,
    maximum_start_delay: int,
    maximum_allowed_stake: int,
    supported_proving_systems: Iterable[ProvingSystemId],
) -> None:
    """Run every check in order, raising ValidationError on the first failure."""
    validate_proving_system_structure(request, supported_proving_systems)
    validate_market_address(request, market_address)
    validate_amount_constraints(request, maximum_allowed_stake)
    validate_time_constraints(
        request, latest_timestamp, minimum_proving_time, maximum_start_delay
    )
    validate_nonce(request)


def validate_proving_system_structure(
    request: Request, supported_proving_systems: Iterable[ProvingSystemId]
) -> None:
    """Check the request's proving system is supported and consistently described."""
    if request.proving_system_id not in set(supported_proving_systems):
        raise ValidationError("proving system id not supported")

    information = request.proving_system_information
    if information.proving_system_id() != request.proving_system_id:
        raise ValidationError("proving system information does not match system id")

    try:
        verifier_details = decode_verifier_details(request.onchain_proof_request.extra_data)
    except PrimitivesError as exc:
        raise ValidationError(f"failed to decode VerifierDetails: {exc}") from exc

    config = information.proof_configuration()
    try:
        config.validate(verifier_details)
    except PrimitivesError as exc:
        raise ValidationError(
            f"verifier details do not match system constraints: {exc}"
        ) from exc

    try:
        information.validate_inputs()
    except PrimitivesError as exc:
        raise ValidationError(f"invalid proving system parameters: {exc}") from exc


def validate_market_address(request: Request, market_address: bytes) -> None:
    if request.onchain_proof_request.market != market_address:
        raise ValidationError("market address invalid")


def validate_amount_constraints(request: Request, maximum_allowed_stake: int) -> None:
    onchain = request.onchain_proof_request
    if onchain.max_reward_amount < onchain.min_reward_amount:
        raise ValidationError("token amounts invalid")
    if onchain.minimum_stake > maximum_allowed_stake:
        raise ValidationError("eth stake amount invalid")


def validate_time_constraints(
    request: Request,
    latest_timestamp: int,
    minimum_proving_time: int,
    maximum_start_delay: int,
) -> None:
    onchain = request.onchain_proof_request
    start = onchain.start_auction_timestamp
    end = onchain.end_auction_timestamp
    if latest_timestamp < start - maximum_start_delay or latest_timestamp >= end:
        raise ValidationError("timestamp invalid: out of bounds")
    if onchain.proving_time < minimum_proving_time:
        raise ValidationError("proving time invalid: below minimum")


def validate_nonce(request: Request) -> None:
    """Accept any well-formed proof request; nonce reuse is not tracked."""
    if not isinstance(request, Request):
        raise ValidationError(
            f"nonce invalid: expected a proof request, got {type(request).__name__}"
        )