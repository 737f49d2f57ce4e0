"""Aligned Layer proof parameters that wrap an underlying proving system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .abi import VerifierDetails
from .errors import EncodingError
from .systems import (
    GnarkConfig,
    GnarkProofParams,
    ProvingSystemId,
    Risc0Config,
    Risc0ProofParams,
    Sp1Config,
    Sp1ProofParams,
    VerifierConstraints,
)

UnderlyingParams = Union[Risc0ProofParams, Sp1ProofParams, GnarkProofParams]
UnderlyingConfig = Union[Risc0Config, Sp1Config, GnarkConfig]

# Tags used for the underlying system in the JSON form.
_UNDERLYING_TAGS: dict[type, str] = {
    Risc0ProofParams: "Risc0",
    Sp1ProofParams: "SP1",
    GnarkProofParams: "Gnark",
}
_UNDERLYING_TYPES = {tag: cls for cls, tag in _UNDERLYING_TAGS.items()}

# AlignedLayerServiceManager contract and its verifyBatchInclusion selector.
_SERVICE_MANAGER = bytes.fromhex("58F280BeBE9B34c9939C3C39e0890C81f163B623")
_VERIFY_BATCH_INCLUSION = bytes.fromhex("06045a91")


def _decode_bytes32(value: Any, name: str) -> bytes:
    if not isinstance(value, str):
        raise EncodingError(f"field `{name}` must be a hex string")
    text = value[2:] if value[:2] in ("0x", "0X") else value
    try:
        raw = bytes.fromhex(text)
    except ValueError:
        raise EncodingError(f"field `{name}` is not valid hex") from None
    if len(raw) != 32:
        raise EncodingError(f"field `{name}` must be 32 bytes")
    return raw


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise EncodingError("expected a JSON object")
    try:
        return data[key]
    except KeyError:
        raise EncodingError(f"missing field `{key}`") from None


@dataclass(frozen=True)
class AlignedLayerConfig:
    """Verification configuration for proofs settled through Aligned Layer."""

    aligned_proving_system_id: str
    proving_system_aux_commitment: bytes
    underlying_config: UnderlyingConfig

    def verifier_constraints(self) -> VerifierConstraints:
        return VerifierConstraints(
            verifier=_SERVICE_MANAGER,
            selector=_VERIFY_BATCH_INCLUSION,
            is_sha_commitment=False,
            public_inputs_offset=32,
            public_inputs_length=64,
            has_partial_commitment_result_check=False,
            submitted_partial_commitment_result_offset=0,
            submitted_partial_commitment_result_length=0,
            predetermined_partial_commitment=bytes(32),
        )

    def validate(self, verifier_details: VerifierDetails) -> None:
        self.underlying_config.validate(verifier_details)


@dataclass
class AlignedLayerProofParams:
    """Parameters for a proof generated by an underlying system and batched by Aligned Layer."""

    aligned_proving_system_id: str
    proving_system_aux_commitment: bytes
    prover_inputs: Any
    underlying_system_params: UnderlyingParams

    def proof_configuration(self) -> AlignedLayerConfig:
        return AlignedLayerConfig(
            aligned_proving_system_id=self.aligned_proving_system_id,
            proving_system_aux_commitment=self.proving_system_aux_commitment,
            underlying_config=self.underlying_system_params.proof_configuration(),
        )

    def validate_inputs(self) -> None:
        self.underlying_system_params.validate_inputs()

    def proving_system_id(self) -> ProvingSystemId:
        return ProvingSystemId.ALIGNED_LAYER

    def to_json(self) -> dict:
        tag = _UNDERLYING_TAGS[type(self.underlying_system_params)]
        return {
            "aligned_proving_system_id": self.aligned_proving_system_id,
            "proving_system_aux_commitment": "0x" + self.proving_system_aux_commitment.hex(),
            "prover_inputs": self.prover_inputs,
            "underlying_system_params": {tag: self.underlying_system_params.to_json()},
        }

    @classmethod
    def from_json(cls, data: Any) -> AlignedLayerProofParams:
        system_id = _field(data, "aligned_proving_system_id")
        if not isinstance(system_id, str):
            raise EncodingError("field `aligned_proving_system_id` must be a string")
        underlying = _field(data, "underlying_system_params")
        if not isinstance(underlying, dict) or len(underlying) != 1:
            raise EncodingError("`underlying_system_params` must hold exactly one variant")
        ((tag, body),) = underlying.items()
        try:
            params_type = _UNDERLYING_TYPES[tag]
        except KeyError:
            raise EncodingError(f"unknown variant `{tag}`") from None
        return cls(
            aligned_proving_system_id=system_id,
            proving_system_aux_commitment=_decode_bytes32(
                _field(data, "proving_system_aux_commitment"),
                "proving_system_aux_commitment",
            ),
            prover_inputs=_field(data, "prover_inputs"),
            underlying_system_params=params_type.from_json(body),
        )