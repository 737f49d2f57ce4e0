"""Proving system identifiers, their parameters and verifier constraints."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .abi import VerifierDetails
from .errors import EncodingError, ProverInputsError, ValidationError


class ProvingSystemId(enum.Enum):
    """Proving systems known to the market."""

    ALIGNED_LAYER = "aligned-layer"
    ARKWORKS = "arkworks"
    GNARK = "gnark"
    RISC0 = "risc0"
    SP1 = "sp1"

    def as_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


def parse_proving_system_id(name: str) -> ProvingSystemId:
    """Return the proving system named by ``name``, ignoring case."""
    try:
        return ProvingSystemId(name.lower())
    except ValueError:
        raise ValueError(f"Invalid proving system: {name}") from None


@dataclass(frozen=True)
class VerifierConstraints:
    """Fixed verifier details a proving system requires; None means unconstrained."""

    verifier: bytes | None = None
    selector: bytes | None = None
    is_sha_commitment: bool | None = None
    public_inputs_offset: int | None = None
    public_inputs_length: int | None = None
    has_partial_commitment_result_check: bool | None = None
    submitted_partial_commitment_result_offset: int | None = None
    submitted_partial_commitment_result_length: int | None = None
    predetermined_partial_commitment: bytes | None = None


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise EncodingError("expected a JSON object")
    try:
        return data[key]
    except KeyError:
        raise EncodingError(f"missing field `{key}`") from None


def _bytes_field(data: Any, key: str) -> bytes:
    value = _require(data, key)
    if not isinstance(value, list):
        raise EncodingError(f"field `{key}` must be a byte array")
    try:
        return bytes(value)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"field `{key}` must be a byte array: {exc}") from None


def _enum_field(data: Any, key: str, enum_type: type[enum.Enum]) -> Any:
    value = _require(data, key)
    try:
        return enum_type(value)
    except ValueError:
        raise EncodingError(f"unknown variant `{value}` for `{key}`") from None


def _check_verifier_details(verifier_details: Any) -> None:
    """Accept any decoded verifier details; reject anything else."""
    if not isinstance(verifier_details, VerifierDetails):
        raise ValidationError(
            f"expected VerifierDetails, got {type(verifier_details).__name__}"
        )


def _check_byte_inputs(**fields: Any) -> None:
    """Reject prover inputs that are not byte strings."""
    for name, value in fields.items():
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise ProverInputsError(f"{name} must be bytes, got {type(value).__name__}")


@dataclass(frozen=True)
class ArkworksConfig:
    """Verification configuration for arkworks Groth16 proofs."""

    def verifier_constraints(self) -> VerifierConstraints:
        return VerifierConstraints(
            is_sha_commitment=False,
            has_partial_commitment_result_check=False,
            submitted_partial_commitment_result_offset=0,
            submitted_partial_commitment_result_length=0,
            predetermined_partial_commitment=bytes(32),
        )

    def validate(self, verifier_details: VerifierDetails) -> None:
        _check_verifier_details(verifier_details)


@dataclass
class ArkworksProofParams:
    """Circom circuit artefacts and inputs for an arkworks proof."""

    r1cs: bytes
    wasm: bytes
    input: Any

    def proof_configuration(self) -> ArkworksConfig:
        return ArkworksConfig()

    def validate_inputs(self) -> None:
        if not self.r1cs or not self.wasm:
            raise ProverInputsError("r1cs or wasm bytes cannot be empty")

    def proving_system_id(self) -> ProvingSystemId:
        return ProvingSystemId.ARKWORKS

    def to_json(self) -> dict:
        return {"r1cs": list(self.r1cs), "wasm": list(self.wasm), "input": self.input}

    @classmethod
    def from_json(cls, data: Any) -> ArkworksProofParams:
        return cls(
            r1cs=_bytes_field(data, "r1cs"),
            wasm=_bytes_field(data, "wasm"),
            input=_require(data, "input"),
        )


class GnarkConfig(enum.Enum):
    """Proof scheme and curve used by a gnark circuit."""

    Groth16Bn254 = "Groth16Bn254"
    PlonkBn254 = "PlonkBn254"
    PlonkBls12_381 = "PlonkBls12_381"

    def verifier_constraints(self) -> VerifierConstraints:
        return VerifierConstraints()

    def validate(self, verifier_details: VerifierDetails) -> None:
        _check_verifier_details(verifier_details)


@dataclass
class GnarkProofParams:
    """Circuit and inputs for a gnark proof."""

    config: GnarkConfig
    r1cs: bytes
    public_inputs: Any
    input: Any

    def proof_configuration(self) -> GnarkConfig:
        return self.config

    def validate_inputs(self) -> None:
        if not self.r1cs:
            raise ProverInputsError("r1cs bytes cannot be empty")

    def proving_system_id(self) -> ProvingSystemId:
        return ProvingSystemId.GNARK

    def to_json(self) -> dict:
        return {
            "config": self.config.value,
            "r1cs": list(self.r1cs),
            "public_inputs": self.public_inputs,
            "input": self.input,
        }

    @classmethod
    def from_json(cls, data: Any) -> GnarkProofParams:
        return cls(
            config=_enum_field(data, "config", GnarkConfig),
            r1cs=_bytes_field(data, "r1cs"),
            public_inputs=_require(data, "public_inputs"),
            input=_require(data, "input"),
        )


@dataclass(frozen=True)
class Risc0Config:
    """Verification configuration for RISC Zero Groth16 receipts."""

    def verifier_constraints(self) -> VerifierConstraints:
        return VerifierConstraints(
            verifier=bytes.fromhex("31766974fb795dF3f7d0c010a3D5c55e4bd8113e"),
            selector=bytes.fromhex("ab750e75"),
            is_sha_commitment=True,
            public_inputs_offset=32,
            public_inputs_length=64,
        )

    def validate(self, verifier_details: VerifierDetails) -> None:
        _check_verifier_details(verifier_details)


@dataclass
class Risc0ProofParams:
    """Guest program and inputs for a RISC Zero proof."""

    elf: bytes
    inputs: bytes

    def proof_configuration(self) -> Risc0Config:
        return Risc0Config()

    def validate_inputs(self) -> None:
        _check_byte_inputs(elf=self.elf, inputs=self.inputs)

    def proving_system_id(self) -> ProvingSystemId:
        return ProvingSystemId.RISC0

    def to_json(self) -> dict:
        return {"elf": list(self.elf), "inputs": list(self.inputs)}

    @classmethod
    def from_json(cls, data: Any) -> Risc0ProofParams:
        return cls(elf=_bytes_field(data, "elf"), inputs=_bytes_field(data, "inputs"))


_SP1_VERIFIERS = {
    "Groth16": "E780809121774D06aD9B0EEeC620fF4B3913Ced1",
    "Plonk": "d2832Cf1fC8bA210FfABF62Db9A8781153131d16",
}


class Sp1Config(enum.Enum):
    """On-chain verifiable SP1 proof kind."""

    Groth16 = "Groth16"
    Plonk = "Plonk"

    def verifier_constraints(self) -> VerifierConstraints:
        return VerifierConstraints(
            verifier=bytes.fromhex(_SP1_VERIFIERS[self.value]),
            selector=bytes.fromhex("41493c60"),
            is_sha_commitment=True,
            public_inputs_offset=0,
            public_inputs_length=64,
        )

    def validate(self, verifier_details: VerifierDetails) -> None:
        _check_verifier_details(verifier_details)


@dataclass
class Sp1ProofParams:
    """Guest program, inputs and proof kind for an SP1 proof."""

    elf: bytes
    inputs: bytes
    proof_config: Sp1Config

    def proof_configuration(self) -> Sp1Config:
        return self.proof_config

    def validate_inputs(self) -> None:
        _check_byte_inputs(elf=self.elf, inputs=self.inputs)

    def proving_system_id(self) -> ProvingSystemId:
        return ProvingSystemId.SP1

    def to_json(self) -> dict:
        return {
            "elf": list(self.elf),
            "inputs": list(self.inputs),
            "proof_config": self.proof_config.value,
        }

    @classmethod
    def from_json(cls, data: Any) -> Sp1ProofParams:
        return cls(
            elf=_bytes_field(data, "elf"),
            inputs=_bytes_field(data, "inputs"),
            proof_config=_enum_field(data, "proof_config", Sp1Config),
        )