"""Mapping between proving system identifiers and their parameter types."""

from __future__ import annotations

import json
from typing import Any, Union

from .aligned_layer import AlignedLayerProofParams
from .errors import EncodingError
from .systems import (
    ArkworksProofParams,
    GnarkProofParams,
    ProvingSystemId,
    Risc0ProofParams,
    Sp1ProofParams,
)

ProvingSystemParams = Union[
    AlignedLayerProofParams,
    ArkworksProofParams,
    GnarkProofParams,
    Risc0ProofParams,
    Sp1ProofParams,
]

_PARAMS_TYPES: dict[ProvingSystemId, type] = {
    ProvingSystemId.ALIGNED_LAYER: AlignedLayerProofParams,
    ProvingSystemId.ARKWORKS: ArkworksProofParams,
    ProvingSystemId.GNARK: GnarkProofParams,
    ProvingSystemId.RISC0: Risc0ProofParams,
    ProvingSystemId.SP1: Sp1ProofParams,
}


def parse_params(system_id: ProvingSystemId, data: bytes) -> ProvingSystemParams:
    """Parse JSON-encoded parameters for the given proving system."""
    params_type = _PARAMS_TYPES[system_id]
    try:
        return params_type.from_json(json.loads(data))
    except (ValueError, EncodingError) as exc:
        raise ValueError(f"Failed to parse {system_id.value} params: {exc}") from exc


def params_to_json(params: ProvingSystemParams) -> dict:
    """Encode parameters tagged with their proving system name."""
    return {params.proving_system_id().value: params.to_json()}


def params_from_json(data: Any) -> ProvingSystemParams:
    """Decode parameters from their tagged JSON form."""
    if not isinstance(data, dict) or len(data) != 1:
        raise EncodingError("proving system params must hold exactly one variant")
    ((tag, body),) = data.items()
    try:
        system_id = ProvingSystemId(tag)
    except ValueError:
        raise EncodingError(f"unknown variant `{tag}`") from None
    return _PARAMS_TYPES[system_id].from_json(body)