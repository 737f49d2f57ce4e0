import json

import pytest

from proofmarket.errors import EncodingError
from proofmarket.registry import params_from_json, params_to_json, parse_params
from proofmarket.systems import (
    ArkworksProofParams,
    ProvingSystemId,
    Risc0ProofParams,
    Sp1Config,
    Sp1ProofParams,
)


def test_parse_params_round_trip():
    params = Sp1ProofParams(elf=b"\x01\x02", inputs=b"\x03", proof_config=Sp1Config.Plonk)
    data = json.dumps(params.to_json()).encode()
    assert parse_params(ProvingSystemId.SP1, data) == params


def test_parse_params_reports_system_name_on_bad_json():
    with pytest.raises(ValueError, match="Failed to parse arkworks params"):
        parse_params(ProvingSystemId.ARKWORKS, b"not json")


def test_parse_params_reports_missing_field():
    with pytest.raises(ValueError, match="Failed to parse risc0 params"):
        parse_params(ProvingSystemId.RISC0, b'{"elf": []}')


def test_params_to_json_tags_with_system_name():
    params = ArkworksProofParams(r1cs=b"\x01", wasm=b"\x02", input={"a": "3"})
    encoded = params_to_json(params)
    assert list(encoded) == ["arkworks"]
    assert encoded["arkworks"] == params.to_json()


def test_params_json_round_trip():
    params = Risc0ProofParams(elf=b"\x07" * 4, inputs=b"\x08")
    assert params_from_json(params_to_json(params)) == params


def test_params_from_json_unknown_tag():
    with pytest.raises(EncodingError):
        params_from_json({"plonky2": {}})


def test_params_from_json_requires_single_variant():
    with pytest.raises(EncodingError):
        params_from_json({"risc0": {}, "sp1": {}})