"""Proof requests as broadcast by the market server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .errors import EncodingError, SignatureError
from .registry import ProvingSystemParams, params_from_json, params_to_json
from .systems import ProvingSystemId

_ID_NAMES = {
    ProvingSystemId.ALIGNED_LAYER: "AlignedLayer",
    ProvingSystemId.ARKWORKS: "Arkworks",
    ProvingSystemId.GNARK: "Gnark",
    ProvingSystemId.RISC0: "Risc0",
    ProvingSystemId.SP1: "Sp1",
}
_IDS_BY_NAME = {name: system_id for system_id, name in _ID_NAMES.items()}

SIGNATURE_LENGTH = 65


def _strip_hex(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def _parse_bytes(value: Any, name: str, size: int | None = None) -> bytes:
    if not isinstance(value, str):
        raise EncodingError(f"field `{name}` must be a hex string")
    try:
        raw = bytes.fromhex(_strip_hex(value))
    except ValueError:
        raise EncodingError(f"field `{name}` is not valid hex") from None
    if size is not None and len(raw) != size:
        raise EncodingError(f"field `{name}` must be {size} bytes")
    return raw


def _parse_uint(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"field `{name}` must be an unsigned integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value, 16) if value[:2] in ("0x", "0X") else int(value, 10)
        except ValueError:
            raise EncodingError(f"field `{name}` is not a number") from None
    else:
        raise EncodingError(f"field `{name}` must be an unsigned integer")
    if number < 0:
        raise EncodingError(f"field `{name}` must be an unsigned integer")
    return number


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise EncodingError("expected a JSON object")
    try:
        return data[key]
    except KeyError:
        raise EncodingError(f"missing field `{key}`") from None


def _load(data: Any) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        try:
            return json.loads(data)
        except ValueError as exc:
            raise EncodingError(f"invalid JSON: {exc}") from None
    return data


@dataclass
class OnChainProofRequest:
    """The market contract's ProofRequest as signed by the requester."""

    market: bytes
    signer: bytes
    start_auction_timestamp: int
    end_auction_timestamp: int
    proving_time: int
    min_reward_amount: int
    max_reward_amount: int
    minimum_stake: int
    extra_data: bytes

    def to_json(self) -> dict:
        return {
            "market": "0x" + self.market.hex(),
            "signer": "0x" + self.signer.hex(),
            "startAuctionTimestamp": self.start_auction_timestamp,
            "endAuctionTimestamp": self.end_auction_timestamp,
            "provingTime": self.proving_time,
            "minRewardAmount": hex(self.min_reward_amount),
            "maxRewardAmount": hex(self.max_reward_amount),
            "minimumStake": self.minimum_stake,
            "extraData": "0x" + self.extra_data.hex(),
        }

    @classmethod
    def from_json(cls, data: Any) -> OnChainProofRequest:
        data = _load(data)
        return cls(
            market=_parse_bytes(_field(data, "market"), "market", 20),
            signer=_parse_bytes(_field(data, "signer"), "signer", 20),
            start_auction_timestamp=_parse_uint(
                _field(data, "startAuctionTimestamp"), "startAuctionTimestamp"
            ),
            end_auction_timestamp=_parse_uint(
                _field(data, "endAuctionTimestamp"), "endAuctionTimestamp"
            ),
            proving_time=_parse_uint(_field(data, "provingTime"), "provingTime"),
            min_reward_amount=_parse_uint(_field(data, "minRewardAmount"), "minRewardAmount"),
            max_reward_amount=_parse_uint(_field(data, "maxRewardAmount"), "maxRewardAmount"),
            minimum_stake=_parse_uint(_field(data, "minimumStake"), "minimumStake"),
            extra_data=_parse_bytes(_field(data, "extraData"), "extraData"),
        )


def _signature_to_json(signature: bytes) -> dict:
    return {
        "r": hex(int.from_bytes(signature[:32], "big")),
        "s": hex(int.from_bytes(signature[32:64], "big")),
        "yParity": hex(signature[64]),
    }


def _signature_from_json(value: Any) -> bytes:
    if isinstance(value, str):
        raw = _parse_bytes(value, "signature", SIGNATURE_LENGTH)
        parity = raw[64] - 27 if raw[64] >= 27 else raw[64]
        if parity not in (0, 1):
            raise SignatureError("invalid recovery id")
        return raw[:64] + bytes([parity])
    r = _parse_uint(_field(value, "r"), "r")
    s = _parse_uint(_field(value, "s"), "s")
    raw_parity = value.get("yParity", value.get("v"))
    if raw_parity is None:
        raise EncodingError("missing field `yParity`")
    parity = raw_parity if isinstance(raw_parity, bool) else _parse_uint(raw_parity, "yParity")
    parity = int(parity)
    if parity >= 27:
        parity -= 27
    if parity not in (0, 1):
        raise SignatureError("invalid recovery id")
    try:
        return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([parity])
    except OverflowError:
        raise SignatureError("signature scalar exceeds 32 bytes") from None


@dataclass
class Request:
    """A proof request together with its proving system parameters and signature."""

    proving_system_id: ProvingSystemId
    proving_system_information: ProvingSystemParams
    onchain_proof_request: OnChainProofRequest
    signature: bytes

    def __post_init__(self) -> None:
        if len(self.signature) != SIGNATURE_LENGTH:
            raise SignatureError(f"signature must be {SIGNATURE_LENGTH} bytes")

    def to_json(self) -> dict:
        return {
            "proving_system_id": _ID_NAMES[self.proving_system_id],
            "proving_system_information": params_to_json(self.proving_system_information),
            "onchain_proof_request": self.onchain_proof_request.to_json(),
            "signature": _signature_to_json(self.signature),
        }

    @classmethod
    def from_json(cls, data: Any) -> Request:
        data = _load(data)
        name = _field(data, "proving_system_id")
        try:
            system_id = _IDS_BY_NAME[name]
        except (KeyError, TypeError):
            raise EncodingError(f"unknown proving system id `{name}`") from None
        return cls(
            proving_system_id=system_id,
            proving_system_information=params_from_json(
                _field(data, "proving_system_information")
            ),
            onchain_proof_request=OnChainProofRequest.from_json(
                _field(data, "onchain_proof_request")
            ),
            signature=_signature_from_json(_field(data, "signature")),
        )