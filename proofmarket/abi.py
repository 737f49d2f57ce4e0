"""ABI encoding of the market contract's VerifierDetails struct."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import EncodingError

_WORD = 32
_FIELD_COUNT = 9
_UINT256_MAX = (1 << 256) - 1


def _check_length(name: str, value: bytes, size: int) -> None:
    if not isinstance(value, (bytes, bytearray)) or len(value) != size:
        raise EncodingError(f"{name} must be {size} bytes")


def _check_uint(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _UINT256_MAX:
        raise EncodingError(f"{name} must be a uint256")


@dataclass(frozen=True)
class VerifierDetails:
    """Describes how the market contract verifies a submitted proof."""

    verifier: bytes
    selector: bytes
    is_sha_commitment: bool
    public_inputs_offset: int
    public_inputs_length: int
    has_partial_commitment_result_check: bool
    submitted_partial_commitment_result_offset: int
    submitted_partial_commitment_result_length: int
    predetermined_partial_commitment: bytes

    def __post_init__(self) -> None:
        _check_length("verifier", self.verifier, 20)
        _check_length("selector", self.selector, 4)
        _check_length(
            "predetermined_partial_commitment", self.predetermined_partial_commitment, 32
        )
        for name in (
            "public_inputs_offset",
            "public_inputs_length",
            "submitted_partial_commitment_result_offset",
            "submitted_partial_commitment_result_length",
        ):
            _check_uint(name, getattr(self, name))

    def abi_encode(self) -> bytes:
        """Return the static-tuple ABI encoding (nine 32-byte words)."""
        words = [
            bytes(12) + bytes(self.verifier),
            bytes(self.selector) + bytes(28),
            int(bool(self.is_sha_commitment)).to_bytes(_WORD, "big"),
            self.public_inputs_offset.to_bytes(_WORD, "big"),
            self.public_inputs_length.to_bytes(_WORD, "big"),
            int(bool(self.has_partial_commitment_result_check)).to_bytes(_WORD, "big"),
            self.submitted_partial_commitment_result_offset.to_bytes(_WORD, "big"),
            self.submitted_partial_commitment_result_length.to_bytes(_WORD, "big"),
            bytes(self.predetermined_partial_commitment),
        ]
        return b"".join(words)


def _decode_bool(word: bytes, name: str) -> bool:
    value = int.from_bytes(word, "big")
    if value not in (0, 1):
        raise EncodingError(f"invalid bool value for {name}")
    return value == 1


def decode_verifier_details(data: bytes) -> VerifierDetails:
    """Decode ABI-encoded VerifierDetails, checking word padding strictly."""
    data = bytes(data)
    if len(data) < _WORD * _FIELD_COUNT:
        raise EncodingError(
            f"buffer too short: expected {_WORD * _FIELD_COUNT} bytes, got {len(data)}"
        )
    words = [data[i * _WORD:(i + 1) * _WORD] for i in range(_FIELD_COUNT)]

    verifier_word, selector_word = words[0], words[1]
    if any(verifier_word[:12]):
        raise EncodingError("invalid address padding")
    if any(selector_word[4:]):
        raise EncodingError("invalid bytes4 padding")

    return VerifierDetails(
        verifier=verifier_word[12:],
        selector=selector_word[:4],
        is_sha_commitment=_decode_bool(words[2], "isShaCommitment"),
        public_inputs_offset=int.from_bytes(words[3], "big"),
        public_inputs_length=int.from_bytes(words[4], "big"),
        has_partial_commitment_result_check=_decode_bool(
            words[5], "hasPartialCommitmentResultCheck"
        ),
        submitted_partial_commitment_result_offset=int.from_bytes(words[6], "big"),
        submitted_partial_commitment_result_length=int.from_bytes(words[7], "big"),
        predetermined_partial_commitment=words[8],
    )