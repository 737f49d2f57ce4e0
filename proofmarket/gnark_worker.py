"""Worker that produces gnark proofs by running an external prover binary."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .errors import WorkerExecutionFailed
from .request import Request
from .systems import GnarkConfig, GnarkProofParams
from .worker import ComputeWorker, WorkResult

logger = logging.getLogger(__name__)

_COMMITMENT_LENGTH = 32

_SCHEMES: dict[GnarkConfig, tuple[str, str]] = {
    GnarkConfig.Groth16Bn254: ("groth16", "bn254"),
    GnarkConfig.PlonkBn254: ("plonk", "bn254"),
    GnarkConfig.PlonkBls12_381: ("plonk", "bls12-381"),
}


def build_prover_input(gnark_params: GnarkProofParams) -> dict[str, Any]:
    """Return the JSON document handed to the gnark prover."""
    scheme, curve = _SCHEMES[gnark_params.config]
    return {
        "r1cs": list(gnark_params.r1cs),
        "public_inputs": gnark_params.public_inputs,
        "private_inputs": gnark_params.input,
        "scheme_config": scheme,
        "curve": curve,
    }


def _write_temp(data: bytes) -> Path:
    fd, name = tempfile.mkstemp(prefix="gnark-", suffix=".json")
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)
    return Path(name)


def _format_opaque_submission(proof: bytes, public_inputs: Any) -> bytes:
    # On-chain verification for gnark proofs is not wired up yet.
    return bytes(_COMMITMENT_LENGTH)


class GnarkWorker(ComputeWorker):
    """Runs the ``gnark-prover`` command on gnark proof requests."""

    def __init__(self, prover_command: str | Sequence[str] = "gnark-prover") -> None:
        if isinstance(prover_command, str):
            self.prover_command = [prover_command]
        else:
            self.prover_command = list(prover_command)

    def execute_gnark_prover(self, gnark_params: GnarkProofParams) -> Path:
        """Run the prover and return the path of the file it wrote its proof to.

        The caller owns the returned file and should remove it when done.
        """
        try:
            payload = json.dumps(build_prover_input(gnark_params)).encode("utf-8")
            params_path = _write_temp(payload)
        except (OSError, TypeError, ValueError) as exc:
            raise WorkerExecutionFailed(str(exc)) from exc

        try:
            try:
                output_path = _write_temp(b"")
            except OSError as exc:
                raise WorkerExecutionFailed(str(exc)) from exc
            command = [
                *self.prover_command,
                "--params",
                str(params_path),
                "--output",
                str(output_path),
            ]
            try:
                completed = subprocess.run(command, capture_output=True, check=False)
            except OSError as exc:
                output_path.unlink(missing_ok=True)
                raise WorkerExecutionFailed(str(exc)) from exc
        finally:
            params_path.unlink(missing_ok=True)

        if completed.returncode != 0:
            output_path.unlink(missing_ok=True)
            raise WorkerExecutionFailed(completed.stderr.decode("utf-8", "replace"))
        return output_path

    def _generate_proof(self, gnark_params: GnarkProofParams) -> tuple[bytes, Any]:
        output_path = self.execute_gnark_prover(gnark_params)
        try:
            proof = output_path.read_bytes()
        except OSError as exc:
            raise WorkerExecutionFailed(str(exc)) from exc
        finally:
            output_path.unlink(missing_ok=True)
        return proof, gnark_params.public_inputs

    def execute(self, request: Request) -> WorkResult:
        logger.info("gnark worker: execution started")
        params = request.proving_system_information
        if not isinstance(params, GnarkProofParams):
            raise WorkerExecutionFailed("Expected Gnark params")
        proof, public_inputs = self._generate_proof(params)
        return WorkResult(
            opaque_submission=_format_opaque_submission(proof, public_inputs),
            partial_commitment=bytes(_COMMITMENT_LENGTH),
        )