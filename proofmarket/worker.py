"""Compute workers and the manager that routes requests to them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import WorkerExecutionFailed
from .request import Request
from .systems import ProvingSystemId

_COMMITMENT_LENGTH = 32


@dataclass(frozen=True)
class ResourceRequirements:
    """Resources a worker needs to run a job."""

    min_memory_mb: int
    min_cpu_cores: int
    estimated_runtime_seconds: int
    gpu_required: bool


@dataclass(frozen=True)
class WorkResult:
    """What a worker hands back for on-chain resolution."""

    opaque_submission: bytes
    partial_commitment: bytes

    def __post_init__(self) -> None:
        if len(self.partial_commitment) != _COMMITMENT_LENGTH:
            raise ValueError(f"partial commitment must be {_COMMITMENT_LENGTH} bytes")


class ComputeWorker(ABC):
    """Produces a proof submission for requests of one proving system."""

    @abstractmethod
    def execute(self, request: Request) -> WorkResult:
        """Generate the proof for ``request`` and format it for the market."""


class WorkerManager:
    """Dispatches requests to the worker registered for their proving system."""

    def __init__(self, workers: Mapping[ProvingSystemId, ComputeWorker]) -> None:
        self._workers = dict(workers)

    @property
    def supported_proving_systems(self) -> list[ProvingSystemId]:
        return list(self._workers)

    def execute(self, request: Request) -> WorkResult:
        try:
            worker = self._workers[request.proving_system_id]
        except KeyError:
            raise WorkerExecutionFailed(
                f"worker not set for proving system id: {request.proving_system_id}"
            ) from None
        return worker.execute(request)