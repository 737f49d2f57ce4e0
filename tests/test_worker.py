import pytest

from proofmarket.errors import WorkerExecutionFailed
from proofmarket.request import OnChainProofRequest, Request
from proofmarket.systems import ProvingSystemId, Risc0ProofParams
from proofmarket.worker import ComputeWorker, WorkerManager, WorkResult


def make_request():
    onchain = OnChainProofRequest(
        market=bytes(20),
        signer=bytes(20),
        start_auction_timestamp=1000,
        end_auction_timestamp=2000,
        proving_time=60,
        min_reward_amount=1,
        max_reward_amount=2,
        minimum_stake=10,
        extra_data=b"",
    )
    return Request(
        proving_system_id=ProvingSystemId.RISC0,
        proving_system_information=Risc0ProofParams(elf=b"\x01" * 40, inputs=b"\x02"),
        onchain_proof_request=onchain,
        signature=bytes(64) + b"\x01",
    )


class RecordingWorker(ComputeWorker):
    def __init__(self, submission):
        self.submission = submission
        self.seen = []

    def execute(self, request):
        self.seen.append(request)
        return WorkResult(opaque_submission=self.submission, partial_commitment=bytes(32))


def test_manager_dispatches_to_registered_worker():
    worker = RecordingWorker(b"proof")
    manager = WorkerManager({ProvingSystemId.RISC0: worker})
    request = make_request()
    result = manager.execute(request)
    assert result.opaque_submission == b"proof"
    assert worker.seen == [request]


def test_manager_picks_worker_by_system():
    risc0 = RecordingWorker(b"risc0")
    sp1 = RecordingWorker(b"sp1")
    manager = WorkerManager({ProvingSystemId.SP1: sp1, ProvingSystemId.RISC0: risc0})
    assert manager.execute(make_request()).opaque_submission == b"risc0"
    assert sp1.seen == []


def test_manager_without_worker_raises():
    manager = WorkerManager({ProvingSystemId.SP1: RecordingWorker(b"x")})
    with pytest.raises(WorkerExecutionFailed) as exc:
        manager.execute(make_request())
    assert exc.value.message.startswith("worker not set for proving system id")


def test_manager_lists_supported_systems():
    manager = WorkerManager(
        {ProvingSystemId.SP1: RecordingWorker(b""), ProvingSystemId.GNARK: RecordingWorker(b"")}
    )
    assert set(manager.supported_proving_systems) == {ProvingSystemId.SP1, ProvingSystemId.GNARK}


def test_manager_copies_worker_mapping():
    workers = {ProvingSystemId.RISC0: RecordingWorker(b"a")}
    manager = WorkerManager(workers)
    workers.clear()
    assert manager.execute(make_request()).opaque_submission == b"a"


def test_compute_worker_is_abstract():
    with pytest.raises(TypeError):
        ComputeWorker()


def test_work_result_rejects_short_commitment():
    with pytest.raises(ValueError):
        WorkResult(opaque_submission=b"", partial_commitment=bytes(31))