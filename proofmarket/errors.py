"""Exception hierarchy for protocol primitives and the provider client."""

from __future__ import annotations


class _PrefixedError(Exception):
    """An error whose text is a fixed prefix followed by a detail message."""

    prefix = "Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class PrimitivesError(_PrefixedError):
    """Base class for errors raised by the protocol primitives."""

    prefix = "Primitives error"


class ContractError(PrimitivesError):
    prefix = "Contract interaction error"


class SignatureError(PrimitivesError):
    prefix = "Invalid signature"


class ValidationError(PrimitivesError):
    prefix = "Validation error"


class RpcError(PrimitivesError):
    prefix = "RPC error"


class EncodingError(PrimitivesError):
    prefix = "Encoding error"


class CommitmentError(PrimitivesError):
    prefix = "Commitment error"


class ProverInputsError(PrimitivesError):
    prefix = "Prover Inputs validation error"


class ProviderError(_PrefixedError):
    """Base class for errors raised by the provider client."""

    prefix = "Provider error"


class TransactionSetupError(ProviderError):
    prefix = "Failed to setup bid"


class BuilderError(ProviderError):
    prefix = "Provider client builder error"


class EventFilterError(ProviderError):
    prefix = "Failed to setup event filter"


class TransactionError(ProviderError):
    prefix = "Failed to send transaction"


class TransactionFailure(ProviderError):
    prefix = "Transaction failed"


class LogParseError(ProviderError):
    prefix = "Failed to parse logs"


class ServerRequestError(ProviderError):
    prefix = "Failed server request"


class RequestParsingError(ProviderError):
    prefix = "Failed to parse incoming request"


class ServerSubscriptionError(ProviderError):
    prefix = "Failed to subscribe to server"


class RpcRequestError(ProviderError):
    prefix = "Failed rpc request"


class RequestAnalysisError(ProviderError):
    prefix = "Failed request analysis"


class WorkerExecutionFailed(ProviderError):
    prefix = "Failed to execute worker"