"""
Exception hierarchy for the notarization service.

Every stage raises one of these to its caller. Only the HTTP handlers and the
CLI turn them into responses or exit codes.
"""

from __future__ import annotations


class NotarizerError(Exception):
    """Base class for all notarizer errors."""

    pass


class ConfigurationError(NotarizerError):
    pass


class SeedPhraseNotSetError(ConfigurationError):
    """The named environment variable holding the seed phrase is unset or empty."""

    def __init__(self, variable_name: str):
        self.variable_name = variable_name
        super().__init__(f"environment variable '{variable_name}' not set")


class DerivationError(NotarizerError):
    """The seed phrase could not be turned into an address and signer."""

    pass


class SerializationError(NotarizerError):
    pass


class IndexerError(NotarizerError):
    pass


class IndexerUnavailableError(IndexerError):
    pass


class IndexerTimeoutError(IndexerError):
    pass


class FetchError(IndexerError):
    """A query or page of the indexer result stream failed."""

    pass


class NodeError(NotarizerError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class OutputNotFoundError(NodeError):
    pass


class AssemblyError(NotarizerError):
    pass


class InsufficientFundsError(AssemblyError):
    def __init__(self, available: int, required: int, reason: str = "insufficient funds"):
        self.available = available
        self.required = required
        super().__init__(f"{reason}: need {required}, have {available}")


class TransactionBuildError(AssemblyError):
    pass


class SigningError(AssemblyError):
    pass


class SubmissionError(NotarizerError):
    pass


class TipFetchError(SubmissionError):
    pass


class BlockBuildError(SubmissionError):
    pass


class BlockSubmitError(SubmissionError):
    pass


class VerificationError(NotarizerError):
    pass


class InvalidOutputIdError(VerificationError):
    pass


class UnexpectedOutputTypeError(VerificationError):
    pass
