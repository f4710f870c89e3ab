from typing import Optional


class ProposalSimsError(Exception):
    """Base class for every error raised by the simulation harness."""


class ConfigurationError(ProposalSimsError):
    """A required setting (RPC URL, Tenderly credential, ...) is missing or invalid."""


class ChainIdMismatchError(ProposalSimsError):
    """An RPC endpoint reported a chain ID different from the one it is configured for."""

    def __init__(self, label: str, expected: int, actual: int, message: Optional[str] = None):
        self.label = label
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"{label} need to be chain {expected}, got chain {actual}")


class TenderlyApiError(ProposalSimsError):
    """Tenderly answered with a non-success HTTP status."""

    def __init__(self, status: int, body: str, url: str):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Tenderly request to {url} failed with status {status}: {body}")


class TenderlyRateLimitError(TenderlyApiError):
    """HTTP 429 from Tenderly. The only error the client retries."""


class ProposalNotFoundError(ProposalSimsError):
    pass


class UnsupportedGovernorError(ProposalSimsError):
    pass


class CalldataDecodeError(ProposalSimsError, ValueError):
    """Calldata does not match the function it was expected to encode."""
