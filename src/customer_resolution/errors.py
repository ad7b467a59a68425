from __future__ import annotations


class ResolutionError(Exception):
    """Base class for errors raised by customer_resolution."""


class ConfigurationError(ResolutionError):
    """Settings or rule definitions are unusable; raised before any record is processed."""


class SimilarityBackendError(ConfigurationError):
    """The similarity scorer failed its startup self-check."""


class DuplicateAccountError(ResolutionError, ValueError):
    """The same account id was supplied more than once."""

    def __init__(self, account_ids: list[str]) -> None:
        self.account_ids = account_ids
        preview = ", ".join(account_ids[:5])
        more = f" (+{len(account_ids) - 5} more)" if len(account_ids) > 5 else ""
        super().__init__(f"duplicate account ids in input: {preview}{more}")


class PipelineCancelled(ResolutionError):
    """Raised between stages when the caller requested cancellation."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"resolution cancelled before stage '{stage}'")
