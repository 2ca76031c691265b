from __future__ import annotations


class ProviderError(RuntimeError):
    """Base exception for provider-related failures."""


class ProviderRequestError(ProviderError):
    """Transport failures and non-2xx responses. `status_code` is None when no response arrived."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderRateLimited(ProviderRequestError):
    """HTTP 429. `retry_after` comes from the Retry-After header when the provider sends one."""

    def __init__(self, message: str, *, retry_after: float | None = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ProviderResponseError(ProviderError):
    """A 2xx response whose body reports an application error (bad key, bad params)."""


class ProviderCapabilityError(ProviderError):
    """No adapter is registered for the requested sport."""


class ProviderMappingError(ProviderError):
    """Payload shape did not match what the adapter expects."""

    def __init__(self, message: str, context: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"
