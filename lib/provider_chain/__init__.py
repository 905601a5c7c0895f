"""
Ordered provider fallback library.

Example usage:
    from lib.provider_chain import ProviderChainResolver

    resolver = ProviderChainResolver([primary, secondary], defaultTimeout=3, name="search")
    outcome = await resolver.resolve("Hangzhou")
    if outcome.ok:
        print(outcome.value)
    else:
        print(outcome.reason)
"""

from .cancellation import CancellationToken
from .errors import (
    AllProvidersExhaustedError,
    ProviderError,
    ProviderHttpError,
    ProviderMalformedResponseError,
    ProviderTimeoutError,
    ValidationError,
)
from .http_provider import HttpProvider
from .interface import BaseProvider, ProviderInterface
from .resolver import ProviderChainResolver
from .types import Failure, ProviderOutcome, Success

__all__ = [
    "CancellationToken",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderMalformedResponseError",
    "ProviderHttpError",
    "AllProvidersExhaustedError",
    "ValidationError",
    "ProviderInterface",
    "BaseProvider",
    "HttpProvider",
    "ProviderChainResolver",
    "Success",
    "Failure",
    "ProviderOutcome",
]
