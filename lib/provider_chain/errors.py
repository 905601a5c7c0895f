"""
Error taxonomy for provider calls.

Providers raise these exceptions internally; BaseProvider.call() and
ProviderChainResolver convert them into Failure outcomes, so they never
escape the chain boundary.
"""

from typing import List, Optional, Sequence


class ProviderError(Exception):
    """Base class for all provider errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderTimeoutError(ProviderError):
    """Provider did not answer in time"""

    def __init__(self, message: str = "timeout"):
        super().__init__(message)


class ProviderMalformedResponseError(ProviderError):
    """Provider answered with a payload we can not use"""


class ProviderHttpError(ProviderError):
    """Provider answered with a non-2xx HTTP status"""

    def __init__(self, status: int, message: Optional[str] = None):
        super().__init__(message or f"HTTP {status}")
        self.status = status


class AllProvidersExhaustedError(ProviderError):
    """Every provider of a chain has failed"""

    def __init__(self, reasons: Sequence[str], chainName: str = "provider chain"):
        self.reasons: List[str] = list(reasons)
        self.chainName = chainName
        details = "; ".join(self.reasons) if self.reasons else "no providers configured"
        super().__init__(f"All providers of {chainName} failed: {details}")


class ValidationError(ProviderError):
    """Mandatory field is missing in a weather payload"""

    def __init__(self, field: str):
        super().__init__(f"Missing mandatory field: {field}")
        self.field = field
