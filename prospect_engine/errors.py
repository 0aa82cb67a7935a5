"""
Exceptions raised by the prospect pipeline.

Validation errors are rejected before any provider call. Provider errors are
absorbed per query, except authentication failures which fail the lane.
Store errors fail the whole run.
"""


class ProspectEngineError(Exception):
    pass


class RunValidationError(ProspectEngineError):
    """Missing or invalid run parameters"""


class SearchProviderError(ProspectEngineError):
    """Non-success response or transport failure from the search provider"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class SearchAuthError(SearchProviderError):
    """Credentials rejected by the provider; never retried"""


class ProspectStoreError(ProspectEngineError):
    """Prospect store unreachable or constraint violated"""


class LaneStateError(ProspectEngineError):
    """Illegal lane status transition"""
