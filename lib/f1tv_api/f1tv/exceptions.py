# f1tv_api/f1tv/exceptions.py
from typing import Optional


class F1TVError(Exception):
    """Base class for all client errors"""


class InvalidCredential(F1TVError):
    """Ascendon token is malformed or failed verification"""


class PreconditionNotMet(F1TVError):
    """Required session state is absent before a dependent call"""

    def __init__(self, message: str, missing: str):
        super().__init__(message)
        self.missing = missing


class UpstreamError(F1TVError):
    """Non-success HTTP response from the F1TV API"""

    def __init__(self, operation: str, status_code: int, body: str, url: Optional[str] = None):
        super().__init__(f"Failed to {operation} (Status Code {status_code}): {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body
        self.url = url


class EmptyResult(F1TVError):
    """Server returned no items where one was required"""
