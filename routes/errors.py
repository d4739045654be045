#!/usr/bin/env python3
"""
Translate client exceptions into HTTP responses
"""

from typing import Any, Dict, Tuple

import requests
from f1tv_api.base.utils import logger
from f1tv_api.f1tv.exceptions import (
    EmptyResult,
    F1TVError,
    InvalidCredential,
    PreconditionNotMet,
    UpstreamError,
)


def error_payload(err: Exception, path: str) -> Tuple[int, Dict[str, Any]]:
    """Map an exception raised by the client to (status, JSON body)"""
    if isinstance(err, InvalidCredential):
        return 400, {"error": str(err), "kind": "invalid_credential"}

    if isinstance(err, PreconditionNotMet):
        return 409, {"error": str(err), "kind": "precondition_not_met", "missing": err.missing}

    if isinstance(err, EmptyResult):
        return 404, {"error": str(err), "kind": "empty_result"}

    if isinstance(err, UpstreamError):
        logger.warning(f"Upstream error in {path}: {err.status_code}")
        return 502, {
            "error": f"Failed to {err.operation}",
            "kind": "upstream_error",
            "upstream_status": err.status_code,
            "upstream_body": err.body,
        }

    if isinstance(err, requests.exceptions.RequestException):
        logger.error(f"Transport error in {path}: {err}")
        return 504, {"error": f"Upstream request failed: {err}", "kind": "transport_error"}

    if isinstance(err, F1TVError):
        return 500, {"error": str(err), "kind": "client_error"}

    logger.error(f"API Error in {path}: {err}", exc_info=True)
    return 500, {"error": f"Internal server error: {err}"}
