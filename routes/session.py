#!/usr/bin/env python3
"""
Session route handlers: ascendon token, status and dependent state
"""

from concurrent.futures import TimeoutError as FutureTimeoutError

from bottle import request, response
from f1tv_api.base.utils import logger

from .errors import error_payload


def _report_to_dict(report):
    return {
        "succeeded": report.succeeded,
        "failed": {name: str(err) for name, err in report.failed.items()},
    }


def setup_session_routes(app, client, service):
    """Setup session-related routes"""

    @app.route("/api/status")
    def get_status():
        return client.get_status().to_dict()

    @app.route("/api/session/ascendon", method="POST")
    def set_ascendon():
        """Replace the ascendon token and wait for the refresh chain"""
        try:
            payload = request.json
        except ValueError:
            response.status = 400
            return {"error": "Invalid JSON format"}

        if not isinstance(payload, dict) or not payload.get("ascendon"):
            response.status = 400
            return {"error": "Body must be a JSON object with an 'ascendon' token"}

        future = client.set_ascendon(payload["ascendon"])
        try:
            report = future.result(timeout=service.ready_timeout)
        except FutureTimeoutError:
            response.status = 202
            return {"login_status": client.login_status(), "refresh": "pending"}
        except Exception as err:
            status, body = error_payload(err, request.path)
            response.status = status
            return body

        logger.info(f"Ascendon token replaced via API (login status {client.login_status()})")
        return {"login_status": client.login_status(), "refresh": _report_to_dict(report)}

    @app.route("/api/session/ascendon", method="DELETE")
    def clear_ascendon():
        """Drop the ascendon token and fall back to the anonymous view"""
        future = client.set_ascendon(None)
        try:
            report = future.result(timeout=service.ready_timeout)
        except FutureTimeoutError:
            return {"login_status": client.login_status(), "refresh": "pending"}
        return {"login_status": client.login_status(), "refresh": _report_to_dict(report)}

    @app.route("/api/session/verify", method="POST")
    def verify_ascendon():
        """Verify the current ascendon token against the issuer's signing keys"""
        try:
            decoded = client.verify_ascendon().result(timeout=service.ready_timeout)
        except FutureTimeoutError:
            response.status = 504
            return {"error": "Verification timed out"}
        except Exception as err:
            status, body = error_payload(err, request.path)
            response.status = status
            return body

        return {"verified": True, "claims": decoded.to_dict()}

    @app.route("/api/location")
    def get_location():
        """Current location; ?wait=<seconds> blocks until the first fetch"""
        wait = request.query.get("wait")
        if wait:
            try:
                client.wait_location_ready(timeout=float(wait))
            except ValueError:
                response.status = 400
                return {"error": "wait must be a number of seconds"}

        location = client.location
        if location is None:
            response.status = 409
            return {"error": "location is not set", "missing": "location"}
        return location.to_dict()

    @app.route("/api/config/remote")
    def get_remote_config():
        remote_config = client.remote_config
        if remote_config is None:
            response.status = 409
            return {"error": "remote config is not set", "missing": "config"}
        return remote_config

    @app.route("/api/session/refresh", method="POST")
    def refresh_session():
        """Re-run the full refresh chain"""
        try:
            report = client.refresh_all().result(timeout=service.ready_timeout)
        except FutureTimeoutError:
            response.status = 202
            return {"refresh": "pending"}
        return {"refresh": _report_to_dict(report)}
