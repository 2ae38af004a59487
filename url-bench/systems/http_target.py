"""
Async HTTP target that issues load test attempts and classifies their outcomes.
"""

import asyncio
import json
import logging
import time
from typing import Optional

import aiohttp

from configuration import (
    ATTEMPT_TIMEOUT_SECONDS,
    DEFAULT_METHOD,
    HTTP_SUCCESS_MIN,
    HTTP_SUCCESS_MAX,
    NO_RESPONSE_STATUS,
)
from models.request import AttemptOutcome, RequestSpec

logger = logging.getLogger(__name__)

# Headers are sent as supplied; aiohttp would otherwise add a Content-Type for the body
_SKIP_AUTO_HEADERS = ("Content-Type",)


def format_log_line(method: str, status: int, url: str, message: str) -> str:
    """Render one attempt as a display line."""
    return f"{method} {status} {url} - {message}"


def _error_text(error: BaseException) -> str:
    # Timeouts carry no message
    return str(error) or type(error).__name__


def describe_error_body(raw: bytes) -> str:
    """Extract the failure message from an error response body.

    The body is expected to be a JSON object with string ``error`` and
    ``details`` fields (either may be absent); they are joined with a space.
    Anything else is reported as a decode error.
    """
    try:
        payload = json.loads(raw)
    except ValueError as e:
        return f"error decoding response body: {e}"

    if not isinstance(payload, dict):
        return f"error decoding response body: expected a JSON object, got {type(payload).__name__}"

    error = payload.get("error", "")
    details = payload.get("details", "")
    if not isinstance(error, str) or not isinstance(details, str):
        return "error decoding response body: error and details must be strings"

    return f"{error} {details}"


async def _on_request_redirect(session, trace_config_ctx, params):
    """Remember the status of the last redirect response an attempt followed."""
    if isinstance(trace_config_ctx.trace_request_ctx, dict):
        trace_config_ctx.trace_request_ctx["redirect_status"] = params.response.status


class HttpTarget:
    """Shared HTTP client for all attempts of one run."""

    def __init__(self, timeout_seconds: float = ATTEMPT_TIMEOUT_SECONDS, connection_limit: int = 100):
        self.timeout_seconds = timeout_seconds
        self.connection_limit = connection_limit
        self.session: Optional[aiohttp.ClientSession] = None

        logger.debug(
            f"Initialized HTTP target (timeout={timeout_seconds}s, connections={connection_limit})"
        )

    async def __aenter__(self):
        """Async context manager entry."""
        trace_config = aiohttp.TraceConfig()
        trace_config.on_request_redirect.append(_on_request_redirect)

        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            connector=aiohttp.TCPConnector(limit=self.connection_limit),
            trace_configs=[trace_config],
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def send(self, spec: RequestSpec) -> AttemptOutcome:
        """Issue one attempt for the spec and classify the outcome.

        Never raises; every failure mode becomes a failed AttemptOutcome
        carrying one log line. An empty method is sent as GET.

        Args:
            spec: Request specification supplying method, URL, body and headers

        Returns:
            AttemptOutcome for this attempt
        """
        if not self.session:
            raise RuntimeError("HTTP target not initialized. Use async context manager.")

        method = spec.method or DEFAULT_METHOD
        trace_ctx = {"redirect_status": NO_RESPONSE_STATUS}
        start_time = time.perf_counter()

        def outcome(success: bool, status: int, message: str) -> AttemptOutcome:
            return AttemptOutcome(
                success=success,
                status=status,
                log_line=format_log_line(method, status, spec.url, message),
                duration_seconds=time.perf_counter() - start_time,
            )

        try:
            async with self.session.request(
                method,
                spec.url,
                data=spec.body.encode("utf-8"),
                headers=spec.headers,
                skip_auto_headers=_SKIP_AUTO_HEADERS,
                trace_request_ctx=trace_ctx,
            ) as response:
                status = response.status
                if HTTP_SUCCESS_MIN <= status < HTTP_SUCCESS_MAX:
                    return outcome(True, status, "no error")

                try:
                    raw = await response.read()
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    return outcome(False, status, f"error reading response body: {_error_text(e)}")

                return outcome(False, status, describe_error_body(raw))

        except (aiohttp.ClientResponseError, aiohttp.RedirectClientError) as e:
            # Transport failed after a response was received; redirect errors
            # carry no status of their own
            status = getattr(e, "status", 0) or trace_ctx["redirect_status"]
            return outcome(False, status, f"{type(e).__name__}: {_error_text(e)}")

        except (aiohttp.InvalidURL, ValueError, TypeError) as e:
            logger.debug(f"Could not build {method} request for {spec.url}: {e}")
            return outcome(False, NO_RESPONSE_STATUS, "error creating request")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return AttemptOutcome(
                success=False,
                status=NO_RESPONSE_STATUS,
                log_line=f"{method} {spec.url} - error sending request, no response received: "
                         f"{_error_text(e)}",
                duration_seconds=time.perf_counter() - start_time,
            )

        except Exception as e:
            logger.error(f"Unexpected error during {method} {spec.url}: {e}", exc_info=True)
            return outcome(False, NO_RESPONSE_STATUS, f"unexpected error: {e}")
