"""
Data structures for URL load tests.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from configuration import DEFAULT_METHOD


class SpecValidationError(ValueError):
    """Raised when a request specification cannot be executed."""


@dataclass(frozen=True)
class RequestSpec:
    """One load test: hit `url` `request_count` times, `concurrency` at a time."""

    url: str
    method: str
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    request_count: int = 0
    concurrency: int = 1

    def validate(self) -> None:
        """Check the preconditions of a run.

        Raises:
            SpecValidationError: If the counts cannot drive a run
        """
        if isinstance(self.request_count, bool) or not isinstance(self.request_count, int):
            raise SpecValidationError(f"req_count must be an integer, got {self.request_count!r}")
        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int):
            raise SpecValidationError(f"c_req_count must be an integer, got {self.concurrency!r}")
        if self.request_count < 0:
            raise SpecValidationError(f"req_count must be >= 0, got {self.request_count}")
        if self.concurrency < 1:
            raise SpecValidationError(f"c_req_count must be >= 1, got {self.concurrency}")

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "RequestSpec":
        """Build a spec from its wire representation.

        Args:
            payload: Decoded JSON object with url, method, body, headers,
                req_count and c_req_count fields

        Returns:
            Validated RequestSpec

        Raises:
            SpecValidationError: If a field is missing or has the wrong type
        """
        if not isinstance(payload, dict):
            raise SpecValidationError(f"request spec must be an object, got {type(payload).__name__}")

        url = payload.get("url")
        method = payload.get("method")
        body = payload.get("body")
        headers = payload.get("headers")

        # JSON nulls and omitted fields fall back to zero values
        if method is None or method == "":
            method = DEFAULT_METHOD
        if body is None:
            body = ""
        if headers is None:
            headers = {}

        if not isinstance(url, str):
            raise SpecValidationError("url must be a string")
        if not isinstance(method, str):
            raise SpecValidationError("method must be a string")
        if not isinstance(body, str):
            raise SpecValidationError("body must be a string")
        if not isinstance(headers, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            raise SpecValidationError("headers must map strings to strings")
        if "req_count" not in payload or "c_req_count" not in payload:
            raise SpecValidationError("req_count and c_req_count are required")

        spec = cls(
            url=url,
            method=method,
            body=body,
            headers=dict(headers),
            request_count=payload["req_count"],
            concurrency=payload["c_req_count"],
        )
        spec.validate()
        return spec


@dataclass(frozen=True)
class AttemptOutcome:
    """Classified result of a single attempt."""

    success: bool
    status: int
    log_line: str
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class ResultRecord:
    """Aggregate result of one run."""

    method: str
    url: str
    success_count: int
    failure_count: int
    elapsed_seconds: float
    log: str = ""

    def to_json(self) -> Dict[str, Any]:
        """Wire representation of the record."""
        return {
            "method": self.method,
            "url": self.url,
            "successful_requests": self.success_count,
            "failed_requests": self.failure_count,
            "time": self.elapsed_seconds,
            "logs": self.log,
        }


def parse_specs(payload: Any) -> List[RequestSpec]:
    """Parse and validate a JSON array of request specifications.

    Raises:
        SpecValidationError: If the payload is not an array or any entry is invalid
    """
    if not isinstance(payload, list):
        raise SpecValidationError("expected a JSON array of request specs")

    specs = []
    for index, item in enumerate(payload):
        try:
            specs.append(RequestSpec.from_json(item))
        except SpecValidationError as e:
            raise SpecValidationError(f"spec {index}: {e}") from e
    return specs
