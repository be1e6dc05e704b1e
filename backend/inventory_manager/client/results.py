"""Tagged outcome of a networked call.

The facade branches on ``ApiResult.outcome`` instead of on exception types:
only ``TRANSPORT_FAILURE`` sends a call to the offline backend. A well-formed
``{success: false}`` answer means the server is reachable and must be shown
to the caller as-is.
"""

import enum
from dataclasses import dataclass


class Outcome(str, enum.Enum):
    OK = "ok"
    APPLICATION_ERROR = "application_error"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass
class ApiResult:
    outcome: Outcome
    payload: dict | None = None
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def from_payload(cls, payload: dict, status_code: int | None = None) -> "ApiResult":
        outcome = Outcome.OK if payload["success"] else Outcome.APPLICATION_ERROR
        return cls(outcome, payload, payload.get("error"), status_code)

    @classmethod
    def transport_failure(cls, error: str, status_code: int | None = None) -> "ApiResult":
        return cls(Outcome.TRANSPORT_FAILURE, None, error, status_code)

    @property
    def is_transport_failure(self) -> bool:
        return self.outcome is Outcome.TRANSPORT_FAILURE
