"""
Boundary error kinds and results

Calls that cross into hardware or the tracking engine never raise into the
control loop. They return a BoundaryResult and the caller decides how to log
the failure.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Failure categories absorbed by the control subsystem"""
    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    HARDWARE_COMMAND_FAILURE = "hardware_command_failure"
    SNAPSHOT_FETCH_FAILURE = "snapshot_fetch_failure"


@dataclass(frozen=True)
class BoundaryResult:
    """Outcome of a single boundary call"""
    ok: bool
    value: Any = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "BoundaryResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: BaseException | str) -> "BoundaryResult":
        return cls(ok=False, error_kind=kind, error=str(error))
