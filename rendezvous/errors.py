"""Module errors: structured error taxonomy for the rendezvous package."""
#
# PURPOSE:
# Gives every loud failure in the package an error code, a human-readable
# message and an optional details dictionary, so callers can branch on the
# code instead of parsing strings.
#
# ERROR CODE FORMAT:
# - GROUP_XXX: RendezvousGroup usage errors
# - CONFIG_XXX: Configuration errors
# - SYSTEM_XXX: Anything else
#
# NOTE:
# A wait that runs out of time is NOT an error. RendezvousGroup.wait() reports
# it through WaitResult.TIMED_OUT.
#
# USAGE:
#   from rendezvous.errors import UnbalancedLeaveError
#
#   try:
#       group.leave()
#   except UnbalancedLeaveError as e:
#       print(e.code, e.details)
#

import json
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    # Group Errors
    GROUP_UNBALANCED_LEAVE = "GROUP_001"
    GROUP_NOTIFY_REJECTED = "GROUP_002"
    GROUP_INVALID_TIMEOUT = "GROUP_003"

    # Config Errors
    CONFIG_INVALID = "CONFIG_001"

    # System Errors
    SYSTEM_INTERNAL_ERROR = "SYSTEM_001"


class RendezvousError(Exception):
    """
    Base exception with structured error information.

    Attributes:
        code: ErrorCode enum value (e.g., "GROUP_001")
        message: Human-readable error message
        details: Optional dictionary with additional context
    """

    default_code: ErrorCode = ErrorCode.SYSTEM_INTERNAL_ERROR

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        message: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}

        # Prefix with the code so log lines are searchable
        super().__init__(f"[{self.code.value}] {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RendezvousError":
        """
        Deserialize error from dictionary.

        Picks the most specific subclass registered for the code so that
        `isinstance` checks keep working after a round trip.
        """
        code = ErrorCode(data["code"])
        error_cls = _ERROR_CLASSES.get(code, cls)
        return error_cls(code, data["message"], data.get("details", {}))


class UnbalancedLeaveError(RendezvousError):
    """Raised when leave() is called with no matching enter()."""

    default_code = ErrorCode.GROUP_UNBALANCED_LEAVE


class NotifyRejectedError(RendezvousError):
    """Raised when a REJECT-policy group already holds a pending callback."""

    default_code = ErrorCode.GROUP_NOTIFY_REJECTED


class ConfigError(RendezvousError):
    """Raised when configuration values cannot be parsed or are out of range."""

    default_code = ErrorCode.CONFIG_INVALID


_ERROR_CLASSES = {
    ErrorCode.GROUP_UNBALANCED_LEAVE: UnbalancedLeaveError,
    ErrorCode.GROUP_NOTIFY_REJECTED: NotifyRejectedError,
    ErrorCode.CONFIG_INVALID: ConfigError,
}


# ============================================================================
# Convenience Functions
# ============================================================================

def unbalanced_leave(group_name: str) -> UnbalancedLeaveError:
    return UnbalancedLeaveError(
        message=f"leave() called on group '{group_name}' with no pending enter()",
        details={"group": group_name, "pending_count": 0},
    )


def invalid_timeout(timeout: Any) -> RendezvousError:
    return RendezvousError(
        ErrorCode.GROUP_INVALID_TIMEOUT,
        f"Timeout must be a number of seconds or None, got {timeout!r}",
        details={"timeout": repr(timeout)},
    )


def invalid_config(key: str, value: Any, reason: str) -> ConfigError:
    return ConfigError(
        message=f"Invalid value for {key}: {value!r} ({reason})",
        details={"key": key, "value": value, "reason": reason},
    )
