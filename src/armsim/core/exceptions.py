"""
Custom exceptions for ArmSim.

All ArmSim exceptions inherit from ArmSimError for easy catching.
None of them is fatal to the simulation: the controller holds its last
valid state and reports the condition to the caller.
"""

from typing import Any


class ArmSimError(Exception):
    """Base exception for all ArmSim errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(ArmSimError):
    """Raised when configuration is invalid or missing."""

    pass


class MotionError(ArmSimError):
    """Raised when a motion command cannot be converted into joint angles."""

    pass


class UnreachableTargetError(MotionError):
    """Raised when a target lies outside the arm's workspace."""

    def __init__(
        self,
        message: str,
        target: tuple[float, float, float] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.target = target


class DegenerateTargetError(UnreachableTargetError):
    """Raised when a target coincides with the shoulder pivot."""

    pass


class InvalidOperationError(ArmSimError):
    """Raised when an operator command is not allowed in the current state."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
