# File: cadence/core/exceptions.py

from typing import Dict, Any, List, Optional
from datetime import datetime


class CadenceException(Exception):
    """Base exception for all Cadence errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a Cadence exception.

        Args:
            message: Human-readable error message
            code: Optional machine-processable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": datetime.now().isoformat(),
        }


# Domain-specific exceptions
class DomainException(CadenceException):
    """Base exception for domain-related errors."""

    CODE_PREFIX = "DOMAIN_"


class EntityNotFoundException(DomainException):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            f"{self.CODE_PREFIX}001",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


# Recurrence-related exceptions
class RecurrenceException(CadenceException):
    """Base exception for recurrence-related errors."""

    CODE_PREFIX = "RECURRENCE_"


class UnsupportedRepetitionTypeException(RecurrenceException):
    """Raised when occurrences cannot be calculated for a repetition type."""

    def __init__(
        self,
        repetition_type: Any,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        error_details["repetition_type"] = str(repetition_type)
        super().__init__(
            message
            or f'Cannot calculate occurrences for repetition type "{repetition_type}"',
            f"{self.CODE_PREFIX}001",
            error_details,
        )


class InvalidRepetitionMomentException(UnsupportedRepetitionTypeException):
    """Raised when a repetition moment does not match the grammar of its type."""

    def __init__(self, repetition_type: Any, moment: Any, reason: str):
        super().__init__(
            repetition_type,
            f'Invalid moment "{moment}" for repetition type "{repetition_type}": {reason}',
            {"moment": moment, "reason": reason},
        )
        self.code = f"{self.CODE_PREFIX}002"


# Validation exceptions
class ValidationException(CadenceException):
    """Raised when input validation fails."""

    def __init__(
        self, message: str, validation_errors: Optional[Dict[str, List[str]]] = None
    ):
        super().__init__(
            message, "VALIDATION_001", {"validation_errors": validation_errors or {}}
        )
