"""
Standardized exception hierarchy for temple-passport
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import date, datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class PassportError(Exception):
    """
    Base exception for all temple-passport errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise PassportError(
            message="Failed to apply check-in",
            user_id="user_001",
            operation="apply_check_in",
            context={"temple_id": "temple_001"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.warning(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(PassportError):
    """
    Raised when an event or ledger call carries invalid input

    Example:
        raise ValidationError(
            message="Timezone is not a valid IANA name",
            field="timezone",
            value="Mars/Olympus",
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        kwargs.setdefault("context", {"field": field, "value": value})
        super().__init__(message=message, **kwargs)


class InvalidAmountError(ValidationError):
    """Ledger amount is zero or negative"""

    def __init__(self, amount: int, **kwargs):
        self.amount = amount
        super().__init__(
            message=f"Merit amount must be positive, got {amount}",
            field="amount",
            value=amount,
            user_message="Merit point amounts must be greater than zero.",
            **kwargs
        )


# ==========================================
# Merit Economy Errors
# ==========================================

class InsufficientBalanceError(PassportError):
    """Spend exceeds the current merit balance"""

    def __init__(self, required: int, available: int, **kwargs):
        self.required = required
        self.available = available
        super().__init__(
            message=f"Insufficient merit balance: need {required}, have {available}",
            user_message=f"Not enough merit points. You need {required} but have {available}.",
            context={"required": required, "available": available},
            **kwargs
        )


class DuplicateCheckInError(PassportError):
    """The same temple was already checked in on the same local date"""

    def __init__(self, temple_id: str, check_in_date: date, **kwargs):
        self.temple_id = temple_id
        self.check_in_date = check_in_date
        super().__init__(
            message=f"Already checked in at {temple_id} on {check_in_date.isoformat()}",
            user_message="You have already checked in at this temple today. Come back tomorrow!",
            context={"temple_id": temple_id, "check_in_date": check_in_date.isoformat()},
            **kwargs
        )


class UnknownAchievementDefinitionError(PassportError):
    """Achievement catalog is inconsistent or an id has no definition"""

    def __init__(self, message: str, achievement_id: Optional[str] = None, **kwargs):
        self.achievement_id = achievement_id
        super().__init__(
            message=message,
            user_message="Achievement data is out of date. Please refresh and try again.",
            context={"achievement_id": achievement_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(PassportError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(PassportError):
    """Persisting or loading progression state failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            user_message="We couldn't save your passport. Please try again.",
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> PassportError:
    """
    Wrap low-level persistence exceptions into our exception hierarchy

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_state", user_id=user_id)
    """
    if isinstance(error, PassportError):
        return error

    return StorageError(
        message=f"{operation} failed: {str(error)}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
