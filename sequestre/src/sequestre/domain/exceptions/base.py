"""
Base domain exceptions.
"""


class SequestreException(Exception):
    """Base exception for all Sequestre domain errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Structured failure returned to callers."""
        return {"error": self.code, "message": self.message}


class ValidationError(SequestreException):
    """Raised when instruction arguments fail validation."""

    def __init__(self, field: str, reason: str, code: str = "VALIDATION_ERROR"):
        message = f"Validation failed for {field}: {reason}"
        super().__init__(message, code=code)
        self.field = field
        self.reason = reason


class InvalidInstructionError(ValidationError):
    """Raised when instruction data or its account list is malformed."""

    def __init__(self, reason: str):
        super().__init__("instruction", reason, code="INVALID_INSTRUCTION")
