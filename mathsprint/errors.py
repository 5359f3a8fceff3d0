from typing import Any, Dict, List, Optional


class MathSprintError(Exception):
    """Base class for errors raised by score stores and the game session."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.message}


class ValidationError(MathSprintError):
    """Malformed or missing input: empty name, bad score, unknown mode."""

    status_code = 400
    message = 'Invalid score data'

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.details:
            payload['details'] = self.details
        return payload


class InternalError(MathSprintError):
    """Storage or network failure. Reported generically to callers."""

    status_code = 500
