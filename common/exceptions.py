"""
CanvasPrint - Custom Exceptions
================================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from typing import Dict, List, Optional

from fastapi import HTTPException


class CanvasPrintError(Exception):
    """Base exception for all business logic errors."""
    def __init__(self, message: str = "אירעה שגיאת מערכת."):
        self.message = message
        super().__init__(self.message)


class SizeValidationError(CanvasPrintError):
    """Raised when a canvas size or aspect ratio is not acceptable."""
    def __init__(self, errors: Optional[List[str]] = None, message: str = ""):
        self.errors = list(errors or [])
        super().__init__(message or "; ".join(self.errors) or "גודל הקנבס אינו תקין")


class EmptyBasketError(CanvasPrintError):
    """Raised when checking out an empty basket."""
    def __init__(self):
        super().__init__("סל הקניות ריק")


class ContactValidationError(CanvasPrintError):
    """Raised when checkout contact details fail validation."""
    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("פרטי הקשר אינם תקינים")


def raise_http(error: CanvasPrintError, status_code: int = 400):
    """Convert a business exception to an HTTP exception."""
    detail = getattr(error, "errors", None) or error.message
    raise HTTPException(status_code=status_code, detail=detail)
