"""
Custom exceptions for the TXF converter.
Row-level problems are never raised; these cover the file and I/O boundary.
"""
from typing import Any, Dict, Optional


class TxfConverterException(Exception):
    """Base exception for all converter errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.
        
        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Error body for API responses."""
        return {"error": type(self).__name__, "message": self.message, "details": self.details}


class FileProcessingError(TxfConverterException):
    """Raised when an uploaded or local export file cannot be processed."""


class ValidationError(TxfConverterException):
    """Raised when request parameters are invalid."""


class ParsingError(TxfConverterException):
    """Raised when CSV parsing fails."""


class ExportError(TxfConverterException):
    """Raised when a TXF file cannot be written."""


class ConfigurationError(TxfConverterException):
    """Raised when configuration is invalid."""


class DataNotFoundError(TxfConverterException):
    """Raised when an input file does not exist."""
