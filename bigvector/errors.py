"""
Error types for the vector engine.

Input errors, missing query keys and configuration problems each get their
own class so callers can tell them apart from programming defects.
"""

from typing import Optional, Any, Dict, List


class BigVectorError(Exception):
    """
    Base exception for all bigvector errors.

    Provides common functionality for error tracking and reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __reduce__(self):
        # Rebuild from the message and restore attributes, so errors raised
        # inside worker processes arrive in the parent intact.
        return (self.__class__, (self.message,), self.__dict__)


class DocumentReadError(BigVectorError):
    """
    Raised when a document stream cannot be opened or read.

    Aborts that document's contribution; the driver decides whether the
    whole corpus build is aborted.
    """

    def __init__(self, message: str,
                 identifier: Optional[str] = None,
                 reason: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.identifier = identifier
        self.reason = reason

        self.details.update({
            'identifier': identifier,
            'reason': reason
        })


class MissingKeyError(BigVectorError, KeyError):
    """
    Raised when a query word or query document is absent from the corpus.

    This is a usage error; no default vector is substituted.
    """

    def __init__(self, message: str,
                 kind: str = 'word',
                 key: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.kind = kind
        self.key = key

        self.details.update({
            'kind': kind,
            'key': key
        })

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class CorpusBuildError(BigVectorError):
    """Raised after the join when one or more documents failed under the abort policy."""

    def __init__(self, message: str,
                 failures: Optional[List[Any]] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.failures = failures or []

        self.details.update({
            'failed_documents': [f.task_id for f in self.failures]
        })


class ConfigurationError(BigVectorError, ValueError):
    """Raised when a configuration value is out of range."""

    def __init__(self, message: str,
                 parameter: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.parameter = parameter
        self.details['parameter'] = parameter
