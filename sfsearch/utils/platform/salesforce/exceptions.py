"""Salesforce search exceptions"""

from typing import Optional


class SalesforceSearchError(Exception):
    """Base exception for search builder and metadata errors"""
    pass


class NotConfiguredError(SalesforceSearchError):
    """A search was requested before scope and objects were set"""
    pass


class UnknownObjectError(SalesforceSearchError, KeyError):
    """Per-object option targets an object type that is not registered"""
    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"Object '{object_name}' is not registered for search")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class InvalidArgumentError(SalesforceSearchError, ValueError):
    """Invalid value passed to a builder or metadata operation"""
    pass


class SearchExecutionFailed(SalesforceSearchError):
    """Salesforce rejected or failed to execute a composed query.

    Captured by the builder rather than raised; see ``get_failure()``.
    """
    def __init__(self, message: str, error_code: Optional[str] = None, query: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        self.query = query
        super().__init__(message)
