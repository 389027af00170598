"""Shared plumbing for the Salesforce tools: one connection, one envelope.

Successful calls return ``{"success": True, "data": ..., "operation": name}``.
Any exception is logged and turned into
``{"success": False, "error", "error_code", "details"[, "guidance"]}`` so an
agent always gets a structured answer.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from langchain_core.tools import BaseTool
from simple_salesforce import Salesforce
from simple_salesforce.exceptions import SalesforceError

from sfsearch.utils.config import ConfigError, config
from sfsearch.utils.logging.framework import SmartLogger
from sfsearch.utils.platform.salesforce import (
    InvalidArgumentError,
    NotConfiguredError,
    SalesforceSearchError,
    SearchExecutionFailed,
    UnknownObjectError,
)

logger = SmartLogger("salesforce")

# Salesforce errorCode -> (summary, guidance)
_API_ERRORS = {
    'MALFORMED_SEARCH': ("Search failed", {
        "consider": "Reserved characters in the search term or an invalid per-object filter.",
        "approach": "Simplify the search term or drop conditions_per_object.",
    }),
    'INVALID_FIELD': ("Invalid field in query", {
        "consider": "Objects name similar concepts differently (Account.Phone vs Contact.MobilePhone).",
        "approach": "Request only fields that exist on each object.",
    }),
    'INVALID_TYPE': ("Invalid object type", {
        "consider": "Custom objects need the '__c' suffix.",
        "approach": "Check the exact API name of the object.",
    }),
    'INVALID_SESSION_ID': ("Session expired", None),
}


class SalesforceConnectionManager:
    """Process-wide Salesforce session, created on first use."""
    _instance = None
    _connection: Optional[Salesforce] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def connection(self) -> Salesforce:
        if self._connection is None:
            options = {"domain": config.salesforce_domain}
            if config.salesforce_api_version:
                options["version"] = config.salesforce_api_version
            self._connection = Salesforce(
                username=config.get_secret('salesforce_user'),
                password=config.get_secret('salesforce_pass'),
                security_token=config.get_secret('salesforce_token'),
                **options
            )
            logger.info("salesforce_connection_created", domain=options["domain"])
        return self._connection

    def reset(self):
        """Forget the session; the next ``connection`` access logs in again."""
        self._connection = None


class BaseSalesforceTool(BaseTool, ABC):
    """Base for tools that talk to Salesforce through the shared connection.

    Subclasses implement ``_execute``; ``_run`` adds logging and the
    response envelope.
    """

    @property
    def sf(self) -> Salesforce:
        return SalesforceConnectionManager().connection

    def _run(self, **kwargs) -> Dict[str, Any]:
        logger.info("tool_call", tool_name=self.name, tool_args=kwargs)
        try:
            data = self._execute(**kwargs)
        except Exception as e:
            return self._error_response(e)

        logger.info("tool_result",
                    tool_name=self.name,
                    result_preview=str(data)[:200])
        return {"success": True, "data": data, "operation": self.name}

    @abstractmethod
    def _execute(self, **kwargs) -> Any:
        """Do the work and return the ``data`` part of the response."""

    def _error_response(self, error: Exception) -> Dict[str, Any]:
        logger.error("tool_error",
                     tool_name=self.name,
                     error=str(error),
                     error_type=type(error).__name__)

        if isinstance(error, UnknownObjectError):
            return _envelope("Object not included in search", "UNKNOWN_OBJECT", str(error), {
                "reflection": f"Options were given for '{error.object_name}' but it is not in object_types.",
                "approach": "Add the object to object_types or drop its options.",
            })
        if isinstance(error, (InvalidArgumentError, NotConfiguredError)):
            return _envelope("Invalid search request", "INVALID_ARGUMENT", str(error))
        if isinstance(error, ConfigError):
            return _envelope("Salesforce is not configured", "CONFIG_ERROR", str(error))

        if isinstance(error, SearchExecutionFailed):
            summary, fallback_code = "Search failed", "SEARCH_FAILED"
            error_code, details = error.error_code, error.message
        elif isinstance(error, SalesforceError):
            summary, fallback_code = "Operation failed", "SALESFORCE_ERROR"
            error_code, details = _api_error_code(error), str(error)
        elif isinstance(error, SalesforceSearchError):
            summary, fallback_code = "Operation failed", "SEARCH_ERROR"
            error_code, details = None, str(error)
        else:
            return _envelope("Operation failed", "UNKNOWN_ERROR", str(error))

        if error_code == 'INVALID_SESSION_ID':
            SalesforceConnectionManager().reset()

        summary, guidance = _API_ERRORS.get(error_code, (summary, None))
        return _envelope(summary, error_code or fallback_code, details, guidance)


def _api_error_code(error: SalesforceError) -> Optional[str]:
    content = getattr(error, 'content', None)
    if isinstance(content, list) and content and isinstance(content[0], dict):
        return content[0].get('errorCode')
    return None


def _envelope(error: str, error_code: str, details: str,
              guidance: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    response = {
        "success": False,
        "error": error,
        "error_code": error_code,
        "details": details,
    }
    if guidance:
        response["guidance"] = guidance
    return response
