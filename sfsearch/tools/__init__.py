"""Agent-facing tools built on the search helpers."""

from .salesforce import SalesforceSOSL, SALESFORCE_SEARCH_TOOLS

__all__ = ['SalesforceSOSL', 'SALESFORCE_SEARCH_TOOLS']
