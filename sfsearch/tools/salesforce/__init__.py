"""Salesforce tools."""

from .base import BaseSalesforceTool, SalesforceConnectionManager
from .search import SalesforceSOSL

SALESFORCE_SEARCH_TOOLS = [
    SalesforceSOSL(),
]

__all__ = [
    'BaseSalesforceTool',
    'SalesforceConnectionManager',
    'SalesforceSOSL',
    'SALESFORCE_SEARCH_TOOLS',
]
