"""Salesforce search helpers.

- utils.platform.salesforce: SOSL search builder, SOQL builder, org metadata
- tools.salesforce: agent-facing tools built on the search builder
- utils: configuration and structured logging
"""

from .utils.platform.salesforce import (
    SOSLQueryBuilder,
    SearchScope,
    ObjectSearchOptions,
    OrgMetadataService,
    SalesforceSearchError,
    NotConfiguredError,
    UnknownObjectError,
    InvalidArgumentError,
    SearchExecutionFailed,
)

__all__ = [
    'SOSLQueryBuilder',
    'SearchScope',
    'ObjectSearchOptions',
    'OrgMetadataService',
    'SalesforceSearchError',
    'NotConfiguredError',
    'UnknownObjectError',
    'InvalidArgumentError',
    'SearchExecutionFailed',
]
