"""Salesforce platform utilities."""

from .exceptions import (
    SalesforceSearchError,
    NotConfiguredError,
    UnknownObjectError,
    InvalidArgumentError,
    SearchExecutionFailed,
)
from .sosl_builder import SOSLQueryBuilder, SearchScope, ObjectSearchOptions
from .soql_builder import SOQLQueryBuilder, SOQLOperator, SOQLCondition
from .metadata import OrgMetadataService, OrgInfo, UserInfo, FieldInfo
from .soql_helpers import (
    escape_soql,
    quote_search_term,
    format_soql_value,
    validate_object_name,
    validate_namespace,
    unique_fields,
)

__all__ = [
    'SalesforceSearchError',
    'NotConfiguredError',
    'UnknownObjectError',
    'InvalidArgumentError',
    'SearchExecutionFailed',
    'SOSLQueryBuilder',
    'SearchScope',
    'ObjectSearchOptions',
    'SOQLQueryBuilder',
    'SOQLOperator',
    'SOQLCondition',
    'OrgMetadataService',
    'OrgInfo',
    'UserInfo',
    'FieldInfo',
    'escape_soql',
    'quote_search_term',
    'format_soql_value',
    'validate_object_name',
    'validate_namespace',
    'unique_fields',
]
