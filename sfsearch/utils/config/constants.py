"""
Central constants for the Salesforce search helpers.

Single source of truth for configuration keys, query-language tokens
and other repeated values.
"""

DEFAULT_CONFIG_FILE = "system_config.json"

# Salesforce record identifier, always returned for every searched object
ID_FIELD = "Id"

# SOSL defaults used by the search tool
DEFAULT_SEARCH_SCOPE = "ALL_FIELDS"
DEFAULT_LIMIT_PER_OBJECT = 20
DEFAULT_SEARCH_OBJECTS = ("Account", "Contact", "Lead", "Opportunity", "Case")

# Fields returned by the search tool when none are requested
DEFAULT_RETURN_FIELDS = {
    'Account': ['Name', 'Type', 'Industry', 'Website'],
    'Contact': ['Name', 'Email', 'Phone', 'Title'],
    'Lead': ['Name', 'Company', 'Email', 'Phone', 'Status'],
    'Opportunity': ['Name', 'Amount', 'StageName', 'CloseDate'],
    'Case': ['CaseNumber', 'Subject', 'Status', 'Priority'],
}

# REST resources
CURRENT_USER_RESOURCE = "chatter/users/me"
