"""
Examples of cross-object search with the SOSL query builder and the org metadata service
"""

from dotenv import load_dotenv

# Secrets are read when sfsearch.utils.config is first imported
load_dotenv()

from sfsearch.tools.salesforce import SalesforceConnectionManager  # noqa: E402
from sfsearch.utils.platform.salesforce import (  # noqa: E402
    OrgMetadataService,
    SearchScope,
    SOSLQueryBuilder,
)


def example_global_search(sf_connection, search_term="Acme"):
    """Search accounts, contacts and opportunities in one round trip"""

    builder = (SOSLQueryBuilder(sf_connection)
        .set_search_scope(SearchScope.NAME_FIELDS)
        .set_search_objects(['Account', 'Contact', 'Opportunity'])
        .set_fields_for_object('Account', ['Name', 'Industry', 'Phone'])
        .set_condition_for_object('Account', "Industry != null")
        .set_limit_for_object('Account', 10)
        .set_fields_for_object('Contact', ['Name', 'Email', 'Account.Name'])
        .set_limit_for_object('Contact', 10)
        .set_fields_for_object('Opportunity', ['Name', 'Amount', 'StageName'])
        .set_condition_for_object('Opportunity', "Amount > 10000"))

    print(f"Query: {builder.build(search_term)}")

    if not builder.find(search_term):
        print(f"Search failed: {builder.get_error()}")
        return

    print(f"=== {builder.total_results} results for '{search_term}' ===")

    for account in builder.get_results_for_object('Account'):
        print(f"\nAccount: {account['Name']}")
        print(f"  Industry: {account.get('Industry', 'N/A')}")

    for contact in builder.get_results_for_object('Contact'):
        print(f"\nContact: {contact['Name']} <{contact.get('Email') or 'no email'}>")

    for opportunity in builder.get_results_for_object('Opportunity'):
        print(f"\nOpportunity: {opportunity['Name']} ({opportunity.get('StageName')})")


def example_email_lookup(sf_connection, email):
    """Find every lead or contact carrying an email address"""

    builder = SOSLQueryBuilder(sf_connection)
    builder.set_search_scope(SearchScope.EMAIL_FIELDS)
    builder.set_search_objects(['Lead', 'Contact'])
    for object_type in builder.get_search_objects():
        builder.set_fields_for_object(object_type, ['Name', 'Email'])

    if builder.find(email):
        for object_type, records in builder.get_results().items():
            print(f"{object_type}: {len(records)} match(es)")


def example_org_overview(sf_connection, namespace="acme"):
    """Print org facts used to tailor searches"""

    metadata = OrgMetadataService(sf_connection)
    print(f"Org: {metadata.org_name} ({metadata.org_id})")
    print(f"Sandbox: {metadata.is_sandbox}")
    print(f"Running as: {metadata.current_user().username}")
    print(f"Required Account fields: {', '.join(metadata.required_fields('Account'))}")
    print(f"Package '{namespace}' installed: {metadata.is_package_installed(namespace)}")


if __name__ == "__main__":
    import sys

    print("SOSL Search Builder Examples")
    connection = SalesforceConnectionManager().connection
    example_global_search(connection, sys.argv[1] if len(sys.argv) > 1 else "Acme")
    example_org_overview(connection)
