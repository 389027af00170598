"""
Global pytest configuration and fixtures for the Salesforce search tests.

Fixtures are organized by purpose:
- Log isolation (every test writes its logs to its own temporary directory)
- Salesforce connection mocks
- Sample search responses
"""

import json
import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
from simple_salesforce import Salesforce

# Module-level config and loggers are created on import; keep them out of the repo
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="sfsearch-logs-"))

sys.path.insert(0, str(Path(__file__).parent))

from sfsearch.utils.logging import reset_multi_file_logger  # noqa: E402
from sfsearch.tools.salesforce import SalesforceConnectionManager  # noqa: E402


# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Route all log files for one test into a temporary directory."""
    directory = tmp_path / "logs"
    monkeypatch.setenv("LOG_DIR", str(directory))
    reset_multi_file_logger()
    yield directory
    reset_multi_file_logger()


@pytest.fixture
def read_log(log_dir):
    """Return the parsed JSON entries of one log file."""
    def _read(filename: str):
        path = log_dir / filename
        if not path.exists():
            return []
        return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    return _read


# ============================================================================
# Salesforce Fixtures
# ============================================================================

@pytest.fixture
def mock_salesforce():
    """Create a mock Salesforce connection."""
    mock_sf = Mock(spec=Salesforce)
    mock_sf.search.return_value = {"searchRecords": []}
    mock_sf.query.return_value = {"totalSize": 0, "done": True, "records": []}
    return mock_sf


@pytest.fixture
def salesforce_search_response():
    """Search response with two Accounts and one Contact."""
    return {
        "searchRecords": [
            {
                "attributes": {"type": "Account", "url": "/services/data/v59.0/sobjects/Account/001000000000001AAA"},
                "Id": "001000000000001AAA",
                "Name": "Acme Corporation",
            },
            {
                "attributes": {"type": "Contact", "url": "/services/data/v59.0/sobjects/Contact/003000000000001AAA"},
                "Id": "003000000000001AAA",
                "Name": "Jane Acme",
                "Email": "jane@acme.example.com",
            },
            {
                "attributes": {"type": "Account", "url": "/services/data/v59.0/sobjects/Account/001000000000002AAA"},
                "Id": "001000000000002AAA",
                "Name": "Acme Holdings",
            },
        ]
    }


@pytest.fixture
def salesforce_connection(mock_salesforce):
    """Install ``mock_salesforce`` as the shared tool connection."""
    manager = SalesforceConnectionManager()
    manager._connection = mock_salesforce
    yield mock_salesforce
    manager.reset()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests with mocked Salesforce")
