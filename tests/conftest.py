"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from asa_expander.main import app
from asa_expander.models.catalog import ObjectCatalog


SAMPLE_ASA_CONFIG = """\
: Saved
:
ASA Version 9.8(2)
!
hostname fw01
names
name 10.1.1.10 web-server
!
interface GigabitEthernet0/0
 nameif outside
 security-level 0
 ip address 203.0.113.2 255.255.255.0
!
object network WEB01
 host 10.1.1.10
object network WEB01-NAT
 host 203.0.113.10
object network INSIDE-NET
 subnet 10.1.0.0 255.255.0.0
 nat (inside,outside) dynamic interface
object service HTTPS
 service tcp destination eq 443
object-group network WEB-SERVERS
 description Public web farm
 network-object object WEB01
 network-object host 10.1.1.11
object-group network ALL-SERVERS
 group-object WEB-SERVERS
 network-object 10.2.0.0 255.255.0.0
object-group service WEB-PORTS
 service-object tcp destination eq 80
 service-object object HTTPS
object-group service DNS
 service-object tcp-udp destination eq 53
access-list OUTSIDE-IN extended permit object-group WEB-PORTS any object-group WEB-SERVERS
access-list OUTSIDE-IN extended permit object-group DNS any host 10.1.1.53
access-list OUTSIDE-IN extended deny ip any any log
access-list OUTSIDE-IN remark object-group references are not expanded in remarks
logging host inside web-server
nat (inside,outside) source static ALL-SERVERS WEB01-NAT
route outside 0.0.0.0 0.0.0.0 203.0.113.1 1
route inside 10.2.0.0 255.255.0.0 10.1.0.1 1
route outside 198.51.100.0 255.255.255.0 203.0.113.1 1
"""


@pytest.fixture(scope="function", autouse=True)
def disable_api_key():
    """Disable API key authentication for all tests."""
    with patch("asa_expander.core.config.settings.API_KEY", None):
        yield


@pytest.fixture(scope="function")
def client():
    """Test client for the FastAPI app."""
    yield TestClient(app)


@pytest.fixture(scope="function")
def client_with_auth():
    """
    Create a test client with API key authentication enabled.

    Sets API_KEY="test-key" for testing authentication.
    """
    with patch("asa_expander.core.config.settings.API_KEY", "test-key"):
        yield TestClient(app)


@pytest.fixture
def sample_config():
    return SAMPLE_ASA_CONFIG


@pytest.fixture
def make_catalog():
    """Build an ObjectCatalog from a plain dict."""
    return ObjectCatalog.from_dict
