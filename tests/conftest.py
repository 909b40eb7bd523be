"""Configuration for pytest."""
import pytest
from unittest.mock import Mock


@pytest.fixture
def mock_settings():
    """Mock application settings for testing."""
    settings = Mock()
    settings.app_name = "Test Trusted Proxies API"
    settings.trusted_proxies = []
    settings.trusted_proxies_strict = True
    settings.forwarded_for_header = "X-Forwarded-For"
    settings.client_ip_resolution_enabled = True
    return settings
