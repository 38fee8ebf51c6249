"""Shared test fixtures and configuration."""

import os

import pytest

from content_discovery.adapters import RepositoryNode, SnapshotRepositoryClient


# Complete test environment that overrides every config value the app reads
TEST_ENV = {
    "OPERATION_MODE": "online",
    "REPOSITORY_URL": "http://repository.test:4502",
    "SNAPSHOT_PATH": "",
    "HTTP_TIMEOUT": "10",
    "REQUEST_TIMEOUT": "5",
    "MAX_CONCURRENCY": "8",
    "DEFAULT_LIMIT": "5",
    "DEFAULT_FUZZY_THRESHOLD": "0.75",
    "DEFAULT_SEARCH_DEPTH": "2",
    "MCP_HOST": "127.0.0.1",
    "MCP_PORT": "15010",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    # Proxy settings - ensure they're cleared for tests
    "http_proxy": "",
    "https_proxy": "",
    "all_proxy": "",
    "no_proxy": "",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset environment variables to test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


def site_nodes() -> list[RepositoryNode]:
    """A small multi-locale site.

    ``/content/mysite`` holds two pages directly, a German direct-locale
    subtree and a British country/language subtree.
    """
    return [
        RepositoryNode(path="/content/mysite/homepage", title="Homepage"),
        RepositoryNode(path="/content/mysite/products-page", title="Products Page"),
        RepositoryNode(path="/content/mysite/de/ueber-uns", title="Ueber Uns"),
        RepositoryNode(path="/content/mysite/de/kontakt", title="Kontakt"),
        RepositoryNode(path="/content/mysite/gb/en/contact", title="Contact"),
        RepositoryNode(path="/content/support/customer-service-fax", title="Customer Service Fax"),
        RepositoryNode(path="/content/support/costumer-servise-fat", title="Costumer Servise Fat"),
    ]


@pytest.fixture
def site_client() -> SnapshotRepositoryClient:
    return SnapshotRepositoryClient(site_nodes())


@pytest.fixture
def locale_client() -> SnapshotRepositoryClient:
    """Site using every locale convention the path generator knows about."""
    return SnapshotRepositoryClient(
        [
            RepositoryNode(path="/content/site/language-masters/en/home", title="Home"),
            RepositoryNode(path="/content/site/language-masters/fr/accueil", title="Accueil"),
            RepositoryNode(path="/content/site/us/en/home", title="Home"),
            RepositoryNode(path="/content/site/ca/fr", title="Canada Francais", active=False),
            RepositoryNode(path="/content/site/ca/fr/accueil", title="Accueil"),
            RepositoryNode(path="/content/site/de/start", title="Start"),
        ]
    )
