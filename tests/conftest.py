"""Shared test fixtures and configuration."""

import os

import pytest


# Complete test environment that overrides every config value
TEST_ENV = {
    "RESOURCE_SEARCH_HISTORY_SIZE": "20",
    "RESOURCE_SEARCH_SUGGESTION_MIN_LENGTH": "2",
    "RESOURCE_SEARCH_MAX_SUGGESTIONS": "10",
    "RESOURCE_SEARCH_INLINE_SUGGESTIONS": "3",
    "RESOURCE_SEARCH_LOG_LEVEL": "warning",
    "RESOURCE_SEARCH_LOG_JSON": "false",
    "RESOURCE_SEARCH_TRACING_ENABLED": "false",
}

# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

from resource_search.config import get_settings  # noqa: E402
from resource_search.domain.model import Resource  # noqa: E402
from resource_search.search.engine import ResourceSearchEngine  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin test defaults and drop any cached settings between tests."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def web_vms():
    """The two-VM inventory used by the end-to-end examples."""
    return [
        Resource(
            name="web-vm-01",
            type="Microsoft.Compute/virtualMachines",
            location="eastus",
            tags={"env": "prod"},
        ),
        Resource(
            name="web-vm-02",
            type="Microsoft.Compute/virtualMachines",
            location="westus",
            tags={"env": "dev"},
        ),
    ]


@pytest.fixture
def mixed_resources():
    """A small inventory spanning several types, regions and resource groups."""
    return [
        Resource(
            id="/subscriptions/123/resourceGroups/rg1/providers/Microsoft.Compute/virtualMachines/vm1",
            name="web-server-vm",
            type="Microsoft.Compute/virtualMachines",
            location="eastus",
            resource_group="production-rg",
            status="Running",
            tags={"env": "production", "app": "web"},
        ),
        Resource(
            id="/subscriptions/123/resourceGroups/rg2/providers/Microsoft.Storage/storageAccounts/storage1",
            name="webstorage",
            type="Microsoft.Storage/storageAccounts",
            location="westus",
            resource_group="staging-rg",
            tags={"env": "staging", "app": "web"},
        ),
        Resource(
            id="/subscriptions/123/resourceGroups/rg1/providers/Microsoft.ContainerService/managedClusters/aks1",
            name="production-aks",
            type="Microsoft.ContainerService/managedClusters",
            location="eastus",
            resource_group="production-rg",
            tags={"env": "production", "app": "api"},
        ),
    ]


@pytest.fixture
def engine(mixed_resources):
    search_engine = ResourceSearchEngine()
    search_engine.set_resources(mixed_resources)
    return search_engine


@pytest.fixture
def vm_engine(web_vms):
    search_engine = ResourceSearchEngine()
    search_engine.set_resources(web_vms)
    return search_engine
