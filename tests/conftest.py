"""Shared fixtures for storage bucket tests."""

import aws_cdk as cdk
import pytest

from storage_bucket.scripts.utils import find_project_root


@pytest.fixture
def app():
    """Fresh CDK app per test."""
    return cdk.App()


@pytest.fixture
def stack(app):
    """Bare stack for exercising constructs in isolation."""
    return cdk.Stack(app, "TestStack")


@pytest.fixture(autouse=True)
def clear_project_root_cache():
    """find_project_root caches on the working directory it first saw."""
    find_project_root.cache_clear()
    yield
    find_project_root.cache_clear()


