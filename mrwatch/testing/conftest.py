"""
Pytest plugin for mrwatch testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["mrwatch.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from mrwatch.testing.fixtures import (
    classifier_config,
    label_driven_config,
    mock_client,
    mock_notifier,
    mock_project_id,
    sample_child_item,
    sample_issue,
    sample_merge_request,
)

__all__ = [
    "mock_client",
    "mock_notifier",
    "mock_project_id",
    "classifier_config",
    "label_driven_config",
    "sample_merge_request",
    "sample_issue",
    "sample_child_item",
]
