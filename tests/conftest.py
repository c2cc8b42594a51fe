"""Common utilities for tests."""

from tests.mock_utils import (  # noqa: F401
    EnhancedMockFirestore,
    MockFieldFilter,
    MockFirestoreBuilder,
    patch_mockfirestore,
)
