from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from tests.helpers import FakeServer

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def server() -> FakeServer:
    """Create an in-memory server recording its requests."""
    return FakeServer()


@pytest.fixture
def mock_span() -> Mock:
    """Create a mock span."""
    return Mock(spec=["end"])


@pytest.fixture
def mock_tracer(mock_span: Mock) -> Mock:
    """Create a mock tracer returning ``mock_span`` for every trace."""
    return Mock(spec=["trace"], trace=Mock(return_value=mock_span))
