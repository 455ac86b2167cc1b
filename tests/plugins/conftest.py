import pytest

from .utils import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
