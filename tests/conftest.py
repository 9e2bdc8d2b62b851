import pytest

from app.config import OkxCredentials
from tests.fakes import FIXED_NOW, FakeOkxClient


@pytest.fixture
def credentials():
    return OkxCredentials(api_key="test-key", secret_key="test-secret", passphrase="test-pass")


@pytest.fixture
def fake_client():
    return FakeOkxClient()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
