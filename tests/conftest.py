import json
import logging
from pathlib import Path

import pytest

from sharedkey.config import DEVELOPMENT_ACCOUNT_KEY, StorageAccount, decode_account_key

FIXTURES = Path(__file__).parent / 'fixtures'


@pytest.fixture(autouse=True)
def logconf(caplog):
    caplog.set_level(logging.DEBUG)


@pytest.fixture(scope="session")
def storage_account():
    return "devstoreaccount1"


@pytest.fixture(scope="session")
def test_key():
    """fixed 32-byte key"""
    return bytes(range(32))


@pytest.fixture(scope="session")
def shared_key():
    return DEVELOPMENT_ACCOUNT_KEY


@pytest.fixture
def emulator_account(storage_account, shared_key):
    return StorageAccount(
        name=storage_account,
        key=decode_account_key(shared_key),
        blob_endpoint=f"http://127.0.0.1:10000/{storage_account}",
        queue_endpoint=f"http://127.0.0.1:10001/{storage_account}",
    )


@pytest.fixture(scope="session")
def signed_requests():
    with open(FIXTURES / 'signed_requests.json') as f:
        return json.load(f)
