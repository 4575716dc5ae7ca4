import json
import os
import sys
from urllib.parse import quote

import pytest
import responses

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gravis.app.config import TestConfig
from gravis.app.factory import create_app

CUSTOMER = {
    "id": "01890a5d-ac96-774b-bcce-b302099a8057",
    "first_name": "Asha",
    "last_name": "Verma",
    "full_name": "Asha Verma",
    "email": "asha@example.com",
    "phone_number": "9876543210",
    "is_email_verified": True,
}


@pytest.fixture()
def app():
    return create_app(TestConfig)


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


# every test runs against a mocked backend; unregistered URLs raise ConnectionError
@pytest.fixture(autouse=True)
def backend_mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture()
def logged_in(client):
    client.set_cookie("user", quote(json.dumps(CUSTOMER), safe=""))
    client.set_cookie("token", "tok-123")
    return CUSTOMER
