import os
from pathlib import Path

TEST_CONFIG = Path(__file__).parent / "config.toml"
os.environ["RELAY_CONFIG"] = str(TEST_CONFIG)

import pytest  # noqa: E402
from fakes import (  # noqa: E402
    FakeFilesResource,
    FakePermissionsResource,
    FakeRazorpayClient,
    FakeSender,
    FakeService,
    FakeServiceFactory,
    folder,
)
from fastapi.testclient import TestClient  # noqa: E402

from relay.core.context import ServiceContext  # noqa: E402
from relay.core.credentials import DelegatedTokenStore  # noqa: E402
from relay.core.drive import DriveGateway  # noqa: E402
from relay.core.mail import Mailer  # noqa: E402
from relay.core.payments import PaymentGateway  # noqa: E402
from relay.core.tokens import TokenPair  # noqa: E402
from relay.main import create_app  # noqa: E402
from relay.shared import load_config  # noqa: E402


@pytest.fixture
def test_config():
    return load_config(TEST_CONFIG)


@pytest.fixture
def files_resource():
    return FakeFilesResource(
        metadata={"folder-123": folder("folder-123")},
        create_response={
            "id": "file-1",
            "name": "greeting.txt",
            "webViewLink": "https://drive.google.com/file/d/file-1/view",
        },
    )


@pytest.fixture
def permissions_resource():
    return FakePermissionsResource()


@pytest.fixture
def service_factory(files_resource, permissions_resource):
    return FakeServiceFactory(
        FakeService(files_resource=files_resource, permissions_resource=permissions_resource)
    )


@pytest.fixture
def tokens():
    return TokenPair(access_token="access-1", refresh_token="refresh-1")


@pytest.fixture
def credentials(test_config, tokens):
    return DelegatedTokenStore(test_config.drive, tokens=tokens)


@pytest.fixture
def razorpay_client():
    return FakeRazorpayClient()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def context(test_config, credentials, service_factory, razorpay_client, sender):
    return ServiceContext(
        config=test_config,
        credentials=credentials,
        drive=DriveGateway(
            credentials, test_config.drive.folder_id, service_factory=service_factory
        ),
        payments=PaymentGateway(
            test_config.payments, client_factory=lambda key_id, key_secret: razorpay_client
        ),
        mailer=Mailer(test_config.mail, send=sender),
    )


@pytest.fixture
def client(context):
    return TestClient(create_app(context))
