"""
Shared pytest fixtures — in-memory SQLite, fake identity provider, fake
extraction service, FastAPI TestClient.
"""
import json
import os
import tempfile

import httpx
import pytest

# Settings are read at import time, so set them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", os.path.join(tempfile.gettempdir(), "receiptvault-test"))
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client.apps.googleusercontent.com")
os.environ.setdefault("EXTRACT_API_KEY", "test-key")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from receiptvault.auth import create_session, get_token_verifier, upsert_user  # noqa: E402
from receiptvault.database import Base, get_db  # noqa: E402
from receiptvault.errors import TokenInvalid  # noqa: E402
from receiptvault.main import app  # noqa: E402
from receiptvault.models import ReceiptModel  # noqa: E402,F401  — register models
from receiptvault.pipeline.client import ExtractionClient, get_extraction_client  # noqa: E402

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


SAMPLE_EXTRACTION = {
    "storeInfo": {
        "storeName": "Kroger",
        "address": "1014 Vine St, Cincinnati, OH",
        "cashierName": "Dana",
        "transactionDate": "2025-03-14",
        "transactionTime": "17:42",
    },
    "paymentSummary": {
        "paymentMethod": "VISA",
        "totalAmount": 42.17,
        "changeGiven": 0,
        "itemsSold": 3,
        "referenceNumber": "0042-7731",
    },
    "itemList": [
        {"itemName": "Bananas", "itemPrice": 1.29, "itemType": "food", "weight": 2.15, "unitPrice": 0.6},
        {"itemName": "Whole Milk", "itemPrice": 3.49, "itemType": "food", "weight": 0, "unitPrice": 0},
        {"itemName": "Dish Soap", "itemPrice": 37.39, "itemType": "taxable", "weight": 0, "unitPrice": 0},
    ],
    "savingsSummary": {
        "totalSavings": 4.5,
        "totalCoupons": 1.0,
        "annualCardSavings": 120.33,
        "fuelPointsEarned": 42,
        "totalFuelPoints": 310,
    },
    "accountInfo": {
        "customerId": "****1234",
        "cardType": "VISA",
        "cardLastDigits": "9921",
        "aid": "A0000000031010",
        "tc": "8F1C2D3E4B5A6978",
    },
}


class FakeVerifier:
    """Accepts the tokens it was given, rejects everything else."""

    def __init__(self):
        self.identities = {}

    def verify(self, id_token):
        try:
            return self.identities[id_token]
        except KeyError:
            raise TokenInvalid(detail="unknown test token")


class FakeUpstream:
    """Stands in for the parse/extract service behind an httpx.MockTransport."""

    def __init__(self):
        self.parse_status = 200
        self.parse_body = {"markdown": "# Kroger\nBananas 1.29\nWhole Milk 3.49\nDish Soap 37.39"}
        self.extract_status = 200
        self.extract_body = {"extraction": SAMPLE_EXTRACTION, "metadata": {"duration_ms": 812}}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/ade/parse":
            return httpx.Response(self.parse_status, json=self.parse_body)
        if request.url.path == "/v1/ade/extract":
            body = self.extract_body
            if isinstance(body, (dict, list)):
                return httpx.Response(self.extract_status, json=body)
            return httpx.Response(self.extract_status, text=body)
        return httpx.Response(404, json={"error": "no such endpoint"})

    @property
    def paths(self):
        return [r.url.path for r in self.requests]

    def client(self, api_key="test-key"):
        return ExtractionClient(
            base_url="https://ade.test",
            api_key=api_key,
            model="dpt-2-latest",
            timeout_s=5,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def verifier():
    return FakeVerifier()


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest.fixture()
def client(db, verifier, upstream):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    app.dependency_overrides[get_extraction_client] = lambda: upstream.client()
    # https so the Secure session cookie is kept by the client
    with TestClient(app, base_url="https://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def alice(db):
    upsert_user(db, "alice-sub", name="Alice", email="alice@example.com")
    return "alice-sub"


@pytest.fixture()
def bob(db):
    upsert_user(db, "bob-sub", name="Bob", email="bob@example.com")
    return "bob-sub"


@pytest.fixture()
def login(db):
    """Returns a function giving the Cookie header of a fresh session for a user."""
    def _login(user_id):
        return {"cookie": f"sid={create_session(db, user_id).sid}"}

    return _login


@pytest.fixture()
def extraction_body():
    return json.loads(json.dumps(SAMPLE_EXTRACTION))
