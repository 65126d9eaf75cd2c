import os
import tempfile

# Settings are read at import time, so configure the environment first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORY_SWEEP_INTERVAL_SECONDS"] = "0"
os.environ["LOG_FILE"] = os.path.join(tempfile.mkdtemp(prefix="social-api-"), "logs.txt")

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app
from app.utils.email import get_otp_sender


class FakeOTPSender:
    """Records every OTP instead of sending it"""

    def __init__(self):
        self.sent = []
        self.fail = False

    def __call__(self, to, otp, purpose):
        self.sent.append({"to": to, "otp": otp, "purpose": purpose})
        return not self.fail

    def last_otp(self, to=None):
        for item in reversed(self.sent):
            if to is None or item["to"] == to:
                return item["otp"]
        return None


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def mailer():
    fake = FakeOTPSender()
    app.dependency_overrides[get_otp_sender] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_otp_sender, None)


@pytest.fixture
def client(mailer):
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def signup(client):
    def _signup(name="Ann", username="ann", email="ann@x.com", password="secret1"):
        return client.post(
            "/api/v1/auth/signup",
            json={"name": name, "username": username, "email": email, "password": password},
        )

    return _signup


@pytest.fixture
def make_user(client, mailer, signup):
    """Register and verify an account; returns (user_id, auth headers)"""

    def _make(username, email=None, password="secret1"):
        email = email or f"{username}@x.com"
        resp = signup(name=username.title(), username=username, email=email, password=password)
        assert resp.status_code == 201, resp.text
        verified = client.post(
            "/api/v1/auth/verify-otp",
            json={"email": email, "otp": mailer.last_otp(email)},
        )
        assert verified.status_code == 200, verified.text
        body = verified.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['access_token']}"}

    return _make
