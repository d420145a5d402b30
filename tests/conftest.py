"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-for-the-govassist-suite")
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("HUGGINGFACE_API_KEY", "")

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import jwt
import pytest
from fastapi.testclient import TestClient

from govassist.ai_main import app as ai_app
from govassist.core.config import settings
from govassist.main import app
from govassist.schemas.procedure import FeeRead, ProcedureRead, ProcedureStepRead

USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")


@pytest.fixture
def test_client() -> TestClient:
    """Create API service test client.

    Returns:
        TestClient: client without lifespan, so no database is contacted
    """
    return TestClient(app)


@pytest.fixture
def ai_test_client() -> TestClient:
    """Create AI service test client."""
    return TestClient(ai_app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    ai_app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}
    ai_app.dependency_overrides = {}


def make_token(user_id: UUID = USER_ID, role: str = "CITIZEN", expires_in: int = 3600) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {"sub": str(user_id), "role": role, "iat": now, "exp": now + timedelta(seconds=expires_in)},
        settings.auth.jwt_secret,
        algorithm=settings.auth.jwt_algorithm,
    )


@pytest.fixture
def user_id() -> UUID:
    return USER_ID


@pytest.fixture
def other_user_id() -> UUID:
    return OTHER_USER_ID


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {make_token(role='ADMIN')}"}


@pytest.fixture
def nic_procedure() -> ProcedureRead:
    """Active NIC procedure with localized steps and one fee."""
    return ProcedureRead(
        id=uuid4(),
        title="Apply for New National Identity Card",
        title_si="නව ජාතික හැඳුනුම්පත සඳහා අයදුම් කිරීම",
        title_ta="புதிய தேசிய அடையாள அட்டைக்கு விண்ணப்பிக்கவும்",
        description="Complete guide to apply for a new National Identity Card",
        category="IDENTITY_DOCUMENTS",
        status="ACTIVE",
        difficulty="EASY",
        slug="apply-new-national-identity-card",
        keywords=["NIC", "national identity card", "ID card"],
        search_tags=["nic", "identity", "card"],
        steps=[
            ProcedureStepRead(
                order=1,
                instruction="Visit the nearest Divisional Secretariat office with required documents",
                instruction_si="අවශ්‍ය ලියකියවිලි සමග ආසන්නතම ප්‍රාදේශීය ලේකම් කාර්යාලයට පිවිසෙන්න",
            ),
            ProcedureStepRead(order=2, instruction="Fill the application form (Form 1) completely and accurately"),
            ProcedureStepRead(order=3, instruction="Submit application with documents and pay the required fee"),
            ProcedureStepRead(order=4, instruction="Collect your new NIC after the processing period"),
        ],
        fees=[FeeRead(description="Application Processing Fee", amount=Decimal("100.00"))],
    )
