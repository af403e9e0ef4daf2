import pytest
from datetime import datetime, timedelta, UTC
from jose import jwt
from loyalty_api.config import settings
from loyalty_api.models import CustomerStatus
from tests.conftest import create_test_token


def test_health_endpoint_no_auth(client):
    """Health endpoint should not require authentication"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_endpoint_no_auth(client):
    """Root endpoint should not require authentication"""
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_response_carries_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_valid_token_accepted(client, auth_headers):
    """Valid token should be accepted"""
    response = client.get("/api/transactions", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["transactions"] == []


def test_missing_token_rejected(client):
    """Request without Authorization header should return 401"""
    response = client.get("/api/transactions")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_expired_token_rejected(client, customer):
    """Expired tokens should return 401"""
    expired_token = create_test_token(customer.id, expired=True)
    headers = {"Authorization": f"Bearer {expired_token}"}

    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401
    assert "message" in response.json()


def test_invalid_signature_rejected(client, customer):
    """Tokens signed with wrong key should fail"""
    payload = {"sub": str(customer.id), "exp": datetime.now(UTC) + timedelta(minutes=15)}
    token = jwt.encode(payload, "wrong-secret-key", algorithm="HS256")

    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401


@pytest.mark.parametrize(
    "token",
    [
        "not-a-valid-jwt-token",
        # Legacy unsigned "<id>:<issued-at>" token, base64 encoded
        "MTIzOjE3MDAwMDAwMDAwMDA=",
    ],
)
def test_malformed_token_rejected(client, customer, token):
    """Malformed or unsigned tokens never map to a customer"""
    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401


def test_missing_sub_claim_rejected(client):
    """Token without 'sub' claim should be rejected"""
    payload = {"exp": datetime.now(UTC) + timedelta(minutes=15), "iat": datetime.now(UTC)}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")

    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401
    assert "customer identifier" in response.json()["message"].lower()


def test_non_numeric_sub_claim_rejected(client):
    """A subject that is not a customer id is unparseable, not a default identity"""
    token = create_test_token("not-a-number")

    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401
    assert "malformed" in response.json()["message"].lower()


def test_missing_exp_claim_rejected(client, customer):
    """Token without 'exp' claim should be rejected"""
    payload = {"sub": str(customer.id), "iat": datetime.now(UTC)}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")

    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401
    assert "expiration" in response.json()["message"].lower()


def test_bearer_prefix_required(client, customer):
    """Authorization header must have 'Bearer' prefix"""
    token = create_test_token(customer.id)
    headers = {"Authorization": token}

    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 401


def test_unknown_customer_returns_404(client):
    """A valid token for a customer that does not exist"""
    headers = {"Authorization": f"Bearer {create_test_token(99999)}"}
    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 404


def test_suspended_customer_forbidden(client, customer_factory):
    suspended = customer_factory(status=CustomerStatus.SUSPENDED)
    headers = {"Authorization": f"Bearer {create_test_token(suspended.id)}"}

    response = client.get("/api/transactions", headers=headers)
    assert response.status_code == 403


class TestAppSignatureGate:
    """Shared app signature header, enabled by APP_SIGNATURE"""

    def test_disabled_when_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "")
        assert client.get("/api/tenants").status_code == 200

    def test_missing_signature_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/tenants")
        assert response.status_code == 403
        assert "signature" in response.json()["message"].lower()

    def test_wrong_signature_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/tenants", headers={"X-AWD-App-Signature": "guess"})
        assert response.status_code == 403

    def test_correct_signature_accepted(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/tenants", headers={"X-AWD-App-Signature": "s3cret-signature"})
        assert response.status_code == 200

    def test_mobile_client_header_accepted(self, client, monkeypatch):
        """Header names are case-insensitive; the mobile app sends it lowercase"""
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/tenants", headers={"x-awd-app-signature": "s3cret-signature"})
        assert response.status_code == 200

    def test_old_header_name_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/tenants", headers={"X-App-Signature": "s3cret-signature"})
        assert response.status_code == 403

    def test_checked_before_authentication(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        response = client.get("/api/transactions")
        assert response.status_code == 403

    def test_health_not_gated(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_SIGNATURE", "s3cret-signature")
        assert client.get("/health").status_code == 200
