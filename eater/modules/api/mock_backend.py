"""
Mock eater backend for local runs and tests

This module provides an in-memory implementation of the auth and order
endpoints the client talks to, so the HTTP clients can be exercised
without real infrastructure.
"""

import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import Dict, Optional

import jwt
from fastapi import FastAPI, HTTPException, Request

from .models import (
    OrderDetails,
    OrderRequest,
    OrderResponse,
    PhoneVerificationRequest,
    PhoneVerificationResponse,
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
    UserPayload,
    VerifyPhoneRequest,
)

MIN_PASSWORD_LENGTH = 6


class MockBackend:
    """
    In-memory eater backend.

    Supports:
    - E-mail/password sign-in and sign-up
    - HS256 JWT tokens with refresh and revocation
    - SMS verification (codes are kept in memory instead of sent)
    - Authorized order placement
    """

    def __init__(self, secret: Optional[str] = None, token_ttl: int = 3600):
        """Initialize the mock backend."""
        self.secret = secret or secrets.token_urlsafe(32)
        self.token_ttl = token_ttl

        # Mock users database, keyed by e-mail
        self.users: Dict[str, dict] = {
            "demo@eater.app": {
                "uid": "demo_user_abc123",
                "password": "demo123",
                "display_name": "Demo User",
                "phone_number": "+14155551234",
            }
        }
        self.revoked: set = set()
        self.verifications: Dict[str, dict] = {}
        self.orders: list = []

    def create_token(self, uid: str) -> str:
        """Create a signed JWT for uid."""
        now = datetime.now(UTC)
        claims = {
            "sub": uid,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.token_ttl)).timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(claims, self.secret, algorithm="HS256")

    def verify_token(self, token: str) -> dict:
        """Decode token, rejecting bad signatures, expiry and revocation."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            raise HTTPException(status_code=401, detail=f"Invalid token: {e}")

        if claims["jti"] in self.revoked:
            raise HTTPException(status_code=401, detail="Token revoked")
        return claims

    def _user_payload(self, email: Optional[str], user: dict) -> UserPayload:
        return UserPayload(
            uid=user["uid"],
            email=email,
            display_name=user.get("display_name"),
            phone_number=user.get("phone_number"),
        )

    def sign_in(self, body: SignInRequest) -> TokenResponse:
        user = self.users.get(body.email)
        if not user or not secrets.compare_digest(user["password"], body.password):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return TokenResponse(token=self.create_token(user["uid"]), user=self._user_payload(body.email, user))

    def sign_up(self, body: SignUpRequest) -> TokenResponse:
        if body.email in self.users:
            raise HTTPException(status_code=400, detail="Email already in use")
        if len(body.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail="Password too short")

        user = {
            "uid": f"user_{uuid.uuid4().hex[:12]}",
            "password": body.password,
            "display_name": body.display_name,
            "phone_number": None,
        }
        self.users[body.email] = user
        return TokenResponse(token=self.create_token(user["uid"]), user=self._user_payload(body.email, user))

    def refresh(self, token: str, body: RefreshRequest) -> RefreshResponse:
        claims = self.verify_token(token)
        if claims["sub"] != body.user_id:
            raise HTTPException(status_code=403, detail="Token does not belong to user")

        if not body.force:
            return RefreshResponse(token=token)

        self.revoked.add(claims["jti"])
        return RefreshResponse(token=self.create_token(body.user_id))

    def sign_out(self, token: str) -> None:
        claims = self.verify_token(token)
        self.revoked.add(claims["jti"])

    def send_verification(self, body: PhoneVerificationRequest) -> PhoneVerificationResponse:
        verification_id = secrets.token_urlsafe(16)
        self.verifications[verification_id] = {
            "phone_number": body.phone_number,
            "code": f"{secrets.randbelow(1_000_000):06d}",
            "expires_at": datetime.now(UTC) + timedelta(minutes=10),
        }
        return PhoneVerificationResponse(verification_id=verification_id)

    def code_for(self, verification_id: str) -> str:
        """Return the SMS code that would have been sent (for testing)."""
        return self.verifications[verification_id]["code"]

    def verify_phone(self, body: VerifyPhoneRequest) -> TokenResponse:
        pending = self.verifications.get(body.verification_id)
        if (
            not pending
            or pending["phone_number"] != body.phone_number
            or datetime.now(UTC) > pending["expires_at"]
            or not secrets.compare_digest(pending["code"], body.code)
        ):
            raise HTTPException(status_code=400, detail="Invalid verification code")

        del self.verifications[body.verification_id]
        uid = f"phone_{uuid.uuid4().hex[:12]}"
        user = {"uid": uid, "phone_number": body.phone_number}
        return TokenResponse(token=self.create_token(uid), user=self._user_payload(None, user))

    def place_order(self, token: str, body: OrderRequest) -> OrderResponse:
        claims = self.verify_token(token)
        self.orders.append({"uid": claims["sub"], "cuisines": body.cuisines})
        return OrderResponse(
            success=True,
            order=OrderDetails(
                platform="Uber Eats",
                item_name=f"{body.cuisines[0]} Chef's Choice",
                price=12.95,
                total_price=19.95,
            ),
        )


def _bearer(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")
    return auth_header[7:]


def create_mock_backend_app(backend: Optional[MockBackend] = None) -> FastAPI:
    """Create a FastAPI app serving the mock backend."""
    app = FastAPI(title="Mock Eater Backend")
    backend = backend or MockBackend()
    app.state.backend = backend

    @app.post("/api/auth/signin", response_model=TokenResponse, response_model_by_alias=True)
    async def sign_in(body: SignInRequest):
        return backend.sign_in(body)

    @app.post("/api/auth/signup", response_model=TokenResponse, response_model_by_alias=True)
    async def sign_up(body: SignUpRequest):
        return backend.sign_up(body)

    @app.post("/api/auth/refresh", response_model=RefreshResponse)
    async def refresh(body: RefreshRequest, request: Request):
        return backend.refresh(_bearer(request), body)

    @app.post("/api/auth/signout", status_code=204)
    async def sign_out(request: Request):
        backend.sign_out(_bearer(request))

    @app.post(
        "/api/auth/send-verification",
        response_model=PhoneVerificationResponse,
        response_model_by_alias=True,
    )
    async def send_verification(body: PhoneVerificationRequest):
        return backend.send_verification(body)

    @app.post("/api/auth/verify-phone", response_model=TokenResponse, response_model_by_alias=True)
    async def verify_phone(body: VerifyPhoneRequest):
        return backend.verify_phone(body)

    @app.post("/order", response_model=OrderResponse, response_model_by_alias=True)
    async def place_order(body: OrderRequest, request: Request):
        return backend.place_order(_bearer(request), body)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app
