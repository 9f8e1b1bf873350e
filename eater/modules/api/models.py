"""
Eater wire models.

These models define the JSON bodies exchanged with the auth and order
endpoints. They are shared by the HTTP clients and the mock backend.
"""

import secrets
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# Enums


class OrderStatus(str, Enum):
    """Lifecycle of an order."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Auth Request Models


class SignInRequest(BaseModel):
    """Request to sign in with e-mail and password."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignUpRequest(SignInRequest):
    """Request to create an account."""

    display_name: Optional[str] = Field(None, alias="displayName")

    model_config = {"populate_by_name": True}


class RefreshRequest(BaseModel):
    """Request for a fresh token."""

    user_id: str = Field(..., alias="userId")
    force: bool = False

    model_config = {"populate_by_name": True}


class PhoneVerificationRequest(BaseModel):
    """Request to send an SMS verification code."""

    phone_number: str = Field(..., alias="phoneNumber", pattern=r"^\+[1-9]\d{1,14}$")

    model_config = {"populate_by_name": True}


class VerifyPhoneRequest(BaseModel):
    """Request to exchange a verification code for a token."""

    verification_id: str = Field(..., alias="verificationId")
    code: str = Field(..., pattern=r"^\d{6}$")
    phone_number: str = Field(..., alias="phoneNumber")

    model_config = {"populate_by_name": True}


# Auth Response Models


class UserPayload(BaseModel):
    """User profile as returned by the backend."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")

    model_config = {"populate_by_name": True}


class TokenResponse(BaseModel):
    """Successful sign-in, sign-up or phone verification."""

    token: str = Field(..., min_length=1)
    user: UserPayload


class RefreshResponse(BaseModel):
    """Successful token refresh."""

    token: str = Field(..., min_length=1)


class PhoneVerificationResponse(BaseModel):
    """Verification id for a sent SMS code."""

    verification_id: str = Field(..., alias="verificationId")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Error body returned with non-2xx statuses."""

    detail: str


# Order Models


class OrderRequest(BaseModel):
    """Request to place an order."""

    cuisines: List[str] = Field(..., min_length=1)
    delivery_address: Optional[str] = Field(None, alias="deliveryAddress")
    special_instructions: Optional[str] = Field(None, alias="specialInstructions")

    model_config = {"populate_by_name": True}

    @field_validator("cuisines")
    @classmethod
    def validate_cuisines(cls, v):
        """Reject blank cuisine names."""
        if any(not c.strip() for c in v):
            raise ValueError("Cuisine names must be non-empty")
        return v


class OrderDetails(BaseModel):
    """Item chosen by the backend for an order."""

    platform: Optional[str] = None
    item_name: Optional[str] = Field(None, alias="itemName")
    customization: Optional[str] = None
    price: Optional[float] = None
    total_price: Optional[float] = Field(None, alias="totalPrice")

    model_config = {"populate_by_name": True}


class OrderResponse(BaseModel):
    """Backend response to an order placement."""

    success: bool
    order: Optional[OrderDetails] = None
    message: Optional[str] = None


def _confirmation_code() -> str:
    return secrets.token_hex(3).upper()


class Order(BaseModel):
    """Order as seen by the client."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    cuisines: List[str]
    status: OrderStatus = OrderStatus.PENDING
    confirmation_code: str = Field(default_factory=_confirmation_code)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    platform: Optional[str] = None
    item_name: Optional[str] = None
    customization: Optional[str] = None
    price: Optional[float] = None
    total_price: Optional[float] = None
