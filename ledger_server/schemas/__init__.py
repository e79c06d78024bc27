"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class AccountLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    username: str
    role: str
    is_super_admin: bool = False


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None


class AdminAccountCreate(AccountCreate):
    role: Literal["admin", "super_admin"] = "admin"


class AccountResponse(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = "OK"


# --- wallet -----------------------------------------------------------------


class WalletResponse(BaseModel):
    owner_id: str
    owner_email: Optional[str] = None
    balance: int
    total_charged: int
    total_used: int
    total_fee: int
    version: int
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionResponse(BaseModel):
    id: str
    type: str
    amount: int
    balance_after: int
    description: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionListResponse(BaseModel):
    transactions: list[WalletTransactionResponse] = Field(default_factory=list)


class WalletAdjustRequest(BaseModel):
    amount: int = Field(..., description="Positive to give, negative to deduct")
    reason: Optional[str] = Field(None, max_length=255)


class BalanceResponse(BaseModel):
    owner_id: str
    balance: int


class ReconciliationResponse(BaseModel):
    owner_id: str
    balance: int
    ledger_total: int
    difference: int
    is_balanced: bool

    model_config = ConfigDict(from_attributes=True)


# --- charges ----------------------------------------------------------------


class ChargeConfigResponse(BaseModel):
    fee_rate: float
    min_points: int
    options: list[int]
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    bank_holder: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ChargeCreateRequest(BaseModel):
    points: int = Field(..., gt=0)


class ChargeRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)


class ChargeResponse(BaseModel):
    id: str
    owner_id: Optional[str] = None
    owner_email: Optional[str] = None
    points: int
    fee: int
    total_payment: int
    payment_method: str
    status: str
    processed_by: Optional[str] = None
    reject_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChargeListResponse(BaseModel):
    pending: int = 0
    charges: list[ChargeResponse] = Field(default_factory=list)


class ChargeApprovalResponse(BaseModel):
    charge: ChargeResponse
    balance_after: int


# --- stores & sponsors ------------------------------------------------------


class StoreCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    place_id: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    category: Optional[str] = None
    phone: Optional[str] = None


class StoreBonusUpdate(BaseModel):
    points: int = Field(..., ge=0)
    active: bool


class StoreResponse(BaseModel):
    id: str
    owner_id: Optional[str] = None
    owner_email: Optional[str] = None
    name: str
    place_id: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None
    phone: Optional[str] = None
    is_sponsored: bool
    sponsor_active: bool
    priority_level: int
    priority_weight: int
    sponsor_activated_at: Optional[datetime] = None
    sponsor_expires_at: Optional[datetime] = None
    sponsor_bonus_points: int
    sponsor_bonus_active: bool
    bonus_points_per_visit: int
    bonus_points_active: bool
    total_bonus_given: int


class SponsorPlanResponse(BaseModel):
    level: int
    label: str
    price: int
    weight: int

    model_config = ConfigDict(from_attributes=True)


class SponsorPurchaseRequest(BaseModel):
    level: int = Field(..., ge=1)


class SponsorPaymentResponse(BaseModel):
    id: str
    store_id: str
    store_name: Optional[str] = None
    owner_id: str
    owner_email: Optional[str] = None
    previous_level: int
    new_level: int
    plan_label: str
    price: int
    weight: int
    paid_at: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SponsorActivationResponse(BaseModel):
    store: StoreResponse
    payment: SponsorPaymentResponse
    balance_after: int


# --- members & orders -------------------------------------------------------


class MemberCreateRequest(BaseModel):
    nickname: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = None
    points: int = Field(0, ge=0)


class MemberResponse(BaseModel):
    id: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    points: int
    blocked: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MemberPointsRequest(BaseModel):
    amount: int = Field(..., description="Positive to give, negative to deduct")
    reason: Optional[str] = Field(None, max_length=255)


class MemberPointsResponse(BaseModel):
    member_id: str
    points: int


class PointHistoryResponse(BaseModel):
    id: str
    type: str
    amount: int
    description: Optional[str] = None
    order_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreateRequest(BaseModel):
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=150)
    point_cost: int = Field(0, ge=0)
    stock: int = Field(0, ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    point_cost: int
    stock: int

    model_config = ConfigDict(from_attributes=True)


class OrderCreateRequest(BaseModel):
    member_id: str
    product_id: str


class OrderStatusRequest(BaseModel):
    status: Literal["pending", "processing", "completed", "cancelled"]
    note: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    user_nickname: Optional[str] = None
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    point_cost: int
    status: str
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    counts: dict[str, int] = Field(default_factory=dict)
    orders: list[OrderResponse] = Field(default_factory=list)


class PartialFailureResponse(BaseModel):
    action: str
    account_id: str
    amount: int
    reason: str
    message: str


class OrderStatusResponse(BaseModel):
    order: OrderResponse
    previous_status: str
    refunded: int = 0
    redebited: int = 0
    restocked: bool = False
    warnings: list[PartialFailureResponse] = Field(default_factory=list)


class VisitBonusRequest(BaseModel):
    store_id: str
    member_id: str


class VisitBonusResponse(BaseModel):
    store_id: str
    member_id: str
    granted: bool
    owner_points: int
    sponsor_points: int
    total_points: int
    owner_balance_after: Optional[int] = None
    member_points_after: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    detail: str
    code: str
