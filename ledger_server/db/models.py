"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text

from ledger_server.core.clock import utcnow
from ledger_server.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="owner")
    is_active = Column(Boolean, default=True)
    email = Column(String(100), unique=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    last_login_at = Column(DateTime(timezone=True))


class OwnerWallet(Base):
    __tablename__ = "owner_wallets"

    owner_id = Column(String(36), primary_key=True)
    owner_email = Column(String(100))
    balance = Column(Integer, nullable=False, default=0)
    total_charged = Column(Integer, nullable=False, default=0)
    total_used = Column(Integer, nullable=False, default=0)
    total_fee = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (CheckConstraint("balance >= 0", name="chk_owner_wallet_balance_nonneg"),)


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), ForeignKey("owner_wallets.owner_id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)  # charge_approved, sponsor_level, admin_give, admin_deduct, visit_bonus
    amount = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    description = Column(String(255))
    reference_id = Column(String(36), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class OwnerCharge(Base):
    __tablename__ = "owner_charges"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), nullable=True, index=True)
    owner_email = Column(String(100))
    points = Column(Integer, nullable=False)
    fee = Column(Integer, nullable=False, default=0)
    total_payment = Column(Integer, nullable=False)
    payment_method = Column(String(20), nullable=False, default="manual")
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, completed, rejected
    processed_by = Column(String(36))
    reject_reason = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    approved_at = Column(DateTime(timezone=True))
    rejected_at = Column(DateTime(timezone=True))


class OwnerStore(Base):
    __tablename__ = "owner_stores"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), nullable=True, index=True)
    owner_email = Column(String(100))
    name = Column(String(150), nullable=False)
    place_id = Column(String(50), unique=True)
    address = Column(String(255))
    category = Column(String(100))
    phone = Column(String(30))
    is_sponsored = Column(Boolean, nullable=False, default=False)
    priority_level = Column(Integer, nullable=False, default=0)
    priority_weight = Column(Integer, nullable=False, default=0)
    sponsor_activated_at = Column(DateTime(timezone=True))
    sponsor_expires_at = Column(DateTime(timezone=True))
    sponsor_bonus_points = Column(Integer, nullable=False, default=0)
    sponsor_bonus_active = Column(Boolean, nullable=False, default=False)
    bonus_points_per_visit = Column(Integer, nullable=False, default=0)
    bonus_points_active = Column(Boolean, nullable=False, default=False)
    total_bonus_given = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)


class SponsorLevelPayment(Base):
    __tablename__ = "sponsor_level_payments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    store_id = Column(String(36), ForeignKey("owner_stores.id"), nullable=False, index=True)
    store_name = Column(String(150))
    owner_id = Column(String(36), nullable=False, index=True)
    owner_email = Column(String(100))
    previous_level = Column(Integer, nullable=False, default=0)
    new_level = Column(Integer, nullable=False)
    plan_label = Column(String(30), nullable=False)
    price = Column(Integer, nullable=False)
    weight = Column(Integer, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)


class Member(Base):
    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    nickname = Column(String(50))
    email = Column(String(100))
    points = Column(Integer, nullable=False, default=0)
    blocked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (CheckConstraint("points >= 0", name="chk_member_points_nonneg"),)


class PointHistory(Base):
    __tablename__ = "point_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    member_id = Column(String(36), ForeignKey("members.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)  # refund, use, admin_give, admin_deduct, visit_bonus
    amount = Column(Integer, nullable=False)
    description = Column(String(255))
    order_id = Column(String(36), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True, default=generate_uuid)
    name = Column(String(150), nullable=False)
    point_cost = Column(Integer, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), index=True)
    user_nickname = Column(String(50))
    product_id = Column(String(64))
    product_name = Column(String(150))
    point_cost = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, processing, completed, cancelled
    note = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True))


class BonusPayment(Base):
    __tablename__ = "bonus_payments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    store_id = Column(String(36), ForeignKey("owner_stores.id"), nullable=False, index=True)
    owner_id = Column(String(36), nullable=False)
    member_id = Column(String(36), ForeignKey("members.id"), nullable=False, index=True)
    owner_points = Column(Integer, nullable=False, default=0)
    sponsor_points = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    recipient_id = Column(String(36), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
