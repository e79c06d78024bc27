"""Store owner endpoints: wallet, charge requests, stores and sponsor levels."""
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.security import get_current_owner
from ledger_server.interfaces.http.deps import get_db_session
from ledger_server.modules.accounts import Account as AccountDomain
from ledger_server.modules.charges import ChargeService
from ledger_server.modules.notifications import NotificationService
from ledger_server.modules.sponsors import SponsorService
from ledger_server.modules.stores import Store, StoreCreateInput, StoreService
from ledger_server.modules.wallets import WalletService
from ledger_server.schemas import (
    ChargeConfigResponse,
    ChargeCreateRequest,
    ChargeListResponse,
    ChargeResponse,
    NotificationResponse,
    SponsorActivationResponse,
    SponsorPaymentResponse,
    SponsorPlanResponse,
    SponsorPurchaseRequest,
    StoreBonusUpdate,
    StoreCreateRequest,
    StoreResponse,
    SuccessResponse,
    WalletResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
)

router = APIRouter()


def store_response(store: Store) -> StoreResponse:
    return StoreResponse(**asdict(store), sponsor_active=store.sponsor_active())


@router.get("/wallet", response_model=WalletResponse)
async def get_wallet(
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    wallet = await WalletService.with_session(db).ensure_wallet(owner.id, owner.email)
    await db.commit()
    return WalletResponse.model_validate(wallet)


@router.get("/wallet/transactions", response_model=WalletTransactionListResponse)
async def list_wallet_transactions(
    limit: int = 50,
    offset: int = 0,
    type: Optional[str] = None,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    rows = await WalletService.with_session(db).list_transactions(owner.id, limit, offset, type)
    return WalletTransactionListResponse(
        transactions=[WalletTransactionResponse.model_validate(row) for row in rows]
    )


@router.get("/charge-config", response_model=ChargeConfigResponse)
async def get_charge_config(
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    return ChargeConfigResponse.model_validate(ChargeService.with_session(db).config())


@router.post("/charges", response_model=ChargeResponse, status_code=status.HTTP_201_CREATED)
async def request_charge(
    payload: ChargeCreateRequest,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    charge = await ChargeService.with_session(db).create_request(owner.id, owner.email, payload.points)
    await db.commit()
    return ChargeResponse.model_validate(charge)


@router.get("/charges", response_model=ChargeListResponse)
async def list_my_charges(
    limit: int = 50,
    offset: int = 0,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    charges = await ChargeService.with_session(db).list_for_owner(owner.id, limit, offset)
    return ChargeListResponse(
        pending=sum(1 for charge in charges if charge.status == "pending"),
        charges=[ChargeResponse.model_validate(charge) for charge in charges],
    )


@router.post("/stores", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def register_store(
    payload: StoreCreateRequest,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    store = await StoreService.with_session(db).register_store(
        owner.id,
        owner.email,
        StoreCreateInput(**payload.model_dump()),
    )
    await db.commit()
    return store_response(store)


@router.get("/stores", response_model=List[StoreResponse])
async def list_my_stores(
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    stores = await StoreService.with_session(db).list_for_owner(owner.id)
    return [store_response(store) for store in stores]


@router.patch("/stores/{store_id}/bonus", response_model=StoreResponse)
async def update_visit_bonus(
    store_id: str,
    payload: StoreBonusUpdate,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    store = await StoreService.with_session(db).update_bonus_settings(
        store_id, owner.id, payload.points, payload.active
    )
    await db.commit()
    return store_response(store)


@router.patch("/stores/{store_id}/sponsor-bonus", response_model=StoreResponse)
async def update_sponsor_bonus(
    store_id: str,
    payload: StoreBonusUpdate,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    store = await StoreService.with_session(db).update_sponsor_bonus(
        store_id, owner.id, payload.points, payload.active
    )
    await db.commit()
    return store_response(store)


@router.get("/sponsor-plans", response_model=List[SponsorPlanResponse])
async def list_sponsor_plans(owner: AccountDomain = Depends(get_current_owner)):
    return [SponsorPlanResponse.model_validate(plan) for plan in SponsorService.plans()]


@router.post("/stores/{store_id}/sponsor-level", response_model=SponsorActivationResponse)
async def purchase_sponsor_level(
    store_id: str,
    payload: SponsorPurchaseRequest,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    activation = await SponsorService.with_session(db).purchase_level(
        store_id, payload.level, actor_id=owner.id
    )
    await db.commit()
    return SponsorActivationResponse(
        store=store_response(activation.store),
        payment=SponsorPaymentResponse.model_validate(activation.payment),
        balance_after=activation.balance_after,
    )


@router.get("/sponsor-payments", response_model=List[SponsorPaymentResponse])
async def list_my_sponsor_payments(
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    payments = await SponsorService.with_session(db).list_payments(owner_id=owner.id)
    return [SponsorPaymentResponse.model_validate(payment) for payment in payments]


@router.get("/notifications", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = False,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    rows = await NotificationService.with_session(db).list_for_recipient(owner.id, unread_only)
    return [NotificationResponse.model_validate(row) for row in rows]


@router.post("/notifications/{notification_id}/read", response_model=SuccessResponse)
async def mark_notification_read(
    notification_id: str,
    owner: AccountDomain = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db_session),
):
    updated = await NotificationService.with_session(db).mark_read(notification_id, owner.id)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    await db.commit()
    return SuccessResponse()
