"""Administrative endpoints: charge approval, wallets, sponsors, members and orders."""
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.security import get_current_admin, get_super_admin
from ledger_server.interfaces.http.deps import get_account_service, get_db_session
from ledger_server.interfaces.http.routers.owner import store_response
from ledger_server.modules.accounts import Account as AccountDomain
from ledger_server.modules.accounts import AccountAlreadyExistsError, AccountCreateInput, AccountService
from ledger_server.modules.bonuses import BonusService
from ledger_server.modules.charges import ChargeService
from ledger_server.modules.members import MemberService
from ledger_server.modules.orders import OrderService
from ledger_server.modules.sponsors import SponsorService
from ledger_server.modules.stores import StoreService
from ledger_server.modules.wallets import WalletService
from ledger_server.schemas import (
    AccountResponse,
    AdminAccountCreate,
    BalanceResponse,
    ChargeApprovalResponse,
    ChargeListResponse,
    ChargeRejectRequest,
    ChargeResponse,
    MemberCreateRequest,
    MemberPointsRequest,
    MemberPointsResponse,
    MemberResponse,
    OrderCreateRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusRequest,
    OrderStatusResponse,
    PartialFailureResponse,
    PointHistoryResponse,
    ProductCreateRequest,
    ProductResponse,
    ReconciliationResponse,
    SponsorPaymentResponse,
    StoreResponse,
    VisitBonusRequest,
    VisitBonusResponse,
    WalletAdjustRequest,
    WalletResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
)

router = APIRouter()


@router.get("/me", response_model=AccountResponse)
async def current_admin(admin: AccountDomain = Depends(get_current_admin)):
    return AccountResponse.model_validate(admin)


@router.get("/accounts", response_model=List[AccountResponse])
async def list_accounts(
    role: Optional[str] = None,
    admin: AccountDomain = Depends(get_super_admin),
    account_service: AccountService = Depends(get_account_service),
):
    accounts = await account_service.list_accounts(role)
    return [AccountResponse.model_validate(account) for account in accounts]


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_staff_account(
    payload: AdminAccountCreate,
    admin: AccountDomain = Depends(get_super_admin),
    account_service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        account = await account_service.create_account(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                role=payload.role,
                email=payload.email,
            )
        )
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken") from exc
    await db.commit()
    return AccountResponse.model_validate(account)


# --- charges ----------------------------------------------------------------


@router.get("/charges", response_model=ChargeListResponse)
async def list_charges(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = 50,
    offset: int = 0,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    service = ChargeService.with_session(db)
    charges = await service.list_admin(status_filter, limit, offset)
    return ChargeListResponse(
        pending=await service.pending_count(),
        charges=[ChargeResponse.model_validate(charge) for charge in charges],
    )


@router.post("/charges/{charge_id}/approve", response_model=ChargeApprovalResponse)
async def approve_charge(
    charge_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    approval = await ChargeService.with_session(db).approve(charge_id, admin_id=admin.id)
    await db.commit()
    return ChargeApprovalResponse(
        charge=ChargeResponse.model_validate(approval.charge),
        balance_after=approval.balance_after,
    )


@router.post("/charges/{charge_id}/reject", response_model=ChargeResponse)
async def reject_charge(
    charge_id: str,
    payload: Optional[ChargeRejectRequest] = None,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    charge = await ChargeService.with_session(db).reject(
        charge_id,
        admin_id=admin.id,
        reason=payload.reason if payload else None,
    )
    await db.commit()
    return ChargeResponse.model_validate(charge)


# --- wallets ----------------------------------------------------------------


@router.get("/wallets/{owner_id}", response_model=WalletResponse)
async def get_owner_wallet(
    owner_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    wallet = await WalletService.with_session(db).ensure_wallet(owner_id)
    await db.commit()
    return WalletResponse.model_validate(wallet)


@router.get("/wallets/{owner_id}/transactions", response_model=WalletTransactionListResponse)
async def list_owner_transactions(
    owner_id: str,
    limit: int = 50,
    offset: int = 0,
    type: Optional[str] = None,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    rows = await WalletService.with_session(db).list_transactions(owner_id, limit, offset, type)
    return WalletTransactionListResponse(
        transactions=[WalletTransactionResponse.model_validate(row) for row in rows]
    )


@router.post("/wallets/{owner_id}/adjust", response_model=BalanceResponse)
async def adjust_owner_wallet(
    owner_id: str,
    payload: WalletAdjustRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    balance = await WalletService.with_session(db).adjust(owner_id, payload.amount, payload.reason)
    await db.commit()
    return BalanceResponse(owner_id=owner_id, balance=balance)


@router.get("/wallets/{owner_id}/reconcile", response_model=ReconciliationResponse)
async def reconcile_owner_wallet(
    owner_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    result = await WalletService.with_session(db).reconcile(owner_id)
    return ReconciliationResponse.model_validate(result)


# --- sponsors ---------------------------------------------------------------


@router.get("/stores/sponsored", response_model=List[StoreResponse])
async def list_sponsored_stores(
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    stores = await StoreService.with_session(db).list_sponsored()
    return [store_response(store) for store in stores]


@router.post("/stores/{store_id}/sponsor/deactivate", response_model=StoreResponse)
async def deactivate_sponsor(
    store_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    store = await StoreService.with_session(db).deactivate_sponsor(store_id)
    await db.commit()
    return store_response(store)


@router.get("/sponsor-payments", response_model=List[SponsorPaymentResponse])
async def list_sponsor_payments(
    owner_id: Optional[str] = None,
    store_id: Optional[str] = None,
    limit: int = 100,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    payments = await SponsorService.with_session(db).list_payments(owner_id, store_id, limit)
    return [SponsorPaymentResponse.model_validate(payment) for payment in payments]


# --- members ----------------------------------------------------------------


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    payload: MemberCreateRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    member = await MemberService.with_session(db).create_member(
        payload.nickname, payload.email, payload.points
    )
    await db.commit()
    return MemberResponse.model_validate(member)


@router.get("/members/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    member = await MemberService.with_session(db).get_member(member_id)
    return MemberResponse.model_validate(member)


@router.post("/members/{member_id}/points", response_model=MemberPointsResponse)
async def adjust_member_points(
    member_id: str,
    payload: MemberPointsRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    points = await MemberService.with_session(db).adjust_points(member_id, payload.amount, payload.reason)
    await db.commit()
    return MemberPointsResponse(member_id=member_id, points=points)


@router.get("/members/{member_id}/point-history", response_model=List[PointHistoryResponse])
async def list_member_history(
    member_id: str,
    limit: int = 50,
    offset: int = 0,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    entries = await MemberService.with_session(db).list_history(member_id, limit, offset)
    return [PointHistoryResponse.model_validate(entry) for entry in entries]


# --- products & orders ------------------------------------------------------


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreateRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    product = await OrderService.with_session(db).create_product(
        payload.name, payload.point_cost, payload.stock, product_id=payload.id
    )
    await db.commit()
    return ProductResponse.model_validate(product)


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = 50,
    offset: int = 0,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    service = OrderService.with_session(db)
    orders = await service.list_orders(status_filter, limit, offset)
    return OrderListResponse(
        counts=await service.status_counts(),
        orders=[OrderResponse.model_validate(order) for order in orders],
    )


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    payload: OrderCreateRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    order = await OrderService.with_session(db).place_order(payload.member_id, payload.product_id)
    await db.commit()
    return OrderResponse.model_validate(order)


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    order = await OrderService.with_session(db).get_order(order_id)
    return OrderResponse.model_validate(order)


@router.post("/orders/{order_id}/status", response_model=OrderStatusResponse)
async def change_order_status(
    order_id: str,
    payload: OrderStatusRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    change = await OrderService.with_session(db).change_status(order_id, payload.status, payload.note)
    await db.commit()
    return OrderStatusResponse(
        order=OrderResponse.model_validate(change.order),
        previous_status=change.previous_status,
        refunded=change.refunded,
        redebited=change.redebited,
        restocked=change.restocked,
        warnings=[
            PartialFailureResponse(**asdict(warning), message=warning.describe())
            for warning in change.warnings
        ],
    )


# --- visits -----------------------------------------------------------------


@router.post("/visits", response_model=VisitBonusResponse)
async def grant_visit_bonus(
    payload: VisitBonusRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    bonus = await BonusService.with_session(db).grant_visit_bonus(payload.store_id, payload.member_id)
    await db.commit()
    return VisitBonusResponse.model_validate(bonus)
