"""Authentication endpoints for store owners and administrators."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.security import create_access_token
from ledger_server.interfaces.http.deps import get_db_session
from ledger_server.modules.accounts import (
    ADMIN_ROLES,
    OWNER_ROLE,
    AccountAlreadyExistsError,
    AccountCreateInput,
    AccountService,
)
from ledger_server.schemas import AccountCreate, AccountLoginResponse, AdminLoginRequest, LoginRequest

router = APIRouter()


def _login_response(account) -> AccountLoginResponse:
    access_token = create_access_token(account.id, account.username, account.role)
    return AccountLoginResponse(
        access_token=access_token,
        account_id=account.id,
        username=account.username,
        role=account.role,
        is_super_admin=account.is_super_admin(),
    )


@router.post("/register", response_model=AccountLoginResponse, summary="Store owner sign-up")
async def register(
    payload: AccountCreate,
    db: AsyncSession = Depends(get_db_session),
):
    account_service = AccountService.with_session(db)
    try:
        account = await account_service.create_account(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                role=OWNER_ROLE,
                email=payload.email,
            )
        )
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken") from exc
    await db.commit()
    return _login_response(account)


@router.post("/login", response_model=AccountLoginResponse, summary="Store owner login")
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
):
    account_service = AccountService.with_session(db)
    account = await account_service.authenticate(payload.username, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    await account_service.set_last_login(account.id)
    await db.commit()
    return _login_response(account)


@router.post("/admin/login", response_model=AccountLoginResponse, summary="Administrator login")
async def admin_login(
    payload: AdminLoginRequest,
    db: AsyncSession = Depends(get_db_session),
):
    account_service = AccountService.with_session(db)
    account = await account_service.authenticate(payload.username, payload.password)
    if not account or account.role not in ADMIN_ROLES:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid administrator credentials")

    await account_service.set_last_login(account.id)
    await db.commit()
    return _login_response(account)
