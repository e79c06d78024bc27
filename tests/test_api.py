import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from ledger_server import main as main_module
from ledger_server.db.models import OwnerCharge, Order as OrderModel
from ledger_server.infrastructure.database import session as session_module
from ledger_server.infrastructure.database.repositories import SqlWalletRepository
from ledger_server.modules.charges import ChargeService
from ledger_server.modules.common import TransientIOError
from ledger_server.modules.wallets import WalletService

from .conftest import auth_headers, create_account


async def test_owner_register_and_login(client):
    response = await client.post(
        "/api/auth/register",
        json={"username": "newowner", "password": "secret123", "email": "new@example.com"},
    )
    assert response.status_code == 200
    assert response.json()["role"] == "owner"

    duplicate = await client.post("/api/auth/register", json={"username": "newowner", "password": "secret123"})
    assert duplicate.status_code == 400

    login = await client.post("/api/auth/login", json={"username": "newowner", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    wallet = await client.get("/api/owner/wallet", headers={"Authorization": f"Bearer {token}"})
    assert wallet.status_code == 200
    assert wallet.json()["balance"] == 0

    bad = await client.post("/api/auth/login", json={"username": "newowner", "password": "wrong-pass"})
    assert bad.status_code == 401


async def test_owner_cannot_use_admin_login_or_routes(client, owner):
    response = await client.post("/api/auth/admin/login", json={"username": "owner1", "password": "secret123"})
    assert response.status_code == 401

    forbidden = await client.get("/api/admin/charges", headers=auth_headers(owner))
    assert forbidden.status_code == 403

    anonymous = await client.get("/api/owner/wallet")
    assert anonymous.status_code in (401, 403)


async def test_charge_approval_flow(client, owner, admin):
    owner_headers, admin_headers = auth_headers(owner), auth_headers(admin)

    config = await client.get("/api/owner/charge-config", headers=owner_headers)
    assert config.json()["min_points"] == 1000

    created = await client.post("/api/owner/charges", json={"points": 10000}, headers=owner_headers)
    assert created.status_code == 201
    charge = created.json()
    assert (charge["fee"], charge["total_payment"]) == (2000, 12000)

    pending = await client.get("/api/admin/charges", params={"status": "pending"}, headers=admin_headers)
    assert pending.json()["pending"] == 1

    approved = await client.post(f"/api/admin/charges/{charge['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["balance_after"] == 10000
    assert approved.json()["charge"]["status"] == "completed"

    again = await client.post(f"/api/admin/charges/{charge['id']}/approve", headers=admin_headers)
    assert again.status_code == 409
    assert again.json()["code"] == "already_processed"

    wallet = await client.get("/api/owner/wallet", headers=owner_headers)
    assert wallet.json()["balance"] == 10000
    notifications = await client.get("/api/owner/notifications", headers=owner_headers)
    assert [note["title"] for note in notifications.json()] == ["Charge approved"]


async def test_error_codes(client, session, owner, admin):
    admin_headers = auth_headers(admin)
    orphan = OwnerCharge(points=10000, fee=2000, total_payment=12000, status="pending")
    session.add(orphan)
    await session.commit()

    missing = await client.post("/api/admin/charges/nope/approve", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"

    no_owner = await client.post(f"/api/admin/charges/{orphan.id}/approve", headers=admin_headers)
    assert no_owner.status_code == 422
    assert no_owner.json()["code"] == "missing_owner_reference"

    too_small = await client.post("/api/owner/charges", json={"points": 500}, headers=auth_headers(owner))
    assert too_small.status_code == 400
    assert too_small.json()["code"] == "invalid_amount"

    zero = await client.post(
        f"/api/admin/wallets/{owner.id}/adjust", json={"amount": 0}, headers=admin_headers
    )
    assert zero.status_code == 400


async def test_sponsor_purchase_over_http(client, owner, admin):
    owner_headers = auth_headers(owner)
    store = (await client.post("/api/owner/stores", json={"name": "Taco Stand"}, headers=owner_headers)).json()

    short = await client.post(
        f"/api/owner/stores/{store['id']}/sponsor-level", json={"level": 2}, headers=owner_headers
    )
    assert short.status_code == 409
    assert short.json()["code"] == "insufficient_balance"

    await client.post(
        f"/api/admin/wallets/{owner.id}/adjust", json={"amount": 60000, "reason": "seed"}, headers=auth_headers(admin)
    )
    bought = await client.post(
        f"/api/owner/stores/{store['id']}/sponsor-level", json={"level": 3}, headers=owner_headers
    )
    assert bought.status_code == 200
    body = bought.json()
    assert body["balance_after"] == 10000
    assert body["store"]["priority_level"] == 3
    assert body["store"]["sponsor_active"] is True

    unknown = await client.post(
        f"/api/owner/stores/{store['id']}/sponsor-level", json={"level": 9}, headers=owner_headers
    )
    assert unknown.status_code == 400
    assert unknown.json()["code"] == "unknown_plan"


async def test_foreign_store_purchase_forbidden(client, session, owner):
    intruder = await create_account(session, "intruder")
    store = (
        await client.post("/api/owner/stores", json={"name": "Bakery"}, headers=auth_headers(owner))
    ).json()

    response = await client.post(
        f"/api/owner/stores/{store['id']}/sponsor-level", json={"level": 1}, headers=auth_headers(intruder)
    )
    assert response.status_code == 403
    assert response.json()["code"] == "permission_denied"


async def test_order_cancel_reports_partial_failure(client, session, admin):
    session.add(
        OrderModel(id="order-1", user_id="gone", product_id="default_tea", point_cost=200, status="pending")
    )
    await session.commit()

    response = await client.post(
        "/api/admin/orders/order-1/status", json={"status": "cancelled"}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["order"]["status"] == "cancelled"
    assert body["refunded"] == 0
    assert body["warnings"][0]["action"] == "refund"
    assert body["warnings"][0]["account_id"] == "gone"

    again = await client.post(
        "/api/admin/orders/order-1/status", json={"status": "cancelled"}, headers=auth_headers(admin)
    )
    assert again.status_code == 409
    assert again.json()["code"] == "invalid_transition"


async def test_member_order_roundtrip_over_http(client, admin):
    headers = auth_headers(admin)
    member = (await client.post("/api/admin/members", json={"nickname": "hana", "points": 800}, headers=headers)).json()
    product = (
        await client.post("/api/admin/products", json={"name": "Mug", "point_cost": 300, "stock": 1}, headers=headers)
    ).json()

    order = await client.post(
        "/api/admin/orders", json={"member_id": member["id"], "product_id": product["id"]}, headers=headers
    )
    assert order.status_code == 201
    sold_out = await client.post(
        "/api/admin/orders", json={"member_id": member["id"], "product_id": product["id"]}, headers=headers
    )
    assert sold_out.status_code == 409
    assert sold_out.json()["code"] == "out_of_stock"

    cancelled = await client.post(
        f"/api/admin/orders/{order.json()['id']}/status", json={"status": "cancelled"}, headers=headers
    )
    assert cancelled.json()["refunded"] == 300
    assert cancelled.json()["restocked"] is True

    refreshed = await client.get(f"/api/admin/members/{member['id']}", headers=headers)
    assert refreshed.json()["points"] == 800
    listing = await client.get("/api/admin/orders", headers=headers)
    assert listing.json()["counts"]["cancelled"] == 1


async def test_health(client):
    response = await client.get("/health")
    assert response.json()["status"] == "ok"


async def test_super_admin_manages_staff(client, session, admin):
    root = await create_account(session, "root", role="super_admin")

    denied = await client.get("/api/admin/accounts", headers=auth_headers(admin))
    assert denied.status_code == 403

    created = await client.post(
        "/api/admin/accounts",
        json={"username": "cashier", "password": "secret123"},
        headers=auth_headers(root),
    )
    assert created.status_code == 201
    assert created.json()["role"] == "admin"

    admins = await client.get("/api/admin/accounts", params={"role": "admin"}, headers=auth_headers(root))
    assert sorted(account["username"] for account in admins.json()) == ["admin1", "cashier"]

    login = await client.post("/api/auth/admin/login", json={"username": "cashier", "password": "secret123"})
    assert login.status_code == 200


async def test_concurrent_http_approvals(client, session, owner, admin):
    second_admin = await create_account(session, "admin2", role="admin")
    charge = await ChargeService.with_session(session).create_request(owner.id, owner.email, 10000)
    await session.commit()

    responses = await asyncio.gather(
        client.post(f"/api/admin/charges/{charge.id}/approve", headers=auth_headers(admin)),
        client.post(f"/api/admin/charges/{charge.id}/approve", headers=auth_headers(second_admin)),
    )

    assert sorted(response.status_code for response in responses) == [200, 409]
    refused = next(response for response in responses if response.status_code == 409)
    assert refused.json()["code"] == "already_processed"
    wallet = await WalletService.with_session(session).get_wallet(owner.id)
    assert wallet.balance == 10000


async def test_slow_request_times_out_with_unknown_outcome(app, client, monkeypatch):
    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"status": "done"}

    monkeypatch.setattr(main_module.settings.ledger, "request_timeout_seconds", 0.05)

    response = await client.get("/slow")

    assert response.status_code == 504
    assert response.json()["code"] == "timeout"
    assert response.json()["outcome"] == "unknown"


async def test_database_outage_maps_to_503(client, owner, monkeypatch):
    async def unavailable(self, owner_id):
        raise OperationalError("SELECT owner_wallets", {}, Exception("database is locked"))

    monkeypatch.setattr(SqlWalletRepository, "get_wallet", unavailable)

    response = await client.get("/api/owner/wallet", headers=auth_headers(owner))

    assert response.status_code == 503
    assert response.json()["code"] == "transient_io"


async def test_session_dependency_turns_outage_into_transient_error(session_factory, monkeypatch):
    monkeypatch.setattr(session_module, "AsyncSessionFactory", session_factory)

    dependency = session_module.get_session()
    await dependency.__anext__()

    with pytest.raises(TransientIOError):
        await dependency.athrow(OperationalError("UPDATE owner_wallets", {}, Exception("disk I/O error")))
