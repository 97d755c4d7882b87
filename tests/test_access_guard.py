from datetime import timedelta
import uuid

import pytest

from ledger_api.api.deps import get_session_resolver
from ledger_api.core.auth import Role
from ledger_api.core.config import settings
from ledger_api.core.security import create_access_token
from ledger_api.main import app

from conftest import API, bearer

SOME_ID = str(uuid.uuid4())
TX_BODY = {"concept": "Venta", "amount": 150, "date": "2025-01-10T00:00:00Z", "type": "INCOME"}

EVERY_ENDPOINT = [
    ("GET", "/transactions", None),
    ("POST", "/transactions", TX_BODY),
    ("GET", f"/transactions/{SOME_ID}", None),
    ("PUT", f"/transactions/{SOME_ID}", {"amount": 10}),
    ("DELETE", f"/transactions/{SOME_ID}", None),
    ("GET", "/users", None),
    ("GET", "/users/me", None),
    ("PUT", f"/users/{SOME_ID}", {"role": "USER"}),
    ("GET", "/reports", None),
    ("GET", "/reports/export", None),
]

ADMIN_ONLY = [
    ("POST", "/transactions", TX_BODY),
    ("PUT", f"/transactions/{SOME_ID}", {"amount": 10}),
    ("DELETE", f"/transactions/{SOME_ID}", None),
    ("GET", "/users", None),
    ("PUT", f"/users/{SOME_ID}", {"role": "USER"}),
    ("GET", "/reports", None),
    ("GET", "/reports/export", None),
]


@pytest.mark.parametrize("method,path,body", EVERY_ENDPOINT)
def test_unauthenticated_calls_never_reach_the_store(client, query_counter, method, path, body) -> None:
    query_counter["count"] = 0
    response = client.request(method, f"{API}{path}", json=body)

    assert response.status_code == 401
    assert response.json() == {"error": "No autorizado"}
    assert query_counter["count"] == 0


@pytest.mark.parametrize("method,path,body", ADMIN_ONLY)
def test_user_role_is_forbidden_on_admin_operations(client, member_headers, method, path, body) -> None:
    response = client.request(method, f"{API}{path}", json=body, headers=member_headers)

    assert response.status_code == 403
    assert "error" in response.json()


WITH_BODY = [
    ("POST", "/transactions"),
    ("PUT", f"/transactions/{SOME_ID}"),
    ("PUT", f"/users/{SOME_ID}"),
]
BAD_BODIES = ["{not json", "[1, 2, 3]", ""]


@pytest.mark.parametrize("raw_body", BAD_BODIES)
@pytest.mark.parametrize("method,path", WITH_BODY)
def test_bad_body_without_credentials_is_unauthorized(client, query_counter, method, path, raw_body) -> None:
    query_counter["count"] = 0
    response = client.request(
        method,
        f"{API}{path}",
        content=raw_body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "No autorizado"}
    assert query_counter["count"] == 0


@pytest.mark.parametrize("raw_body", BAD_BODIES)
@pytest.mark.parametrize("method,path", WITH_BODY)
def test_bad_body_from_user_role_is_forbidden(client, member_headers, method, path, raw_body) -> None:
    headers = dict(member_headers, **{"Content-Type": "application/json"})
    response = client.request(method, f"{API}{path}", content=raw_body, headers=headers)

    assert response.status_code == 403
    assert "error" in response.json()


def test_user_role_can_list_transactions(client, member_headers) -> None:
    response = client.get(f"{API}/transactions", headers=member_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_forbidden_create_persists_nothing(client, member_headers, admin_headers) -> None:
    client.post(f"{API}/transactions", json=TX_BODY, headers=member_headers)
    assert client.get(f"{API}/transactions", headers=admin_headers).json() == []


def test_garbage_token_is_rejected(client, query_counter) -> None:
    query_counter["count"] = 0
    response = client.get(f"{API}/transactions", headers={"Authorization": "Bearer not.a.jwt"})
    assert response.status_code == 401
    assert query_counter["count"] == 0


def test_expired_token_is_rejected(client, admin) -> None:
    token = create_access_token(str(admin.id), expires_delta=timedelta(seconds=-10))
    response = client.get(f"{API}/transactions", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_unknown_user_is_rejected(client) -> None:
    token = create_access_token(str(uuid.uuid4()))
    response = client.get(f"{API}/transactions", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_inactive_user_is_rejected(client, make_user) -> None:
    ghost = make_user("Old Account", "old@example.com", Role.ADMIN, is_active=False)
    response = client.get(f"{API}/transactions", headers=bearer(ghost))
    assert response.status_code == 401


def test_session_cookie_is_accepted(client, admin) -> None:
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_access_token(str(admin.id)))
    response = client.get(f"{API}/users/me")

    assert response.status_code == 200
    assert response.json() == {
        "id": str(admin.id),
        "name": "Ana Admin",
        "email": "ana@example.com",
        "role": "ADMIN",
    }


def test_resolution_errors_fail_closed(client, admin_headers) -> None:
    class BrokenResolver:
        async def resolve_session(self, credentials):
            raise RuntimeError("identity provider unreachable")

    app.dependency_overrides[get_session_resolver] = lambda: BrokenResolver()
    response = client.get(f"{API}/transactions", headers=admin_headers)

    assert response.status_code == 401
    assert response.json() == {"error": "No autorizado"}


def test_role_changes_apply_on_the_next_request(client, admin, admin_headers, member, member_headers) -> None:
    response = client.put(f"{API}/users/{member.id}", json={"role": "ADMIN"}, headers=admin_headers)
    assert response.status_code == 200

    assert client.get(f"{API}/reports", headers=member_headers).status_code == 200
