import asyncio
import uuid

import pytest

from app.config import settings
from app.models.todo import Todo


pytestmark = pytest.mark.asyncio

API = settings.API_PREFIX


async def _create(client, headers, text):
    return await client.post(f"{API}/todos", headers=headers, json={"text": text})


async def test_full_todo_crud_flow(client, user_headers):
    user, headers = await user_headers()

    list_resp = await client.get(f"{API}/todos", headers=headers)
    assert list_resp.status_code == 200
    assert list_resp.json() == {"data": []}

    create_resp = await _create(client, headers, "  buy milk  ")
    assert create_resp.status_code == 201
    created = create_resp.json()["data"]
    assert created["text"] == "buy milk"
    assert created["completed"] is False
    assert created["userId"] == str(user.id)
    assert set(created) == {"id", "text", "completed", "createdAt", "updatedAt", "userId"}
    todo_id = created["id"]

    detail = await client.get(f"{API}/todos/{todo_id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["text"] == "buy milk"

    patch_resp = await client.patch(
        f"{API}/todos/{todo_id}", headers=headers, json={"completed": True}
    )
    assert patch_resp.status_code == 200
    patched = patch_resp.json()["data"]
    assert patched["completed"] is True
    assert patched["text"] == "buy milk"  # untouched field kept

    rename = await client.patch(
        f"{API}/todos/{todo_id}", headers=headers, json={"text": "  buy oat milk "}
    )
    assert rename.json()["data"]["text"] == "buy oat milk"
    assert rename.json()["data"]["completed"] is True

    delete_resp = await client.delete(f"{API}/todos/{todo_id}", headers=headers)
    assert delete_resp.status_code == 200
    assert delete_resp.json()["data"] is None

    missing = await client.get(f"{API}/todos/{todo_id}", headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Todo non trouvé"}


async def test_list_is_newest_first(client, user_headers):
    _, headers = await user_headers()
    for text in ("first", "second", "third"):
        await _create(client, headers, text)
        await asyncio.sleep(0.01)
    resp = await client.get(f"{API}/todos", headers=headers)
    assert [t["text"] for t in resp.json()["data"]] == ["third", "second", "first"]


async def test_create_empty_text_rejected(client, user_headers):
    _, headers = await user_headers()
    for text in ("", "   "):
        resp = await _create(client, headers, text)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Le texte ne peut pas être vide"}
    assert await Todo.all().count() == 0


async def test_create_too_long_rejected(client, user_headers):
    _, headers = await user_headers()
    resp = await _create(client, headers, "x" * (settings.todo_text_max_length + 1))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Texte trop long"}


async def test_create_missing_body_field(client, user_headers):
    _, headers = await user_headers()
    resp = await client.post(f"{API}/todos", headers=headers, json={})
    assert resp.status_code == 400
    assert "error" in resp.json()


async def test_update_blank_text_rejected(client, user_headers):
    _, headers = await user_headers()
    todo_id = (await _create(client, headers, "keep me")).json()["data"]["id"]
    resp = await client.patch(f"{API}/todos/{todo_id}", headers=headers, json={"text": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Le texte ne peut pas être vide"}
    detail = await client.get(f"{API}/todos/{todo_id}", headers=headers)
    assert detail.json()["data"]["text"] == "keep me"


async def test_requires_authentication(client):
    assert (await client.get(f"{API}/todos")).status_code == 401
    assert (await client.post(f"{API}/todos", json={"text": "x"})).status_code == 401
    some_id = str(uuid.uuid4())
    assert (await client.patch(f"{API}/todos/{some_id}", json={"completed": True})).status_code == 401
    resp = await client.delete(f"{API}/todos/{some_id}")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Non autorisé"}


async def test_todo_access_isolated_per_user(client, user_headers):
    _, headers_a = await user_headers()
    _, headers_b = await user_headers()

    todo_id = (await _create(client, headers_a, "A's secret")).json()["data"]["id"]

    list_b = await client.get(f"{API}/todos", headers=headers_b)
    assert list_b.json()["data"] == []

    assert (await client.get(f"{API}/todos/{todo_id}", headers=headers_b)).status_code == 404
    patch_b = await client.patch(f"{API}/todos/{todo_id}", headers=headers_b, json={"completed": True})
    assert patch_b.status_code == 404
    delete_b = await client.delete(f"{API}/todos/{todo_id}", headers=headers_b)
    assert delete_b.status_code == 404
    assert delete_b.json() == {"error": "Todo non trouvé"}

    # Row remains for its true owner, unchanged
    detail_a = await client.get(f"{API}/todos/{todo_id}", headers=headers_a)
    assert detail_a.status_code == 200
    assert detail_a.json()["data"]["completed"] is False


async def test_malformed_id_is_not_found(client, user_headers):
    _, headers = await user_headers()
    resp = await client.get(f"{API}/todos/not-a-uuid", headers=headers)
    assert resp.status_code == 404


async def test_repeated_list_is_stable(client, user_headers):
    _, headers = await user_headers()
    for i in range(3):
        await _create(client, headers, f"todo {i}")
    first = (await client.get(f"{API}/todos", headers=headers)).json()["data"]
    second = (await client.get(f"{API}/todos", headers=headers)).json()["data"]
    assert {t["id"] for t in first} == {t["id"] for t in second}


async def test_cookie_session_authenticates(client, create_user):
    user, password = await create_user()
    login = await client.post(f"{API}/auth/login", json={"email": user.email, "password": password})
    token = login.cookies[settings.session_cookie_name]
    client.cookies.clear()
    resp = await client.get(
        f"{API}/todos", headers={"Cookie": f"{settings.session_cookie_name}={token}"}
    )
    assert resp.status_code == 200


async def test_options_preflight_on_todo_routes(client):
    collection = await client.options(f"{API}/todos")
    assert collection.status_code == 200
    assert "POST" in collection.headers["access-control-allow-methods"]

    item = await client.options(f"{API}/todos/{uuid.uuid4()}")
    assert item.status_code == 200
    assert "PATCH" in item.headers["access-control-allow-methods"]
    assert "DELETE" in item.headers["access-control-allow-methods"]


async def test_cross_origin_preflight_is_answered(client):
    headers = {"Origin": "http://other.example", "Access-Control-Request-Method": "POST"}
    resp = await client.options(f"{API}/todos", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://other.example"
    assert "POST" in resp.headers["access-control-allow-methods"]

    headers["Access-Control-Request-Method"] = "DELETE"
    item = await client.options(f"{API}/todos/{uuid.uuid4()}", headers=headers)
    assert item.status_code == 200
    assert "DELETE" in item.headers["access-control-allow-methods"]


async def test_unexpected_error_becomes_generic_500(client, user_headers, monkeypatch):
    _, headers = await user_headers()

    async def _boom(owner):
        raise RuntimeError("secret internals")

    monkeypatch.setattr("app.services.todos.list_todos", _boom)
    resp = await client.get(f"{API}/todos", headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Une erreur interne est survenue"}
    assert "secret" not in resp.text
