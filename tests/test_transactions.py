async def _create_account(api_client) -> int:
    resp = await api_client.post("/api/users", json={"name": "owner", "email": "owner@x.com"})
    assert resp.status_code == 201
    return resp.json()["id"]


async def test_create_then_get_round_trips(api_client) -> None:
    account_id = await _create_account(api_client)

    resp = await api_client.post(
        "/api/orders",
        json={"user_id": account_id, "amount": -12.5, "description": "refund"},
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["user_id"] == account_id
    assert created["amount"] == -12.5
    assert created["description"] == "refund"
    assert isinstance(created["id"], int)
    assert created["created_at"]

    fetched = await api_client.get(f"/api/orders/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


async def test_unknown_owner_surfaces_store_error(api_client) -> None:
    resp = await api_client.post(
        "/api/orders",
        json={"user_id": 424242, "amount": 1.0, "description": "orphan"},
    )
    assert resp.status_code == 500
    assert "FOREIGN KEY constraint failed" in resp.text
    assert resp.headers["content-type"].startswith("text/plain")


async def test_deleting_referenced_account_surfaces_store_error(api_client) -> None:
    account_id = await _create_account(api_client)
    resp = await api_client.post("/api/orders", json={"user_id": account_id, "amount": 3, "description": "x"})
    assert resp.status_code == 201

    resp = await api_client.delete(f"/api/users/{account_id}")
    assert resp.status_code == 500


async def test_list_returns_newest_first(api_client) -> None:
    account_id = await _create_account(api_client)
    ids = []
    for amount in (1, 2, 3):
        resp = await api_client.post("/api/orders", json={"user_id": account_id, "amount": amount, "description": ""})
        ids.append(resp.json()["id"])

    resp = await api_client.get("/api/orders")
    assert resp.status_code == 200
    assert [row["id"] for row in resp.json()] == list(reversed(ids))


async def test_update_of_missing_transaction_is_no_content(api_client) -> None:
    resp = await api_client.put(
        "/api/orders/9999999",
        json={"user_id": 1, "amount": 10.0, "description": "nothing to update"},
    )
    assert resp.status_code == 204


async def test_put_and_patch_semantics(api_client) -> None:
    account_id = await _create_account(api_client)
    created = (
        await api_client.post("/api/orders", json={"user_id": account_id, "amount": 9.99, "description": "book"})
    ).json()
    url = f"/api/orders/{created['id']}"

    resp = await api_client.patch(url, json={"amount": 19.99})
    assert resp.status_code == 204
    patched = (await api_client.get(url)).json()
    assert patched["amount"] == 19.99
    assert patched["description"] == "book"

    resp = await api_client.put(url, json={"user_id": account_id, "amount": 5})
    assert resp.status_code == 204
    replaced = (await api_client.get(url)).json()
    assert replaced["amount"] == 5.0
    assert replaced["description"] == ""
    assert replaced["id"] == created["id"]
    assert replaced["created_at"] == created["created_at"]


async def test_delete_is_idempotent(api_client) -> None:
    account_id = await _create_account(api_client)
    created = (
        await api_client.post("/api/orders", json={"user_id": account_id, "amount": 1, "description": "once"})
    ).json()

    first = await api_client.delete(f"/api/orders/{created['id']}")
    second = await api_client.delete(f"/api/orders/{created['id']}")
    assert first.status_code == 204
    assert second.status_code == 204

    gone = await api_client.get(f"/api/orders/{created['id']}")
    assert gone.status_code == 404


async def test_fields_are_not_coerced_across_types(api_client) -> None:
    account_id = await _create_account(api_client)

    for body in (
        {"user_id": account_id, "amount": "5", "description": "x"},
        {"user_id": str(account_id), "amount": 5.0, "description": "x"},
        {"user_id": account_id, "amount": 5.0, "description": 7},
    ):
        resp = await api_client.post("/api/orders", json=body)
        assert resp.status_code == 400
        assert resp.text == "bad request"

    resp = await api_client.post("/api/orders", json={"user_id": account_id, "amount": 5, "description": None})
    assert resp.status_code == 201
    assert resp.json()["amount"] == 5.0
    assert resp.json()["description"] == ""


async def test_patch_ignores_null_fields(api_client) -> None:
    account_id = await _create_account(api_client)
    created = (
        await api_client.post("/api/orders", json={"user_id": account_id, "amount": 2.5, "description": "tea"})
    ).json()
    url = f"/api/orders/{created['id']}"

    resp = await api_client.patch(url, json={"amount": None, "description": "green tea"})
    assert resp.status_code == 204

    patched = (await api_client.get(url)).json()
    assert patched["amount"] == 2.5
    assert patched["description"] == "green tea"


async def test_out_of_range_id_is_not_found(api_client) -> None:
    resp = await api_client.get("/api/orders/18446744073709551616")
    assert resp.status_code == 404
    resp = await api_client.delete("/api/orders/18446744073709551616")
    assert resp.status_code == 204
