from intro.services.device_service import get_device_registry


async def test_responses_include_x_request_id(api_client) -> None:
    resp = await api_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers.get("x-request-id")


async def test_list_devices_returns_seeded_devices(api_client) -> None:
    resp = await api_client.get("/devices")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == [
        {"id": 1, "mac": "5f-33-CC-1F-43-82", "firmware": "2.1.6"},
        {"id": 2, "mac": "EF-2B-C4-F5-D6-34", "firmware": "2.1.6"},
    ]


async def test_create_device_appends_to_list(api_client) -> None:
    body = {"id": 3, "mac": "AA-BB-CC-DD-EE-FF", "firmware": "3.0.0"}
    resp = await api_client.post("/devices", json=body)
    assert resp.status_code == 201
    assert resp.text == "Device created"

    listed = (await api_client.get("/devices")).json()
    assert len(listed) == 3
    assert listed[-1] == body


async def test_create_device_rejects_malformed_json(api_client) -> None:
    resp = await api_client.post(
        "/devices",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 400
    assert "detail" in resp.json()
    assert len(get_device_registry()) == 2


async def test_create_device_rejects_wrongly_typed_id(api_client) -> None:
    resp = await api_client.post("/devices", json={"id": "three", "mac": "x", "firmware": "1"})
    assert resp.status_code == 400
    assert len(get_device_registry()) == 2


async def test_upgrade_device_changes_firmware(api_client) -> None:
    resp = await api_client.put("/devices/1", json={"firmware": "2.2.0"})
    assert resp.status_code == 202
    assert resp.text == "Upgrading..."

    listed = {d["id"]: d for d in (await api_client.get("/devices")).json()}
    assert listed[1]["firmware"] == "2.2.0"
    assert listed[2]["firmware"] == "2.1.6"


async def test_upgrade_device_accepts_full_device_body(api_client) -> None:
    resp = await api_client.put("/devices/2", json={"id": 99, "mac": "ignored", "firmware": "2.3.0"})
    assert resp.status_code == 202

    listed = {d["id"]: d for d in (await api_client.get("/devices")).json()}
    assert listed[2] == {"id": 2, "mac": "EF-2B-C4-F5-D6-34", "firmware": "2.3.0"}
    assert 99 not in listed


async def test_upgrade_unknown_device_is_accepted_without_changes(api_client) -> None:
    before = (await api_client.get("/devices")).json()
    resp = await api_client.put("/devices/42", json={"firmware": "9.9.9"})
    assert resp.status_code == 202
    assert (await api_client.get("/devices")).json() == before


async def test_upgrade_device_rejects_non_numeric_id(api_client) -> None:
    resp = await api_client.put("/devices/abc", json={"firmware": "2.2.0"})
    assert resp.status_code == 400
    assert "abc" in resp.json()["detail"]


async def test_upgrade_device_rejects_malformed_body(api_client) -> None:
    resp = await api_client.put("/devices/1", content=b"", headers={"content-type": "application/json"})
    assert resp.status_code == 400


async def test_unsupported_methods_return_405(api_client) -> None:
    resp = await api_client.delete("/devices")
    assert resp.status_code == 405
    assert resp.headers.get("allow")

    resp = await api_client.get("/devices/1")
    assert resp.status_code == 405
    assert "PUT" in resp.headers.get("allow", "")


async def test_login_returns_welcome_message(api_client) -> None:
    resp = await api_client.get("/login")
    assert resp.status_code == 200
    assert resp.text == "Welcome to the Intro App!"


async def test_upgrade_device_rejects_loosely_formatted_ids(api_client) -> None:
    for raw in ("1_0", " 1", "１", "1.0"):
        resp = await api_client.put(f"/devices/{raw}", json={"firmware": "2.2.0"})
        assert resp.status_code == 400, raw

    listed = {d["id"]: d["firmware"] for d in (await api_client.get("/devices")).json()}
    assert listed == {1: "2.1.6", 2: "2.1.6"}


async def test_upgrade_device_accepts_signed_ids(api_client) -> None:
    resp = await api_client.put("/devices/+1", json={"firmware": "2.2.0"})
    assert resp.status_code == 202

    listed = {d["id"]: d["firmware"] for d in (await api_client.get("/devices")).json()}
    assert listed[1] == "2.2.0"


async def test_upgrade_without_id_is_rejected_not_redirected(api_client) -> None:
    resp = await api_client.put("/devices/", json={"firmware": "2.2.0"})
    assert resp.status_code == 400
    assert "Invalid device id" in resp.json()["detail"]

    resp = await api_client.get("/devices/")
    assert resp.status_code == 405
    assert "PUT" in resp.headers.get("allow", "")
