from rating_api.ordering import rating_order

from tests.conftest import PLAYERS


def test_root_and_health(client):
    assert client.get("/").json() == {"ok": True}
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["database"] is True


def test_players_in_roster_order(client):
    assert client.get("/players").json() == {"players": PLAYERS}


def test_player_details_start_eligible(client):
    body = client.get("/players/details").json()
    assert body["ok"] is True
    assert body["players"] == [{"name": p, "can_rate": True} for p in PLAYERS]


def test_login_is_case_insensitive_and_returns_canonical_name(client):
    resp = client.post("/login", json={"name": "  christian ", "password": "christian123"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "name": "Christian"}


def test_login_rejects_bad_password(client):
    resp = client.post("/login", json={"name": "Christian", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"ok": False, "error": "invalid_credentials"}


def test_login_rejects_unknown_player(client):
    resp = client.post("/login", json={"name": "Zed", "password": "zed123"})
    assert resp.status_code == 401


def test_login_password_is_case_sensitive(client):
    resp = client.post("/login", json={"name": "Bader", "password": "BADER123"})
    assert resp.status_code == 401


def test_malformed_body_is_invalid_request(client):
    resp = client.post("/login", json={"name": ["Bader"], "password": "bader123"})
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "invalid_request"}


def test_order_for_given_day(client):
    resp = client.get("/order", params={"name": "edmond", "day": "20250314"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Edmond"
    assert body["day"] == "20250314"
    assert body["order"] == rating_order(PLAYERS, "Edmond", "20250314")
    assert "Edmond" not in body["order"]


def test_order_defaults_to_today(client):
    body = client.get("/order", params={"name": "Bader"}).json()
    assert len(body["day"]) == 8
    assert sorted(body["order"]) == sorted(p for p in PLAYERS if p != "Bader")


def test_order_rejects_unknown_player_and_bad_day(client):
    assert client.get("/order", params={"name": "Zed"}).json()["error"] == "invalid_name"
    resp = client.get("/order", params={"name": "Bader", "day": "2025-03-14"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_day"
