import pytest

from backend import create_app
from backend import routes
from database import db_manager

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE_FILE": str(tmp_path / "api.db"),
        "NOTIFY_AUTOSTART": False,
    })
    yield app
    app.extensions["authnotify.scheduler"].stop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_time(monkeypatch):
    monkeypatch.setattr(routes, "now", lambda: 59)


def _add(client, name="github", secret=RFC_SECRET):
    return client.post("/api/accounts", json={"name": name, "secret": secret})


def test_index_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "GET /api/accounts" in resp.get_json()["endpoints"]


def test_add_and_list_accounts(client, frozen_time):
    resp = _add(client, secret="GEZD GNBV GY3T QOJQ GEZD GNBV GY3T QOJQ")
    assert resp.status_code == 201
    account_id = resp.get_json()["id"]

    data = client.get("/api/accounts").get_json()
    assert data["period"] == 30
    assert data["remaining"] == 1
    assert data["accounts"] == [{"id": account_id, "name": "github", "code": "287082"}]


def test_list_marks_broken_account(app, client, frozen_time):
    # bypass validation to simulate a corrupted stored secret
    conn = db_manager.get_db_connection(app.config["DATABASE_FILE"])
    conn.execute("INSERT INTO accounts (name, secret) VALUES (?, ?)", ("legacy", "GEZDG1BV"))
    conn.commit()
    conn.close()
    _add(client)

    accounts = client.get("/api/accounts").get_json()["accounts"]
    assert accounts[0]["name"] == "legacy" and "error" in accounts[0] and "code" not in accounts[0]
    assert accounts[1]["code"] == "287082"


@pytest.mark.parametrize(
    "payload",
    [{"name": "github", "secret": "GEZDG1BV"}, {"name": "", "secret": RFC_SECRET}, {"name": "x"}],
)
def test_add_rejects_bad_input(client, payload):
    resp = client.post("/api/accounts", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_add_requires_json(client):
    resp = client.post("/api/accounts", data="name=x", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "JSON object body required"


def test_rename(client):
    account_id = _add(client).get_json()["id"]
    resp = client.patch(f"/api/accounts/{account_id}", json={"name": "work"})
    assert resp.get_json() == {"id": account_id, "name": "work", "renamed": True}

    resp = client.patch(f"/api/accounts/{account_id}", json={"name": "   "})
    assert resp.get_json()["renamed"] is False
    assert resp.get_json()["name"] == "work"


@pytest.mark.parametrize("name", [None, 123, {}])
def test_rename_requires_string_name(client, name):
    account_id = _add(client).get_json()["id"]
    resp = client.patch(f"/api/accounts/{account_id}", json={"name": name})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "name must be a string"
    assert client.get("/api/accounts").get_json()["accounts"][0]["name"] == "github"


def test_rename_unknown(client):
    resp = client.patch("/api/accounts/99", json={"name": "x"})
    assert resp.status_code == 404
    assert "99" in resp.get_json()["error"]


def test_delete(client):
    account_id = _add(client).get_json()["id"]
    assert client.delete(f"/api/accounts/{account_id}").status_code == 200
    assert client.delete(f"/api/accounts/{account_id}").status_code == 404
    assert client.get("/api/accounts").get_json()["accounts"] == []


def test_settings_enable_starts_scheduler(app, client):
    data = client.get("/api/settings").get_json()
    assert data == {"enabled": False, "dark_mode": False, "interval": 30, "scheduler_running": False}

    data = client.put("/api/settings", json={"enabled": True}).get_json()
    assert data["enabled"] is True
    assert data["scheduler_running"] is True
    assert app.extensions["authnotify.scheduler"].running

    data = client.put("/api/settings", json={"enabled": False}).get_json()
    assert data["scheduler_running"] is False


def test_settings_rejects_unknown_key(client):
    resp = client.put("/api/settings", json={"volume": 3})
    assert resp.status_code == 400


@pytest.mark.parametrize("payload", [{"enabled": "false"}, {"enabled": 1}, {"interval": "30"}])
def test_settings_rejects_wrong_types(app, client, payload):
    resp = client.put("/api/settings", json=payload)
    assert resp.status_code == 400

    data = client.get("/api/settings").get_json()
    assert data == {"enabled": False, "dark_mode": False, "interval": 30, "scheduler_running": False}
    assert not app.extensions["authnotify.scheduler"].running


def test_theme_toggle(client):
    assert client.post("/api/theme/toggle").get_json() == {"dark_mode": True}
    assert client.get("/api/settings").get_json()["dark_mode"] is True
    assert client.post("/api/theme/toggle").get_json() == {"dark_mode": False}


def test_notification_preview(client, frozen_time):
    _add(client, "github")
    _add(client, "mail")
    data = client.get("/api/notification").get_json()
    assert data == {
        "title": "Authentication codes",
        "message": "github: 287082\nmail: 287082",
        "failed": [],
    }


def test_unknown_route_is_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_cryptography_provider_app(tmp_path, monkeypatch):
    app = create_app({
        "DATABASE_FILE": str(tmp_path / "c.db"),
        "HASH_PROVIDER": "cryptography",
        "NOTIFY_AUTOSTART": False,
    })
    monkeypatch.setattr(routes, "now", lambda: 59)
    client = app.test_client()
    _add(client)
    assert client.get("/api/accounts").get_json()["accounts"][0]["code"] == "287082"


def test_scheduler_follows_stored_enabled_flag(app, client):
    _add(client)
    scheduler = app.extensions["authnotify.scheduler"]
    db_manager.update_settings(app.config["DATABASE_FILE"], enabled=True)
    assert scheduler.send_notification(59) == "github: 287082"

    # disabled from another process (e.g. the CLI) while the app runs
    db_manager.update_settings(app.config["DATABASE_FILE"], enabled=False)
    assert scheduler.send_notification(59) is None
