import pytest

from gearguard.core.gate import gate_redirect, is_exempt, is_public


@pytest.mark.parametrize("path", [
    "/api/equipment", "/api/auth/login", "/static/app.css", "/favicon.ico",
    "/health", "/docs", "/openapi.json", "/logo.svg", "/img/photo.JPG",
])
def test_exempt_paths_pass_either_way(path):
    assert is_exempt(path)
    assert gate_redirect(path, authenticated=False) is None
    assert gate_redirect(path, authenticated=True) is None


@pytest.mark.parametrize("path", ["/login", "/signup", "/login/reset"])
def test_public_paths(path):
    assert is_public(path)
    assert gate_redirect(path, authenticated=False) is None
    assert gate_redirect(path, authenticated=True) == "/"


@pytest.mark.parametrize("path, target", [
    ("/", "/login?callbackUrl=%2F"),
    ("/equipment", "/login?callbackUrl=%2Fequipment"),
    ("/maintenance/12", "/login?callbackUrl=%2Fmaintenance%2F12"),
])
def test_protected_paths_send_anonymous_callers_to_login(path, target):
    assert gate_redirect(path, authenticated=False) == target
    assert gate_redirect(path, authenticated=True) is None


def test_anonymous_page_request_is_redirected(client, world):
    r = client.get("/equipment", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/login?callbackUrl=%2Fequipment"


def test_signed_in_user_is_sent_home_from_login(client, world):
    client.post("/api/auth/login", json={"email": "user@gearguard.com", "password": "user123"})
    r = client.get("/login", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/"

    r = client.get("/report", follow_redirects=False)
    assert r.status_code == 200
    assert "Reports" in r.text


def test_any_role_passes_the_gate(client, world):
    client.post("/api/auth/login", json={"email": "tech@gearguard.com", "password": "tech123"})
    for path in ("/", "/equipment", "/maintenance", "/categories", "/calendar", "/report"):
        assert client.get(path, follow_redirects=False).status_code == 200


def test_login_page_is_public(client, world):
    r = client.get("/login?callbackUrl=%2Fequipment", follow_redirects=False)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "/equipment" in r.text


def test_api_answers_json_instead_of_redirecting(client, world):
    r = client.get("/api/equipment", follow_redirects=False)
    assert r.status_code == 401
    assert r.json() == {"ok": False, "error": "Unauthorized"}


def test_garbage_cookie_counts_as_anonymous(client, world):
    client.cookies.set("gearguard_session", "garbage")
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"].startswith("/login")


@pytest.mark.parametrize("callback", [
    "/%5Cevil.example",
    "/%5C%5Cevil.example",
    "%2F%2Fevil.example",
    "/%09/evil.example",
    "https%3A%2F%2Fevil.example",
    "javascript%3Aalert(1)",
])
def test_login_page_ignores_offsite_callbacks(client, world, callback):
    r = client.get(f"/login?callbackUrl={callback}", follow_redirects=False)
    assert r.status_code == 200
    assert 'window.location = "/";' in r.text
    assert "evil.example" not in r.text


def test_login_page_keeps_local_callback(client, world):
    r = client.get("/login?callbackUrl=%2Fmaintenance%3Fstage%3DNEW", follow_redirects=False)
    assert 'window.location = "/maintenance?stage=NEW";' in r.text


def test_login_page_callback_cannot_close_the_script(client, world):
    r = client.get("/login?callbackUrl=%2F%3C%2Fscript%3E%3Cscript%3Ealert(1)", follow_redirects=False)
    assert "</script><script>" not in r.text
    assert "\\u003c/script\\u003e" in r.text
