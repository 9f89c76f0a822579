# backend/gearguard/routers/pages.py
"""
Bare HTML shells for the browser side.

SessionGateMiddleware decides who reaches these; the pages themselves only
talk to the JSON API.
"""
import json
from html import escape
from typing import Optional
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from ..core.security import get_optional_session
from ..schemas.user import SessionUser

router = APIRouter(include_in_schema=False)

SECTIONS = {
    "equipment": "Equipment",
    "maintenance": "Maintenance",
    "categories": "Categories",
    "calendar": "Calendar",
    "report": "Reports",
}

# JSON endpoint each section renders from
SECTION_APIS = {
    "equipment": "/api/equipment",
    "maintenance": "/api/maintenance",
    "categories": "/api/categories",
    "calendar": "/api/maintenance/calendar",
    "report": "/api/reports/summary",
}

_LAYOUT = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title} · GearGuard</title></head>
<body>
{nav}
<main>
<h1>{title}</h1>
{body}
</main>
</body>
</html>
"""

_AUTH_FORM = """<form id="auth-form">
{fields}
<button type="submit">{submit}</button>
</form>
<p id="auth-error" role="alert"></p>
<script>
document.getElementById("auth-form").addEventListener("submit", async (ev) => {{
  ev.preventDefault();
  const body = Object.fromEntries(new FormData(ev.target));
  const res = await fetch("{action}", {{
    method: "POST",
    headers: {{"Content-Type": "application/json"}},
    body: JSON.stringify(body),
  }});
  const payload = await res.json();
  if (payload.ok) {{ window.location = {next_url}; }}
  else {{ document.getElementById("auth-error").textContent = payload.error; }}
}});
</script>
"""


def _nav(user: Optional[SessionUser]) -> str:
    if user is None:
        return ""
    links = " | ".join(f'<a href="/{slug}">{label}</a>' for slug, label in SECTIONS.items())
    return f'<nav><a href="/">Dashboard</a> | {links} <span>{escape(user.name)} ({user.role})</span></nav>'


def _page(title: str, body: str, user: Optional[SessionUser] = None) -> HTMLResponse:
    return HTMLResponse(_LAYOUT.format(title=escape(title), nav=_nav(user), body=body))


def _safe_callback(url: Optional[str]) -> str:
    # only same-site paths; anything else goes home
    if not url or not url.startswith("/") or url.startswith("//"):
        return "/"
    # browsers treat a backslash as a slash and drop tabs and newlines in URLs
    if "\\" in url or any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return "/"
    parts = urlsplit(url)
    if parts.scheme or parts.netloc:
        return "/"
    return url


def _js_string(value: str) -> str:
    # JSON string literal that cannot close the surrounding <script>
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


@router.get("/login")
def login_page(callbackUrl: Optional[str] = Query(None)):
    fields = (
        '<label>Email <input name="email" type="email" required></label>\n'
        '<label>Password <input name="password" type="password" required></label>'
    )
    next_url = _js_string(_safe_callback(callbackUrl))
    body = _AUTH_FORM.format(fields=fields, submit="Sign in", action="/api/auth/login", next_url=next_url)
    body += '<p>No account? <a href="/signup">Sign up</a></p>'
    return _page("Sign in", body)


@router.get("/signup")
def signup_page():
    fields = (
        '<label>Name <input name="name" required minlength="2"></label>\n'
        '<label>Email <input name="email" type="email" required></label>\n'
        '<label>Password <input name="password" type="password" required minlength="6"></label>'
    )
    body = _AUTH_FORM.format(fields=fields, submit="Create account", action="/api/auth/signup",
                             next_url=_js_string("/login"))
    return _page("Sign up", body)


@router.get("/")
def home_page(user: Optional[SessionUser] = Depends(get_optional_session)):
    body = "<ul>" + "".join(
        f'<li><a href="/{slug}">{label}</a></li>' for slug, label in SECTIONS.items()
    ) + "</ul>"
    return _page("Dashboard", body, user)


def _section_page(slug: str, label: str):
    def _handler(user: Optional[SessionUser] = Depends(get_optional_session)):
        body = f'<div id="{slug}" data-api="{SECTION_APIS[slug]}"></div>'
        return _page(label, body, user)
    _handler.__name__ = f"{slug}_page"
    return _handler


for _slug, _label in SECTIONS.items():
    router.add_api_route(f"/{_slug}", _section_page(_slug, _label), methods=["GET"])
