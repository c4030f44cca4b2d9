"""
Access control as a single table.

Every request path falls into one path class, and the pair
``(authenticated, path_class)`` maps to exactly one decision: let the request
through, redirect it somewhere else, or refuse it outright (JSON endpoints
answer 401 instead of redirecting).
"""
from dataclasses import dataclass
from typing import Optional

ROOT = "root"
AUTH_PAGE = "auth_page"
PROTECTED_PAGE = "protected_page"
API = "api"
AUTH_ACTION = "auth_action"
PUBLIC = "public"

LOGIN_PATH = "/login"
HOME_PATH = "/chat"


@dataclass(frozen=True)
class Decision:
    action: str
    target: Optional[str] = None

    @property
    def allowed(self):
        return self.action == "allow"


ALLOW = Decision("allow")
DENY = Decision("deny")


def redirect_to(target):
    return Decision("redirect", target)


POLICY = {
    (False, ROOT): redirect_to(LOGIN_PATH),
    (True, ROOT): redirect_to(HOME_PATH),
    (False, AUTH_PAGE): ALLOW,
    (True, AUTH_PAGE): redirect_to(HOME_PATH),
    (False, PROTECTED_PAGE): redirect_to(LOGIN_PATH),
    (True, PROTECTED_PAGE): ALLOW,
    (False, API): DENY,
    (True, API): ALLOW,
    (False, AUTH_ACTION): ALLOW,
    (True, AUTH_ACTION): ALLOW,
    (False, PUBLIC): ALLOW,
    (True, PUBLIC): ALLOW,
}

_EXACT = {
    "/": ROOT,
    "/login": AUTH_PAGE,
    "/chat": PROTECTED_PAGE,
    "/profile": PROTECTED_PAGE,
    "/session": AUTH_ACTION,
    "/signup": AUTH_ACTION,
    "/signout": AUTH_ACTION,
    "/health": PUBLIC,
}


def classify_path(path: str) -> str:
    if path != "/":
        path = path.rstrip("/")
    if path in _EXACT:
        return _EXACT[path]
    if path == "/api" or path.startswith("/api/"):
        return API
    if path.startswith(("/chat/", "/profile/")):
        return PROTECTED_PAGE
    if path.startswith("/static/"):
        return PUBLIC
    # unknown paths fall through to Flask's own 404 handling
    return PUBLIC


def decide(authenticated: bool, path: str) -> Decision:
    return POLICY[(bool(authenticated), classify_path(path))]
