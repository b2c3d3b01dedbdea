"""One-shot flash messages stored in the signed session cookie.

A handler calls flash() before redirecting; the next rendered page pops the
messages and shows them once. Requires Starlette's SessionMiddleware.
"""

from starlette.requests import Request

_SESSION_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "info") -> None:
    messages = list(request.session.get(_SESSION_KEY, []))
    messages.append({"category": category, "message": message})
    request.session[_SESSION_KEY] = messages


def pop_flashed_messages(request: Request) -> list[dict[str, str]]:
    if "session" not in request.scope:
        return []
    return request.session.pop(_SESSION_KEY, [])
