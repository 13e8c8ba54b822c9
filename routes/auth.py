# routes/auth.py
import logging
from urllib.parse import quote

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from config import settings
from schemas import SessionContext
from templating import templates

logger = logging.getLogger("catalog.auth")

router = APIRouter(tags=["Auth"])

SIGNIN_NAME_REQUIRED = "Favor informar seu nome"


def get_session_context(request: Request) -> SessionContext:
    """
    Dependency returning the session built by the cookie gate middleware.
    """
    session = getattr(request.state, "session", None)
    if session is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return session


@router.get(settings.signin_path, response_class=HTMLResponse, include_in_schema=False)
def get_signin_page(request: Request):
    return templates.TemplateResponse(request, "signin.html", {"title": "Entrar", "error": None, "name": ""})


@router.post(settings.signin_path, include_in_schema=False)
def signin(request: Request, name: str = Form("")):
    name = name.strip()
    if not name:
        return templates.TemplateResponse(
            request, "signin.html", {"title": "Entrar", "error": SIGNIN_NAME_REQUIRED, "name": ""},
            status_code=422,
        )
    logger.info("User %s signed in", name)
    response = RedirectResponse(url="/", status_code=303)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=quote(name),
        max_age=settings.session_cookie_max_age,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/signout", include_in_schema=False)
def signout():
    response = RedirectResponse(url=settings.signin_path, status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response
