# main.py
import logging
from urllib.parse import unquote

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from routes import auth, products
from schemas import SessionContext
from templating import ROOT_DIR

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("catalog")

app = FastAPI(title=settings.app_title)

app.mount("/static", StaticFiles(directory=str(ROOT_DIR / "static")), name="static")

PUBLIC_PATHS = [settings.signin_path, "/signout", "/static/"]


@app.middleware("http")
async def session_cookie_gate(request: Request, call_next):
    """
    Cookie presence is the whole check: without it, redirect to sign-in
    before any handler (and therefore any product fetch) runs.
    """
    if any(request.url.path.startswith(path) for path in PUBLIC_PATHS):
        return await call_next(request)
    user = request.cookies.get(settings.session_cookie_name)
    if not user:
        logger.debug("No session cookie on %s, redirecting to %s", request.url.path, settings.signin_path)
        return RedirectResponse(url=settings.signin_path)
    request.state.session = SessionContext(user_name=unquote(user))
    return await call_next(request)


# Routers
app.include_router(auth.router)
app.include_router(products.router)
