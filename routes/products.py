# routes/products.py

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from catalog_api import CatalogApiClient, CatalogApiError, get_catalog_client
from config import settings
from crud.product import ProductRepository
from routes.auth import get_session_context
from schemas import SessionContext
from services.product_editor import EditorMode, ProductEditor
from services.product_list import ProductListController
from templating import templates

logger = logging.getLogger("catalog.pages")

router = APIRouter(tags=["Products"])

SAVE_FAILED = "Não foi possível salvar o produto. Tente novamente."


# ---------- helpers ----------

def _load_list(client: CatalogApiClient, q: Optional[str] = None, sort: Optional[str] = None,
               favorites: bool = False, clear: bool = False) -> ProductListController:
    controller = ProductListController(client)
    if q:
        controller.search(q)
    elif sort:
        controller.order_by(sort)
    elif favorites:
        controller.filter_favorites()
    elif clear:
        controller.clear_filters()
    else:
        controller.load_all()
    return controller


def _render_home(request: Request, controller: ProductListController, session: SessionContext,
                 editor: Optional[ProductEditor] = None, form_action: Optional[str] = None,
                 error: Optional[str] = None, status_code: int = 200):
    context = {
        "title": "Home",
        "products": controller.products,
        "search_term": controller.search_term,
        "is_loading": controller.is_loading,
        "user_name": session.user_name,
        "editor": editor,
        "form_action": form_action,
        "field_errors": {err.field: err.message for err in editor.errors} if editor else {},
        "error": error,
    }
    return templates.TemplateResponse(request, "home.html", context, status_code=status_code)


def _editor(mode: EditorMode, client: CatalogApiClient, session: SessionContext, product=None) -> ProductEditor:
    return ProductEditor(
        mode,
        ProductRepository(client),
        user_name=session.user_name,
        product=product,
        date_format=settings.date_format,
    )


def _get_product_or_404(client: CatalogApiClient, product_id: str):
    try:
        return ProductRepository(client).get(product_id)
    except CatalogApiError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Product not found")
        logger.error("Loading product %s failed: %s", product_id, e)
        raise HTTPException(status_code=502, detail="Products API unavailable")


def _submit(request: Request, editor: ProductEditor, client: CatalogApiClient, session: SessionContext,
            form_action: str, data: dict):
    result = editor.submit(data)
    if result.ok:
        return RedirectResponse(url="/", status_code=303)

    controller = _load_list(client)
    if result.reason == "persistence":
        return _render_home(request, controller, session, editor=editor, form_action=form_action,
                            error=SAVE_FAILED, status_code=502)
    return _render_home(request, controller, session, editor=editor, form_action=form_action,
                        status_code=422)


# ---------- pages ----------

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def home(
    request: Request,
    q: Optional[str] = Query(None),
    sort: Optional[Literal["price", "name"]] = Query(None),
    favorites: bool = Query(False),
    clear: bool = Query(False),
    client: CatalogApiClient = Depends(get_catalog_client),
    session: SessionContext = Depends(get_session_context),
):
    """
    Product list. At most one of search / sort / favorites / clear applies,
    in that order of precedence; with none the list is sorted by name.
    """
    controller = _load_list(client, q=q, sort=sort, favorites=favorites, clear=clear)
    return _render_home(request, controller, session)


@router.get("/products/new", response_class=HTMLResponse, include_in_schema=False)
def new_product_form(
    request: Request,
    client: CatalogApiClient = Depends(get_catalog_client),
    session: SessionContext = Depends(get_session_context),
):
    editor = _editor(EditorMode.CREATE, client, session)
    return _render_home(request, _load_list(client), session, editor=editor, form_action="/products/new")


@router.post("/products/new", include_in_schema=False)
def create_product(
    request: Request,
    name: str = Form(""),
    sku: str = Form(""),
    price: str = Form(""),
    client: CatalogApiClient = Depends(get_catalog_client),
    session: SessionContext = Depends(get_session_context),
):
    editor = _editor(EditorMode.CREATE, client, session)
    return _submit(request, editor, client, session, "/products/new",
                   {"name": name, "sku": sku, "price": price})


@router.get("/products/{product_id}/edit", response_class=HTMLResponse, include_in_schema=False)
def edit_product_form(
    request: Request,
    product_id: str,
    client: CatalogApiClient = Depends(get_catalog_client),
    session: SessionContext = Depends(get_session_context),
):
    product = _get_product_or_404(client, product_id)
    editor = _editor(EditorMode.EDIT, client, session, product=product)
    return _render_home(request, _load_list(client), session, editor=editor,
                        form_action=f"/products/{product.id}/edit")


@router.post("/products/{product_id}/edit", include_in_schema=False)
def update_product(
    request: Request,
    product_id: str,
    name: str = Form(""),
    sku: str = Form(""),
    price: str = Form(""),
    client: CatalogApiClient = Depends(get_catalog_client),
    session: SessionContext = Depends(get_session_context),
):
    product = _get_product_or_404(client, product_id)
    editor = _editor(EditorMode.EDIT, client, session, product=product)
    return _submit(request, editor, client, session, f"/products/{product.id}/edit",
                   {"name": name, "sku": sku, "price": price})
