# services/product_editor.py
import enum
import logging
import threading
import uuid
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional

from catalog_api import CatalogApiError
from crud.product import ProductRepository
from schemas import EditorResult, Failure, FieldError, Product, ProductForm, Success, validate_product_form

logger = logging.getLogger("catalog.editor")

ESCAPE_KEY = "Escape"


class EditorMode(str, enum.Enum):
    CREATE = "CREATE"
    EDIT = "EDIT"


class EditorState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    CLOSED_SUCCESS = "closed_success"
    CLOSED_CANCELLED = "closed_cancelled"


def _new_product_id() -> str:
    return str(uuid.uuid4())


class ProductEditor:
    """
    Create/edit form for a single product.

    Lifecycle: IDLE -> SUBMITTING -> CLOSED_SUCCESS, or IDLE -> CLOSED_CANCELLED.
    A failed save goes back to IDLE so the user can retry; `on_close` is only
    called when the editor actually closes.
    """

    def __init__(
        self,
        mode: EditorMode,
        repository: ProductRepository,
        user_name: str,
        product: Optional[Product] = None,
        on_close: Optional[Callable[[EditorResult], None]] = None,
        today: Callable[[], date] = date.today,
        date_format: str = "%d/%m/%Y",
        id_factory: Callable[[], str] = _new_product_id,
    ):
        mode = EditorMode(mode)
        if mode is EditorMode.EDIT and product is None:
            raise ValueError("EDIT mode requires the product being edited.")
        self.mode = mode
        self.repository = repository
        self.user_name = user_name
        self.product = product
        self.on_close = on_close
        self.today = today
        self.date_format = date_format
        self.id_factory = id_factory

        self.state = EditorState.IDLE
        self.errors: List[FieldError] = []
        self.values: Dict[str, Any] = self._initial_values()
        self._lock = threading.RLock()

    @property
    def title(self) -> str:
        return "Adicionar Produto" if self.mode is EditorMode.CREATE else "Editar Produto"

    @property
    def is_loading(self) -> bool:
        return self.state is EditorState.SUBMITTING

    @property
    def is_closed(self) -> bool:
        return self.state in (EditorState.CLOSED_SUCCESS, EditorState.CLOSED_CANCELLED)

    def _initial_values(self) -> Dict[str, Any]:
        if self.mode is EditorMode.EDIT:
            return {"name": self.product.name, "sku": self.product.sku, "price": self.product.price}
        return {"name": "", "sku": "", "price": ""}

    def _stamp(self) -> str:
        return self.today().strftime(self.date_format)

    def _close(self, state: EditorState, result: EditorResult) -> EditorResult:
        self.state = state
        if self.on_close is not None:
            self.on_close(result)
        return result

    # -------------------- close events --------------------
    def cancel(self) -> Optional[EditorResult]:
        """Close without saving; unsaved input is discarded."""
        with self._lock:
            if self.is_closed:
                return None
            self.values = self._initial_values()
            self.errors = []
            return self._close(EditorState.CLOSED_CANCELLED, Failure(reason="cancelled"))

    def press_key(self, key: str) -> Optional[EditorResult]:
        if key == ESCAPE_KEY:
            return self.cancel()
        return None

    def click(self, inside_surface: bool) -> Optional[EditorResult]:
        if not inside_surface:
            return self.cancel()
        return None

    # -------------------- submission --------------------
    def build_product(self, form: ProductForm) -> Product:
        stamp = self._stamp()
        if self.mode is EditorMode.CREATE:
            return Product(
                id=self.id_factory(),
                name=form.name,
                sku=form.sku,
                price=form.price,
                is_favorite=False,
                created_at=stamp,
                updated_at=stamp,
                updated_by=self.user_name,
            )
        return self.product.model_copy(update={
            "name": form.name,
            "sku": form.sku,
            "price": form.price,
            "updated_at": stamp,
            "updated_by": self.user_name,
        })

    def submit(self, data: Mapping[str, Any]) -> EditorResult:
        with self._lock:
            if self.is_closed:
                return Failure(reason="closed")
            if self.state is EditorState.SUBMITTING:
                return Failure(reason="busy")

            self.values = {key: data.get(key, "") for key in ("name", "sku", "price")}
            form, self.errors = validate_product_form(data)
            if form is None:
                return Failure(reason="invalid", errors=list(self.errors))
            self.state = EditorState.SUBMITTING

        saved = None
        try:
            product = self.build_product(form)
            if self.mode is EditorMode.CREATE:
                saved = self.repository.register(product)
            else:
                saved = self.repository.update(product.id, product)
        except CatalogApiError as e:
            logger.error("Saving product (%s) failed: %s", self.mode.value, e)
            return Failure(reason="persistence", message=str(e))
        finally:
            if saved is None:
                with self._lock:
                    if self.state is EditorState.SUBMITTING:
                        self.state = EditorState.IDLE

        logger.info("Product %s saved (%s) by %s", saved.id, self.mode.value, self.user_name)
        result = Success(product=saved)
        with self._lock:
            if self.is_closed:
                # cancelled while the save was in flight; the caller was already told
                logger.warning("Product %s saved after the editor was closed", saved.id)
                return result
            return self._close(EditorState.CLOSED_SUCCESS, result)
