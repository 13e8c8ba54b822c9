# templating.py
from pathlib import Path

from fastapi.templating import Jinja2Templates

ROOT_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(ROOT_DIR / "templates"))


def format_price(value) -> str:
    """R$ 1.234,50 style price for the product cards."""
    text = f"{float(value):,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


templates.env.filters["price"] = format_price
