# tests/test_routes.py
from datetime import date

from config import settings
from conftest import USER_NAME


def test_home_without_cookie_redirects_to_signin(client, fake_client):
    r = client.get("/", follow_redirects=False)

    assert r.status_code in (302, 307)
    assert r.headers["location"] == settings.signin_path
    assert fake_client.calls == []


def test_editor_without_cookie_redirects_to_signin(client, fake_client):
    r = client.post("/products/new", data={"name": "Fogão", "sku": "FOG", "price": "10"},
                    follow_redirects=False)

    assert r.headers["location"] == settings.signin_path
    assert fake_client.calls == []


def test_signin_page_is_public(client):
    r = client.get("/signin")

    assert r.status_code == 200
    assert "Entrar" in r.text


def test_signin_sets_session_cookie(client):
    r = client.post("/signin", data={"name": "João"}, follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == "/"
    assert settings.session_cookie_name in r.headers["set-cookie"]


def test_signin_requires_a_name(client):
    r = client.post("/signin", data={"name": "  "})

    assert r.status_code == 422
    assert "Favor informar seu nome" in r.text


def test_signout_clears_cookie(signed_in_client):
    r = signed_in_client.get("/signout", follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == settings.signin_path
    assert settings.session_cookie_name in r.headers["set-cookie"]


def test_home_lists_products_sorted_by_name(signed_in_client, fake_client):
    r = signed_in_client.get("/")

    assert r.status_code == 200
    assert fake_client.calls == [("list", {"_sort": "name"})]
    assert r.text.index("product-p-1") < r.text.index("product-p-2")
    assert f"Olá, {USER_NAME}" in r.text
    assert "R$ 10,00" in r.text


def test_home_sort_by_price(signed_in_client, fake_client):
    r = signed_in_client.get("/", params={"sort": "price"})

    assert r.status_code == 200
    assert fake_client.calls == [("list", {"_sort": "price"})]
    assert r.text.index("product-p-2") < r.text.index("product-p-1")


def test_home_rejects_unknown_sort_field(signed_in_client, fake_client):
    r = signed_in_client.get("/", params={"sort": "sku"})

    assert r.status_code == 422
    assert fake_client.calls == []


def test_home_search(signed_in_client, fake_client):
    r = signed_in_client.get("/", params={"q": "B"})

    assert fake_client.calls == [("list", {"name_like": "B"})]
    assert "product-p-2" in r.text
    assert "product-p-1" not in r.text
    assert 'value="B"' in r.text


def test_home_favorites(signed_in_client, fake_client):
    r = signed_in_client.get("/", params={"favorites": "true"})

    assert fake_client.calls == [("list", {"isFavorite": "true"})]
    assert "product-p-1" in r.text
    assert "product-p-2" not in r.text


def test_home_clear_filters(signed_in_client, fake_client):
    signed_in_client.get("/", params={"clear": "true"})

    assert fake_client.calls == [("list", {})]


def test_home_survives_api_failure(signed_in_client, fake_client):
    fake_client.fail_reads = True

    r = signed_in_client.get("/")

    assert r.status_code == 200
    assert "Nenhum produto encontrado." in r.text


def test_new_product_form_opens_modal(signed_in_client):
    r = signed_in_client.get("/products/new")

    assert r.status_code == 200
    assert 'action="/products/new"' in r.text
    assert "Adicionar Produto" in r.text


def test_create_product_redirects_to_refreshed_list(signed_in_client, fake_client):
    r = signed_in_client.post("/products/new", data={"name": "Fogão", "sku": "FOG-5", "price": "899.90"},
                              follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == "/"
    kind, body = fake_client.writes()[0]
    assert kind == "create"
    today = date.today().strftime(settings.date_format)
    assert body["isFavorite"] is False
    assert body["created_at"] == body["updated_at"] == today
    assert body["updated_by"] == USER_NAME
    assert body["price"] == 899.90


def test_create_product_validation_errors_rerender_form(signed_in_client, fake_client):
    r = signed_in_client.post("/products/new", data={"name": "Fo", "sku": "", "price": "0"})

    assert r.status_code == 422
    assert "Nome muito curto" in r.text
    assert "Favor informar o SKU do produto" in r.text
    assert "Preço inválido" in r.text
    assert 'value="Fo"' in r.text
    assert fake_client.writes() == []


def test_create_product_api_failure_keeps_modal_open(signed_in_client, fake_client):
    fake_client.fail_writes = True

    r = signed_in_client.post("/products/new", data={"name": "Fogão", "sku": "FOG-5", "price": "899"})

    assert r.status_code == 502
    assert "Não foi possível salvar o produto" in r.text
    assert 'value="Fogão"' in r.text


def test_edit_form_prefills_product(signed_in_client):
    r = signed_in_client.get("/products/p-1/edit")

    assert r.status_code == 200
    assert "Editar Produto" in r.text
    assert 'action="/products/p-1/edit"' in r.text
    assert 'value="SKU-A"' in r.text


def test_edit_unknown_product_is_404(signed_in_client):
    r = signed_in_client.get("/products/nope/edit")

    assert r.status_code == 404


def test_edit_when_api_is_down_is_502(signed_in_client, fake_client):
    fake_client.fail_reads = True

    r = signed_in_client.get("/products/p-1/edit")

    assert r.status_code == 502


def test_update_product_preserves_favorite_and_creation_date(signed_in_client, fake_client):
    r = signed_in_client.post("/products/p-1/edit", data={"name": "A renamed", "sku": "SKU-A", "price": "11"},
                              follow_redirects=False)

    assert r.status_code == 303
    kind, product_id, body = fake_client.writes()[0]
    assert (kind, product_id) == ("replace", "p-1")
    assert body["id"] == "p-1"
    assert body["name"] == "A renamed"
    assert body["isFavorite"] is True
    assert body["created_at"] == "01/01/2026"
    assert body["updated_by"] == USER_NAME
