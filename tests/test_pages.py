import responses

from gravis.app.config import TestConfig

BACKEND = TestConfig.BACKEND_URL


def test_home_shows_categories_and_popular_products(client, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/product-categories", json=[{"id": "c1", "name": "Inverters"}])
    backend_mock.add(responses.GET, f"{BACKEND}/products", json=[{"id": "p1", "name": "Silent Genset", "sale_price_in_rupee": 75000}])
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"items": [{"product_id": "p1", "quantity": 3}]})
    r = client.get("/")
    body = r.get_data(as_text=True)
    assert r.status_code == 200
    assert "Inverters" in body
    assert "Silent Genset" in body
    assert "₹75,000" in body
    assert "data-cart-count>3<" in body
    products_call = next(c for c in backend_mock.calls if c.request.path_url.startswith("/api/products"))
    assert "limit=8" in products_call.request.url


def test_home_renders_when_backend_is_down(client):
    r = client.get("/")
    assert r.status_code == 200
    assert b"No products to show right now." in r.data


def test_about(client):
    assert b"About Gravis" in client.get("/about").data
