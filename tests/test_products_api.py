"""HTTP layer for /api/products."""

import uuid


def test_list_envelope(client, product_factory):
    product_factory(name="Phone", brand="Samsung", cat_id="electronics", ram=["8GB"])

    response = client.get("/api/products", params={"catId": "electronics", "limit": "5"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["error"] is False
    assert body["message"] == "Products retrieved successfully"
    assert body["data"][0]["name"] == "Phone"
    assert body["data"][0]["countInStock"] == 10
    assert body["pagination"]["limit"] == 5
    assert body["availableFilters"]["ramOptions"] == ["8GB"]
    assert body["appliedFilters"]["catId"] == "electronics"


def test_list_empty_is_ok(client):
    response = client.get("/api/products", params={"search": "nothing"})

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_featured_route_not_shadowed_by_id(client, product_factory):
    product_factory(name="Star", is_featured=True)

    response = client.get("/api/products/featured")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]] == ["Star"]


def test_featured_bad_limit(client):
    response = client.get("/api/products/featured", params={"limit": "100"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid limit. Must be between 1 and 50"


def test_get_by_id(client, product_factory):
    product = product_factory(name="Item", locations=["Krakow"], images=["https://cdn/a.jpg"])

    response = client.get(f"/api/products/{product.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["location"] == [{"value": "Krakow", "label": "Krakow"}]
    assert data["images"][0]["publicId"] == "img-0"


def test_get_by_id_errors(client):
    assert client.get("/api/products/xyz").status_code == 400
    assert client.get(f"/api/products/{uuid.uuid4()}").status_code == 404


def test_by_sub_cat_id(client, product_factory):
    product_factory(name="Sneaker", sub_cat_id="shoes")

    response = client.get("/api/products/subCatId/shoes")

    assert response.status_code == 200
    assert response.json()["appliedFilters"]["subCatId"] == "shoes"


def test_by_third_sub_cat_id_not_found(client):
    response = client.get("/api/products/thirdSubCatId/unknown")

    assert response.status_code == 404
    assert response.json()["message"] == "No products found for thirdSubCatId: unknown"


def test_by_category(client, product_factory):
    category_id = uuid.uuid4()
    product_factory(category_id=category_id)

    response = client.get(f"/api/products/category/{category_id}")

    assert response.status_code == 200
    assert response.json()["pagination"]["totalProducts"] == 1
    assert client.get("/api/products/category/bad").status_code == 400


def test_huge_page_returns_empty_page(client, product_factory):
    product_factory()

    response = client.get("/api/products", params={"page": "99999999999999999999"})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["pagination"]["totalProducts"] == 1
    assert body["pagination"]["hasNextPage"] is False


def test_featured_includes_count(client, product_factory):
    product_factory(name="A", is_featured=True)
    product_factory(name="B", is_featured=True)

    body = client.get("/api/products/featured").json()

    assert body["count"] == 2
    assert len(body["data"]) == 2
