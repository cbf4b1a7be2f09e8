"""HTTP layer for /api/cart."""

import uuid


def add(client, headers, product, quantity=1):
    return client.post(
        "/api/cart/create",
        json={"productId": str(product.id), "quantity": quantity},
        headers=headers,
    )


def test_create_then_merge(client, auth_headers, product_factory):
    product = product_factory(stock=10)

    first = add(client, auth_headers, product, 2)
    second = add(client, auth_headers, product, 3)

    assert first.status_code == 201
    assert first.json()["message"] == "Item added to cart successfully"
    assert second.status_code == 200
    assert second.json()["message"] == "Cart item quantity updated successfully"
    assert second.json()["data"]["quantity"] == 5


def test_create_out_of_stock(client, auth_headers, product_factory):
    response = add(client, auth_headers, product_factory(stock=0))

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": True,
        "message": "Product is out of stock",
        "availableStock": 0,
    }


def test_create_invalid_quantity(client, auth_headers, product_factory):
    response = add(client, auth_headers, product_factory(), quantity=0)

    assert response.status_code == 400
    assert response.json()["message"] == "Quantity must be an integer between 1 and 100"


def test_create_without_body(client, auth_headers):
    response = client.post("/api/cart/create", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


def test_get_cart(client, auth_headers, product_factory):
    add(client, auth_headers, product_factory(), 2)

    body = client.get("/api/cart", headers=auth_headers).json()

    assert body["message"] == "Cart items retrieved successfully"
    assert body["data"]["summary"]["totalQuantity"] == 2
    assert body["data"]["alerts"] == {"stockIssues": None, "priceChanges": None}


def test_update_quantity_routes(client, auth_headers, product_factory):
    item_id = add(client, auth_headers, product_factory(), 1).json()["data"]["id"]

    put = client.put(f"/api/cart/update-quantity/{item_id}", json={"quantity": 3}, headers=auth_headers)
    assert put.json()["message"] == "Cart quantity updated successfully"
    assert put.json()["data"]["changes"]["newQuantity"] == 3

    patch = client.patch(f"/api/cart/{item_id}/quantity", json={"quantity": 3}, headers=auth_headers)
    assert patch.status_code == 200
    assert patch.json()["message"] == "Quantity is already set to this value"


def test_increment_decrement(client, auth_headers, product_factory):
    item_id = add(client, auth_headers, product_factory(stock=2), 1).json()["data"]["id"]

    assert client.patch(f"/api/cart/{item_id}/increment", headers=auth_headers).status_code == 200
    over = client.patch(f"/api/cart/{item_id}/increment", headers=auth_headers)
    assert over.status_code == 400
    assert over.json()["availableStock"] == 2

    assert client.patch(f"/api/cart/{item_id}/decrement", headers=auth_headers).json()["data"]["quantity"] == 1
    under = client.patch(f"/api/cart/{item_id}/decrement", headers=auth_headers)
    assert under.status_code == 400
    assert under.json()["suggestion"] == "Use DELETE /api/cart/:id to remove this item"


def test_delete_item(client, auth_headers, product_factory):
    item_id = add(client, auth_headers, product_factory(), 1).json()["data"]["id"]

    response = client.delete(f"/api/cart/{item_id}", headers=auth_headers)

    assert response.json()["message"] == "Cart item deleted successfully"
    assert client.delete(f"/api/cart/{item_id}", headers=auth_headers).status_code == 404


def test_delete_batch(client, auth_headers, product_factory):
    ids = [add(client, auth_headers, product_factory(name=f"P{i}")).json()["data"]["id"] for i in range(2)]

    response = client.request("DELETE", "/api/cart/batch", json={"cartItemIds": ids}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "2 cart item(s) deleted successfully"


def test_delete_batch_invalid_ids(client, auth_headers):
    response = client.request(
        "DELETE", "/api/cart/batch", json={"cartItemIds": ["nope"]}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["invalidIds"] == ["nope"]


def test_clear_with_status(client, auth_headers, product_factory):
    item_id = add(client, auth_headers, product_factory()).json()["data"]["id"]
    client.patch(f"/api/cart/{item_id}/save-for-later", headers=auth_headers)

    response = client.delete("/api/cart/clear", params={"status": "saved_for_later"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "SAVED FOR LATER cart items cleared successfully"


def test_clear_all_message(client, auth_headers, product_factory):
    add(client, auth_headers, product_factory())

    response = client.delete("/api/cart/clear", headers=auth_headers)

    assert response.json()["message"] == "All cart items cleared successfully"
    assert client.delete("/api/cart/clear", headers=auth_headers).status_code == 404


def test_save_for_later_and_move_back(client, auth_headers, product_factory):
    item_id = add(client, auth_headers, product_factory()).json()["data"]["id"]

    saved = client.patch(f"/api/cart/{item_id}/save-for-later", headers=auth_headers)
    again = client.patch(f"/api/cart/{item_id}/save-for-later", headers=auth_headers)
    moved = client.patch(f"/api/cart/{item_id}/move-to-cart", headers=auth_headers)

    assert saved.json()["data"]["status"] == "saved_for_later"
    assert again.status_code == 400
    assert moved.json()["message"] == "Item moved to cart successfully"


def test_other_users_item_is_not_found(client, user_factory, auth_headers, product_factory):
    from tests.conftest import make_token

    item_id = add(client, auth_headers, product_factory()).json()["data"]["id"]
    other = {"Authorization": f"Bearer {make_token(user_factory().id)}"}

    assert client.delete(f"/api/cart/{item_id}", headers=other).status_code == 404
    assert client.patch(f"/api/cart/{uuid.uuid4()}/increment", headers=other).status_code == 404


def test_reconcile(client, auth_headers, product_factory):
    add(client, auth_headers, product_factory())

    response = client.post("/api/cart/reconcile", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"added": [], "removed": [], "total": 1}
