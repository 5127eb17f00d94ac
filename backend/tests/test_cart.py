from models.product import Product


def _ring(db_session):
    return db_session.query(Product).filter(Product.name == "Vela Stack Ring").one()


def test_cart_requires_session(client):
    assert client.get("/api/cart").status_code == 401
    assert client.post("/api/cart", json={"productId": "x"}).status_code == 401


def test_empty_cart(user_client):
    response = user_client.get("/api/cart")
    assert response.status_code == 200
    assert response.json() == []


def test_add_item_returns_hydrated_cart(user_client, stocked_product):
    response = user_client.post("/api/cart", json={"productId": stocked_product.id})
    assert response.status_code == 201
    lines = response.json()
    assert len(lines) == 1
    assert lines[0]["quantity"] == 1
    assert lines[0]["size"] is None
    assert lines[0]["product"]["id"] == stocked_product.id


def test_same_product_and_size_increments(user_client, db_session):
    ring = _ring(db_session)
    user_client.post("/api/cart", json={"productId": ring.id, "size": "7", "quantity": 2})
    lines = user_client.post("/api/cart", json={"productId": ring.id, "size": "7"}).json()
    assert len(lines) == 1
    assert lines[0]["quantity"] == 3

    lines = user_client.post("/api/cart", json={"productId": ring.id, "size": "8"}).json()
    assert len(lines) == 2


def test_add_validation(user_client, db_session):
    ring = _ring(db_session)

    missing = user_client.post("/api/cart", json={"quantity": 1})
    assert missing.status_code == 400
    assert missing.json()["message"] == "productId is required"

    unknown = user_client.post("/api/cart", json={"productId": "nope"})
    assert unknown.status_code == 404

    bad_size = user_client.post("/api/cart", json={"productId": ring.id, "size": "42"})
    assert bad_size.status_code == 400
    assert bad_size.json()["message"] == "Invalid size"

    zero = user_client.post("/api/cart", json={"productId": ring.id, "quantity": 0})
    assert zero.status_code == 400


def test_update_quantity(user_client, stocked_product):
    line = user_client.post("/api/cart", json={"productId": stocked_product.id}).json()[0]

    updated = user_client.patch(f"/api/cart/{line['id']}", json={"quantity": 4})
    assert updated.status_code == 200
    assert updated.json()[0]["quantity"] == 4

    not_a_number = user_client.patch(f"/api/cart/{line['id']}", json={"quantity": "lots"})
    assert not_a_number.status_code == 400
    assert not_a_number.json()["message"] == "quantity is required"

    removed = user_client.patch(f"/api/cart/{line['id']}", json={"quantity": 0})
    assert removed.json() == []


def test_other_users_lines_are_invisible(user_client, admin_client, stocked_product):
    line = user_client.post("/api/cart", json={"productId": stocked_product.id}).json()[0]

    response = admin_client.patch(f"/api/cart/{line['id']}", json={"quantity": 9})
    assert response.status_code == 404
    assert response.json()["message"] == "Cart item not found"

    assert admin_client.delete(f"/api/cart/{line['id']}").json() == []
    assert len(user_client.get("/api/cart").json()) == 1


def test_delete_line_and_clear(user_client, db_session, stocked_product):
    ring = _ring(db_session)
    user_client.post("/api/cart", json={"productId": stocked_product.id})
    lines = user_client.post("/api/cart", json={"productId": ring.id, "size": "6"}).json()

    remaining = user_client.delete(f"/api/cart/{lines[0]['id']}").json()
    assert len(remaining) == 1

    # Removing a missing line is not an error
    assert len(user_client.delete("/api/cart/missing").json()) == 1

    cleared = user_client.delete("/api/cart")
    assert cleared.status_code == 200
    assert cleared.json() == []
    assert user_client.get("/api/cart").json() == []


def test_quantity_upper_bound(user_client, stocked_product):
    too_many = user_client.post("/api/cart", json={"productId": stocked_product.id, "quantity": 10**20})
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Invalid cart data"

    line = user_client.post("/api/cart", json={"productId": stocked_product.id, "quantity": 10_000}).json()[0]
    overflow = user_client.post("/api/cart", json={"productId": stocked_product.id})
    assert overflow.status_code == 400
    assert overflow.json()["message"] == "Quantity must be at most 10000"

    # 1e400 parses to infinity on the server
    for raw in ("1e400", "-1e400", "10001"):
        response = user_client.patch(
            f"/api/cart/{line['id']}",
            content=f'{{"quantity": {raw}}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
    assert user_client.get("/api/cart").json()[0]["quantity"] == 10_000
