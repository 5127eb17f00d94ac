from models.order import Order
from models.product import Product
from models.users import User
from routes import orders as orders_routes
from routes.orders import shipping_cost


def _stock(db_session, product_id):
    db_session.expire_all()
    return db_session.get(Product, product_id)


def test_order_requires_session(client, checkout_payload, stocked_product):
    response = client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 1}],
    ))
    assert response.status_code == 401


def test_create_order_from_items(user_client, db_session, stocked_product, checkout_payload):
    price, start = stocked_product.price, stocked_product.stock_quantity

    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 2, "size": stocked_product.sizes[2]}],
        totalAmount=1,
    ))
    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "pending"
    assert order["shippingCost"] == 10_000_000
    assert order["subtotal"] == price * 2
    assert order["totalAmount"] == price * 2 + 10_000_000
    assert order["isPreOrder"] is False
    assert order["items"][0]["productName"] == stocked_product.name
    assert order["items"][0]["size"] == stocked_product.sizes[2]

    assert _stock(db_session, stocked_product.id).stock_quantity == start - 2


def test_create_order_from_cart_clears_it(user_client, db_session, stocked_product, checkout_payload):
    user_client.post("/api/cart", json={"productId": stocked_product.id, "quantity": 3})

    response = user_client.post("/api/orders", json=checkout_payload())
    assert response.status_code == 201
    assert response.json()["items"][0]["quantity"] == 3
    assert user_client.get("/api/cart").json() == []


def test_empty_cart_is_rejected(user_client, checkout_payload):
    response = user_client.post("/api/orders", json=checkout_payload())
    assert response.status_code == 400
    assert response.json()["message"] == "Cart is empty"


def test_invalid_checkout_body(user_client, checkout_payload, stocked_product):
    response = user_client.post("/api/orders", json=checkout_payload(
        customerPhone="123",
        items=[{"productId": stocked_product.id}],
    ))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid order data"


def test_unknown_product(user_client, checkout_payload):
    response = user_client.post("/api/orders", json=checkout_payload(items=[{"productId": "ghost"}]))
    assert response.status_code == 404


def test_insufficient_stock_returns_409(user_client, db_session, stocked_product, checkout_payload):
    stocked_product.stock_quantity = 1
    db_session.commit()

    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 2}],
    ))
    assert response.status_code == 409
    assert response.json()["message"] == f"Insufficient stock for {stocked_product.name}"
    assert _stock(db_session, stocked_product.id).stock_quantity == 1
    assert db_session.query(Order).count() == 0


def test_failed_item_rolls_back_earlier_items(user_client, db_session, checkout_payload):
    first, second = (
        db_session.query(Product).filter(Product.is_pre_order == False).order_by(Product.name).limit(2).all()  # noqa: E712
    )
    second.stock_quantity = 0
    second.in_stock = False
    db_session.commit()

    response = user_client.post("/api/orders", json=checkout_payload(items=[
        {"productId": first.id, "quantity": 1},
        {"productId": second.id, "quantity": 1},
    ]))
    assert response.status_code == 409
    assert _stock(db_session, first.id).stock_quantity == 100


def test_selling_out_marks_product_unavailable(user_client, db_session, stocked_product, checkout_payload):
    stocked_product.stock_quantity = 2
    db_session.commit()

    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 2}],
    ))
    assert response.status_code == 201
    product = _stock(db_session, stocked_product.id)
    assert product.stock_quantity == 0
    assert product.in_stock is False


def test_pre_order_skips_stock(user_client, db_session, pre_order_product, checkout_payload):
    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": pre_order_product.id, "quantity": 500}],
    ))
    assert response.status_code == 201
    assert response.json()["isPreOrder"] is True
    assert _stock(db_session, pre_order_product.id).stock_quantity == 100


def test_duplicate_idempotency_key_returns_original(user_client, db_session, stocked_product, checkout_payload):
    body = checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 1}],
        idempotencyKey="checkout-42",
    )
    first = user_client.post("/api/orders", json=body)
    second = user_client.post("/api/orders", json=body)

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert db_session.query(Order).count() == 1
    assert _stock(db_session, stocked_product.id).stock_quantity == 99


def test_idempotency_key_header(user_client, stocked_product, checkout_payload):
    body = checkout_payload(items=[{"productId": stocked_product.id, "quantity": 1}])
    headers = {"Idempotency-Key": "hdr-1"}
    first = user_client.post("/api/orders", json=body, headers=headers)
    second = user_client.post("/api/orders", json=body, headers=headers)
    assert second.json()["id"] == first.json()["id"]


def test_idempotency_key_of_another_user(user_client, make_client, stocked_product, checkout_payload):
    body = checkout_payload(items=[{"productId": stocked_product.id, "quantity": 1}], idempotencyKey="shared")
    assert user_client.post("/api/orders", json=body).status_code == 201

    other = make_client()
    other.post("/api/auth/register", json={"name": "Tono", "email": "tono@example.com", "password": "pw"})
    assert other.post("/api/orders", json=body).status_code == 409


def test_paid_order_is_processing(user_client, stocked_product, checkout_payload):
    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 1}],
        paymentStatus="paid",
        transactionId="txn_1",
    ))
    order = response.json()
    assert order["status"] == "processing"
    assert order["transactionId"] == "txn_1"


def test_shipping_cost_rules():
    assert shipping_cost("instant", 0) == 25_000_000
    assert shipping_cost("express", 0) == 10_000_000
    assert shipping_cost("prioritize", 0) == 0
    assert shipping_cost("free", 999_999_999) == 10_000_000
    assert shipping_cost("free", 1_000_000_000) == 0


def test_free_shipping_over_threshold(user_client, db_session, checkout_payload):
    ring = db_session.query(Product).filter(Product.name == "Vela Stack Ring").one()
    response = user_client.post("/api/orders", json=checkout_payload(
        shippingType="free",
        items=[{"productId": ring.id, "quantity": 10}],
    ))
    order = response.json()
    assert order["shippingCost"] == 0
    assert order["totalAmount"] == ring.price * 10


def test_order_visibility(user_client, admin_client, make_client, stocked_product, checkout_payload):
    order = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 1}],
    )).json()
    url = f"/api/orders/{order['id']}"

    assert user_client.get(url).status_code == 200
    assert admin_client.get(url).status_code == 200

    stranger = make_client()
    stranger.post("/api/auth/register", json={"name": "Joko", "email": "joko@example.com", "password": "pw"})
    response = stranger.get(url)
    assert response.status_code == 404
    assert response.json()["message"] == "Order not found"


def test_admin_lists_orders(user_client, admin_client, stocked_product, checkout_payload):
    user_client.post("/api/orders", json=checkout_payload(items=[{"productId": stocked_product.id}]))
    user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id}], paymentStatus="paid",
    ))

    assert user_client.get("/api/orders").status_code == 403
    assert len(admin_client.get("/api/orders").json()) == 2
    processing = admin_client.get("/api/orders", params={"status": "processing"}).json()
    assert [o["status"] for o in processing] == ["processing"]


def test_user_order_history(user_client, admin_client, stocked_product, checkout_payload):
    user_client.post("/api/orders", json=checkout_payload(items=[{"productId": stocked_product.id}]))
    history = user_client.get("/api/user/orders")
    assert history.status_code == 200
    assert len(history.json()) == 1
    assert admin_client.get("/api/user/orders").json() == []


def test_status_update_validation(user_client, admin_client, stocked_product, checkout_payload):
    order = user_client.post("/api/orders", json=checkout_payload(items=[{"productId": stocked_product.id}])).json()
    url = f"/api/orders/{order['id']}/status"

    assert user_client.patch(url, json={"status": "completed"}).status_code == 403
    bad = admin_client.patch(url, json={"status": "shipped"})
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid status"
    assert admin_client.patch("/api/orders/ghost/status", json={"status": "completed"}).status_code == 404

    done = admin_client.patch(url, json={"status": "completed"})
    assert done.status_code == 200
    assert done.json()["status"] == "completed"
    assert admin_client.patch(url, json={"status": "cancelled"}).status_code == 400


def test_cancelling_restores_stock(user_client, admin_client, db_session, stocked_product, checkout_payload):
    order = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 5}],
    )).json()
    assert _stock(db_session, stocked_product.id).stock_quantity == 95

    response = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "cancelled"})
    assert response.status_code == 200
    assert _stock(db_session, stocked_product.id).stock_quantity == 100


def test_size_must_belong_to_product(user_client, db_session, stocked_product, checkout_payload):
    start = stocked_product.stock_quantity
    response = user_client.post("/api/orders", json=checkout_payload(items=[
        {"productId": stocked_product.id, "quantity": 1, "size": stocked_product.sizes[0]},
        {"productId": stocked_product.id, "quantity": 1, "size": "42"},
    ]))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid size"
    assert _stock(db_session, stocked_product.id).stock_quantity == start
    assert db_session.query(Order).count() == 0


def test_line_quantity_is_bounded(user_client, db_session, stocked_product, checkout_payload):
    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 10**20}],
    ))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid order data"
    assert db_session.query(Order).count() == 0


def _insert_competing_order(monkeypatch, db_session, owner_email, key):
    """Commit an order with ``key`` right after the route's own lookup misses."""
    real_find = orders_routes._find_by_key
    calls = []

    def find_after_competitor(db, lookup_key):
        calls.append(lookup_key)
        if len(calls) > 1:
            return real_find(db, lookup_key)
        owner = db_session.query(User).filter(User.email == owner_email).one()
        db_session.add(Order(
            user_id=owner.id,
            customer_name=owner.name,
            customer_email=owner.email,
            customer_phone="081234567890",
            shipping_address="Jl. Melati No. 5",
            shipping_city="Jakarta",
            shipping_postal_code="12345",
            shipping_country="Indonesia",
            total_amount=0,
            idempotency_key=lookup_key,
        ))
        db_session.commit()
        return None

    monkeypatch.setattr(orders_routes, "_find_by_key", find_after_competitor)


def test_concurrent_key_returns_winner(user_client, db_session, monkeypatch, stocked_product, checkout_payload):
    start = stocked_product.stock_quantity
    _insert_competing_order(monkeypatch, db_session, "siti@example.com", "race-1")

    response = user_client.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 3}],
        idempotencyKey="race-1",
    ))
    assert response.status_code == 200
    winner = db_session.query(Order).filter(Order.idempotency_key == "race-1").one()
    assert response.json()["id"] == winner.id
    assert db_session.query(Order).count() == 1
    assert _stock(db_session, stocked_product.id).stock_quantity == start


def test_concurrent_key_of_another_user(user_client, make_client, db_session, monkeypatch,
                                        stocked_product, checkout_payload):
    other = make_client()
    other.post("/api/auth/register", json={"name": "Tono", "email": "tono@example.com", "password": "pw"})
    _insert_competing_order(monkeypatch, db_session, "siti@example.com", "race-2")

    response = other.post("/api/orders", json=checkout_payload(
        items=[{"productId": stocked_product.id, "quantity": 1}],
        idempotencyKey="race-2",
    ))
    assert response.status_code == 409
    assert response.json()["message"] == "Idempotency key already used"
    assert db_session.query(Order).count() == 1
