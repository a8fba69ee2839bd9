from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image

from storefront.core.auth import AuthService

API = "/api/v1/admin"
ADMIN_PASSWORD = "admin-password"


# ==================== АУТЕНТИФИКАЦИЯ ====================


def test_login_returns_token(client, admin_user):
    response = client.post(
        f"{API}/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "admin"
    assert body["user"]["last_login"] is not None

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    assert client.get(f"{API}/categories", headers=headers).status_code == 200


def test_login_by_email(client, admin_user):
    response = client.post(
        f"{API}/auth/login",
        json={"username": "admin@example.com", "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200


def test_login_wrong_password(client, admin_user):
    response = client.post(f"{API}/auth/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401


def test_login_disabled_user(client, make_user):
    make_user("sleepy", role="admin", is_active=False)

    response = client.post(
        f"{API}/auth/login", json={"username": "sleepy", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 400


def test_login_non_admin(client, make_user):
    make_user("shopper")

    response = client.post(
        f"{API}/auth/login", json={"username": "shopper", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 403


def test_admin_routes_require_token(client):
    assert client.get(f"{API}/categories").status_code in (401, 403)


def test_admin_routes_reject_regular_user(client, make_user):
    user = make_user("shopper")
    token = AuthService.create_access_token(data={"sub": user.id})

    response = client.get(f"{API}/categories", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


def test_check_users(client, make_user):
    assert client.get(f"{API}/check-users").json() == {"has_admins": False}

    make_user("admin", role="admin")

    assert client.get(f"{API}/check-users").json() == {"has_admins": True}


def test_check_role(client, admin_headers, make_user):
    user = make_user("shopper")

    response = client.get(f"{API}/check-role/{user.id}", headers=admin_headers)

    assert response.json() == {"role": "user"}
    assert client.get(f"{API}/check-role/missing", headers=admin_headers).status_code == 404


# ==================== ПОЛЬЗОВАТЕЛИ ====================


def test_list_users_and_change_role(client, admin_headers, make_user):
    user = make_user("shopper")

    listing = client.get(f"{API}/users", headers=admin_headers).json()
    assert listing["meta"]["total"] == 2

    response = client.patch(
        f"{API}/users/{user.id}/role", json={"role": "admin"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    admins = client.get(f"{API}/users", params={"role": "admin"}, headers=admin_headers).json()
    assert admins["meta"]["total"] == 2


def test_change_role_validation(client, admin_headers, make_user):
    user = make_user("shopper")

    bad = client.patch(
        f"{API}/users/{user.id}/role", json={"role": "owner"}, headers=admin_headers
    )
    missing = client.patch(
        f"{API}/users/missing/role", json={"role": "admin"}, headers=admin_headers
    )

    assert bad.status_code == 400
    assert missing.status_code == 404


# ==================== КАТЕГОРИИ ====================


def test_create_category_generates_slug(client, admin_headers):
    response = client.post(
        f"{API}/categories",
        json={"name": "Smart Home Devices", "description": "  "},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "smart-home-devices"
    assert body["description"] is None
    assert body["is_active"] is True


def test_create_category_slug_conflict(client, admin_headers, make_category):
    make_category("Audio", slug="audio")

    response = client.post(f"{API}/categories", json={"name": "Audio"}, headers=admin_headers)

    assert response.status_code == 409


def test_create_category_requires_name(client, admin_headers):
    response = client.post(f"{API}/categories", json={"name": "   "}, headers=admin_headers)

    assert response.status_code == 422


def test_update_category(client, admin_headers, make_category):
    category = make_category("Audio")
    make_category("Video", slug="video")

    ok = client.put(
        f"{API}/categories/{category.id}",
        json={"name": "Audio Gear", "is_active": False},
        headers=admin_headers,
    )
    conflict = client.put(
        f"{API}/categories/{category.id}",
        json={"name": "Audio", "slug": "video"},
        headers=admin_headers,
    )
    missing = client.put(
        f"{API}/categories/missing", json={"name": "X"}, headers=admin_headers
    )

    assert ok.status_code == 200
    assert ok.json()["slug"] == "audio-gear"
    assert ok.json()["is_active"] is False
    assert conflict.status_code == 409
    assert missing.status_code == 404


def test_list_categories_includes_inactive_newest_first(client, admin_headers, make_category):
    make_category("Old")
    make_category("New", is_active=False)

    body = client.get(f"{API}/categories", headers=admin_headers).json()

    assert [c["name"] for c in body] == ["New", "Old"]


def test_delete_category(client, admin_headers, make_category, make_product):
    empty = make_category("Empty")
    full = make_category("Full")
    make_product(full)

    assert client.delete(f"{API}/categories/{full.id}", headers=admin_headers).status_code == 409
    assert client.delete(f"{API}/categories/{empty.id}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/categories/{empty.id}", headers=admin_headers).status_code == 404


# ==================== ТОВАРЫ ====================


def test_create_product_generates_sku(client, admin_headers, make_category):
    category = make_category("Audio")

    response = client.post(
        f"{API}/products",
        json={"name": "Bass Speaker", "price": 49.5, "category_id": category.id},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["sku"].startswith("BASS-SPEAKER-")
    assert body["price"] == 49.5
    assert body["category"]["id"] == category.id


def test_create_product_validation(client, admin_headers, make_category, make_product):
    category = make_category("Audio")
    make_product(category, sku="TAKEN")

    zero_price = client.post(
        f"{API}/products",
        json={"name": "Free", "price": 0, "category_id": category.id},
        headers=admin_headers,
    )
    bad_category = client.post(
        f"{API}/products",
        json={"name": "Lost", "price": 1, "category_id": "missing"},
        headers=admin_headers,
    )
    taken_sku = client.post(
        f"{API}/products",
        json={"name": "Dup", "price": 1, "category_id": category.id, "sku": "TAKEN"},
        headers=admin_headers,
    )

    assert zero_price.status_code == 422
    assert bad_category.status_code == 400
    assert taken_sku.status_code == 409


def test_list_products_with_filters(client, admin_headers, make_category, make_product):
    audio = make_category("Audio")
    video = make_category("Video")
    make_product(audio, name="Speaker", minutes=1)
    make_product(audio, name="Old speaker", minutes=2, is_active=False)
    make_product(video, name="Camera", minutes=3)

    everything = client.get(f"{API}/products", headers=admin_headers).json()
    active_audio = client.get(
        f"{API}/products",
        params={"category": audio.id, "status": "active"},
        headers=admin_headers,
    ).json()
    searched = client.get(
        f"{API}/products", params={"search": "speak", "page_size": 1}, headers=admin_headers
    ).json()

    assert [p["name"] for p in everything["items"]] == ["Camera", "Old speaker", "Speaker"]
    assert [p["name"] for p in active_audio["items"]] == ["Speaker"]
    assert searched["meta"] == {"page": 1, "page_size": 1, "total": 2, "total_pages": 2}


def test_update_product_changes_only_given_fields(client, admin_headers, make_category, make_product):
    audio = make_category("Audio")
    video = make_category("Video")
    speaker = make_product(audio, name="Speaker", sku="SPK-1", description="Loud")

    response = client.put(
        f"{API}/products/{speaker.id}",
        json={"price": 25.5, "category_id": video.id, "is_active": False, "name": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 25.5
    assert body["category"]["id"] == video.id
    assert body["is_active"] is False
    assert body["name"] == "Speaker"
    assert body["description"] == "Loud"
    assert body["sku"] == "SPK-1"


def test_update_product_validation(client, admin_headers, make_category, make_product):
    audio = make_category("Audio")
    speaker = make_product(audio, sku="SPK-1")
    make_product(audio, sku="TAKEN")

    missing = client.put(f"{API}/products/missing", json={"price": 5}, headers=admin_headers)
    bad_category = client.put(
        f"{API}/products/{speaker.id}", json={"category_id": "missing"}, headers=admin_headers
    )
    taken_sku = client.put(
        f"{API}/products/{speaker.id}", json={"sku": "TAKEN"}, headers=admin_headers
    )
    same_sku = client.put(
        f"{API}/products/{speaker.id}", json={"sku": "SPK-1"}, headers=admin_headers
    )
    zero_price = client.put(
        f"{API}/products/{speaker.id}", json={"price": 0}, headers=admin_headers
    )

    assert missing.status_code == 404
    assert bad_category.status_code == 400
    assert taken_sku.status_code == 409
    assert same_sku.status_code == 200
    assert zero_price.status_code == 422


def test_get_and_delete_product(client, admin_headers, make_category, make_product):
    hidden = make_product(make_category("Audio"), is_active=False)

    fetched = client.get(f"{API}/products/{hidden.id}", headers=admin_headers)
    deleted = client.delete(f"{API}/products/{hidden.id}", headers=admin_headers)

    assert fetched.status_code == 200
    assert fetched.json()["is_active"] is False
    assert deleted.status_code == 200
    assert client.get(f"{API}/products/{hidden.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"{API}/products/{hidden.id}", headers=admin_headers).status_code == 404


# ==================== СЛАЙДЫ ====================


def test_create_slider_appends_to_end(client, admin_headers, make_slider):
    make_slider("First", 0)
    make_slider("Second", 4)

    response = client.post(
        f"{API}/sliders",
        json={"title": "Third", "image_url": "/static/sliders/third.webp"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["order_index"] == 5
    assert body["button_text"] == "Shop Now"


def test_create_first_slider_starts_at_zero(client, admin_headers):
    response = client.post(
        f"{API}/sliders",
        json={"title": "Hero", "image_url": "/static/hero.webp", "button_text": "Buy"},
        headers=admin_headers,
    )

    assert response.json()["order_index"] == 0
    assert response.json()["button_text"] == "Buy"


def test_create_slider_requires_title_and_image(client, admin_headers):
    no_image = client.post(f"{API}/sliders", json={"title": "Hero"}, headers=admin_headers)
    blank_title = client.post(
        f"{API}/sliders", json={"title": " ", "image_url": "/x.webp"}, headers=admin_headers
    )

    assert no_image.status_code == 422
    assert blank_title.status_code == 422


def test_list_sliders_filters_total_by_status(client, admin_headers, make_slider):
    make_slider("A", 2)
    make_slider("B", 1)
    make_slider("C", 0, is_active=False)

    active = client.get(
        f"{API}/sliders", params={"status": "active"}, headers=admin_headers
    ).json()

    assert [s["title"] for s in active["items"]] == ["B", "A"]
    assert active["meta"]["total"] == 2


def test_update_and_delete_slider(client, admin_headers, make_slider):
    slider = make_slider("Hero", 3)

    updated = client.put(
        f"{API}/sliders/{slider.id}",
        json={"title": "Hero 2", "image_url": "/static/hero2.webp", "is_active": False},
        headers=admin_headers,
    )

    assert updated.status_code == 200
    assert updated.json()["order_index"] == 3
    assert updated.json()["is_active"] is False
    assert client.delete(f"{API}/sliders/{slider.id}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/sliders/{slider.id}", headers=admin_headers).status_code == 404


# ==================== РАЙОНЫ ====================


def test_district_crud(client, admin_headers):
    created = client.post(
        f"{API}/districts", json={"name": "Dhaka", "delivery_charge": 60}, headers=admin_headers
    )
    district_id = created.json()["id"]

    updated = client.put(
        f"{API}/districts/{district_id}",
        json={"name": "Dhaka City", "delivery_charge": 80, "is_active": False},
        headers=admin_headers,
    )
    listing = client.get(f"{API}/districts", headers=admin_headers).json()
    deleted = client.delete(f"{API}/districts/{district_id}", headers=admin_headers)

    assert created.status_code == 201
    assert updated.json()["delivery_charge"] == 80.0
    assert [d["name"] for d in listing] == ["Dhaka City"]
    assert deleted.status_code == 200
    assert client.get(f"{API}/districts/{district_id}", headers=admin_headers).status_code == 404


@pytest.mark.parametrize(
    "payload", [{"name": "", "delivery_charge": 10}, {"name": "X", "delivery_charge": -1}, {"name": "X"}]
)
def test_district_validation(client, admin_headers, payload):
    assert client.post(f"{API}/districts", json=payload, headers=admin_headers).status_code == 422


# ==================== КЛИЕНТЫ ====================


def test_create_customer_defaults_country(client, admin_headers):
    response = client.post(
        f"{API}/customers",
        json={"email": "karim@example.com", "first_name": "Karim", "last_name": "Hossain"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["country"] == "Bangladesh"


def test_create_customer_duplicate_email(client, admin_headers, make_customer):
    make_customer("karim@example.com")

    response = client.post(
        f"{API}/customers",
        json={"email": "KARIM@example.com", "first_name": "K", "last_name": "H"},
        headers=admin_headers,
    )

    assert response.status_code == 409


def test_list_customers_filters(client, admin_headers, make_customer):
    make_customer("a@example.com", first_name="Ayesha", phone="01711000000")
    make_customer("b@example.com", first_name="Babul", is_active=False)

    by_phone = client.get(
        f"{API}/customers", params={"search": "01711"}, headers=admin_headers
    ).json()
    inactive = client.get(
        f"{API}/customers", params={"is_active": "false"}, headers=admin_headers
    ).json()
    future = client.get(
        f"{API}/customers", params={"start_date": "2999-01-01T00:00:00"}, headers=admin_headers
    ).json()

    assert [c["first_name"] for c in by_phone["items"]] == ["Ayesha"]
    assert [c["first_name"] for c in inactive["items"]] == ["Babul"]
    assert future["meta"]["total"] == 0


def test_get_customer_with_orders(client, admin_headers, make_customer, make_order):
    customer = make_customer("a@example.com")
    make_order(customer, total="100.00")
    make_order(customer, total="250.00")

    body = client.get(f"{API}/customers/{customer.id}", headers=admin_headers).json()

    assert [o["total_amount"] for o in body["orders"]] == [250.0, 100.0]
    assert client.get(f"{API}/customers/missing", headers=admin_headers).status_code == 404


def test_patch_customer_is_partial(client, admin_headers, make_customer):
    customer = make_customer("a@example.com", city="Dhaka")
    make_customer("taken@example.com")

    ok = client.patch(
        f"{API}/customers/{customer.id}", json={"phone": "01800000000"}, headers=admin_headers
    )
    conflict = client.patch(
        f"{API}/customers/{customer.id}", json={"email": "taken@example.com"}, headers=admin_headers
    )

    assert ok.status_code == 200
    assert ok.json()["phone"] == "01800000000"
    assert ok.json()["city"] == "Dhaka"
    assert conflict.status_code == 409


def test_delete_customer_with_orders_deactivates(client, admin_headers, make_customer, make_order):
    buyer = make_customer("buyer@example.com")
    make_order(buyer)
    browser = make_customer("browser@example.com")

    deactivated = client.delete(f"{API}/customers/{buyer.id}", headers=admin_headers).json()
    deleted = client.delete(f"{API}/customers/{browser.id}", headers=admin_headers).json()

    assert deactivated["deactivated"] is True
    assert client.get(f"{API}/customers/{buyer.id}", headers=admin_headers).json()["is_active"] is False
    assert deleted["deactivated"] is False
    assert client.get(f"{API}/customers/{browser.id}", headers=admin_headers).status_code == 404


# ==================== ДАШБОРД И ЗАГРУЗКИ ====================


def test_dashboard(client, admin_headers, make_category, make_product, make_slider):
    audio = make_category("Audio")
    make_category("Empty")
    make_product(audio, price="10.00", stock_quantity=0)
    make_product(audio, price="30.00", stock_quantity=5)
    make_product(audio, price="99.00", stock_quantity=50, is_active=False)
    make_slider("Hero", 0)
    make_slider("Old", 1, is_active=False)

    body = client.get(f"{API}/dashboard", params={"period": 7}, headers=admin_headers).json()

    assert body["overview"]["total_products"] == 3
    assert body["overview"]["total_categories"] == 2
    assert body["products"]["by_status"] == {"active": 2, "inactive": 1}
    assert body["products"]["inventory"] == {
        "total_stock": 55,
        "low_stock_count": 1,
        "out_of_stock_count": 1,
    }
    assert body["products"]["pricing"] == {
        "average_price": 20.0,
        "highest_price": 30.0,
        "lowest_price": 10.0,
    }
    assert body["sliders"] == {"active": 1, "inactive": 1}
    assert body["period"]["days"] == 7
    counts = {c["name"]: c["product_count"] for c in body["categories"]}
    assert counts == {"Audio": 3, "Empty": 0}


def test_upload_image_stores_optimized_file(client, admin_headers, storage):
    buffer = BytesIO()
    Image.new("RGB", (800, 600), "blue").save(buffer, format="PNG")

    response = client.post(
        f"{API}/uploads",
        files={"file": ("hero.png", buffer.getvalue(), "image/png")},
        data={"folder": "sliders"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["path"].startswith("sliders/")
    assert body["path"].endswith("_hero.webp")
    assert body["mime_type"] == "image/webp"
    assert body["url"] == f"/static/{body['path']}"
    assert storage.file_exists(body["path"])


def test_upload_rejects_unsupported_extension(client, admin_headers):
    response = client.post(
        f"{API}/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_dashboard_counts_orders_districts_and_features(
    client, admin_headers, make_customer, make_order, make_district, make_feature
):
    buyer = make_customer("buyer@example.com")
    make_order(buyer, status="pending")
    make_order(buyer, status="pending")
    make_order(None, status="delivered")
    make_district("Dhaka")
    make_district("Closed", is_active=False)
    make_feature("Free delivery", 0)

    body = client.get(f"{API}/dashboard", headers=admin_headers).json()

    orders = body["orders"]
    assert orders["total"] == 3
    assert orders["pending"] == 2
    assert orders["by_status"]["delivered"] == 1
    assert orders["by_status"]["cancelled"] == 0
    assert orders["total_customers"] == 1
    assert body["districts"] == {"active": 1, "inactive": 1}
    assert body["promotional_features"] == {"active": 1, "inactive": 0}


# ==================== ЗАКАЗЫ ====================


def order_payload(product_id, quantity=2, district="Dhaka", **overrides):
    payload = {
        "customer_name": "Rahim Uddin",
        "customer_phone": "01711000000",
        "customer_email": "Buyer@Example.com",
        "shipping_address": {"line_1": "House 1, Road 2", "city": "Dhaka", "district": district},
        "items": [{"product_id": product_id, "quantity": quantity}],
        "payment_method": "cod",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def speaker(make_category, make_product, make_district):
    make_district("Dhaka", "60.00")
    return make_product(
        make_category("Audio"),
        name="Speaker",
        sku="SPK-1",
        price="50.00",
        sale_price=Decimal("40.00"),
        stock_quantity=5,
    )


def test_create_order_snapshots_prices_and_takes_stock(
    client, admin_headers, speaker, make_customer
):
    buyer = make_customer("buyer@example.com")

    response = client.post(f"{API}/orders", json=order_payload(speaker.id), headers=admin_headers)

    assert response.status_code == 201
    order = response.json()
    assert order["order_number"].startswith("ORD-")
    assert order["status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["shipping_cost"] == 60.0
    assert order["total_amount"] == 140.0
    assert order["shipping_country"] == "Bangladesh"
    assert order["customer_id"] == buyer.id
    assert order["customer"]["email"] == "buyer@example.com"
    item = order["items"][0]
    assert (item["product_sku"], item["quantity"], item["unit_price"], item["total_price"]) == (
        "SPK-1", 2, 40.0, 80.0
    )

    product = client.get(f"{API}/products/{speaker.id}", headers=admin_headers).json()
    assert product["stock_quantity"] == 3


def test_create_order_validation(client, admin_headers, speaker):
    unknown_district = client.post(
        f"{API}/orders", json=order_payload(speaker.id, district="Mars"), headers=admin_headers
    )
    too_many = client.post(
        f"{API}/orders", json=order_payload(speaker.id, quantity=6), headers=admin_headers
    )
    unknown_product = client.post(
        f"{API}/orders", json=order_payload("missing"), headers=admin_headers
    )
    no_items = client.post(
        f"{API}/orders", json=order_payload(speaker.id, items=[]), headers=admin_headers
    )

    assert unknown_district.status_code == 400
    assert unknown_district.json()["detail"] == "District not found: Mars"
    assert too_many.status_code == 400
    assert too_many.json()["detail"] == "Insufficient stock for Speaker"
    assert unknown_product.status_code == 400
    assert no_items.status_code == 422

    product = client.get(f"{API}/products/{speaker.id}", headers=admin_headers).json()
    assert product["stock_quantity"] == 5


def test_list_orders_with_filters(client, admin_headers, make_customer, make_order):
    ayesha = make_customer("ayesha@example.com", first_name="Ayesha")
    babul = make_customer("babul@example.com", first_name="Babul")
    make_order(ayesha, status="pending")
    make_order(ayesha, status="shipped", payment_status="paid")
    make_order(babul, status="pending")

    everything = client.get(f"{API}/orders", headers=admin_headers).json()
    pending = client.get(
        f"{API}/orders", params={"status": "pending", "page_size": 1}, headers=admin_headers
    ).json()
    paid = client.get(
        f"{API}/orders", params={"payment_status": "paid"}, headers=admin_headers
    ).json()
    by_email = client.get(
        f"{API}/orders", params={"search": "BABUL@"}, headers=admin_headers
    ).json()
    future = client.get(
        f"{API}/orders", params={"start_date": "2999-01-01T00:00:00"}, headers=admin_headers
    ).json()

    assert [o["order_number"] for o in everything["items"]] == [
        "ORD-00003", "ORD-00002", "ORD-00001"
    ]
    assert pending["meta"] == {"page": 1, "page_size": 1, "total": 2, "total_pages": 2}
    assert [o["order_number"] for o in paid["items"]] == ["ORD-00002"]
    assert [o["customer_email"] for o in by_email["items"]] == ["babul@example.com"]
    assert future["meta"]["total"] == 0


def test_get_order_detail(client, admin_headers, speaker):
    created = client.post(
        f"{API}/orders", json=order_payload(speaker.id), headers=admin_headers
    ).json()

    detail = client.get(f"{API}/orders/{created['id']}", headers=admin_headers)

    assert detail.status_code == 200
    assert len(detail.json()["items"]) == 1
    assert detail.json()["customer"] is None
    assert client.get(f"{API}/orders/missing", headers=admin_headers).status_code == 404


def test_update_order_status(client, admin_headers, make_order):
    order = make_order(None, notes="call first")

    response = client.patch(
        f"{API}/orders/{order.id}",
        json={
            "status": "shipped",
            "payment_status": "paid",
            "shipping_address": {"line_1": "New street 5", "city": "Sylhet", "district": "Sylhet"},
        },
        headers=admin_headers,
    )
    bad_status = client.patch(
        f"{API}/orders/{order.id}", json={"status": "lost"}, headers=admin_headers
    )
    bad_payment = client.patch(
        f"{API}/orders/{order.id}", json={"payment_status": "refunded"}, headers=admin_headers
    )
    missing = client.patch(
        f"{API}/orders/missing", json={"status": "shipped"}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "shipped"
    assert body["payment_status"] == "paid"
    assert body["shipping_city"] == "Sylhet"
    assert body["shipping_country"] == "Bangladesh"
    assert body["notes"] == "call first"
    assert bad_status.status_code == 400
    assert bad_payment.status_code == 400
    assert missing.status_code == 404


def test_cancel_order_restores_stock_once(client, admin_headers, speaker):
    order = client.post(
        f"{API}/orders", json=order_payload(speaker.id, quantity=3), headers=admin_headers
    ).json()

    first = client.delete(f"{API}/orders/{order['id']}", headers=admin_headers)
    second = client.delete(f"{API}/orders/{order['id']}", headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["order"]["status"] == "cancelled"
    assert second.status_code == 200
    product = client.get(f"{API}/products/{speaker.id}", headers=admin_headers).json()
    assert product["stock_quantity"] == 5


def test_cancel_order_in_progress_is_rejected(client, admin_headers, make_order):
    shipped = make_order(None, status="shipped")

    response = client.delete(f"{API}/orders/{shipped.id}", headers=admin_headers)

    assert response.status_code == 400
    assert client.delete(f"{API}/orders/missing", headers=admin_headers).status_code == 404


# ==================== ПРОМО-БЛОКИ ====================


def test_promotional_feature_crud(client, admin_headers, make_feature):
    make_feature("Warranty", 3)

    created = client.post(
        f"{API}/promotional-features",
        json={"title": "Free delivery", "icon_name": "truck"},
        headers=admin_headers,
    )
    feature_id = created.json()["id"]
    updated = client.put(
        f"{API}/promotional-features/{feature_id}",
        json={"is_active": False, "title": None},
        headers=admin_headers,
    )
    listing = client.get(f"{API}/promotional-features", headers=admin_headers).json()
    deleted = client.delete(f"{API}/promotional-features/{feature_id}", headers=admin_headers)

    assert created.status_code == 201
    assert created.json()["display_order"] == 4
    assert updated.json()["is_active"] is False
    assert updated.json()["title"] == "Free delivery"
    assert [f["title"] for f in listing] == ["Warranty", "Free delivery"]
    assert deleted.status_code == 200
    assert (
        client.delete(f"{API}/promotional-features/{feature_id}", headers=admin_headers).status_code
        == 404
    )


def test_promotional_feature_requires_title(client, admin_headers):
    response = client.post(
        f"{API}/promotional-features", json={"title": "  "}, headers=admin_headers
    )

    assert response.status_code == 422
