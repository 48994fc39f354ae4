from __future__ import annotations

import uuid

import pytest

from catalog_api.models.image import Image
from catalog_api.models.product import Product

NEW_PRODUCT = {
    "name": "Gadget",
    "description": "Does gadget things",
    "sku": "GAD-100",
    "manufacturer": "Globex",
    "quantity": 50,
}


def test_create_product_sets_owner(client, users, auth_headers):
    user_a, _ = users
    res = client.post("/v1/product", json=NEW_PRODUCT, headers=auth_headers(user_a.email))

    assert res.status_code == 201
    body = res.json()
    assert body["owner_user_id"] == user_a.id
    assert body["quantity"] == 50
    assert uuid.UUID(body["id"]).version == 4


def test_create_product_defaults_quantity_to_zero(client, users, auth_headers):
    user_a, _ = users
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != "quantity"}
    res = client.post("/v1/product", json=payload, headers=auth_headers(user_a.email))
    assert res.status_code == 201
    assert res.json()["quantity"] == 0


def test_create_product_requires_auth(client):
    res = client.post("/v1/product", json=NEW_PRODUCT)
    assert res.status_code == 401


@pytest.mark.parametrize("quantity", [-1, 101, "5", 2.5])
def test_create_product_rejects_bad_quantity(client, users, auth_headers, quantity):
    user_a, _ = users
    res = client.post("/v1/product", json={**NEW_PRODUCT, "quantity": quantity}, headers=auth_headers(user_a.email))
    assert res.status_code == 422


def test_create_product_rejects_owner_override(client, users, auth_headers):
    user_a, user_b = users
    res = client.post(
        "/v1/product",
        json={**NEW_PRODUCT, "owner_user_id": user_b.id},
        headers=auth_headers(user_a.email),
    )
    assert res.status_code == 422


def test_duplicate_sku_is_409(client, users, product, auth_headers):
    _, user_b = users
    res = client.post("/v1/product", json={**NEW_PRODUCT, "sku": product.sku}, headers=auth_headers(user_b.email))
    assert res.status_code == 409
    assert res.json()["message"] == "Product with this SKU already exists"


def test_get_product_is_public(client, product):
    res = client.get(f"/v1/product/{product.id}")
    assert res.status_code == 200
    assert res.json()["sku"] == "WID-001"


def test_get_product_bad_id_and_missing(client, db_session):
    assert client.get("/v1/product/123").status_code == 400
    assert client.get(f"/v1/product/{uuid.uuid4()}").status_code == 404


def test_put_replaces_all_fields(client, db_session, users, product, auth_headers):
    user_a, _ = users
    res = client.put(f"/v1/product/{product.id}", json=NEW_PRODUCT, headers=auth_headers(user_a.email))
    assert res.status_code == 204

    db_session.expire_all()
    fresh = db_session.get(Product, product.id)
    assert fresh.name == "Gadget"
    assert fresh.sku == "GAD-100"
    assert fresh.quantity == 50
    assert fresh.owner_user_id == user_a.id


def test_put_requires_all_fields(client, users, product, auth_headers):
    user_a, _ = users
    res = client.put(f"/v1/product/{product.id}", json={"name": "Only"}, headers=auth_headers(user_a.email))
    assert res.status_code == 422


def test_put_keeping_own_sku_is_fine(client, users, product, auth_headers):
    user_a, _ = users
    res = client.put(
        f"/v1/product/{product.id}",
        json={**NEW_PRODUCT, "sku": product.sku},
        headers=auth_headers(user_a.email),
    )
    assert res.status_code == 204


def test_patch_changes_one_field(client, db_session, users, product, auth_headers):
    user_a, _ = users
    res = client.patch(f"/v1/product/{product.id}", json={"quantity": 99}, headers=auth_headers(user_a.email))
    assert res.status_code == 204

    db_session.expire_all()
    fresh = db_session.get(Product, product.id)
    assert fresh.quantity == 99
    assert fresh.name == "Widget"


def test_patch_sku_collision_is_409(client, db_session, users, product, auth_headers):
    user_a, _ = users
    other = Product(
        name="Other",
        description="Other product",
        sku="OTH-1",
        manufacturer="Acme",
        owner_user_id=user_a.id,
    )
    db_session.add(other)
    db_session.commit()

    res = client.patch(f"/v1/product/{product.id}", json={"sku": "OTH-1"}, headers=auth_headers(user_a.email))
    assert res.status_code == 409


def test_patch_rejects_empty_and_immutable(client, users, product, auth_headers):
    user_a, _ = users
    headers = auth_headers(user_a.email)

    assert client.patch(f"/v1/product/{product.id}", json={}, headers=headers).status_code == 400
    assert client.patch(f"/v1/product/{product.id}", json={"quantity": None}, headers=headers).status_code == 422
    assert client.patch(f"/v1/product/{product.id}", json={"date_added": "2020-01-01"}, headers=headers).status_code == 422


def test_delete_product_removes_row_images_and_objects(client, db_session, users, product, auth_headers, fake_s3):
    user_a, _ = users
    fake_s3.objects["users/a/products/p/one.png"] = b"x"
    db_session.add(
        Image(
            product_id=product.id,
            owner_user_id=user_a.id,
            file_name="one.png",
            s3_bucket_path="users/a/products/p/one.png",
        )
    )
    db_session.commit()

    res = client.delete(f"/v1/product/{product.id}", headers=auth_headers(user_a.email))
    assert res.status_code == 204

    db_session.expire_all()
    assert db_session.get(Product, product.id) is None
    assert db_session.query(Image).count() == 0
    assert fake_s3.deleted == ["users/a/products/p/one.png"]


def test_delete_product_with_body_is_400(client, users, product, auth_headers):
    user_a, _ = users
    res = client.request(
        "DELETE",
        f"/v1/product/{product.id}",
        content=b'{"force": true}',
        headers={**auth_headers(user_a.email), "Content-Type": "application/json"},
    )
    assert res.status_code == 400
