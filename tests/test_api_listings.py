import json
from datetime import date

import pytest

from tests.conftest import JPEG_BYTES, auth, register


def _listing(**overrides):
    body = {
        "title": "Test Car",
        "brand": "Toyota",
        "model": "Camry",
        "model_year": 2022,
        "mileage": 5000,
        "price": "25000.00",
        "location": "Damascus",
        "description": "Test Description",
    }
    body.update(overrides)
    return body


@pytest.fixture
def seller(client):
    return register(client, "seller")


@pytest.fixture
def admin(client):
    return register(client, "admin", roles=["admin"])


def _create(client, token, **overrides):
    response = client.post("/api/listings", json=_listing(**overrides), headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()


def _approve(client, admin_token, listing_id):
    response = client.put(f"/api/listings/{listing_id}/approve", headers=auth(admin_token))
    assert response.status_code == 200
    return response.json()


def test_create_listing(client, seller):
    body = _create(client, seller)
    assert body["title"] == "Test Car"
    assert body["seller_username"] == "seller"
    assert body["approved"] is False
    assert body["image_url"] is None


def test_unapproved_listing_hidden_from_public(client, seller, admin):
    listing = _create(client, seller)

    assert client.get(f"/api/listings/{listing['id']}").status_code == 404
    assert client.get(f"/api/listings/{listing['id']}", headers=auth(seller)).status_code == 200
    assert client.get("/api/listings").json()["total_elements"] == 0

    _approve(client, admin, listing["id"])
    assert client.get(f"/api/listings/{listing['id']}").status_code == 200
    assert client.get("/api/listings").json()["total_elements"] == 1


def test_only_admin_can_approve(client, seller):
    listing = _create(client, seller)
    response = client.put(f"/api/listings/{listing['id']}/approve", headers=auth(seller))
    assert response.status_code == 403


def test_sorting_by_price(client, seller, admin):
    for price in ("10000.00", "20000.00", "15000.00"):
        _approve(client, admin, _create(client, seller, price=price)["id"])

    asc = client.get("/api/listings?sort=price,asc").json()["content"]
    desc = client.get("/api/listings?sort=price,desc").json()["content"]
    assert [float(item["price"]) for item in asc] == [10000.0, 15000.0, 20000.0]
    assert [float(item["price"]) for item in desc] == [20000.0, 15000.0, 10000.0]


def test_default_sort_newest_first(client, seller, admin):
    ids = [_approve(client, admin, _create(client, seller, title=f"Car {i}")["id"])["id"] for i in range(3)]
    content = client.get("/api/listings").json()["content"]
    assert [item["id"] for item in content] == list(reversed(ids))


def test_non_whitelisted_sort_field_rejected(client):
    response = client.get("/api/listings?sort=nonExistentField")
    assert response.status_code == 400
    assert response.json()["detail"] == "Sorting by field 'nonExistentField' is not allowed."


def test_pagination(client, seller, admin):
    for i in range(5):
        _approve(client, admin, _create(client, seller, title=f"Car {i}")["id"])

    page = client.get("/api/listings?page=1&size=2").json()
    assert page["total_elements"] == 5
    assert page["total_pages"] == 3
    assert page["page"] == 1
    assert len(page["content"]) == 2
    assert page["last"] is False

    last = client.get("/api/listings?page=2&size=2").json()
    assert len(last["content"]) == 1
    assert last["last"] is True


def test_filter_listings(client, seller, admin):
    _approve(client, admin, _create(client, seller, brand="Toyota", price="10000.00", model_year=2015)["id"])
    _approve(client, admin, _create(client, seller, brand="Honda", price="30000.00", model_year=2021)["id"])
    _create(client, seller, brand="Toyota")  # not approved

    toyota = client.get("/api/listings/filter?brand=toyota").json()
    assert toyota["total_elements"] == 1
    assert toyota["content"][0]["brand"] == "Toyota"

    pricey = client.get("/api/listings/filter?minPrice=20000").json()
    assert [item["brand"] for item in pricey["content"]] == ["Honda"]

    years = client.get("/api/listings/filter?minYear=2010&maxYear=2016").json()
    assert [item["model_year"] for item in years["content"]] == [2015]


def test_update_listing_owner_only(client, seller):
    listing = _create(client, seller)
    other = register(client, "other")

    response = client.put(f"/api/listings/{listing['id']}", json={"mileage": 7000}, headers=auth(other))
    assert response.status_code == 403

    response = client.put(f"/api/listings/{listing['id']}", json={"mileage": 7000}, headers=auth(seller))
    assert response.status_code == 200
    assert response.json()["mileage"] == 7000
    assert response.json()["title"] == "Test Car"


def test_status_transitions(client, seller):
    listing_id = _create(client, seller)["id"]

    archived = client.put(f"/api/listings/{listing_id}/archive", headers=auth(seller))
    assert archived.json()["is_archived"] is True
    assert client.put(f"/api/listings/{listing_id}/mark-sold", headers=auth(seller)).status_code == 409

    client.put(f"/api/listings/{listing_id}/unarchive", headers=auth(seller))
    sold = client.put(f"/api/listings/{listing_id}/mark-sold", headers=auth(seller))
    assert sold.status_code == 200
    assert sold.json()["is_sold"] is True
    assert client.put(f"/api/listings/{listing_id}/mark-sold", headers=auth(seller)).status_code == 409


def test_create_with_image_and_delete_cleans_storage(client, seller):
    response = client.post(
        "/api/listings/with-image",
        data={"listing": json.dumps(_listing())},
        files={"image": ("car.jpg", JPEG_BYTES, "image/jpeg")},
        headers=auth(seller),
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["image_key"].startswith("listings/")
    image_path = body["image_url"].replace("http://localhost:8080", "")
    assert client.get(image_path).content == JPEG_BYTES

    assert client.delete(f"/api/listings/{body['id']}", headers=auth(seller)).status_code == 200
    assert client.get(image_path).status_code == 404
    assert client.get(f"/api/listings/{body['id']}", headers=auth(seller)).status_code == 404


def test_create_with_invalid_image_is_rejected(client, seller):
    response = client.post(
        "/api/listings/with-image",
        data={"listing": json.dumps(_listing())},
        files={"image": ("car.jpg", b"not really a jpeg", "image/jpeg")},
        headers=auth(seller),
    )
    assert response.status_code == 400
    assert client.get("/api/listings/my-listings", headers=auth(seller)).json()["total_elements"] == 0


def test_replace_image_removes_old_file(client, seller):
    listing_id = _create(client, seller)["id"]
    first = client.post(
        f"/api/listings/{listing_id}/image",
        files={"image": ("a.jpg", JPEG_BYTES, "image/jpeg")},
        headers=auth(seller),
    ).json()
    second = client.post(
        f"/api/listings/{listing_id}/image",
        files={"image": ("b.jpg", JPEG_BYTES, "image/jpeg")},
        headers=auth(seller),
    ).json()

    assert first["image_key"] != second["image_key"]
    assert client.get(first["image_url"].replace("http://localhost:8080", "")).status_code == 404


def test_admin_can_delete_any_listing(client, seller, admin):
    listing_id = _create(client, seller)["id"]
    other = register(client, "other")
    assert client.delete(f"/api/listings/{listing_id}", headers=auth(other)).status_code == 403
    assert client.delete(f"/api/listings/{listing_id}", headers=auth(admin)).status_code == 200


@pytest.mark.parametrize("year,message", [
    (1919, "Year must be 1920 or later"),
    (date.today().year + 1, "Year must not be later than the current year"),
    (12345, "Year must be a 4-digit number"),
])
def test_model_year_rejected(client, seller, year, message):
    response = client.post("/api/listings", json=_listing(model_year=year), headers=auth(seller))
    assert response.status_code == 422
    errors = response.json()["detail"]
    assert len(errors) == 1
    assert errors[0]["msg"] == message


@pytest.mark.parametrize("year", [1920, date.today().year])
def test_model_year_boundaries_accepted(client, seller, year):
    _create(client, seller, model_year=year)
