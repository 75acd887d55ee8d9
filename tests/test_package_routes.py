from conftest import auth_headers, make_user
from enums.user_role import UserRole

PACKAGE = {
    "title": "Kerala Backwaters Escape",
    "category": "Relaxation",
    "duration_days": 4,
    "duration_nights": 3,
    "base_price": 12000,
    "discount_percentage": 5,
    "group_discounts": [
        {"min_people": 4, "max_people": 8, "discount_percentage": 15},
    ],
    "group_size_min": 2,
    "group_size_max": 12,
}


def create_package(client, user, payload=PACKAGE):
    response = client.post("/packages", json=payload, headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_contributor_creates_package(client, db):
    contributor = make_user(db, "writer@example.com", UserRole.CONTRIBUTOR)
    package = create_package(client, contributor)

    assert package["slug"] == "kerala-backwaters-escape"
    assert package["display_duration"] == "4D/3N"
    assert package["status"] == "Active"

    second = create_package(client, contributor)
    assert second["slug"] == "kerala-backwaters-escape-2"


def test_guest_cannot_create_package(client, guest):
    response = client.post("/packages", json=PACKAGE, headers=auth_headers(guest))
    assert response.status_code == 403


def test_group_discount_band_rejects_inverted_range(client, admin):
    payload = {**PACKAGE, "group_discounts": [{"min_people": 5, "max_people": 2, "discount_percentage": 10}]}
    response = client.post("/packages", json=payload, headers=auth_headers(admin))
    assert response.status_code == 400


def test_quote_uses_group_band(client, admin):
    package = create_package(client, admin)

    response = client.post(f"/packages/{package['id']}/quote", json={"number_of_people": 4})
    assert response.status_code == 200
    assert response.json()["data"] == {
        "package_id": package["id"],
        "title": "Kerala Backwaters Escape",
        "number_of_people": 4,
        "price_per_person": 10200.0,
        "discount_percentage": 15.0,
        "total_price": 40800.0,
    }

    flat = client.post(f"/packages/{package['id']}/quote", json={"number_of_people": 2}).json()["data"]
    assert flat["discount_percentage"] == 5.0
    assert flat["total_price"] == 22800.0


def test_quote_outside_group_size(client, admin):
    package = create_package(client, admin)
    response = client.post(f"/packages/{package['id']}/quote", json={"number_of_people": 1})
    assert response.status_code == 400
    assert response.json()["message"] == "Minimum group size is 2"


def test_list_and_get_packages(client, admin):
    package = create_package(client, admin)

    body = client.get("/packages", params={"category": "Relaxation"}).json()
    assert body["pagination"]["total"] == 1
    assert client.get(f"/packages/{package['id']}").json()["data"]["title"] == PACKAGE["title"]
    assert client.get("/packages/999").status_code == 404


def test_author_updates_package(client, db):
    contributor = make_user(db, "writer@example.com", UserRole.CONTRIBUTOR)
    package = create_package(client, contributor)

    response = client.patch(
        f"/packages/{package['id']}",
        json={"title": "Kerala Backwaters Deluxe", "base_price": 15000, "duration_days": 5},
        headers=auth_headers(contributor),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Kerala Backwaters Deluxe"
    assert data["base_price"] == 15000.0
    assert data["display_duration"] == "5D/3N"
    assert data["slug"] == "kerala-backwaters-escape"


def test_package_update_rules(client, db, admin):
    contributor = make_user(db, "writer@example.com", UserRole.CONTRIBUTOR)
    other = make_user(db, "other.writer@example.com", UserRole.CONTRIBUTOR)
    package = create_package(client, contributor)
    url = f"/packages/{package['id']}"

    assert client.patch(url, json={"base_price": 1}, headers=auth_headers(other)).status_code == 403
    assert client.patch(url, json={"group_size_min": 20}, headers=auth_headers(contributor)).status_code == 400
    assert client.patch(url, json={"slug": "custom"}, headers=auth_headers(contributor)).status_code == 400

    response = client.patch(url, json={"status": "Inactive"}, headers=auth_headers(admin))
    assert response.status_code == 200
    quote = client.post(f"{url}/quote", json={"number_of_people": 2})
    assert quote.status_code == 400


def test_deleted_package_is_gone(client, db):
    contributor = make_user(db, "writer@example.com", UserRole.CONTRIBUTOR)
    other = make_user(db, "other.writer@example.com", UserRole.CONTRIBUTOR)
    package = create_package(client, contributor)
    url = f"/packages/{package['id']}"

    assert client.delete(url, headers=auth_headers(other)).status_code == 403
    assert client.delete(url, headers=auth_headers(contributor)).status_code == 200
    assert client.get(url).status_code == 404
    assert client.get("/packages").json()["data"] == []
