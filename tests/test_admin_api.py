"""
API tests for platform admin operations
"""

import pytest

from guestfeedback.models import Review, ReviewStatus, SubscriptionPlan, UserRole

from conftest import auth_headers, make_form, make_hotel, make_user


@pytest.fixture
def admin_headers(db):
    return auth_headers(make_user(db, role=UserRole.PLATFORM_ADMIN))


def test_list_hotels(client, db, admin_headers):
    make_hotel(db, slug="alpha-hotel")
    make_hotel(db, slug="beta-hotel")

    hotels = client.get("/api/v1/admin/hotels", headers=admin_headers).json()

    assert {h["slug"] for h in hotels} == {"alpha-hotel", "beta-hotel"}


def test_suspend_hotel_stops_submissions(client, db, admin_headers):
    hotel = make_hotel(db)
    make_user(db, hotel)
    form = make_form(db, hotel)

    response = client.post(f"/api/v1/admin/hotels/{hotel.id}/toggle-active", headers=admin_headers)
    assert response.json()["is_active"] is False

    submit = client.post(
        f"/api/v1/public/hotels/{hotel.slug}/submit",
        json={"form_id": str(form.id), "responses": {}},
    )
    assert submit.status_code == 404


def test_change_plan(client, db, admin_headers):
    hotel = make_hotel(db)

    response = client.put(f"/api/v1/admin/hotels/{hotel.id}/plan", json={"plan": "enterprise"}, headers=admin_headers)

    assert response.status_code == 200
    db.refresh(hotel)
    assert hotel.subscription_plan == SubscriptionPlan.ENTERPRISE


def test_deactivate_user_blocks_next_request(client, db, admin_headers):
    hotel = make_hotel(db)
    user = make_user(db, hotel)
    headers = auth_headers(user, hotel)

    response = client.put(f"/api/v1/admin/users/{user.id}/status", json={"status": "DEACTIVATED"}, headers=admin_headers)
    assert response.json()["status"] == "DEACTIVATED"

    blocked = client.get("/api/v1/forms/", headers=headers)
    assert blocked.status_code == 403
    assert blocked.json()["code"] == "account_deactivated"


def test_unknown_hotel(client, admin_headers):
    response = client.post(
        "/api/v1/admin/hotels/00000000-0000-0000-0000-000000000000/toggle-active", headers=admin_headers
    )
    assert response.status_code == 404


def test_contact_message_reaches_platform_admins(client, db, admin_headers):
    hotel = make_hotel(db)
    user = make_user(db, hotel)

    response = client.post(
        "/api/v1/hotels/contact",
        json={"subject": "Invoice question", "message": "Where is my March invoice?"},
        headers=auth_headers(user, hotel),
    )
    assert response.status_code == 202

    inbox = client.get("/api/v1/notifications/", headers=admin_headers).json()
    assert [n["message"] for n in inbox] == ["Invoice question"]


def _review(db, form, rating, status=ReviewStatus.PENDING, is_deleted=False):
    review = Review(
        hotel_id=form.hotel_id,
        form_id=form.id,
        responses={},
        overall_rating=rating,
        status=status,
        is_deleted=is_deleted,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


@pytest.fixture
def two_hotels(db):
    alpha = make_hotel(db, slug="alpha-hotel")
    beta = make_hotel(db, slug="beta-hotel")
    alpha_form = make_form(db, alpha)
    beta_form = make_form(db, beta)
    return alpha, beta, alpha_form, beta_form


def test_list_reviews_across_hotels(client, db, admin_headers, two_hotels):
    alpha, beta, alpha_form, beta_form = two_hotels
    kept = [
        _review(db, alpha_form, 5, ReviewStatus.APPROVED),
        _review(db, alpha_form, 2),
        _review(db, beta_form, 1),
    ]
    _review(db, beta_form, 4, is_deleted=True)

    reviews = client.get("/api/v1/admin/reviews", headers=admin_headers).json()

    assert {r["id"] for r in reviews} == {str(r.id) for r in kept}


def test_filter_reviews(client, db, admin_headers, two_hotels):
    alpha, beta, alpha_form, beta_form = two_hotels
    approved = _review(db, alpha_form, 5, ReviewStatus.APPROVED)
    low = _review(db, alpha_form, 2)
    _review(db, beta_form, 2)

    by_hotel = client.get(
        "/api/v1/admin/reviews", params={"hotel_id": str(alpha.id)}, headers=admin_headers
    ).json()
    by_status = client.get(
        "/api/v1/admin/reviews", params={"status": "APPROVED"}, headers=admin_headers
    ).json()
    by_both = client.get(
        "/api/v1/admin/reviews", params={"hotel_id": str(alpha.id), "rating": 2}, headers=admin_headers
    ).json()

    assert {r["id"] for r in by_hotel} == {str(approved.id), str(low.id)}
    assert [r["id"] for r in by_status] == [str(approved.id)]
    assert [r["id"] for r in by_both] == [str(low.id)]


def test_get_review_and_form(client, db, admin_headers, two_hotels):
    alpha, beta, alpha_form, beta_form = two_hotels
    review = _review(db, beta_form, 3)
    deleted = _review(db, beta_form, 3, is_deleted=True)

    found = client.get(f"/api/v1/admin/reviews/{review.id}", headers=admin_headers)
    assert found.status_code == 200
    assert found.json()["hotel_id"] == str(beta.id)
    assert client.get(f"/api/v1/admin/reviews/{deleted.id}", headers=admin_headers).status_code == 404

    form = client.get(f"/api/v1/admin/forms/{alpha_form.id}", headers=admin_headers)
    assert form.status_code == 200
    assert len(form.json()["fields"]) == 3

    hotel = client.get(f"/api/v1/admin/hotels/{beta.id}", headers=admin_headers)
    assert hotel.json()["slug"] == "beta-hotel"


def test_list_forms_across_hotels(client, db, admin_headers, two_hotels):
    alpha, beta, alpha_form, beta_form = two_hotels

    every = client.get("/api/v1/admin/forms", headers=admin_headers).json()
    only_beta = client.get(
        "/api/v1/admin/forms", params={"hotel_id": str(beta.id)}, headers=admin_headers
    ).json()

    assert {f["id"] for f in every} == {str(alpha_form.id), str(beta_form.id)}
    assert [f["id"] for f in only_beta] == [str(beta_form.id)]


@pytest.mark.parametrize("path", ["/api/v1/admin/reviews", "/api/v1/admin/forms"])
def test_oversight_requires_platform_admin(client, db, two_hotels, path):
    alpha = two_hotels[0]
    owner = make_user(db, alpha)

    response = client.get(path, headers=auth_headers(owner, alpha))

    assert response.status_code == 403
