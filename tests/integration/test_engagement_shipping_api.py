"""
HTTP tests for reviews, wishlists and shipping quotes.
"""

from uuid import uuid4

import pytest

from app.core.domain import AuthorizationException
from app.domains.engagement.api.dependencies import get_review_service, get_wishlist_service
from app.domains.engagement.application.dto import MoveToCartResult
from app.domains.engagement.domain.entities import Review
from app.domains.shipping.api.dependencies import get_shipping_service
from app.domains.shipping.application.dto import ShippingQuote
from app.domains.shipping.domain.entities import ShippingZone

API = "/api/v1"


@pytest.mark.api
def test_submit_review_uses_profile_name(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_review_service, service_mock)
    product_id = uuid4()
    service_mock.create_review.return_value = Review.submit(
        user_id=customer.id, product_id=product_id, rating=5, comment="Great fit"
    )

    response = api_client.post(
        f"{API}/reviews", json={"productId": str(product_id), "rating": 5, "comment": "Great fit"}
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Review submitted successfully"
    kwargs = service_mock.create_review.await_args.kwargs
    assert kwargs["user_name"] == customer.full_name


@pytest.mark.api
def test_review_rating_out_of_range(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_review_service, service_mock)

    response = api_client.post(f"{API}/reviews", json={"productId": str(uuid4()), "rating": 6, "comment": "Wow"})

    assert response.status_code == 400
    service_mock.create_review.assert_not_called()


@pytest.mark.api
def test_deleting_someone_elses_review_is_forbidden(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_review_service, service_mock)
    service_mock.delete_review.side_effect = AuthorizationException(operation="delete_review")

    response = api_client.delete(f"{API}/reviews/{uuid4()}")

    assert response.status_code == 403
    assert service_mock.delete_review.await_args.kwargs == {"is_admin": False}


@pytest.mark.api
def test_move_to_cart_reports_counts(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_wishlist_service, service_mock)
    service_mock.move_all_to_cart.return_value = MoveToCartResult(added=2, failed=["Saree"])

    response = api_client.post(f"{API}/wishlist/move-to-cart")

    assert response.status_code == 200
    assert response.json()["message"] == "2 items added to cart"
    assert response.json()["data"] == {"added": 2, "failed": ["Saree"]}


@pytest.mark.api
def test_shipping_quote_is_public(api_client, override, service_mock):
    override(get_shipping_service, service_mock)
    zone = ShippingZone.new("Inside Dhaka", ["Dhaka"])
    service_mock.calculate.return_value = ShippingQuote(zone=zone, rates=[{"name": "Standard", "price": 60.0}])

    response = api_client.get(f"{API}/shipping/calculate", params={"city": "Dhaka", "weight": 1, "orderTotal": 500})

    assert response.status_code == 200
    assert response.json()["data"]["zone"]["name"] == "Inside Dhaka"
    service_mock.calculate.assert_awaited_once_with("Dhaka", 1.0, 500.0)


@pytest.mark.api
def test_shipping_quote_without_zone(api_client, override, service_mock):
    override(get_shipping_service, service_mock)
    service_mock.calculate.return_value = ShippingQuote(zone=None)

    response = api_client.get(f"{API}/shipping/calculate", params={"city": "Rajshahi"})

    assert response.status_code == 200
    assert response.json()["data"] == {"zone": None, "rates": []}


@pytest.mark.api
def test_customer_cannot_create_zone(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_shipping_service, service_mock)

    response = api_client.post(f"{API}/shipping/zones", json={"name": "Sylhet", "areas": ["Sylhet"]})

    assert response.status_code == 403
