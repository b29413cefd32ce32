"""
HTTP tests for the cart and order routers.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from app.core.domain import InsufficientStockException, InvalidOperationException
from app.domains.commerce.api.dependencies import get_cart_service, get_order_service, get_place_order_use_case
from app.domains.commerce.domain.entities import Cart
from app.domains.commerce.domain.value_objects import PaymentMethod, ShippingMethod

API = "/api/v1"

ADDRESS = {
    "fullName": "Rahim Uddin",
    "phone": "01711000000",
    "street": "House 12, Road 5",
    "city": "Dhaka",
    "state": "Dhaka",
    "zipCode": "1207",
}


@pytest.mark.api
def test_cart_requires_login(api_client, override, service_mock):
    override(get_cart_service, service_mock)

    response = api_client.get(f"{API}/cart")

    assert response.status_code == 401
    service_mock.get_cart.assert_not_called()


@pytest.mark.api
def test_add_to_cart(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_cart_service, service_mock)
    service_mock.add_item.return_value = Cart.for_user(customer.id)
    product_id = uuid4()

    response = api_client.post(f"{API}/cart", json={"productId": str(product_id), "quantity": 2})

    assert response.status_code == 200
    assert response.json()["message"] == "Item added to cart"
    service_mock.add_item.assert_awaited_once_with(
        customer.id, product_id, quantity=2, variant_id=None, variant_sku=None
    )


@pytest.mark.api
def test_add_to_cart_rejects_zero_quantity(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_cart_service, service_mock)

    response = api_client.post(f"{API}/cart", json={"productId": str(uuid4()), "quantity": 0})

    assert response.status_code == 400
    service_mock.add_item.assert_not_called()


@pytest.mark.api
def test_stock_shortage_answers_400(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_cart_service, service_mock)
    service_mock.add_item.side_effect = InsufficientStockException(uuid4(), 5, 3)

    response = api_client.post(f"{API}/cart", json={"productId": str(uuid4()), "quantity": 5})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Only 3 items available in stock"}


@pytest.mark.api
def test_place_order_builds_request(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_place_order_use_case, service_mock)
    order = MagicMock()
    service_mock.execute.return_value = order
    order.to_dict.return_value = {"orderNumber": "ORD-240315-AB12CD"}

    response = api_client.post(
        f"{API}/orders", json={"shippingAddress": ADDRESS, "paymentMethod": "cod", "customerNote": "Call first"}
    )

    assert response.status_code == 201
    assert response.json()["data"]["orderNumber"] == "ORD-240315-AB12CD"
    user, request = service_mock.execute.await_args.args
    assert user is customer
    assert request.payment_method == PaymentMethod.COD
    assert request.shipping_method == ShippingMethod.STANDARD
    assert request.shipping_address["country"] == "Bangladesh"
    assert request.shipping_address["zipCode"] == "1207"


@pytest.mark.api
def test_place_order_rejects_unknown_payment_method(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_place_order_use_case, service_mock)

    response = api_client.post(f"{API}/orders", json={"shippingAddress": ADDRESS, "paymentMethod": "cheque"})

    assert response.status_code == 400
    assert "paymentMethod" in {source["path"] for source in response.json()["errorSources"]}


@pytest.mark.api
def test_illegal_transition_answers_400(api_client, as_user, admin, override, service_mock):
    as_user(admin)
    override(get_order_service, service_mock)
    service_mock.update_status.side_effect = InvalidOperationException(
        "change_status", "pending", "Cannot change status from pending to delivered"
    )

    response = api_client.patch(f"{API}/orders/admin/{uuid4()}/status", json={"status": "delivered"})

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot change status from pending to delivered"


@pytest.mark.api
def test_customer_cannot_list_all_orders(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_order_service, service_mock)

    response = api_client.get(f"{API}/orders/admin/all")

    assert response.status_code == 403
