"""
HTTP tests for the category and product routers.
"""

from uuid import uuid4

import pytest

from app.core.domain import EntityNotFoundException, PaginatedResult, Pagination
from app.domains.catalog.api.dependencies import get_category_service, get_product_service

API = "/api/v1"


@pytest.mark.api
def test_category_tree_is_public(api_client, override, service_mock):
    override(get_category_service, service_mock)
    service_mock.get_tree.return_value = [{"id": "1", "name": "Men", "children": []}]

    response = api_client.get(f"{API}/categories/tree")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Category tree retrieved successfully",
        "data": [{"id": "1", "name": "Men", "children": []}],
    }


@pytest.mark.api
def test_customer_cannot_create_category(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_category_service, service_mock)

    response = api_client.post(f"{API}/categories", json={"name": "Panjabi"})

    assert response.status_code == 403
    service_mock.create_category.assert_not_called()


@pytest.mark.api
def test_missing_product_answers_404(api_client, override, service_mock):
    override(get_product_service, service_mock)
    service_mock.get_product.side_effect = EntityNotFoundException("Product")

    response = api_client.get(f"{API}/products/{uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Product not found"}


@pytest.mark.api
def test_product_detail_tracks_view(api_client, override, service_mock, make_product):
    product = make_product()
    override(get_product_service, service_mock)
    service_mock.get_product.return_value = product

    response = api_client.get(f"{API}/products/{product.id}")

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Cotton Panjabi"
    service_mock.get_product.assert_awaited_once_with(product.id, track_view=True)


@pytest.mark.api
def test_product_list_carries_pagination_meta(api_client, override, service_mock, make_product):
    override(get_product_service, service_mock)
    service_mock.list_products.return_value = PaginatedResult(
        items=[make_product()], total=21, pagination=Pagination(page=2, limit=10)
    )

    response = api_client.get(f"{API}/products", params={"page": 2, "limit": 10})

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    assert body["meta"]["total"] == 21
    assert body["meta"]["page"] == 2


@pytest.mark.api
def test_malformed_product_id_is_a_validation_error(api_client, override, service_mock):
    override(get_product_service, service_mock)

    response = api_client.get(f"{API}/products/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"
