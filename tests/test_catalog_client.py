import httpx
import pytest

from depot_cart.core.errors import CatalogLookupError
from depot_cart.services.catalog_client import CatalogClient

PRODUCTS_PAYLOAD = {
    "success": True,
    "data": [
        {
            "id": 101,
            "name": "A2 Cow Milk",
            "category": {"id": 1, "name": "Milk"},
            "isDairyProduct": True,
            "variants": [
                {
                    "id": 1001,
                    "name": "500ml",
                    "mrp": "55.00",
                    "buyOncePrice": 55,
                    "price15Day": "46",
                    "price1Month": None,
                    "closingQty": 40,
                    "notInStock": False,
                    "isHidden": False,
                    "depot": {"id": 1, "name": "Dombivli", "isOnline": True},
                },
                {"id": "broken"},
            ],
        },
        {
            "id": 102,
            "name": "Buffalo Milk",
            "variants": [{"id": 1003, "name": "1L", "mrp": 90}],
        },
    ],
}


def _client(handler, **kwargs) -> CatalogClient:
    return CatalogClient(
        "https://shop.example/",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_variants_for_depot_are_flattened_from_products():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json=PRODUCTS_PAYLOAD)

    client = _client(handler)
    variants = await client.get_variants_for_depot(1)
    await client.close()

    assert seen[0].path == "/api/products/public"
    assert seen[0].params["depotId"] == "1"
    assert [v.id for v in variants] == [1001, 1003]

    milk = variants[0]
    assert milk.product_id == 101
    assert milk.depot_id == 1
    assert milk.mrp == 55
    assert milk.price_15_day == 46
    assert milk.price_1_month is None
    assert milk.is_online is True
    assert milk.product.name == "A2 Cow Milk"
    assert milk.product.category == "Milk"


@pytest.mark.asyncio
async def test_variants_for_product_filters_by_product():
    client = _client(lambda request: httpx.Response(200, json=PRODUCTS_PAYLOAD))
    variants = await client.get_variants_for_product(102, 1)
    await client.close()

    assert [v.id for v in variants] == [1003]


@pytest.mark.asyncio
async def test_not_found_means_no_variants():
    client = _client(lambda request: httpx.Response(404))
    assert await client.get_variants_for_depot(9) == []
    assert await client.resolve_depot_for_pincode("000000") is None
    await client.close()


@pytest.mark.asyncio
async def test_unsuccessful_envelope_means_no_variants():
    client = _client(lambda request: httpx.Response(200, json={"success": False}))
    assert await client.get_variants_for_depot(1) == []
    await client.close()


@pytest.mark.asyncio
async def test_server_errors_are_retried_then_raised():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(503)

    client = _client(handler, max_retries=2)
    with pytest.raises(CatalogLookupError):
        await client.get_variants_for_depot(1)
    await client.close()

    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_transient_failure_recovers():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=PRODUCTS_PAYLOAD)

    client = _client(handler)
    variants = await client.get_variants_for_depot(1)
    await client.close()

    assert len(attempts) == 2
    assert len(variants) == 2


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(400, json={"message": "bad depot"})

    client = _client(handler)
    with pytest.raises(CatalogLookupError):
        await client.get_variants_for_depot(1)
    await client.close()

    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_resolve_depot_for_pincode():
    def handler(request):
        assert request.url.path == "/api/public/area-masters/by-pincode/421201"
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": [
                    {"id": 7, "name": "No depot area", "depot": None},
                    {
                        "id": 8,
                        "name": "Dombivli East",
                        "deliverySchedule": ["monday", "thursday"],
                        "depot": {"id": 1, "name": "Dombivli", "isOnline": True},
                    },
                ],
            },
        )

    client = _client(handler)
    context = await client.resolve_depot_for_pincode("421201")
    await client.close()

    assert context.depot_id == 1
    assert context.area_name == "Dombivli East"
    assert context.delivery_schedule == ["monday", "thursday"]
    assert context.is_online is True
