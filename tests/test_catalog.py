"""
Tests for the EShops catalog client
"""

import json
from decimal import Decimal

import httpx
import pytest

from eshops.errors import CatalogLookupError, CatalogOfflineError, OrderSubmissionError
from eshops.services.catalog import LOCAL_VERSION, CatalogProduct, Connectivity, EShopsClient

API_ROOT = "https://eshops.test/"


def _client(handler, api_key="key-1") -> EShopsClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return EShopsClient(api_id="site-1", api_key=api_key, api_root=API_ROOT, http_client=http_client)


def _catalog_handler(requests, product=None, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/sys/version":
            return httpx.Response(200, json="4.2.1.0")
        if request.url.path.startswith("/adm/pro-get/"):
            return httpx.Response(status, json={"resultado": product})
        if request.url.path == "/pedidos/add/site-1/key-1":
            return httpx.Response(status, json={"resultado": 501})
        return httpx.Response(404)

    return handler


PRODUCT = {
    "productoId": 15,
    "titulo": "Coffee beans",
    "imageUrl": "https://cdn.example.com/beans.png",
    "unitario": 12.4,
    "existencia": 30,
}


class TestConnectivity:
    """Tests for the version probe."""

    @pytest.mark.asyncio
    async def test_init_online(self):
        requests = []
        client = _client(_catalog_handler(requests))

        state = await client.init()

        assert state is Connectivity.ONLINE
        assert client.is_online is True
        assert client.get_current_version() == "4.2.1.0"
        assert str(requests[0].url) == f"{API_ROOT}sys/version"

    @pytest.mark.asyncio
    async def test_init_plain_text_version(self):
        client = _client(lambda request: httpx.Response(200, text="4.3.0.0\n"))

        await client.init()

        assert client.get_current_version() == "4.3.0.0"

    @pytest.mark.asyncio
    async def test_init_unreachable_goes_offline(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        state = await client.init()

        assert state is Connectivity.OFFLINE
        assert client.get_current_version() == LOCAL_VERSION

    @pytest.mark.asyncio
    async def test_init_server_error_goes_offline(self):
        client = _client(lambda request: httpx.Response(503))

        assert await client.init() is Connectivity.OFFLINE

    @pytest.mark.asyncio
    async def test_init_without_key_stays_offline(self):
        requests = []
        client = _client(_catalog_handler(requests), api_key="")

        assert await client.init() is Connectivity.OFFLINE
        assert requests == []

    def test_api_root_gets_trailing_slash(self):
        client = EShopsClient(api_id="a", api_key="b", api_root="https://eshops.test")

        assert client.api_root == "https://eshops.test/"
        assert client.connectivity is Connectivity.OFFLINE


class TestGetProduct:
    """Tests for product lookup."""

    @pytest.mark.asyncio
    async def test_get_product(self):
        requests = []
        client = _client(_catalog_handler(requests, product=PRODUCT))
        await client.init()

        product = await client.get_product(15)

        assert product.product_id == 15
        assert product.title == "Coffee beans"
        assert product.image_url == "https://cdn.example.com/beans.png"
        assert product.unit_price == Decimal("12.4")
        assert requests[-1].url.path == "/adm/pro-get/15/key-1"

    @pytest.mark.asyncio
    async def test_get_product_offline(self):
        requests = []
        client = _client(_catalog_handler(requests, product=PRODUCT))

        with pytest.raises(CatalogOfflineError):
            await client.get_product(15)

        assert requests == []

    @pytest.mark.asyncio
    async def test_get_product_not_found(self):
        client = _client(_catalog_handler([], product=None))
        await client.init()

        with pytest.raises(CatalogLookupError):
            await client.get_product(15)

    @pytest.mark.asyncio
    async def test_get_product_http_error(self):
        client = _client(_catalog_handler([], product=PRODUCT, status=500))
        await client.init()

        with pytest.raises(CatalogLookupError) as exc_info:
            await client.get_product(15)

        assert not isinstance(exc_info.value, CatalogOfflineError)

    @pytest.mark.asyncio
    async def test_get_product_network_error(self):
        def handler(request):
            if request.url.path == "/sys/version":
                return httpx.Response(200, json="4.2.1.0")
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client(handler)
        await client.init()

        with pytest.raises(CatalogLookupError):
            await client.get_product(15)

    @pytest.mark.asyncio
    async def test_get_product_invalid_payload(self):
        client = _client(_catalog_handler([], product={"productoId": 15, "unitario": -3}))
        await client.init()

        with pytest.raises(CatalogLookupError):
            await client.get_product(15)

    @pytest.mark.asyncio
    async def test_get_product_missing_price(self):
        client = _client(_catalog_handler([], product={"productoId": 15, "titulo": "x", "unitario": None}))
        await client.init()

        with pytest.raises(CatalogLookupError):
            await client.get_product(15)

    @pytest.mark.asyncio
    async def test_get_product_non_numeric_price(self):
        client = _client(_catalog_handler([], product={"productoId": 15, "titulo": "x", "unitario": "abc"}))
        await client.init()

        with pytest.raises(CatalogLookupError):
            await client.get_product(15)


class TestCatalogProduct:
    """Tests for the product model."""

    def test_accepts_wire_names(self):
        product = CatalogProduct.model_validate(PRODUCT)

        assert product.product_id == 15
        assert product.unit_price == Decimal("12.4")

    def test_accepts_field_names(self):
        product = CatalogProduct(product_id=3, title="Tea", unit_price=2)

        assert product.product_id == 3
        assert product.image_url == ""
        assert product.unit_price == Decimal("2")

    def test_numeric_string_price(self):
        product = CatalogProduct.model_validate({"productoId": 3, "unitario": "10.50"})

        assert product.unit_price == Decimal("10.50")

    def test_ignores_unknown_fields(self):
        product = CatalogProduct.model_validate(PRODUCT)

        assert "existencia" not in product.model_dump()
        assert not hasattr(product, "existencia")


class TestSubmitOrder:
    """Tests for order submission."""

    @pytest.mark.asyncio
    async def test_submit_order(self):
        requests = []
        client = _client(_catalog_handler(requests))
        await client.init()
        payload = {"cliente": {}, "items": [{"productoId": 1}], "resumen": {}}

        result = await client.submit_order(payload)

        assert result == {"resultado": 501}
        assert requests[-1].method == "POST"
        assert json.loads(requests[-1].content) == payload

    @pytest.mark.asyncio
    async def test_submit_order_rejected(self):
        client = _client(_catalog_handler([], status=400))
        await client.init()

        with pytest.raises(OrderSubmissionError):
            await client.submit_order({"items": []})

    @pytest.mark.asyncio
    async def test_submit_order_offline(self):
        client = _client(_catalog_handler([]))

        with pytest.raises(CatalogOfflineError):
            await client.submit_order({"items": []})

    @pytest.mark.asyncio
    async def test_aclose(self):
        client = _client(_catalog_handler([]))

        await client.aclose()

        assert client._http_client is None
