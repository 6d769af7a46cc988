"""
EShops Catalog Client

Async client for the remote EShops REST API. The cart only needs three
things from it: a version probe that decides whether the API is reachable,
a product lookup by id, and order submission.
"""

import os
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eshops.errors import (
    ERROR_CATALOG_LOOKUP,
    ERROR_ORDER_SUBMISSION,
    ERROR_PRODUCT_NOT_FOUND,
    CatalogLookupError,
    CatalogOfflineError,
    OrderSubmissionError,
)
from eshops.logging import get_logger, sanitize_id_for_logging
from eshops.services.money import to_decimal

logger = get_logger(__name__)

ESHOPS_API_ROOT = os.environ.get("ESHOPS_API_ROOT", "https://eshops-api.psweb.me/")
PSWEB_ID = os.environ.get("PSWEB_ID", "")
PSWEB_KEY = os.environ.get("PSWEB_KEY", "")

# Reported when the version probe fails
LOCAL_VERSION = "4.0.0.0-local"


class Connectivity(str, Enum):
    """Reachability of the remote API, decided by the version probe."""
    ONLINE = "online"
    OFFLINE = "offline"


class CatalogProduct(BaseModel):
    """Product fields the cart snapshots at add time."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    product_id: int = Field(alias="productoId")
    title: str = Field(default="", alias="titulo")
    image_url: str = Field(default="", alias="imageUrl")
    unit_price: Decimal = Field(alias="unitario", ge=0)

    @field_validator("title", "image_url", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("unit_price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        if v is None:
            raise ValueError("unitario is required")
        # Strings are left to pydantic, which rejects non-numeric and NaN values
        if isinstance(v, float):
            return to_decimal(v)
        return v


class EShopsClient:
    """
    Client for the EShops REST API.

    Every request URL is built from fixed path segments plus the site id
    and/or API key. Nothing is requested while `connectivity` is OFFLINE;
    callers get CatalogOfflineError instead.
    """

    def __init__(
        self,
        api_id: Optional[str] = None,
        api_key: Optional[str] = None,
        api_root: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_id = api_id if api_id is not None else PSWEB_ID
        self.api_key = api_key if api_key is not None else PSWEB_KEY
        root = api_root or ESHOPS_API_ROOT
        self.api_root = root if root.endswith("/") else f"{root}/"
        self.api_version: Optional[str] = None
        self.connectivity = Connectivity.OFFLINE
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(10.0, connect=5.0),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def is_online(self) -> bool:
        return self.connectivity is Connectivity.ONLINE

    def get_current_version(self) -> Optional[str]:
        return self.api_version

    async def init(self) -> Connectivity:
        """
        Probe the API version and set connectivity accordingly.

        A failed probe is not an error: the client switches to OFFLINE and
        reports the local fallback version.

        Returns:
            The resulting connectivity state
        """
        if not self.api_key:
            logger.error("PSWEB_KEY is not configured, catalog stays offline")
            self.connectivity = Connectivity.OFFLINE
            return self.connectivity

        client = await self._get_http_client()
        try:
            response = await client.get(f"{self.api_root}sys/version")
            response.raise_for_status()
            try:
                version = response.json()
            except ValueError:
                version = response.text.strip()
            self.api_version = str(version)
            self.connectivity = Connectivity.ONLINE
        except httpx.HTTPError as e:
            logger.warning("Catalog API unreachable, switching to offline mode: %s", e)
            self.api_version = LOCAL_VERSION
            self.connectivity = Connectivity.OFFLINE

        logger.info("EShops API version %s (%s)", self.api_version, self.connectivity.value)
        return self.connectivity

    async def get_product(self, product_id: int | str) -> CatalogProduct:
        """
        Fetch a product by id.

        Args:
            product_id: Catalog identifier

        Returns:
            CatalogProduct with price, title and image

        Raises:
            CatalogOfflineError: API is offline, no request made
            CatalogLookupError: transport/HTTP failure, empty or invalid payload
        """
        if not self.is_online:
            raise CatalogOfflineError()

        safe_id = sanitize_id_for_logging(product_id)
        client = await self._get_http_client()
        try:
            response = await client.get(f"{self.api_root}adm/pro-get/{product_id}/{self.api_key}")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Catalog lookup for product %s failed with HTTP %s",
                safe_id,
                e.response.status_code,
            )
            raise CatalogLookupError(f"{ERROR_CATALOG_LOOKUP}: HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Catalog network error for product %s: %s", safe_id, e)
            raise CatalogLookupError(f"{ERROR_CATALOG_LOOKUP}: {e!s}") from e
        except ValueError as e:
            raise CatalogLookupError(f"{ERROR_CATALOG_LOOKUP}: invalid JSON") from e

        payload = data.get("resultado") if isinstance(data, dict) else None
        if not payload:
            logger.warning("Catalog returned no product for id %s", safe_id)
            raise CatalogLookupError(ERROR_PRODUCT_NOT_FOUND)

        try:
            return CatalogProduct.model_validate(payload)
        except ValidationError as e:
            logger.error("Catalog returned an invalid product for id %s: %s", safe_id, e)
            raise CatalogLookupError(f"{ERROR_CATALOG_LOOKUP}: invalid product data") from e

    async def submit_order(self, payload: dict[str, Any]) -> Any:
        """
        Register an order on the platform.

        Args:
            payload: Order snapshot as produced by Order.to_dict()

        Returns:
            Decoded JSON response of the API

        Raises:
            CatalogOfflineError: API is offline, no request made
            OrderSubmissionError: the API rejected the order or was unreachable
        """
        if not self.is_online:
            raise CatalogOfflineError()

        client = await self._get_http_client()
        try:
            response = await client.post(
                f"{self.api_root}pedidos/add/{self.api_id}/{self.api_key}", json=payload
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Order submission rejected with HTTP %s", e.response.status_code)
            raise OrderSubmissionError(f"{ERROR_ORDER_SUBMISSION}: HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.exception("Order submission network error")
            raise OrderSubmissionError(f"{ERROR_ORDER_SUBMISSION}: {e!s}") from e
        except ValueError as e:
            raise OrderSubmissionError(f"{ERROR_ORDER_SUBMISSION}: invalid JSON response") from e

        logger.info("Order submitted with %s item(s)", len(payload.get("items", [])))
        return result
