# pharmacart/services/product_client.py
import requests
from requests import RequestException

from pharmacart.domain.errors import CatalogUnavailable
from pharmacart.domain.schemas import CatalogProduct
from pharmacart.utils.retry import http_retry
from pharmacart.utils.settings import PRODUCT_SERVICE_URL
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """Catalog store: products with their embedded variants."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get(self, url: str) -> requests.Response:
        return requests.get(url, timeout=self.timeout)

    def fetch_product(self, product_id: int) -> CatalogProduct | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        try:
            resp = self._get(url)
        except RequestException as e:
            logger.error(f"Catalog request for product {product_id} failed: {e}")
            raise CatalogUnavailable("Catalog service unavailable") from e

        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            logger.error(f"Catalog returned {resp.status_code} for product {product_id}")
            raise CatalogUnavailable("Catalog service unavailable")

        return CatalogProduct.model_validate(resp.json())
