"""
Korean public EV charger information feed (data.go.kr, B552584/EvCharger)
https://www.data.go.kr/data/15076352/openapi.do
"""
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import settings
from ..core.retry import retry_with_backoff

logger = logging.getLogger(__name__)


class FeedItem(BaseModel):
    """One charger row of the feed. Several rows share a station (stat_id)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    stat_nm: Optional[str] = Field(None, alias="statNm")
    stat_id: str = Field(..., alias="statId")
    chger_id: Optional[str] = Field(None, alias="chgerId")
    chger_type: Optional[str] = Field(None, alias="chgerType")
    addr: Optional[str] = None
    lat: Optional[str] = None
    lng: Optional[str] = None
    busi_nm: Optional[str] = Field(None, alias="busiNm")
    busi_call: Optional[str] = Field(None, alias="busiCall")
    use_time: Optional[str] = Field(None, alias="useTime")
    stat: Optional[str] = None
    output: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # The feed sends some numeric fields as JSON numbers, others as strings
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class FeedItems(BaseModel):
    item: List[FeedItem] = []


class FeedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    result_code: Optional[str] = Field(None, alias="resultCode")
    result_msg: Optional[str] = Field(None, alias="resultMsg")
    total_count: int = Field(0, alias="totalCount")
    page_no: int = Field(1, alias="pageNo")
    num_of_rows: int = Field(0, alias="numOfRows")
    items: Optional[FeedItems] = None


class EvChargerApiClient:
    """Client for the getChargerInfo operation."""

    def __init__(
        self,
        service_key: Optional[str] = None,
        base_url: Optional[str] = None,
        zcode: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
    ):
        self.service_key = service_key if service_key is not None else settings.openapi_service_key
        self.base_url = (base_url or settings.openapi_base_url).rstrip("/")
        self.zcode = zcode or settings.openapi_zcode
        self.timeout = timeout or settings.seed_timeout_s
        self.transport = transport
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    @property
    def enabled(self) -> bool:
        return bool(self.service_key and self.service_key.strip())

    def _url(self, page_no: int, num_of_rows: int) -> str:
        # The portal issues the key already percent-encoded; it goes into the URL verbatim
        return (
            f"{self.base_url}/getChargerInfo"
            f"?ServiceKey={self.service_key}"
            f"&pageNo={page_no}"
            f"&numOfRows={num_of_rows}"
            f"&zcode={self.zcode}"
            f"&dataType=JSON"
        )

    async def fetch_page(self, page_no: int, num_of_rows: int) -> FeedResponse:
        """
        Fetch one page. HTTP and parsing errors propagate after retries.
        """
        url = self._url(page_no, num_of_rows)

        async def _get() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response

        response = await retry_with_backoff(
            _get, max_attempts=self.max_attempts, initial_delay=self.retry_delay
        )
        return FeedResponse.model_validate(response.json())

    async def fetch_chargers(self, page_size: int = 100, max_pages: int = 1) -> List[FeedItem]:
        """
        Fetch up to max_pages pages of charger rows.

        Returns an empty list when no service key is configured or the feed fails.
        """
        if not self.enabled:
            logger.warning("[EvChargerApi] Service key not configured, skipping fetch")
            return []

        items: List[FeedItem] = []
        for page_no in range(1, max_pages + 1):
            try:
                page = await self.fetch_page(page_no, page_size)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"[EvChargerApi] Fetch failed on page {page_no}: {e}")
                break

            page_items = page.items.item if page.items else []
            items.extend(page_items)
            logger.info(
                f"[EvChargerApi] Fetched {len(page_items)} rows "
                f"(pageNo={page_no}, numOfRows={page_size}, totalCount={page.total_count})"
            )
            if not page_items or page_no * page_size >= page.total_count:
                break
        return items
