"""Patient API client: paginated record retrieval and assessment submission."""
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from patient_risk.config.settings import PatientApiSettings
from patient_risk.models.schemas import AssessmentResultSet
from patient_risk.services.integrations.http_client import ResilientHttpClient
from patient_risk.utils.logger import get_logger

logger = get_logger(__name__)


class PageResult(BaseModel):
    """One page of patient records with whatever pagination metadata it carried."""

    page: int
    records: List[Any] = Field(default_factory=list)
    has_next: Optional[bool] = None
    total_pages: Optional[float] = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_page(page: int, payload: Any) -> PageResult:
    """
    Extract records and pagination hints from a raw page payload.

    Anything unexpected (non-object payload, missing or non-list `data`,
    missing `pagination`, mistyped flags) degrades to "not provided".
    """
    body = payload if isinstance(payload, dict) else {}
    data = body.get("data")
    pagination = body.get("pagination")
    if not isinstance(pagination, dict):
        pagination = {}

    has_next = pagination.get("hasNext")
    total_pages = pagination.get("totalPages")
    return PageResult(
        page=page,
        records=data if isinstance(data, list) else [],
        has_next=has_next if isinstance(has_next, bool) else None,
        total_pages=total_pages if _is_number(total_pages) else None,
    )


def should_continue(
    page: PageResult,
    total_pages: Optional[float],
    page_size: int,
) -> bool:
    """
    Decide whether another page should be requested.

    Priority: the page's explicit hasNext flag, then the last known page
    count, then whether the page came back full.
    """
    if page.has_next is not None:
        return page.has_next
    if total_pages:
        return page.page < total_pages
    return len(page.records) == page_size


class PatientsApiClient:
    """Reads patient records page by page and submits assessment results."""

    def __init__(
        self,
        settings: PatientApiSettings,
        http: Optional[ResilientHttpClient] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self._owns_http = http is None
        self.http = http or ResilientHttpClient(settings, sleep=sleep)
        self._sleep = sleep

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def fetch_page(self, page: int) -> PageResult:
        """Fetch and parse a single page of patient records."""
        params: Dict[str, Any] = {"page": page, "limit": self.settings.page_size}
        payload = self.http.get_json(self.settings.patients_url, params=params)
        return parse_page(page, payload)

    def fetch_all_patients(self) -> List[Any]:
        """
        Fetch every page of patient records, starting at page 1.

        Returns:
            All records in page order (raw, unvalidated)

        Raises:
            PatientApiError: If any page cannot be fetched
        """
        records: List[Any] = []
        total_pages: Optional[float] = None
        page_number = 1

        while True:
            page = self.fetch_page(page_number)
            records.extend(page.records)
            if page.total_pages is not None:
                total_pages = page.total_pages

            logger.info(
                "Fetched patient page",
                page=page_number,
                records=len(page.records),
                total_pages=total_pages,
                has_next=page.has_next,
            )

            if not should_continue(page, total_pages, self.settings.page_size):
                break

            page_number += 1
            # Fixed pacing between pages
            self._sleep(self.settings.page_delay_ms / 1000.0)

        logger.info("Fetched all patients", pages=page_number, records=len(records))
        return records

    def submit_assessment(self, results: AssessmentResultSet) -> Any:
        """
        Submit the result set.

        Returns:
            The API response body, unmodified
        """
        logger.info("Submitting assessment", **results.counts())
        response = self.http.post_json(self.settings.submit_url, results.model_dump())
        logger.info("Assessment submitted")
        return response
