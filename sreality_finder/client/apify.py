"""
Apify actor client - trigger a Sreality scrape, wait for it, download the dataset.
"""
import logging
import time
from typing import Any, Callable, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from ..config import ApifyConfig, get_config
from ..errors import ConfigurationError, ScrapeTimeoutError, UpstreamError
from ..models.listing import RawListing
from ..models.search import NormalizedSearchParams


logger = logging.getLogger(__name__)


def build_actor_input(params: NormalizedSearchParams) -> dict[str, Any]:
    """Actor input with unset filters left out."""
    actor_input: dict[str, Any] = {"city": params.city}

    if params.price_max:
        actor_input["priceMax"] = params.price_max
    if params.price_m2_max:
        actor_input["priceM2Max"] = params.price_m2_max
    if params.rooms_from:
        actor_input["roomsFrom"] = params.rooms_from
    if params.keywords:
        actor_input["keywords"] = list(params.keywords)

    return actor_input


class ApifyClient:
    """
    Runs the scraping actor and returns its dataset as raw listing dicts.
    The run is polled at a fixed interval until it finishes or the
    configured maximum wait is exceeded.
    """

    SUCCEEDED = "SUCCEEDED"
    FAILED_STATUSES = ("FAILED", "ABORTED", "TIMED-OUT")

    def __init__(
        self,
        config: Optional[ApifyConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or get_config().apify
        self.session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock

        if not self.config.token:
            raise ConfigurationError("APIFY_TOKEN is not configured")

    @property
    def _auth(self) -> dict[str, str]:
        return {"token": self.config.token}

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        before_sleep=lambda retry_state: logger.warning(
            f"Retry attempt {retry_state.attempt_number}"
        ),
        reraise=True,
    )
    def _get(self, url: str, params: dict[str, Any]) -> requests.Response:
        """GET with retries on connection problems; HTTP errors are not retried."""
        return self.session.get(url, params=params, timeout=self.config.request_timeout_s)

    def fetch_listings(self, params: NormalizedSearchParams) -> list[RawListing]:
        """
        Run the actor for the given search and return the scraped listings.

        Raises:
            UpstreamError: The run could not be started, failed, or its data
                could not be downloaded
            ScrapeTimeoutError: The run did not finish in time
        """
        actor_input = build_actor_input(params)
        logger.info(f"Triggering Apify actor {self.config.actor_slug} with input {actor_input}")

        run_id = self._start_run(actor_input)
        dataset_id = self._wait_for_dataset(run_id)
        items = self._download_dataset(dataset_id)

        logger.info(f"Apify dataset downloaded: {len(items)} items")
        return items

    def _start_run(self, actor_input: dict[str, Any]) -> str:
        url = f"{self.config.base_url}/acts/{self.config.actor_slug}/runs"
        try:
            response = self.session.post(
                url,
                params=self._auth,
                json={"input": actor_input},
                timeout=self.config.request_timeout_s,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Apify run creation failed: {e}") from e

        if not response.ok:
            raise UpstreamError(f"Apify run creation failed: {response.text}")

        run_id = self._run_data(response).get("id")
        if not run_id:
            raise UpstreamError("Apify run id missing")

        logger.info(f"Apify run {run_id} started")
        return run_id

    def _wait_for_dataset(self, run_id: str) -> str:
        """Poll the run until it succeeds and return its default dataset id."""
        url = f"{self.config.base_url}/actor-runs/{run_id}"
        start = self._clock()

        while self._clock() - start < self.config.max_poll_duration_s:
            try:
                response = self._get(url, self._auth)
            except requests.RequestException as e:
                raise UpstreamError(f"Failed to poll Apify run: {e}") from e

            if not response.ok:
                raise UpstreamError(f"Failed to poll Apify run: {response.text}")

            run = self._run_data(response)
            status = run.get("status")

            if status == self.SUCCEEDED:
                dataset_id = run.get("defaultDatasetId")
                if not dataset_id:
                    raise UpstreamError("Apify run succeeded but dataset id missing")
                return dataset_id

            if status in self.FAILED_STATUSES:
                raise UpstreamError(f"Apify run ended with status {status}")

            logger.debug(f"Apify run {run_id} status {status}, waiting")
            self._sleep(self.config.poll_interval_s)

        raise ScrapeTimeoutError("Apify run polling timed out")

    def _download_dataset(self, dataset_id: str) -> list[RawListing]:
        url = f"{self.config.base_url}/datasets/{dataset_id}/items"
        try:
            response = self._get(url, {**self._auth, "clean": "1"})
        except requests.RequestException as e:
            raise UpstreamError(f"Failed to download Apify dataset: {e}") from e

        if not response.ok:
            raise UpstreamError(f"Failed to download Apify dataset: {response.text}")

        try:
            items = response.json()
        except ValueError as e:
            raise UpstreamError(f"Apify dataset is not valid JSON: {e}") from e

        if not isinstance(items, list):
            raise UpstreamError("Apify dataset is not a list")

        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _run_data(response: requests.Response) -> dict[str, Any]:
        """The `data` object of an Apify run response."""
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"Apify returned invalid JSON: {e}") from e
        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, dict) else {}
