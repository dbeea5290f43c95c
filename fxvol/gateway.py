"""
Market-data gateway access: health check and surface retrieval.

The gateway fronts a Bloomberg reference-data service:

    GET  {base}/health               -> 200 when the gateway is up
    POST {base}/bloomberg/reference  -> {securities: [...], fields: [...]}

Surface retrieval has two paths:
    1. Mock: dev mode, or a base URL that is not a live gateway. Sleeps
       briefly to simulate latency, then returns a synthetic surface.
    2. Gateway: builds the ATM/RR/BF identifiers for the pair, splits
       them into batches and posts all batches concurrently.

The reference-data response format has not been settled with the
gateway owners, so the gateway path does not parse the quotes yet; once
the batches come back it serves a synthetic surface as well. When the
gateway path fails, the fetcher falls back to synthetic data unless
fallback is disabled (config.FALLBACK_TO_MOCK / fallback_to_mock=False),
in which case SurfaceFetchError propagates.
"""

import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import httpx

from . import config
from .mock_data import generate_mock_surface
from .securities import build_securities, chunk, classify_security
from .surface import VolatilitySurface

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    """Base class for gateway failures."""


class SurfaceFetchError(GatewayError):
    """Network, status or decoding failure while fetching surface data."""


class GatewayClient:
    """Thin httpx wrapper around the gateway endpoints."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: Gateway base URL. Defaults to config.API_BASE_URL
            timeout: Request timeout for reference-data calls, seconds.
                Defaults to config.REQUEST_TIMEOUT
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def is_live_gateway(self) -> bool:
        return config.LIVE_GATEWAY_MARKER in self.base_url

    def check_connection(self) -> bool:
        """True only if the health endpoint answers 200 within the timeout."""
        try:
            response = self._client.get(config.HEALTH_PATH, timeout=config.HEALTH_TIMEOUT)
        except httpx.HTTPError as e:
            logger.debug(f"Health check failed: {e}")
            return False
        return response.status_code == 200

    def fetch_reference(self, securities: Sequence[str], fields: Sequence[str] = None) -> dict:
        """
        POST one batch of securities to the reference-data endpoint.

        Raises:
            SurfaceFetchError: on transport errors, non-2xx status, or a
                body that is not JSON
        """
        if fields is None:
            fields = config.REFERENCE_FIELDS

        payload = {"securities": list(securities), "fields": list(fields)}
        try:
            response = self._client.post(config.REFERENCE_PATH, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise SurfaceFetchError(
                f"Gateway returned {e.response.status_code} for reference request"
            ) from e
        except httpx.HTTPError as e:
            raise SurfaceFetchError(f"Reference request failed: {e}") from e
        except ValueError as e:
            raise SurfaceFetchError(f"Reference response is not valid JSON: {e}") from e

    def fetch_reference_batches(
        self,
        securities: Sequence[str],
        batch_size: int = None,
        max_workers: int = None,
    ) -> List[dict]:
        """
        Split securities into batches and request them concurrently.

        Results come back in batch order. The first failing batch raises
        SurfaceFetchError, whatever the underlying exception.
        """
        if max_workers is None:
            max_workers = config.MAX_WORKERS

        batches = chunk(securities, batch_size)
        if not batches:
            return []

        logger.debug(f"Requesting {len(securities)} securities in {len(batches)} batches")
        try:
            with ThreadPoolExecutor(max_workers=min(max_workers, len(batches))) as executor:
                return list(executor.map(self.fetch_reference, batches))
        except SurfaceFetchError:
            raise
        except Exception as e:
            raise SurfaceFetchError(f"Reference request failed: {e!r}") from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def validate_selection(pair: str, mode: str) -> None:
    if pair not in config.CURRENCY_PAIRS:
        raise ValueError(f"Unknown currency pair: {pair}.")
    if mode not in config.DATA_MODES:
        raise ValueError(f"Unknown data mode: {mode}. Use one of {', '.join(config.DATA_MODES)}.")


def fetch_volatility_surface(
    pair: str,
    mode: str = None,
    client: GatewayClient = None,
    dev_mode: bool = None,
    fallback_to_mock: bool = None,
    delay: float = None,
    seed: Optional[int] = None,
) -> VolatilitySurface:
    """
    Main entry point for getting a pair's vol surface.

    Parameters
    ----------
    pair : currency pair code
    mode : data mode label (default: config.DEFAULT_MODE). Only validated;
           every mode is fetched the same way
    client : gateway client (default: a new one on config.API_BASE_URL)
    dev_mode : force the mock path (default: config.DEV_MODE)
    fallback_to_mock : serve synthetic data when the gateway fails
                       (default: config.FALLBACK_TO_MOCK)
    delay : simulated latency on the mock path (default: config.MOCK_DELAY)
    seed : seed for the synthetic generator

    Returns
    -------
    VolatilitySurface

    Raises
    ------
    ValueError : unknown pair or mode
    SurfaceFetchError : gateway failure with fallback disabled
    """
    if mode is None:
        mode = config.DEFAULT_MODE
    if dev_mode is None:
        dev_mode = config.DEV_MODE
    if fallback_to_mock is None:
        fallback_to_mock = config.FALLBACK_TO_MOCK
    if delay is None:
        delay = config.MOCK_DELAY

    validate_selection(pair, mode)

    owns_client = client is None
    if owns_client:
        client = GatewayClient()

    try:
        if dev_mode or not client.is_live_gateway:
            if delay > 0:
                time.sleep(delay)
            return generate_mock_surface(pair, seed=seed)

        try:
            securities = build_securities(pair)
            mix = Counter(classify_security(s) for s in securities)
            logger.debug(f"{pair}: {mix['atm']} ATM, {mix['rr']} RR, {mix['bf']} BF identifiers")
            batches = client.fetch_reference_batches(securities)
        except SurfaceFetchError as e:
            if not fallback_to_mock:
                raise
            logger.error(f"Failed to fetch volatility surface for {pair}: {e}")
            return generate_mock_surface(pair, seed=seed)

        # TODO: build the matrix from the quotes once the gateway publishes its response schema
        logger.warning(
            f"Received {len(batches)} reference batches for {pair} ({mode}); "
            "quote parsing is not available, serving synthetic surface"
        )
        return generate_mock_surface(pair, seed=seed)
    finally:
        if owns_client:
            client.close()
