"""
Async HTTP client that keeps retrying until a page is fetched.

Built on httpx with:
- Unbounded retry with capped exponential backoff (tenacity)
- Strict body decoding (an unreadable body counts as a failure)
- Injectable sleep for tests
"""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_never,
    wait_exponential,
)

logger = structlog.get_logger(__name__)


USER_AGENT = "Mozilla/5.0 (compatible; GuildWarsBot/1.0)"
INITIAL_BACKOFF_SECONDS = 1
MAX_BACKOFF_SECONDS = 300  # 5 minutes

# Anything here is transient: retried forever, never surfaced
RETRYABLE_ERRORS = (httpx.HTTPError,)


def decode_body(response: httpx.Response) -> str:
    """
    Decode a response body without replacement characters.

    Raises:
        httpx.DecodingError: If the body is not valid in its declared charset
            or the charset is unknown
    """
    encoding = response.charset_encoding or "utf-8"
    try:
        return response.content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise httpx.DecodingError(
            f"Unreadable body ({encoding}): {e}", request=response.request
        ) from e


def describe_error(error: Optional[BaseException]) -> str:
    """Short log-friendly description of a fetch failure."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return f"{type(error).__name__}: {error}"


class HttpClient:
    """
    Async HTTP client that blocks until a page is fetched.

    Usage:
        async with HttpClient() as client:
            html = await client.fetch_with_retry(url, "Daily activities")
    """

    def __init__(
        self,
        timeout: float = 30.0,
        initial_backoff: float = INITIAL_BACKOFF_SECONDS,
        max_backoff: float = MAX_BACKOFF_SECONDS,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
            initial_backoff: First retry delay in seconds
            max_backoff: Retry delay cap in seconds
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (tests use MockTransport)
            sleep: Coroutine used for backoff sleeps
        """
        self.timeout = timeout
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.user_agent = user_agent
        self.transport = transport
        self.sleep = sleep

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _retrying(self, url: str, label: str) -> AsyncRetrying:
        """Fresh retry controller, so backoff restarts on every call."""

        def log_failure(retry_state: RetryCallState) -> None:
            logger.warning(
                "fetch_failed",
                label=label,
                url=url,
                attempt=retry_state.attempt_number,
                error=describe_error(retry_state.outcome.exception()),
                retry_in=retry_state.next_action.sleep,
            )

        return AsyncRetrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            wait=wait_exponential(multiplier=self.initial_backoff, max=self.max_backoff),
            stop=stop_never,
            before_sleep=log_failure,
            sleep=self.sleep,
        )

    async def _get_once(self, url: str) -> str:
        """Single GET attempt; raises on any non-success."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        response = await self._client.get(url)
        response.raise_for_status()
        return decode_body(response)

    async def fetch_with_retry(self, url: str, label: str) -> str:
        """
        GET a page, retrying until it succeeds.

        Network errors, non-2xx statuses and undecodable bodies are all
        retried with exponential backoff; there is no attempt limit.

        Args:
            url: URL to fetch
            label: Human-readable page name for log lines

        Returns:
            Response body text
        """
        logger.debug("http_get", label=label, url=url)

        async for attempt in self._retrying(url, label):
            with attempt:
                body = await self._get_once(url)
                logger.info("fetched", label=label, bytes=len(body))
                return body
