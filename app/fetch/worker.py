import logging

import httpx

from .base import Deadline, FetchFailure, FetchResult, FetchSuccess

logger = logging.getLogger(__name__)

async def fetch(client: httpx.AsyncClient, url: str, deadline: Deadline) -> FetchResult:
    """
    Fetch one URL within the shared deadline.

    Never raises for per-URL problems: malformed URLs, connection errors,
    broken bodies and the deadline itself all come back as a FetchFailure.
    Non-2xx responses are returned as data.
    """
    try:
        async with deadline.scope():
            response = await client.get(url)
    except TimeoutError:
        return _failed(url, deadline.describe())
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return _failed(url, str(e) or type(e).__name__)
    except Exception as e:
        # bad IDNA labels, out-of-range ports and the like surface below httpx
        return _failed(url, f"{type(e).__name__}: {e}" if str(e) else type(e).__name__)

    logger.debug(
        f"FETCHED {url}: {response.status_code}, {len(response.content)} bytes, "
        f"{deadline.remaining():.2f}s left"
    )
    return FetchSuccess(url=url, data=response.text)

def _failed(url: str, detail: str) -> FetchFailure:
    error = f'GET "{url}": {detail}'
    logger.warning(f"FETCH FAILED {error}")
    return FetchFailure(url=url, error=error)
