# wipercheck/core/http.py
from typing import Any, Dict, Optional

import httpx

from wipercheck.core.errors import ProviderError
from wipercheck.core.logger import logger


async def get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    provider: str,
    params: Optional[Dict[str, Any]] = None,
    max_retries: int = 2,
) -> httpx.Response:
    """
    Issue an idempotent GET, retrying on request errors and non-2xx codes.

    Request errors cover transport failures as well as undecodable
    bodies and redirect loops.

    The request is attempted at most ``1 + max_retries`` times. The last
    failure is raised as ProviderError naming the provider.
    """
    attempts = 1 + max(max_retries, 0)

    for attempt in range(1, attempts + 1):
        try:
            response = await client.get(url, params=params)
        except httpx.RequestError as exc:
            if attempt < attempts:
                logger.debug(
                    f"{provider} request failed (attempt {attempt}/{attempts}): {exc!r}"
                )
                continue
            raise ProviderError(provider, f"error on api request: {exc!r}") from exc

        if response.is_success:
            return response

        if attempt < attempts:
            logger.debug(
                f"{provider} returned {response.status_code} "
                f"(attempt {attempt}/{attempts})"
            )
            continue
        raise ProviderError(provider, f"error code {response.status_code} returned")

    # Unreachable: the loop always returns or raises
    raise ProviderError(provider, "request failed after all retries")


def read_json(response: httpx.Response, provider: str) -> Any:
    """Decode a JSON body, turning parse errors into ProviderError."""
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError(provider, f"error unmarshalling response: {exc}") from exc
