# basket_service/utils/retry.py
import requests
import redis
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception

from basket_service.utils.settings import (
    HTTP_RETRY_ATTEMPTS,
    HTTP_RETRY_MAX_WAIT,
    REDIS_RETRY_ATTEMPTS,
    REDIS_RETRY_MAX_WAIT,
)


def is_transient_http_error(exc: BaseException) -> bool:
    """Polaczenie, timeout albo 5xx. 4xx sie nie poprawi po ponowieniu."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is None or response.status_code >= 500
    return False


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(HTTP_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=HTTP_RETRY_MAX_WAIT),
        retry=retry_if_exception(is_transient_http_error),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(REDIS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=REDIS_RETRY_MAX_WAIT),
        retry=retry_if_exception(
            lambda exc: isinstance(exc, (redis.ConnectionError, redis.TimeoutError))
        ),
    )
