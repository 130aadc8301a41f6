import requests

from basket_service.utils.retry import is_transient_http_error
from basket_service.utils.settings import BASKET_LOCK_TTL_SECONDS, CATALOG_LOOKUP_BUDGET_SECONDS


class Resp:
    def __init__(self, status_code):
        self.status_code = status_code


def test_connection_and_timeout_errors_are_transient():
    assert is_transient_http_error(requests.ConnectionError("refused"))
    assert is_transient_http_error(requests.Timeout("slow"))


def test_only_5xx_http_errors_are_transient():
    assert is_transient_http_error(requests.HTTPError("boom", response=Resp(502)))
    assert not is_transient_http_error(requests.HTTPError("bad", response=Resp(400)))
    assert not is_transient_http_error(requests.HTTPError("gone", response=Resp(404)))


def test_other_errors_are_not_retried():
    assert not is_transient_http_error(ValueError("nope"))
    assert not is_transient_http_error(requests.TooManyRedirects("loop"))


def test_basket_lock_outlives_two_catalog_lookups():
    assert BASKET_LOCK_TTL_SECONDS > 2 * CATALOG_LOOKUP_BUDGET_SECONDS
