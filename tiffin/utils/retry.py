# tiffin/utils/retry.py
import logging

import redis
import requests
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tiffin.utils.settings import HTTP_RETRY_ATTEMPTS, REDIS_RETRY_ATTEMPTS
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry(attempts: int = HTTP_RETRY_ATTEMPTS):
    """Dostawca tozsamosci: tylko bledy sieci, odpowiedz 4xx nie jest ponawiana."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def redis_retry(attempts: int = REDIS_RETRY_ATTEMPTS):
    # guard i stash; po wyczerpaniu prob blad idzie do serwisu
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
