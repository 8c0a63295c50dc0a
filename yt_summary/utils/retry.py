from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
from yt_summary.config import settings

def transport_retry():
    """Retry connection-level failures only; HTTP errors (429 included) surface immediately."""
    return retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
        )),
        reraise=True
    )
