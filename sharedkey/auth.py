import datetime
import logging
from urllib.parse import quote

from .config import DEFAULT_API_VERSION
from .utils import SharedKeySigner, SigningRequest

logger = logging.getLogger(__name__)


def rfc1123_now() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime('%a, %d %b %Y %H:%M:%S GMT')


def encode_query(query: dict) -> str:
    return '&'.join(f"{quote(k, safe='')}={quote(str(v), safe='')}" for k, v in query.items())


class Authenticator:
    def __init__(self, account, api_version: str = DEFAULT_API_VERSION):
        self.account = account
        self.api_version = api_version

    def sign(self, method: str, endpoint: str, path: str = '', query: dict = None,
             headers: dict = None, payload: bytes = b'') -> (dict, str):
        """
        Build the URL and headers for a Shared Key request.
        Query values are escaped in the URL but signed as given.
        """
        query = {k: str(v) for k, v in (query or {}).items()}
        headers = headers.copy() if headers else {}
        headers['x-ms-version'] = headers.get('x-ms-version', self.api_version)
        headers['x-ms-date'] = headers.get('x-ms-date', rfc1123_now())

        url = endpoint.rstrip('/') + path
        if query:
            url += '?' + encode_query(query)

        # requests sends Content-Length for everything but GET/HEAD
        content_length = '' if method in ('GET', 'HEAD') else str(len(payload or b''))

        request = SigningRequest.from_url(method, url, headers)
        signature = SharedKeySigner.sign(request, self.account.name, self.account.key,
                                         query, content_length)
        headers['Authorization'] = SharedKeySigner.authorization(self.account.name, signature)
        logger.debug("signed %s %s", method, url)
        return headers, url
