import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

HEADER_PREFIX = 'x-ms-'

# Standard headers between the verb and the canonicalized headers, in order.
# Only Content-Length is ever filled in.
STANDARD_HEADERS = (
    'Content-Encoding',
    'Content-Language',
    'Content-Length',
    'Content-MD5',
    'Content-Type',
    'Date',
    'If-Modified-Since',
    'If-Match',
    'If-None-Match',
    'If-Unmodified-Since',
    'Range',
)


class InvalidCredentialError(ValueError):
    """The account key cannot be used to sign a request."""


def uri_segments(path: str) -> list:
    """
    Split a URL path into segments the way URI parsers report them:
    '/' first, then every segment with its trailing slash kept.

    >>> uri_segments('/devstoreaccount1/queue/messages')
    ['/', 'devstoreaccount1/', 'queue/', 'messages']
    """
    path = path or '/'
    segments = ['/']
    rest = path[1:] if path.startswith('/') else path
    while rest:
        head, sep, rest = rest.partition('/')
        segments.append(head + sep)
    return segments


@dataclass
class SigningRequest:
    method: str
    segments: list
    headers: dict = field(default_factory=dict)

    @classmethod
    def from_url(cls, method: str, url: str, headers: dict = None) -> 'SigningRequest':
        return cls(method, uri_segments(urlparse(url).path), dict(headers or {}))

    @classmethod
    def from_prepared(cls, prepared) -> 'SigningRequest':
        """Build from a requests.PreparedRequest, after its body has been prepared."""
        return cls.from_url(prepared.method, prepared.url, prepared.headers)


class SharedKeySigner:
    @staticmethod
    def canonicalized_headers(headers: dict) -> list:
        # No folding of multi-line values; they are signed verbatim.
        rendered = [f"{k}:{v}" for k, v in headers.items() if k.startswith(HEADER_PREFIX)]
        return sorted(rendered)

    @staticmethod
    def canonicalized_resource(account_name: str, segments: list, query: dict) -> str:
        query_lines = [f"{k}:{query[k]}" for k in sorted(query or {})]
        return '/' + account_name + ''.join(segments) + '\n' + '\n'.join(query_lines)

    @staticmethod
    def string_to_sign(request: SigningRequest, account_name: str, query: dict,
                       content_length_override: str = '') -> str:
        content_length = request.headers.get('Content-Length')
        if content_length is None:
            content_length = content_length_override or ''
        standard = dict.fromkeys(STANDARD_HEADERS, '')
        standard['Content-Length'] = str(content_length)
        return '\n'.join([
            request.method,
            *standard.values(),
            '\n'.join(SharedKeySigner.canonicalized_headers(request.headers)),
            SharedKeySigner.canonicalized_resource(account_name, request.segments, query),
        ])

    @staticmethod
    def sign(request: SigningRequest, account_name: str, account_key: bytes, query: dict,
             content_length_override: str = '') -> str:
        """
        Shared Key signature for a storage REST request.
        - request: method, URI segments and the headers already set on it
        - account_key: raw key bytes (the Base64-decoded account key)
        - query: the literal query parameters present on the request URI
        - content_length_override: used when the request has no Content-Length header
        Returns the Base64 HMAC-SHA256 signature.
        """
        if not isinstance(account_key, (bytes, bytearray, memoryview)):
            raise InvalidCredentialError(
                f"account key must be raw bytes, got {type(account_key).__name__}")
        if len(account_key) == 0:
            raise InvalidCredentialError("account key is empty")

        string_to_sign = SharedKeySigner.string_to_sign(
            request, account_name, query, content_length_override)
        logger.debug("string to sign: %r", string_to_sign)

        digest = hmac.new(bytes(account_key), string_to_sign.encode('utf-8'),
                          hashlib.sha256).digest()
        return base64.b64encode(digest).decode('utf-8')

    @staticmethod
    def authorization(account_name: str, signature: str) -> str:
        return f"SharedKey {account_name}:{signature}"
