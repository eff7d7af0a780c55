import base64
import binascii
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

import yaml

from .utils import InvalidCredentialError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = '2014-02-14'
DEFAULT_TIMEOUT = 30

# Well-known emulator account
DEVELOPMENT_ACCOUNT_NAME = 'devstoreaccount1'
DEVELOPMENT_ACCOUNT_KEY = ('Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/'
                           'K1SZFPTOtr/KBHBeksoGMGw==')
DEVELOPMENT_HOST = 'http://127.0.0.1'
DEVELOPMENT_PORTS = {'blob': 10000, 'queue': 10001}


@dataclass
class StorageAccount:
    name: str
    key: bytes
    blob_endpoint: str = None
    queue_endpoint: str = None

    def endpoint(self, service: str) -> str:
        url = getattr(self, f"{service}_endpoint")
        if not url:
            raise ValueError(f"No {service} endpoint configured for account '{self.name}'")
        return url.rstrip('/')


def decode_account_key(text: str) -> bytes:
    try:
        key = base64.b64decode(text, validate=True)
    except (binascii.Error, TypeError) as e:
        raise InvalidCredentialError("account key is not valid base64") from e
    if not key:
        raise InvalidCredentialError("account key is empty")
    return key


def development_account(proxy_uri: str = None) -> StorageAccount:
    host = DEVELOPMENT_HOST
    if proxy_uri:
        parsed = urlparse(proxy_uri)
        host = f"{parsed.scheme or 'http'}://{parsed.hostname}"
    endpoints = {
        svc: f"{host}:{port}/{DEVELOPMENT_ACCOUNT_NAME}"
        for svc, port in DEVELOPMENT_PORTS.items()
    }
    return StorageAccount(
        name=DEVELOPMENT_ACCOUNT_NAME,
        key=decode_account_key(DEVELOPMENT_ACCOUNT_KEY),
        blob_endpoint=endpoints['blob'],
        queue_endpoint=endpoints['queue'],
    )


def parse_connection_string(text: str) -> StorageAccount:
    """Parse a storage connection string (Key=Value pairs separated by ';')."""
    settings = {}
    for part in text.split(';'):
        if not part.strip():
            continue
        k, sep, v = part.partition('=')
        if not sep:
            raise ValueError(f"Malformed connection string segment '{part}'")
        settings[k.strip()] = v.strip()

    if settings.get('UseDevelopmentStorage', '').lower() == 'true':
        logger.debug("using development storage account")
        return development_account(settings.get('DevelopmentStorageProxyUri'))

    for key in ('AccountName', 'AccountKey'):
        if not settings.get(key):
            raise ValueError(f"Missing '{key}' in connection string")

    name = settings['AccountName']
    protocol = settings.get('DefaultEndpointsProtocol', 'https')
    suffix = settings.get('EndpointSuffix', 'core.windows.net')
    return StorageAccount(
        name=name,
        key=decode_account_key(settings['AccountKey']),
        blob_endpoint=settings.get('BlobEndpoint') or f"{protocol}://{name}.blob.{suffix}",
        queue_endpoint=settings.get('QueueEndpoint') or f"{protocol}://{name}.queue.{suffix}",
    )


def load_config(profile: str, config_file: str = ".config.yaml") -> dict:
    """Load the configuration for a specific profile from the YAML file."""
    with open(config_file, "r") as f:
        full_config = yaml.safe_load(f) or {}

    if profile not in full_config:
        raise ValueError(f"Profile '{profile}' not found in {config_file}")

    return full_config[profile]


def account_from_config(conf: dict) -> StorageAccount:
    if conf.get('connection_string'):
        return parse_connection_string(conf['connection_string'])

    for key in ('account_name', 'account_key'):
        if not conf.get(key):
            raise ValueError(f"Missing '{key}' in config")

    return StorageAccount(
        name=conf['account_name'],
        key=decode_account_key(conf['account_key']),
        blob_endpoint=conf.get('blob_endpoint'),
        queue_endpoint=conf.get('queue_endpoint'),
    )
