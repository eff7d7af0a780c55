import logging

import requests

from .result import ProbeResult

logger = logging.getLogger(__name__)


class ContainerManager:
    def __init__(self, auth, timeout: float = None, verify: bool = True):
        self.auth = auth
        self.timeout = timeout
        self.verify = verify

    def _endpoint(self) -> str:
        return self.auth.account.endpoint('blob')

    def get_properties(self, container: str) -> ProbeResult:
        hdrs, url = self.auth.sign('GET', self._endpoint(), path=f"/{container}",
                                   query={'restype': 'container'})
        r = requests.get(url, headers=hdrs, timeout=self.timeout, verify=self.verify)
        logger.debug("get properties %s: %s %s", container, r.status_code, r.reason)
        return ProbeResult.from_response(r)

    def acquire_lease(self, container: str, duration: int = 60,
                      proposed_lease_id: str = None) -> ProbeResult:
        headers = {
            'x-ms-lease-action': 'acquire',
            'x-ms-lease-duration': str(duration),
        }
        if proposed_lease_id:
            headers['x-ms-proposed-lease-id'] = proposed_lease_id
        hdrs, url = self.auth.sign('PUT', self._endpoint(), path=f"/{container}",
                                   query={'restype': 'container', 'comp': 'lease'},
                                   headers=headers)
        r = requests.put(url, headers=hdrs, data=b'', timeout=self.timeout, verify=self.verify)
        logger.debug("acquire lease %s: %s %s", container, r.status_code, r.reason)
        return ProbeResult.from_response(r)
