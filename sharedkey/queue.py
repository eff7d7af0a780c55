import logging
from urllib.parse import quote

import requests

from .result import ProbeResult

logger = logging.getLogger(__name__)


class QueueManager:
    def __init__(self, auth, timeout: float = None, verify: bool = True):
        self.auth = auth
        self.timeout = timeout
        self.verify = verify

    def update_message(self, queue: str, message_id: str, pop_receipt: str,
                       visibility_timeout: int = 60) -> ProbeResult:
        """
        Update Message with the given pop receipt. A mismatched receipt is
        documented as 400 PopReceiptMismatch; the result records what the
        service actually answered.
        """
        path = f"/{queue}/messages/{quote(message_id, safe='')}"
        hdrs, url = self.auth.sign(
            'PUT', self.auth.account.endpoint('queue'), path=path,
            query={'popreceipt': pop_receipt, 'visibilitytimeout': visibility_timeout})
        r = requests.put(url, headers=hdrs, data=b'', timeout=self.timeout, verify=self.verify)
        logger.debug("update message %s/%s: %s %s", queue, message_id, r.status_code, r.reason)
        return ProbeResult.from_response(r)
