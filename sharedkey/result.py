from dataclasses import dataclass
import xml.etree.ElementTree as ET


@dataclass
class ProbeResult:
    status_code: int
    reason: str
    error_code: str = None
    error_message: str = None
    body: str = ''

    @classmethod
    def from_response(cls, resp) -> 'ProbeResult':
        code, message = parse_error_body(resp.text)
        return cls(
            status_code=resp.status_code,
            reason=resp.reason,
            error_code=code,
            error_message=message,
            body=resp.text,
        )


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def parse_error_body(text: str) -> (str, str):
    """Return the Code and Message of a storage error body, or (None, None)."""
    if not text or not text.strip():
        return None, None
    try:
        # the service prefixes its bodies with a BOM
        root = ET.fromstring(text.lstrip('\ufeff'))
    except ET.ParseError:
        return None, None
    found = {}
    for el in root:
        name = _local_name(el.tag)
        if name in ('Code', 'Message') and name not in found:
            found[name] = el.text
    return found.get('Code'), found.get('Message')
