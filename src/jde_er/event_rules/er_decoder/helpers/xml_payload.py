# jde_er/event_rules/er_decoder/helpers/xml_payload.py

import codecs
import re
from collections.abc import Iterator

from lxml import etree

from jde_er.event_rules.errors import MalformedDocumentError

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_PARSER = etree.XMLParser(remove_comments=True, remove_pis=True, resolve_entities=False)


def decode_payload(payload: str | bytes | None) -> str:
    """Return the payload as text. Bytes carrying a UTF-16 BOM (or NUL-interleaved
    ASCII, as produced by the spec extraction layer) decode as UTF-16, anything else
    as UTF-8. Undecodable bytes become U+FFFD; a stray trailing NUL pad on UTF-16
    data is dropped.
    """
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload

    if payload.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        encoding = "utf-16"
    elif len(payload) >= 2 and payload[1] == 0 and payload[0] != 0:
        encoding = "utf-16-le"
    elif len(payload) >= 2 and payload[0] == 0 and payload[1] != 0:
        encoding = "utf-16-be"
    else:
        return payload.decode("utf-8-sig", errors="replace")

    if len(payload) % 2 and payload.endswith(b"\0"):
        payload = payload[:-1]
    return payload.decode(encoding, errors="replace")


def normalize_xml_payload(payload: str | bytes | None) -> str:
    """Spec XML can contain padding or non-XML bytes; normalize to the first element."""
    cleaned = (
        decode_payload(payload)
        .replace("\0", "")
        .replace("\ufeff", "")
        .replace("\u200b", "")
        .lstrip()
    )
    start = cleaned.find("<")
    if start > 0:
        cleaned = cleaned[start:]

    # lxml refuses str input that still declares an encoding
    return _XML_DECLARATION.sub("", cleaned, count=1).lstrip()


def has_payload(payload: str | bytes | None) -> bool:
    return bool(normalize_xml_payload(payload))


def parse_xml(payload: str | bytes | None, what: str = "XML") -> etree._Element:
    """Parse a normalized payload into an lxml element tree and return its root."""
    text = normalize_xml_payload(payload)
    if not text:
        raise MalformedDocumentError(f"{what} root not found.")
    try:
        return etree.fromstring(text, _PARSER)
    except etree.XMLSyntaxError as e:
        raise MalformedDocumentError(f"{what} is not well-formed: {e}") from e


def local_name(element: etree._Element) -> str:
    """Element name without its namespace."""
    return etree.QName(element).localname


def iter_elements(element: etree._Element) -> Iterator[etree._Element]:
    """All descendants of element in document order (element itself excluded)."""
    return element.iterdescendants(etree.Element)


def child_elements(element: etree._Element) -> Iterator[etree._Element]:
    return element.iterchildren(etree.Element)


def find_descendant(element: etree._Element | None, name: str) -> etree._Element | None:
    """First descendant whose local name is `name`."""
    if element is None:
        return None
    return next((el for el in iter_elements(element) if local_name(el) == name), None)


def find_descendants(element: etree._Element | None, name: str) -> list[etree._Element]:
    if element is None:
        return []
    return [el for el in iter_elements(element) if local_name(el) == name]


def find_children(element: etree._Element | None, name: str) -> list[etree._Element]:
    if element is None:
        return []
    return [el for el in child_elements(element) if local_name(el) == name]


def first_child(element: etree._Element | None) -> etree._Element | None:
    if element is None:
        return None
    return next(child_elements(element), None)


def attr(element: etree._Element | None, name: str, default: str | None = None) -> str | None:
    if element is None:
        return default
    return element.get(name, default)
