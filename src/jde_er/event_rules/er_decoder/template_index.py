# jde_er/event_rules/er_decoder/template_index.py
"""Data structure template (DSTMPL) parsing.

The template XML is a root element whose first child is the template root; every
descendant of the template root that carries an item id, alias and field name is a
template item. Items are indexed by id, first occurrence wins.

xmltodict groups same-named siblings under one key, so the element dicts are
collected with a postprocessor as each element closes. That keeps document order
across mixed tag names (items are leaf elements, so close order is open order).
"""

import logging
from collections.abc import Iterable
from xml.parsers.expat import ExpatError

import xmltodict

from jde_er.event_rules.entities.data_structure_template import DataStructureTemplate
from jde_er.event_rules.entities.template_item import DataStructureTemplateItem
from jde_er.event_rules.er_decoder.helpers.xml_payload import normalize_xml_payload
from jde_er.event_rules.errors import MalformedTemplateError

logger = logging.getLogger(__name__)

# Attribute names per field, in lookup order
ATTRIBUTE_MAPS = {
    "id": ("@ItemID", "@idItem"),
    "alias": ("@DDAlias",),
    "field_name": ("@FieldName",),
    "display_sequence": ("@DisplaySequence",),
    "copy_word": ("@CopyWord",),
}
TEMPLATE_NAME_ATTRIBUTES = ("@szTmplName", "@szTemplateName", "@szName")
DESCRIPTION_ATTRIBUTES = ("@szDescription", "@szDesc", "@szTitle", "@szTemplateDesc", "@szTemplateName")
REQUIRED_FIELDS = ("id", "alias", "field_name")

ROOT_DEPTH = 1
TEMPLATE_ROOT_DEPTH = 2


def _is_child_key(key: str) -> bool:
    return not key.startswith(("@", "#"))


def _first_attribute(element: dict, names: tuple[str, ...]) -> str | None:
    for name in names:
        value = element.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _parse_in_order(text: str) -> tuple[dict, list[tuple[int, dict | str | None]]]:
    """Parse with xmltodict and also return (depth, value) for every element, in close order."""
    closed: list[tuple[int, dict | str | None]] = []

    def record_element(path, key, value):
        # Attributes (@) and text (#text) pass through here too
        if _is_child_key(key):
            closed.append((len(path), value))
        return key, value

    doc = xmltodict.parse(text, postprocessor=record_element)
    return doc, closed


def _template_elements(closed: list[tuple[int, dict | str | None]]) -> list[dict] | None:
    """Element dicts below the template root (the first child of the root), or None
    when the root has no child element.
    """
    elements: list[dict] = []
    for depth, value in closed:
        if depth == TEMPLATE_ROOT_DEPTH:
            # Siblings close in document order: the first one to close is the template root
            return elements
        if depth > TEMPLATE_ROOT_DEPTH and isinstance(value, dict):
            elements.append(value)
    return None


def _find_template_name(root: dict, closed: list[tuple[int, dict | str | None]]) -> str | None:
    name = _first_attribute(root, TEMPLATE_NAME_ATTRIBUTES)
    if name:
        return name
    for depth, value in closed:
        if depth > ROOT_DEPTH and isinstance(value, dict):
            name = _first_attribute(value, ("@szTmplName",))
            if name:
                return name
    return None


def create_template_item(element: dict) -> DataStructureTemplateItem | None:
    """Build an item from one element dict; None when a required attribute is blank."""
    fields = {field: _first_attribute(element, names) for field, names in ATTRIBUTE_MAPS.items()}
    if any(fields[field] is None for field in REQUIRED_FIELDS):
        return None
    return DataStructureTemplateItem(**fields)


def build_item_index(elements: Iterable[dict]) -> dict[str, DataStructureTemplateItem]:
    index: dict[str, DataStructureTemplateItem] = {}
    for element in elements:
        item = create_template_item(element)
        if item is None:
            continue
        # Preserve the first occurrence to keep a deterministic mapping
        if item.id not in index:
            index[item.id] = item
        else:
            logger.debug("Duplicate template item id %s ignored", item.id)
    return index


def parse_template(xml: str | bytes | None, template_name: str | None = None) -> DataStructureTemplate:
    """Parse a DSTMPL document.

    Args:
      xml            the template payload (str or raw bytes)
      template_name  explicit name; when omitted the name is read from the document

    Raises:
      MalformedTemplateError when the XML is not well-formed, has no root, no
      template root, or no template name can be determined.

    """
    text = normalize_xml_payload(xml)
    if not text:
        raise MalformedTemplateError("Data structure XML root not found.")

    try:
        doc, closed = _parse_in_order(text)
    except ExpatError as e:
        raise MalformedTemplateError(f"Data structure XML is not well-formed: {e}") from e

    _, root = next(iter(doc.items()))
    if not isinstance(root, dict):
        raise MalformedTemplateError("Data structure template root not found.")

    elements = _template_elements(closed)
    if elements is None:
        raise MalformedTemplateError("Data structure template root not found.")

    name = (template_name or "").strip() or _find_template_name(root, closed)
    if not name:
        raise MalformedTemplateError("Data structure template name not found.")

    return DataStructureTemplate(
        template_name=name,
        description=_first_attribute(root, DESCRIPTION_ATTRIBUTES),
        items_by_id=build_item_index(elements),
    )
