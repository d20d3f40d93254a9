# jde_er/event_rules/er_decoder/decoder.py

import logging
from collections.abc import Sequence

from jde_er.event_rules.entities.decompile_result import DecompileResult
from jde_er.event_rules.er_decoder.helpers.xml_payload import has_payload
from jde_er.event_rules.er_decoder.interpreter import NEWLINE, EventRuleInterpreter
from jde_er.event_rules.er_decoder.spec_resolver import SpecResolver
from jde_er.event_rules.er_decoder.template_index import parse_template
from jde_er.event_rules.errors import MalformedTemplateError

logger = logging.getLogger(__name__)

Payload = str | bytes
Payloads = Payload | Sequence[Payload] | None

STATUS_NO_EVENT_RULES = "No event rules found."
STATUS_NO_TEXT = "No formatted event rules available."
STATUS_LOADED = "Event rules loaded."


def _as_list(payloads: Payloads) -> list[Payload]:
    if payloads is None:
        return []
    if isinstance(payloads, (str, bytes)):
        return [payloads]
    return list(payloads)


def decompile(
    event_xml: Payloads,
    template_xml: Payloads,
    spec_resolver: SpecResolver | None = None,
    template_name: str | None = None,
) -> DecompileResult:
    """Entrypoint: decompile event rule XML into readable, tab-indented text.

    Args:
      event_xml      one event rule payload or a sequence of them (str or bytes)
      template_xml   the data structure template payload(s); the first non-empty one is used
      spec_resolver  optional metadata service for table I/O and business function lines
      template_name  explicit template name (otherwise read from the template XML)

    Returns:
      DecompileResult with the root event spec key, readable text and template name.
      readable_text is empty when no event payload is non-empty or nothing was produced.

    Raises:
      MalformedDocumentError (or a subclass) on structural failures.

    """
    event_documents = [doc for doc in _as_list(event_xml) if has_payload(doc)]
    if not event_documents:
        return DecompileResult(template_name=template_name, status_message=STATUS_NO_EVENT_RULES)

    template_document = next((doc for doc in _as_list(template_xml) if has_payload(doc)), None)
    if template_document is None:
        raise MalformedTemplateError("No data structure XML available for the event rules.")
    template = parse_template(template_document, template_name)

    root_key = ""
    combined: list[str] = []
    for document in event_documents:
        interpreter = EventRuleInterpreter(document, template, spec_resolver)
        text = interpreter.convert()
        root_key = root_key or interpreter.root_event_spec_key
        if text.strip():
            combined.append(text.rstrip())

    logger.debug("Decompiled %d event document(s) for %s", len(event_documents), root_key)

    if not combined:
        return DecompileResult(
            root_event_spec_key=root_key,
            template_name=template.template_name,
            status_message=STATUS_NO_TEXT,
        )

    return DecompileResult(
        root_event_spec_key=root_key,
        readable_text=(NEWLINE + NEWLINE).join(combined) + NEWLINE,
        template_name=template.template_name,
        status_message=STATUS_LOADED,
    )
