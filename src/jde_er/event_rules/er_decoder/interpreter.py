# jde_er/event_rules/er_decoder/interpreter.py

from __future__ import annotations

import logging
from collections.abc import Callable

from lxml import etree

from jde_er.event_rules.entities.data_structure_template import DataStructureTemplate
from jde_er.event_rules.er_decoder.criteria import handle_criteria
from jde_er.event_rules.er_decoder.defs import GbrTag
from jde_er.event_rules.er_decoder.handlers import (handle_assign,
                                                    handle_comment,
                                                    handle_summary_text,
                                                    handle_variable)
from jde_er.event_rules.er_decoder.helpers.xml_payload import iter_elements, local_name, parse_xml
from jde_er.event_rules.er_decoder.operand_resolver import OperandResolver
from jde_er.event_rules.er_decoder.renderer import render_line
from jde_er.event_rules.er_decoder.spec_formatting import handle_business_function, handle_file_io
from jde_er.event_rules.er_decoder.spec_resolver import SpecResolver, TemplateCatalog
from jde_er.event_rules.er_decoder.template_index import parse_template
from jde_er.event_rules.er_decoder.variable_table import EventVariableTable
from jde_er.event_rules.errors import MissingEventKeyError

logger = logging.getLogger(__name__)

INDENT = "\t"
NEWLINE = "\n"
EVENT_SPEC_KEY = "szEventSpecKey"


class EventRuleInterpreter:
    """Replays one event rule XML document into indented, readable lines.

    Every element below the root is visited in document order and dispatched on its
    tag; unrecognised tags are skipped. Criteria blocks open a nesting level that the
    matching End If / End While closes. An instance is not reentrant: `convert()`
    resets indent, output and event variables before each run (templates fetched
    through the spec resolver stay cached).

    Provide a SpecResolver to enable table I/O and business function formatting.
    """

    def __init__(
        self,
        event_xml: str | bytes,
        template: str | bytes | DataStructureTemplate,
        spec_resolver: SpecResolver | None = None,
        template_name: str | None = None,
    ) -> None:
        self.spec_resolver = spec_resolver
        self.event_root = parse_xml(event_xml, "Event XML")

        primary = template if isinstance(template, DataStructureTemplate) else parse_template(template, template_name)
        self.templates = TemplateCatalog(primary, spec_resolver)
        self.variables = EventVariableTable()
        self.resolver = OperandResolver(self.templates, self.variables)

        self.indent_level = 0
        self.lines: list[tuple[int, str]] = []
        self.root_event_spec_key = ""
        self.readable_text = ""

        self._dispatch: dict[GbrTag, Callable[[etree._Element], None]] = {
            GbrTag.EVENT: self._on_event,
            GbrTag.VARIABLE: self._on_variable,
            GbrTag.ASSIGN: lambda el: self.add_line(handle_assign(el, self.resolver)),
            GbrTag.SUMMARY_TEXT: lambda el: self.add_line(handle_summary_text(el)),
            GbrTag.COMMENT: lambda el: self.add_line(handle_comment(el)),
            GbrTag.FILE_IO: lambda el: self.add_lines(handle_file_io(el, self.resolver, self.spec_resolver)),
            GbrTag.CRITERIA: self._on_criteria,
            GbrTag.BUSINESS_FUNC: lambda el: self.add_lines(
                handle_business_function(el, self.resolver, self.spec_resolver, self.templates)
            ),
            GbrTag.END_IF: lambda el: self._on_end_block("If"),
            GbrTag.END_WHILE: lambda el: self._on_end_block("While"),
            GbrTag.ELSE: self._on_else,
        }

    @property
    def template_name(self) -> str:
        return self.templates.primary_name

    def reset(self) -> None:
        self.indent_level = 0
        self.lines.clear()
        self.variables.clear()
        self.root_event_spec_key = ""
        self.readable_text = ""

    def convert(self) -> str:
        """Build the readable event rule text (and event variables) from the XML.

        Raises:
          MissingEventKeyError when the root has no szEventSpecKey attribute.

        """
        self.reset()

        key = self.event_root.get(EVENT_SPEC_KEY)
        if key is None:
            raise MissingEventKeyError("Event Spec Key Not Found")
        self.root_event_spec_key = key

        for element in iter_elements(self.event_root):
            self.interpret(element)

        self.readable_text = self.render()
        return self.readable_text

    def interpret(self, element: etree._Element) -> None:
        handler = self._dispatch.get(GbrTag.from_name(local_name(element)))
        if handler is not None:
            handler(element)

    def render(self) -> str:
        if not self.lines:
            return ""
        return NEWLINE.join(INDENT * max(level, 0) + text for level, text in self.lines) + NEWLINE

    # ──────────────────────────────────────────────────────────────────────────
    def add_line(self, line: str) -> None:
        self.lines.append((self.indent_level, line))

    def add_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.add_line(line)

    def increase_indent(self) -> None:
        self.indent_level += 1

    def decrease_indent(self) -> None:
        if self.indent_level > 0:
            self.indent_level -= 1
        else:
            logger.debug("Unbalanced block end in event %s", self.root_event_spec_key)

    # ──────────────────────────────────────────────────────────────────────────
    def _on_event(self, element: etree._Element) -> None:
        pass

    def _on_variable(self, element: etree._Element) -> None:
        variable = handle_variable(element)
        if variable is not None and variable.variable_id.strip():
            self.variables.add(variable)

    def _on_criteria(self, element: etree._Element) -> None:
        self.add_lines(handle_criteria(element, self.resolver))
        self.increase_indent()

    def _on_end_block(self, keyword: str) -> None:
        self.decrease_indent()
        self.add_line(render_line("END_BLOCK", keyword=keyword))

    def _on_else(self, element: etree._Element) -> None:
        self.decrease_indent()
        self.add_line(render_line("ELSE"))
        self.increase_indent()
