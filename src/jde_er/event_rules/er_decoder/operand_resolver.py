# jde_er/event_rules/er_decoder/operand_resolver.py

import html
import logging

from jde_er.event_rules.entities.template_item import DataStructureTemplateItem
from jde_er.event_rules.er_decoder.defs import DEFAULT_QUALIFIERS, QUALIFIER_TOKENS, OperandKind
from jde_er.event_rules.er_decoder.operand_nodes import (ConstantOperand,
                                                         LiteralOperand,
                                                         MemberOperand,
                                                         Operand,
                                                         SystemVariableOperand,
                                                         VariableOperand)
from jde_er.event_rules.er_decoder.spec_resolver import TemplateCatalog
from jde_er.event_rules.er_decoder.variable_table import EventVariableTable

logger = logging.getLogger(__name__)


def split_qualifier(value: str | None) -> tuple[str | None, str]:
    """Split a legacy hint such as "BF MyFunction" into ("BF", "MyFunction").
    Returns (None, trimmed value) when the first word is not a known qualifier.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return None, ""

    parts = trimmed.split(None, 1)
    if len(parts) < 2 or parts[0].upper() not in QUALIFIER_TOKENS:
        return None, trimmed
    return parts[0].upper(), parts[1].strip()


def prefix_qualifier(qualifier: str | None, value: str) -> str:
    if not qualifier or not qualifier.strip():
        return value
    return f"{qualifier} {value}"


def apply_qualifier(fallback: str, resolved: str | None) -> str | None:
    """Prepend the qualifier found in fallback (if any) to a resolved label."""
    if resolved is None or not resolved.strip():
        return resolved
    qualifier, _ = split_qualifier(fallback)
    return prefix_qualifier(qualifier, resolved)


def format_literal_value(operand: LiteralOperand) -> str:
    """Entity-decoded literal; string literals are quoted."""
    value = html.unescape(operand.value.strip())
    if operand.is_string:
        return f'"{value}"'
    return value


class OperandResolver:
    """Turns operand variants into display labels.

    Member operands resolve through the session's TemplateCatalog, variable
    operands through the pass's EventVariableTable. Misses never raise: the
    caller's raw text is returned instead.
    """

    def __init__(self, templates: TemplateCatalog, variables: EventVariableTable) -> None:
        self.templates = templates
        self.variables = variables

    def member_item(self, operand: MemberOperand) -> DataStructureTemplateItem | None:
        return self.templates.resolve_item(operand.item_id, operand.template_name)

    def member_label(self, operand: MemberOperand) -> str | None:
        item = self.member_item(operand)
        if item is None:
            logger.debug("Template item %s not resolved", operand.item_id)
            return None
        return item.get_formatted_name()

    def variable_label(self, operand: VariableOperand) -> str | None:
        name = self.variables.resolve(operand.variable_id)
        if name is None:
            logger.debug("Event variable %s not declared (yet)", operand.variable_id)
        return name

    def resolve(
        self,
        operand: Operand | None,
        fallback: str,
        qualifier_hint: str | None = None,
        decode_literal: bool = False,
    ) -> str:
        """Label for a criteria-side operand, falling back to the clause text.

        Args:
          operand         the operand variant, or None when the node had none
          fallback        raw text recovered from the description
          qualifier_hint  text to read a BF/VA/SV/CO qualifier from (defaults to fallback)
          decode_literal  HTML-decode literal text (predicate side)

        """
        hint = fallback if qualifier_hint is None else qualifier_hint

        match operand:
            case None:
                return fallback
            case MemberOperand():
                return apply_qualifier(hint, self.member_label(operand)) or fallback
            case VariableOperand():
                return apply_qualifier(hint, self.variable_label(operand)) or fallback
            case LiteralOperand():
                return html.unescape(fallback) if decode_literal else fallback
            case SystemVariableOperand() | ConstantOperand():
                qualifier, remainder = split_qualifier(hint)
                value = remainder or operand.identifier or fallback
                return prefix_qualifier(qualifier or DEFAULT_QUALIFIERS[operand.kind], value)
            case _:
                return fallback

    def label(self, operand: Operand, qualifier_hint: str | None = None) -> str:
        """Label for a business function or table I/O parameter value.

        Qualifiers from the XML hint (e.g. BF/VA/SV/CO) are preserved when present,
        otherwise each operand kind gets its default qualifier.
        """
        qualifier, remainder = split_qualifier(qualifier_hint)

        match operand:
            case MemberOperand():
                value = self.member_label(operand) or remainder or "Member"
                return prefix_qualifier(qualifier or DEFAULT_QUALIFIERS[OperandKind.MEMBER], value)
            case VariableOperand():
                value = self.variable_label(operand) or remainder or "Variable"
                return prefix_qualifier(qualifier or DEFAULT_QUALIFIERS[OperandKind.VARIABLE], value)
            case SystemVariableOperand():
                value = remainder or operand.identifier or "SystemVariable"
                return prefix_qualifier(qualifier or DEFAULT_QUALIFIERS[OperandKind.SYSTEM_VARIABLE], value)
            case ConstantOperand():
                value = remainder or operand.identifier or "Constant"
                return prefix_qualifier(qualifier or DEFAULT_QUALIFIERS[OperandKind.CONSTANT], value)
            case LiteralOperand():
                return format_literal_value(operand)
            case _:
                return remainder or operand.text
