# jde_er/event_rules/er_decoder/handlers.py
"""Handlers for the single-line event rule tags (GBRVAR, GBRASSIGN, GBRSLBF, GBRCOMMENT)."""

import html
import logging

from lxml import etree

from jde_er.event_rules.entities.event_variable import EventLevelVariable
from jde_er.event_rules.er_decoder.helpers.xml_payload import attr, find_descendant
from jde_er.event_rules.er_decoder.operand_nodes import (LiteralOperand,
                                                         MemberOperand,
                                                         VariableOperand,
                                                         operand_from_element,
                                                         operand_under)
from jde_er.event_rules.er_decoder.operand_resolver import OperandResolver
from jde_er.event_rules.er_decoder.renderer import render_line

logger = logging.getLogger(__name__)

MISSING_TEXT = "ERROR"
NO_ALIAS = "N/A"


def handle_variable(element: etree._Element) -> EventLevelVariable | None:
    """<GBRVAR szVariableName="evt_szBlankLotSerialNum_LOTN">
        <DSOBJVariable idVariable="1" szDict="LOTN" wStyle="32" dataType="String" size="30" />
    </GBRVAR>
    """
    name = attr(element, "szVariableName") or "Could Not Parse Variable Name"
    descriptor = find_descendant(element, "DSOBJVariable")
    if descriptor is None:
        logger.debug("GBRVAR %s has no DSOBJVariable descriptor", name)
        return None

    operand = operand_from_element(descriptor)
    alias = operand.dict_alias or NO_ALIAS
    return EventLevelVariable(
        variable_id=operand.variable_id or "",
        variable_name=f"{name} [{alias}]",
        alias=alias,
    )


def handle_summary_text(element: etree._Element) -> str:
    """NER-specific statements only carry their legacy summary text."""
    return html.unescape(attr(element, "summary_text", MISSING_TEXT))


def handle_comment(element: etree._Element) -> str:
    # Long comments wrap in the ER editor, leaving line breaks inside one attribute
    text = attr(element, "comment_text", MISSING_TEXT)
    return text.replace("\r", "").replace("\n", "")


def format_assign_target(target: str, operand, resolver: OperandResolver) -> str:
    match operand:
        case VariableOperand():
            return render_line("ASSIGN_TARGET", target=target, alias=operand.dict_alias or NO_ALIAS)
        case MemberOperand():
            item = resolver.member_item(operand)
            return render_line("ASSIGN_TARGET", target=target, alias=item.alias if item else NO_ALIAS)
        case _:
            return render_line("ASSIGN_TARGET", target=target, alias=None)


def format_assign_value(value: str, operand, resolver: OperandResolver) -> str:
    match operand:
        case LiteralOperand():
            return html.unescape(value)
        case VariableOperand():
            return render_line("ASSIGN_VALUE", value=value, alias=operand.dict_alias or NO_ALIAS)
        case MemberOperand():
            item = resolver.member_item(operand)
            return render_line("ASSIGN_VALUE", value=value, alias=item.alias if item else NO_ALIAS)
        case _:
            return value


def handle_assign(element: etree._Element, resolver: OperandResolver) -> str:
    """<GBRASSIGN textString="target=value"> with ObjTo / ObjFrom operands."""
    text = attr(element, "textString", MISSING_TEXT)
    if text == MISSING_TEXT:
        return text

    target, _, value = text.partition("=")
    target_operand = operand_under(find_descendant(element, "ObjTo"))
    value_operand = operand_under(find_descendant(element, "ObjFrom"))

    return (
        format_assign_target(target.strip(), target_operand, resolver)
        + format_assign_value(value.strip(), value_operand, resolver)
    )
