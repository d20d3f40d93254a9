# jde_er/event_rules/er_decoder/operand_nodes.py

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

from jde_er.event_rules.er_decoder.defs import OperandKind
from jde_er.event_rules.er_decoder.helpers.xml_payload import attr, find_descendant, iter_elements, local_name


@dataclass(frozen=True)
class Operand:
    """Common fields for _all_ operand variants.
    - kind : which DSOBJ* element produced it
    - text : the element's own text content, trimmed
    """

    kind: OperandKind
    text: str = ""


@dataclass(frozen=True)
class MemberOperand(Operand):
    """A data structure template member (DSOBJMember)."""

    item_id: str | None = None
    template_name: str | None = None
    dict_alias: str | None = None  # from a nested Dbref, used by table columns


@dataclass(frozen=True)
class VariableOperand(Operand):
    """An event-local variable reference (DSOBJVariable)."""

    variable_id: str | None = None
    dict_alias: str | None = None


@dataclass(frozen=True)
class LiteralOperand(Operand):
    """A literal value (DSOBJLiteral) and the Literal* element that carried it."""

    value: str = ""
    literal_type: str | None = None  # e.g. "LiteralString", "LiteralNumeric"

    @property
    def is_string(self) -> bool:
        return (self.literal_type or "").lower() == "literalstring"


@dataclass(frozen=True)
class SystemVariableOperand(Operand):
    identifier: str | None = None


@dataclass(frozen=True)
class ConstantOperand(Operand):
    identifier: str | None = None


@dataclass(frozen=True)
class UnknownOperand(Operand):
    tag: str = ""


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _element_text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def operand_from_element(element: etree._Element) -> Operand:
    """Turn one DSOBJ* element into its operand variant."""
    name = local_name(element)
    text = _element_text(element)

    if name == OperandKind.MEMBER.value:
        dbref = find_descendant(element, "Dbref")
        return MemberOperand(
            kind=OperandKind.MEMBER,
            text=text,
            item_id=_blank_to_none(attr(element, "idItem")),
            template_name=_blank_to_none(attr(element, "szTmplName")),
            dict_alias=_blank_to_none(attr(dbref, "szDict")),
        )

    if name == OperandKind.VARIABLE.value:
        return VariableOperand(
            kind=OperandKind.VARIABLE,
            text=text,
            variable_id=_blank_to_none(attr(element, "idVariable")),
            dict_alias=_blank_to_none(attr(element, "szDict")),
        )

    if name == OperandKind.LITERAL.value:
        value_element = next(
            (el for el in iter_elements(element) if local_name(el).lower().startswith("literal")),
            None,
        )
        if value_element is None:
            return LiteralOperand(kind=OperandKind.LITERAL, text=text, value=text)
        return LiteralOperand(
            kind=OperandKind.LITERAL,
            text=text,
            value=_element_text(value_element),
            literal_type=local_name(value_element),
        )

    if name == OperandKind.SYSTEM_VARIABLE.value:
        return SystemVariableOperand(
            kind=OperandKind.SYSTEM_VARIABLE,
            text=text,
            identifier=_blank_to_none(attr(element, "idVariable")) or _blank_to_none(text),
        )

    if name == OperandKind.CONSTANT.value:
        return ConstantOperand(
            kind=OperandKind.CONSTANT,
            text=text,
            identifier=_blank_to_none(attr(element, "idConstant")) or _blank_to_none(text),
        )

    return UnknownOperand(kind=OperandKind.UNKNOWN, text=text, tag=name)


def operand_under(container: etree._Element | None) -> Operand | None:
    """The operand held by a wrapper such as zSubject, ObjTo or DsObjFrom (its first
    descendant element), or None when the wrapper is missing or empty.
    """
    if container is None:
        return None
    inner = next(iter_elements(container), None)
    return operand_from_element(inner) if inner is not None else None
