"""Unit tests for operand variants and their labels."""

import pytest
from lxml import etree

from jde_er.event_rules.er_decoder.defs import OperandKind
from jde_er.event_rules.er_decoder.operand_nodes import (ConstantOperand,
                                                         LiteralOperand,
                                                         MemberOperand,
                                                         SystemVariableOperand,
                                                         UnknownOperand,
                                                         VariableOperand,
                                                         operand_from_element,
                                                         operand_under)
from jde_er.event_rules.er_decoder.operand_resolver import (OperandResolver,
                                                            apply_qualifier,
                                                            format_literal_value,
                                                            prefix_qualifier,
                                                            split_qualifier)
from jde_er.event_rules.er_decoder.spec_resolver import TemplateCatalog
from jde_er.event_rules.er_decoder.variable_table import EventVariableTable


def element(xml: str):
    return etree.fromstring(xml)


@pytest.fixture
def resolver(template):
    variables = EventVariableTable()
    variables.declare("1", "evt_var [LOTN]", "LOTN")
    return OperandResolver(TemplateCatalog(template), variables)


# =============================================================================
# Operand variants
# =============================================================================


class TestOperandFromElement:
    def test_member(self):
        operand = operand_from_element(element('<DSOBJMember idItem="1" szTmplName="D0001"><Dbref szDict="ABCD" /></DSOBJMember>'))

        assert operand == MemberOperand(kind=OperandKind.MEMBER, item_id="1", template_name="D0001", dict_alias="ABCD")

    def test_variable(self):
        operand = operand_from_element(element('<DSOBJVariable idVariable="1" szDict="LOTN" />'))

        assert isinstance(operand, VariableOperand)
        assert operand.variable_id == "1"
        assert operand.dict_alias == "LOTN"

    def test_literal_with_typed_child(self):
        operand = operand_from_element(element("<DSOBJLiteral><LiteralString>Value</LiteralString></DSOBJLiteral>"))

        assert isinstance(operand, LiteralOperand)
        assert operand.value == "Value"
        assert operand.is_string

    def test_literal_without_child(self):
        operand = operand_from_element(element("<DSOBJLiteral>  raw  </DSOBJLiteral>"))

        assert operand.value == "raw"
        assert not operand.is_string

    def test_system_variable_and_constant(self):
        assert operand_from_element(element('<DSOBJSystemVariable idVariable="SV1" />')) == SystemVariableOperand(
            kind=OperandKind.SYSTEM_VARIABLE, identifier="SV1"
        )
        assert operand_from_element(element('<DSOBJConstant idConstant="C1" />')) == ConstantOperand(
            kind=OperandKind.CONSTANT, identifier="C1"
        )

    def test_unknown(self):
        operand = operand_from_element(element("<DSOBJSomethingElse>x</DSOBJSomethingElse>"))

        assert operand == UnknownOperand(kind=OperandKind.UNKNOWN, text="x", tag="DSOBJSomethingElse")

    def test_namespaced_element(self):
        operand = operand_from_element(element('<DSOBJVariable xmlns="http://jde" idVariable="2" />'))

        assert isinstance(operand, VariableOperand)

    def test_operand_under_wrapper(self):
        wrapper = element('<zSubject><DSOBJMember idItem="2" /></zSubject>')

        assert operand_under(wrapper).item_id == "2"
        assert operand_under(element("<zSubject />")) is None
        assert operand_under(None) is None


# =============================================================================
# Qualifier helpers
# =============================================================================


class TestQualifiers:
    def test_split_qualifier(self):
        assert split_qualifier("") == (None, "")
        assert split_qualifier(None) == (None, "")
        assert split_qualifier("Value") == (None, "Value")
        assert split_qualifier("BF Test") == ("BF", "Test")
        assert split_qualifier("va  evt_var ") == ("VA", "evt_var")
        assert split_qualifier("XX Value") == (None, "XX Value")

    def test_prefix_qualifier(self):
        assert prefix_qualifier("", "Value") == "Value"
        assert prefix_qualifier(None, "Value") == "Value"
        assert prefix_qualifier("BF", "Value") == "BF Value"

    def test_apply_qualifier(self):
        assert apply_qualifier("BF mnField1", "Field1 [AL1]") == "BF Field1 [AL1]"
        assert apply_qualifier("Field1", "Field1 [AL1]") == "Field1 [AL1]"
        assert apply_qualifier("BF Field1", None) is None

    def test_format_literal_value(self):
        string_literal = LiteralOperand(kind=OperandKind.LITERAL, value="A &amp; B", literal_type="LiteralString")
        numeric_literal = LiteralOperand(kind=OperandKind.LITERAL, value=" 42 ", literal_type="LiteralNumeric")

        assert format_literal_value(string_literal) == '"A & B"'
        assert format_literal_value(numeric_literal) == "42"


# =============================================================================
# Resolver
# =============================================================================


class TestOperandResolverResolve:
    """Criteria mode: unresolved operands fall back to the clause text."""

    def test_member_resolves_through_primary_template(self, resolver):
        operand = MemberOperand(kind=OperandKind.MEMBER, item_id="1")

        assert resolver.resolve(operand, "Field1") == "Field1 [AL1]"
        assert resolver.resolve(operand, "BF mnField1") == "BF Field1 [AL1]"

    def test_member_explicit_template_falls_back_to_primary(self, resolver):
        operand = MemberOperand(kind=OperandKind.MEMBER, item_id="2", template_name="D9999")

        assert resolver.resolve(operand, "Field2") == "Field2 [AL2]"

    def test_unresolved_member_returns_fallback(self, resolver):
        operand = MemberOperand(kind=OperandKind.MEMBER, item_id="42")

        assert resolver.resolve(operand, "BF Mystery") == "BF Mystery"

    def test_variable(self, resolver):
        assert resolver.resolve(VariableOperand(kind=OperandKind.VARIABLE, variable_id="1"), "VA evt_var") == "VA evt_var [LOTN]"
        assert resolver.resolve(VariableOperand(kind=OperandKind.VARIABLE, variable_id="9"), "VA later") == "VA later"

    def test_literal(self, resolver):
        literal = LiteralOperand(kind=OperandKind.LITERAL, value="x")

        assert resolver.resolve(literal, "&quot;x&quot;", decode_literal=True) == '"x"'
        assert resolver.resolve(literal, "&quot;x&quot;") == "&quot;x&quot;"

    def test_system_variable_and_constant(self, resolver):
        system = SystemVariableOperand(kind=OperandKind.SYSTEM_VARIABLE, identifier="SV1")
        constant = ConstantOperand(kind=OperandKind.CONSTANT, identifier="C1")

        assert resolver.resolve(system, "SL DateToday") == "SV SL DateToday"
        assert resolver.resolve(system, "SV DateToday") == "SV DateToday"
        assert resolver.resolve(constant, "") == "CO C1"

    def test_missing_or_unknown_operand(self, resolver):
        assert resolver.resolve(None, "raw text") == "raw text"
        assert resolver.resolve(UnknownOperand(kind=OperandKind.UNKNOWN, tag="X"), "raw text") == "raw text"


class TestOperandResolverLabel:
    """Parameter mode: each kind carries its default qualifier."""

    def test_member(self, resolver):
        assert resolver.label(MemberOperand(kind=OperandKind.MEMBER, item_id="1")) == "BF Field1 [AL1]"
        assert resolver.label(MemberOperand(kind=OperandKind.MEMBER, item_id="42")) == "BF Member"

    def test_variable(self, resolver):
        assert resolver.label(VariableOperand(kind=OperandKind.VARIABLE, variable_id="1")) == "VA evt_var [LOTN]"
        assert resolver.label(VariableOperand(kind=OperandKind.VARIABLE, variable_id="9")) == "VA Variable"

    def test_hint_qualifier_is_preserved(self, resolver):
        operand = VariableOperand(kind=OperandKind.VARIABLE, variable_id="9")

        assert resolver.label(operand, "BF szName") == "BF szName"

    def test_system_variable_and_constant(self, resolver):
        assert resolver.label(SystemVariableOperand(kind=OperandKind.SYSTEM_VARIABLE, identifier="SV1")) == "SV SV1"
        assert resolver.label(ConstantOperand(kind=OperandKind.CONSTANT, identifier="C1"), "EFGH") == "CO EFGH"

    def test_literal(self, resolver):
        literal = LiteralOperand(kind=OperandKind.LITERAL, value="VALUE", literal_type="LiteralString")

        assert resolver.label(literal) == '"VALUE"'

    def test_unknown(self, resolver):
        assert resolver.label(UnknownOperand(kind=OperandKind.UNKNOWN, text="raw", tag="X")) == "raw"
