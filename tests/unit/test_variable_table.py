"""Unit tests for the event variable table."""

from jde_er.event_rules.entities.event_variable import EventLevelVariable
from jde_er.event_rules.er_decoder.variable_table import EventVariableTable


class TestEventVariableTable:
    def test_declare_and_resolve(self):
        table = EventVariableTable()
        table.declare("1", "evt_var [LOTN]", "LOTN")

        assert table.resolve("1") == "evt_var [LOTN]"
        assert "1" in table
        assert len(table) == 1

    def test_unknown_or_blank_id(self):
        table = EventVariableTable()

        assert table.resolve("1") is None
        assert table.resolve(None) is None
        assert table.resolve("  ") is None

    def test_redeclaration_last_write_wins(self):
        table = EventVariableTable()
        table.add(EventLevelVariable(variable_id="1", variable_name="first [A]", alias="A"))
        table.add(EventLevelVariable(variable_id="1", variable_name="second [B]", alias="B"))

        assert table.resolve("1") == "second [B]"
        assert len(table) == 1

    def test_clear(self):
        table = EventVariableTable()
        table.declare("1", "evt_var [LOTN]", "LOTN")
        table.clear()

        assert len(table) == 0
        assert table.resolve("1") is None
