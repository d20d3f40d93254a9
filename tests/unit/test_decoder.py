"""Unit tests for the decompile entrypoint."""

import pytest

from jde_er.event_rules.er_decoder.decoder import decompile
from jde_er.event_rules.errors import MalformedDocumentError, MalformedTemplateError, MissingEventKeyError

from event_samples import MEMBER_1, TEMPLATE_XML, assign, crit, event, literal

SCENARIO_D = (
    crit("If Field1 is equal to 10", ("EQUAL", MEMBER_1, literal("10")))
    + assign("foo=bar", MEMBER_1, literal("bar", "LiteralString"))
    + "<GBREndIf />"
)


class TestDecompile:
    def test_single_document(self):
        result = decompile(event(SCENARIO_D), TEMPLATE_XML)

        assert result.root_event_spec_key == "EV1"
        assert result.template_name == "D0001"
        assert result.status_message == "Event rules loaded."
        assert result.readable_text == "If Field1 [AL1] is equal to 10\n\tfoo [AL1] = bar\nEnd If\n"

    def test_bytes_payloads(self):
        result = decompile(event(SCENARIO_D).encode("utf-16-le"), TEMPLATE_XML.encode("utf-8"))

        assert result.readable_text.startswith("If Field1 [AL1]")

    def test_utf16_payload_with_trailing_pad_byte(self):
        result = decompile(event(SCENARIO_D).encode("utf-16-le") + b"\x00", TEMPLATE_XML)

        assert result.readable_text.startswith("If Field1 [AL1]")

    def test_truncated_utf16_payload_is_a_malformed_document(self):
        with pytest.raises(MalformedDocumentError):
            decompile(event(SCENARIO_D).encode("utf-16-le") + b"\x01", TEMPLATE_XML)

    def test_explicit_template_name(self):
        result = decompile(event(SCENARIO_D), TEMPLATE_XML, template_name="D4200310")

        assert result.template_name == "D4200310"
        assert "Field1 [AL1]" in result.readable_text

    def test_multiple_documents_are_joined_by_blank_line(self):
        first = event('<GBRCOMMENT comment_text="// first" />', key="EV1")
        second = event('<GBRCOMMENT comment_text="// second" />', key="EV2")

        result = decompile([first, "", second], TEMPLATE_XML)

        assert result.readable_text == "// first\n\n// second\n"
        assert result.root_event_spec_key == "EV1"

    def test_nesting_does_not_leak_between_documents(self):
        opened = event(crit("If Field1 is equal to 10", ("EQUAL", MEMBER_1, literal("10"))))
        other = event('<GBRCOMMENT comment_text="// top" />', key="EV2")

        result = decompile([opened, other], TEMPLATE_XML)

        assert result.readable_text.endswith("\n\n// top\n")

    @pytest.mark.parametrize("payload", [None, "", "  ", [], ["", "\u0000"]])
    def test_no_event_rules(self, payload):
        result = decompile(payload, TEMPLATE_XML)

        assert result.readable_text == ""
        assert result.status_message == "No event rules found."

    def test_no_readable_text(self):
        result = decompile(event('<GBRVAR szVariableName="evt"><DSOBJVariable idVariable="1" /></GBRVAR>'), TEMPLATE_XML)

        assert result.readable_text == ""
        assert result.root_event_spec_key == "EV1"
        assert result.status_message == "No formatted event rules available."

    def test_missing_template_raises(self):
        with pytest.raises(MalformedTemplateError):
            decompile(event(SCENARIO_D), [None, ""])

    def test_missing_event_key_raises(self):
        with pytest.raises(MissingEventKeyError):
            decompile("<GBREvent />", TEMPLATE_XML)

    def test_malformed_event_raises(self):
        with pytest.raises(MalformedDocumentError):
            decompile("<GBREvent szEventSpecKey='EV1'><GBRCOMMENT></GBREvent>", TEMPLATE_XML)

    def test_file_io_without_resolver_still_succeeds(self):
        body = '<GBRFileIOOp operation="SELECT"><DSOBJFileIO Name="F0101" /></GBRFileIOOp><GBRBF szFuncName="F" />'

        result = decompile(event(body), TEMPLATE_XML)

        assert result.readable_text == ""
        assert result.status_message == "No formatted event rules available."
