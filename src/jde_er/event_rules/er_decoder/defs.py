# -----------------------------------------------------------------------------
# Event rule tags, comparison types and operand qualifiers
# -----------------------------------------------------------------------------
# flake8: noqa: E221
from enum import Enum


class GbrTag(Enum):
    """Element names of the event rule XML that produce (or shape) output."""

    UNKNOWN       = ""

    EVENT         = "GBREvent"
    VARIABLE      = "GBRVAR"
    ASSIGN        = "GBRASSIGN"
    SUMMARY_TEXT  = "GBRSLBF"
    COMMENT       = "GBRCOMMENT"
    FILE_IO       = "GBRFileIOOp"
    CRITERIA      = "GBRCRIT"
    BUSINESS_FUNC = "GBRBF"
    END_IF        = "GBREndIf"
    END_WHILE     = "GBREndWhile"
    ELSE          = "GBRElse"

    @classmethod
    def from_name(cls, name: str) -> "GbrTag":
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class CompType(Enum):
    """CRE_NODE eCompType codes and their English comparison phrase."""

    EQUAL       = "is equal to"
    NOT_EQ      = "is not equal to"
    LE_OR_EQ    = "is less than or equal to"
    GR          = "is greater than"
    EQ_OR_EMPTY = "is equal to or empty"

    @classmethod
    def from_code(cls, code: str | None) -> "CompType":
        """Unknown or missing codes compare as EQUAL."""
        if code is None:
            return cls.EQUAL
        return cls.__members__.get(code.strip(), cls.EQUAL)

    @property
    def phrase(self) -> str:
        return self.value


class OperandKind(Enum):
    """Operand element names found under zSubject, ObjTo, ERPARAM, DsObjFrom …"""

    MEMBER          = "DSOBJMember"
    VARIABLE        = "DSOBJVariable"
    LITERAL         = "DSOBJLiteral"
    SYSTEM_VARIABLE = "DSOBJSystemVariable"
    CONSTANT        = "DSOBJConstant"
    UNKNOWN         = ""


# Two-letter operand-kind markers embedded in legacy free-text hints
QUALIFIER_TOKENS = {
    "BF",  # Business function data structure member
    "VA",  # Event-local variable
    "SV",  # System variable
    "CO",  # Constant
}

DEFAULT_QUALIFIERS = {
    OperandKind.MEMBER:          "BF",
    OperandKind.VARIABLE:        "VA",
    OperandKind.SYSTEM_VARIABLE: "SV",
    OperandKind.CONSTANT:        "CO",
}

FILE_IO_OPERATIONS = {
    "FETCH_SINGLE": "FetchSingle",
    "FETCH_NEXT":   "FetchNext",
    "SELECT":       "Select",
    "DELETE":       "Delete",
    "UPDATE":       "Update",
    "INSERT":       "Insert",
}

BLOCK_KEYWORDS = ("If", "While", "And", "Or")
DEFAULT_BLOCK_KEYWORD = "If"
