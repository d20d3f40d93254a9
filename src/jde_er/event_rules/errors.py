"""Typed failures raised by a decompile pass.

Only structural problems surface as exceptions. Unresolved variables, template
items or comparator phrases are recovered locally and never reach the caller.
"""


class ErDecompileError(Exception):
    """Base class for all decompiler errors."""


class MalformedDocumentError(ErDecompileError):
    """The event or template XML cannot be used at all (bad syntax, no root)."""


class MissingEventKeyError(MalformedDocumentError):
    """The event XML root carries no ``szEventSpecKey`` attribute."""


class MalformedTemplateError(MalformedDocumentError):
    """The data structure template has no root, no template root or no name."""
