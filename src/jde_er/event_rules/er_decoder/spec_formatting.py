# jde_er/event_rules/er_decoder/spec_formatting.py
"""Spec-backed tag handlers: table I/O (GBRFileIOOp) and business function calls (GBRBF).

Both need a SpecResolver for index keys, data dictionary titles and callee names;
without one they emit nothing.
"""

import logging

from lxml import etree

from jde_er.event_rules.er_decoder.defs import FILE_IO_OPERATIONS
from jde_er.event_rules.er_decoder.helpers.xml_payload import (attr,
                                                               find_children,
                                                               find_descendant,
                                                               first_child)
from jde_er.event_rules.er_decoder.operand_nodes import operand_from_element
from jde_er.event_rules.er_decoder.operand_resolver import OperandResolver
from jde_er.event_rules.er_decoder.renderer import (format_business_function_param_line,
                                                    format_file_io_param_line,
                                                    render_line)
from jde_er.event_rules.er_decoder.spec_resolver import SpecResolver, TemplateCatalog

logger = logging.getLogger(__name__)

PARAM_INDENT = "\t"


def format_file_io_operation(operation: str | None) -> str:
    """FETCH_SINGLE -> FetchSingle; unknown codes lose their underscores."""
    if operation is None or not operation.strip():
        return "Operation"
    return FILE_IO_OPERATIONS.get(operation.strip().upper(), operation.strip().replace("_", ""))


def _column_dict(element: etree._Element | None) -> str | None:
    dbref = find_descendant(element, "Dbref")
    value = attr(dbref, "szDict")
    return value.strip() if value and value.strip() else None


def title_for(titles: dict[str, str], data_item: str) -> str:
    """Title of a data item from a map keyed by upper-cased item; the item itself when untitled."""
    return titles.get(data_item.strip().upper(), data_item)


def format_table_column(column: etree._Element, titles: dict[str, str]) -> str:
    data_item = _column_dict(column)
    if data_item is None:
        return "UnknownColumn"
    return render_line("TABLE_COLUMN", title=title_for(titles, data_item), data_item=data_item)


def format_file_io_header(
    table_name: str,
    operation: str,
    index_id: str | None,
    spec_resolver: SpecResolver,
    titles: dict[str, str],
) -> str:
    """"{table}.{operation}", plus " [Index {id}: {keys}]" when the index resolves.
    titles is keyed by upper-cased data item.
    """
    keys: list[str] = []
    if index_id and index_id.strip():
        try:
            id_value = int(index_id.strip())
        except ValueError:
            id_value = None

        index = next(
            (info for info in spec_resolver.get_table_indexes(table_name) if info.id == id_value),
            None,
        ) if id_value is not None else None

        if index is None:
            logger.debug("Index %s not found for table %s", index_id, table_name)
        else:
            keys = [title_for(titles, key) for key in index.key_columns if key and key.strip()]

    return render_line(
        "FILE_IO_HEADER",
        table=table_name,
        operation=operation,
        index_id=index_id.strip() if keys else None,
        keys=keys,
    )


def handle_file_io(
    element: etree._Element,
    resolver: OperandResolver,
    spec_resolver: SpecResolver | None,
) -> list[str]:
    """<GBRFileIOOp operation="FETCH_SINGLE" indexId="1"> with a DSOBJFileIO table and GBRParam/DSItem columns."""
    if spec_resolver is None:
        logger.info("Spec resolver unavailable; skipping table I/O")
        return []

    table_name = attr(find_descendant(element, "DSOBJFileIO"), "Name") or "UnknownTable"
    operation = format_file_io_operation(attr(element, "operation"))
    index_id = attr(element, "indexId")

    items: list[etree._Element] = []
    for param in find_children(element, "GBRParam"):
        items.extend(find_children(param, "DSItem")[:1])

    data_items: dict[str, str] = {}
    for item in items:
        data_item = _column_dict(item)
        if data_item:
            data_items.setdefault(data_item.upper(), data_item)
    for index in spec_resolver.get_table_indexes(table_name):
        for key in index.key_columns:
            data_items.setdefault(key.upper(), key)

    # Data items are matched case-insensitively (a column may spell AN8 as an8)
    titles = {
        item.upper(): title
        for item, title in spec_resolver.get_data_dictionary_titles(data_items.values()).items()
    }
    lines = [format_file_io_header(table_name, operation, index_id, spec_resolver, titles)]

    for item in items:
        source = first_child(find_descendant(item, "DsObjFrom"))
        target = first_child(find_descendant(item, "DsObjTo"))
        if source is None or target is None:
            continue

        source_label = resolver.label(operand_from_element(source), attr(item, "dataItem"))
        target_label = format_table_column(target, titles)
        lines.append(PARAM_INDENT + format_file_io_param_line(attr(item, "copyWord"), source_label, target_label))

    return lines


def handle_business_function(
    element: etree._Element,
    resolver: OperandResolver,
    spec_resolver: SpecResolver | None,
    templates: TemplateCatalog,
) -> list[str]:
    """<GBRBF szFuncName="MyFunc" szTmplName="D0001"> with ERPARAM children."""
    if spec_resolver is None:
        logger.info("Spec resolver unavailable; skipping business function call")
        return []

    function_name = attr(element, "szFuncName") or "UnknownFunction"
    template_name = attr(element, "szTmplName") or ""
    object_name = spec_resolver.resolve_business_function_name(template_name) or template_name

    lines = [render_line("BF_HEADER", function=function_name, object_name=object_name)]

    template = templates.get(template_name)
    for param in find_children(element, "ERPARAM"):
        value_element = first_child(param)
        if value_element is None:
            continue

        param_id = attr(param, "idItem")
        param_item = template.try_get_item(param_id) if template is not None else None
        param_label = param_item.get_formatted_name() if param_item is not None else f"Param {param_id}"

        event_label = resolver.label(operand_from_element(value_element))
        lines.append(PARAM_INDENT + format_business_function_param_line(attr(param, "wCopyWord"), event_label, param_label))

    return lines
