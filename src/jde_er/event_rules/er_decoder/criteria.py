# jde_er/event_rules/er_decoder/criteria.py

import logging
import re

from lxml import etree

from jde_er.event_rules.er_decoder.criteria_splitter import split_criteria
from jde_er.event_rules.er_decoder.defs import BLOCK_KEYWORDS, DEFAULT_BLOCK_KEYWORD, CompType
from jde_er.event_rules.er_decoder.helpers.xml_payload import attr, find_descendant, find_descendants
from jde_er.event_rules.er_decoder.operand_nodes import operand_under
from jde_er.event_rules.er_decoder.operand_resolver import OperandResolver
from jde_er.event_rules.er_decoder.renderer import render_line

logger = logging.getLogger(__name__)

_PREFIX = re.compile(rf"^\s*({'|'.join(BLOCK_KEYWORDS)})\b\s*", re.IGNORECASE)


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower().title()


def extract_prefix(statement: str, default_prefix: str) -> tuple[str, str]:
    """Split a leading If/While/And/Or off a clause subject.
    Returns (prefix, remainder); prefix is default_prefix when none is found.
    """
    if not statement or not statement.strip():
        return default_prefix, ""

    match = _PREFIX.match(statement)
    if match:
        return normalize_keyword(match.group(1)), statement[match.end():].strip()
    return default_prefix, statement.strip()


def format_clause(clause: str, node: etree._Element, block_keyword: str, first: bool, resolver: OperandResolver) -> str:
    """Rewrite one description clause using its structured CRE_NODE.

    The clause is split on the node's comparison phrase into subject and predicate
    text; both sides are resolved against zSubject / zPredicate. A clause that does
    not contain the phrase is returned verbatim.
    """
    comparison = CompType.from_code(attr(node, "eCompType"))
    subject_text, found, predicate_text = clause.partition(comparison.phrase)
    if not found:
        logger.debug("Comparison %r not found in clause %r", comparison.phrase, clause)
        return clause

    prefix, subject_text = extract_prefix(subject_text, block_keyword if first else "")
    if not prefix:
        prefix = block_keyword

    subject = resolver.resolve(
        operand_under(find_descendant(node, "zSubject")), subject_text, decode_literal=False
    )
    predicate = resolver.resolve(
        operand_under(find_descendant(node, "zPredicate")), predicate_text.strip(), decode_literal=True
    )
    return render_line("CRITERIA_CLAUSE", prefix=prefix, subject=subject, phrase=comparison.phrase, predicate=predicate)


def handle_criteria(element: etree._Element, resolver: OperandResolver) -> list[str]:
    """<GBRCRIT type="If|While" lpszCritDesc="…"> with a CRE_HEADER of CRE_NODEs.

    Description clauses and CRE_NODEs are paired by position up to the shorter of
    the two; extra clauses or nodes are dropped.
    """
    type_attribute = attr(element, "type")
    block_keyword = normalize_keyword(type_attribute if type_attribute and type_attribute.strip() else DEFAULT_BLOCK_KEYWORD)

    header = find_descendant(element, "CRE_HEADER")
    if header is None:
        logger.warning("GBRCRIT without CRE_HEADER; no conditions emitted")
    nodes = find_descendants(header, "CRE_NODE")
    clauses = split_criteria(attr(element, "lpszCritDesc"))

    if len(nodes) != len(clauses):
        logger.debug("Criteria has %d clauses for %d comparison nodes", len(clauses), len(nodes))

    return [
        format_clause(clause, node, block_keyword, index == 0, resolver)
        for index, (clause, node) in enumerate(zip(clauses, nodes))
    ]
