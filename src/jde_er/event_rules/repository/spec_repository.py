"""File-backed spec metadata store.

A YAML catalog describes tables, data dictionary titles and business function
object names; data structure templates live as `<template>.xml` files in a
templates directory. Example catalog:

    tables:
      F0101:
        indexes:
          - id: 1
            name: Address Number
            primary: true
            keys: [AN8]
    data_dictionary:
      AN8: {title1: Address, title2: Number}
    business_functions: [B0100001]
"""

import fnmatch
import logging
from pathlib import Path
from typing import Any

import yaml

from jde_er.event_rules.entities.data_dictionary_title import DataDictionaryTitle
from jde_er.event_rules.entities.index_info import IndexInfo
from jde_er.event_rules.er_decoder.helpers.xml_payload import decode_payload

logger = logging.getLogger(__name__)


class SpecRepository:
    """SpecSource over a YAML catalog and a directory of template XML files."""

    # Catalog keys -> IndexInfo fields
    ATTRIBUTE_MAPS = {
        "Index": {"id": "id", "name": "name", "primary": "is_primary", "keys": "key_columns"},
        "DataDictionary": {"title1": "title1", "title2": "title2"},
    }

    def __init__(self, catalog: dict[str, Any] | None = None, templates_dir: Path | str | None = None) -> None:
        catalog = catalog or {}
        self.templates_dir = Path(templates_dir) if templates_dir else None
        self._tables = {str(k).upper(): v or {} for k, v in (catalog.get("tables") or {}).items()}
        self._titles = {str(k).upper(): (str(k), v or {}) for k, v in (catalog.get("data_dictionary") or {}).items()}
        self._functions = [str(name) for name in catalog.get("business_functions") or []]

    @classmethod
    def from_files(cls, catalog_path: Path | str | None, templates_dir: Path | str | None = None) -> "SpecRepository":
        catalog: dict[str, Any] = {}
        if catalog_path is not None:
            with open(catalog_path, encoding="utf-8") as f:
                catalog = yaml.safe_load(f) or {}
            logger.info("Loaded spec catalog %s", catalog_path)
        return cls(catalog, templates_dir)

    @staticmethod
    def _map(entity: str, raw: dict) -> dict:
        attr_map = SpecRepository.ATTRIBUTE_MAPS[entity]
        return {attr_map[k]: v for k, v in raw.items() if k in attr_map}

    def get_data_structure_xml(self, template_name: str) -> list[str]:
        if self.templates_dir is None or not self.templates_dir.is_dir():
            return []

        wanted = f"{template_name.strip()}.xml".lower()
        for path in sorted(self.templates_dir.iterdir()):
            if path.is_file() and path.name.lower() == wanted:
                return [decode_payload(path.read_bytes())]
        logger.debug("Template file for %s not found in %s", template_name, self.templates_dir)
        return []

    def get_table_indexes(self, table_name: str) -> list[IndexInfo]:
        table = self._tables.get(table_name.strip().upper(), {})
        return [IndexInfo(**self._map("Index", raw)) for raw in table.get("indexes") or []]

    def get_data_dictionary_titles(self, data_items: list[str]) -> list[DataDictionaryTitle]:
        titles = []
        for item in data_items:
            entry = self._titles.get(item.strip().upper())
            if entry is None:
                continue
            data_item, raw = entry
            titles.append(DataDictionaryTitle(data_item=data_item, **self._map("DataDictionary", raw)))
        return titles

    def find_business_functions(self, search_pattern: str, max_results: int = 1) -> list[str]:
        pattern = search_pattern.strip().upper()
        matches = [name for name in self._functions if fnmatch.fnmatchcase(name.upper(), pattern)]
        return matches[:max_results]
