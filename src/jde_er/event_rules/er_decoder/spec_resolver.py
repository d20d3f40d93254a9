# jde_er/event_rules/er_decoder/spec_resolver.py
"""Metadata lookups needed by spec-backed formatting.

`SpecResolver` is what the decompiler consumes. `CachingSpecResolver` implements it
on top of a lower-level `SpecSource` (a live connection, or the file-backed
`SpecRepository`) and caches every answer for the life of the resolver.
"""

import logging
import threading
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from jde_er.event_rules.entities.data_dictionary_title import DataDictionaryTitle
from jde_er.event_rules.entities.data_structure_template import DataStructureTemplate
from jde_er.event_rules.entities.index_info import IndexInfo
from jde_er.event_rules.er_decoder.template_index import parse_template
from jde_er.event_rules.errors import MalformedTemplateError

logger = logging.getLogger(__name__)


@runtime_checkable
class SpecResolver(Protocol):
    """Synchronous metadata service queried while decompiling."""

    def get_data_structure_template(self, template_name: str) -> DataStructureTemplate | None: ...

    def get_table_indexes(self, table_name: str) -> list[IndexInfo]: ...

    def get_data_dictionary_titles(self, data_items: Iterable[str]) -> dict[str, str]: ...

    def resolve_business_function_name(self, template_name: str) -> str | None: ...


class SpecSource(Protocol):
    """Raw metadata access behind a CachingSpecResolver."""

    def get_data_structure_xml(self, template_name: str) -> list[str]: ...

    def get_table_indexes(self, table_name: str) -> list[IndexInfo]: ...

    def get_data_dictionary_titles(self, data_items: list[str]) -> list[DataDictionaryTitle]: ...

    def find_business_functions(self, search_pattern: str, max_results: int = 1) -> list[str]: ...


def build_business_function_search_pattern(template_name: str) -> str:
    """DSTMPL names usually start with "D"; the business function starts with "B"."""
    if len(template_name) > 1 and template_name[0] in "dD":
        return f"B{template_name[1:]}"
    return template_name


class CachingSpecResolver:
    """SpecResolver over a SpecSource with case-insensitive, thread-safe caches.

    Caches are read-heavy and written on miss; each source call happens at most
    once per key (negative answers are cached too).
    """

    def __init__(self, source: SpecSource) -> None:
        if source is None:
            raise ValueError("A spec source is required.")
        self._source = source
        self._lock = threading.Lock()
        self._template_cache: dict[str, DataStructureTemplate] = {}
        self._index_cache: dict[str, list[IndexInfo]] = {}
        self._dd_title_cache: dict[str, str | None] = {}
        self._bsfn_name_cache: dict[str, str | None] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().upper()

    def get_data_structure_template(self, template_name: str) -> DataStructureTemplate | None:
        """Resolve a data structure template (DSTMPL) by template name."""
        if not template_name or not template_name.strip():
            return None

        key = self._key(template_name)
        with self._lock:
            cached = self._template_cache.get(key)
        if cached is not None:
            return cached

        documents = self._source.get_data_structure_xml(template_name)
        document = next((d for d in documents if d and d.strip()), None)
        if document is None:
            logger.debug("No data structure XML for template %s", template_name)
            return None

        try:
            template = parse_template(document, template_name)
        except MalformedTemplateError as e:
            logger.warning("Template %s could not be parsed: %s", template_name, e)
            return None

        with self._lock:
            # Another thread may have won the race; keep the first one stored
            return self._template_cache.setdefault(key, template)

    def get_table_indexes(self, table_name: str) -> list[IndexInfo]:
        """Resolve table index metadata by table name."""
        if not table_name or not table_name.strip():
            return []

        key = self._key(table_name)
        with self._lock:
            cached = self._index_cache.get(key)
        if cached is not None:
            return cached

        indexes = list(self._source.get_table_indexes(table_name) or [])
        with self._lock:
            return self._index_cache.setdefault(key, indexes)

    def get_data_dictionary_titles(self, data_items: Iterable[str]) -> dict[str, str]:
        """Resolve data dictionary titles for the provided items.

        Items without a title are left out of the result.
        """
        items: dict[str, str] = {}
        for item in data_items:
            if item and item.strip():
                items.setdefault(self._key(item), item.strip())
        if not items:
            return {}

        with self._lock:
            missing = [item for key, item in items.items() if key not in self._dd_title_cache]

        if missing:
            titles = self._source.get_data_dictionary_titles(missing)
            with self._lock:
                for title in titles:
                    if title.data_item and title.data_item.strip():
                        self._dd_title_cache[self._key(title.data_item)] = title.combined_title
                for item in missing:
                    self._dd_title_cache.setdefault(self._key(item), None)

        resolved: dict[str, str] = {}
        with self._lock:
            for key, item in items.items():
                title = self._dd_title_cache.get(key)
                if title and title.strip():
                    resolved[item] = title
        return resolved

    def resolve_business_function_name(self, template_name: str) -> str | None:
        """Resolve the business function (BSFN) object name for a template name."""
        if not template_name or not template_name.strip():
            return None

        key = self._key(template_name)
        with self._lock:
            if key in self._bsfn_name_cache:
                return self._bsfn_name_cache[key]

        candidate = build_business_function_search_pattern(template_name.strip())
        matches = self._source.find_business_functions(candidate, max_results=1)
        resolved = matches[0] if matches else candidate
        with self._lock:
            return self._bsfn_name_cache.setdefault(key, resolved)


class TemplateCatalog:
    """Templates visible to one decompile session.

    Lookup is two-level: an explicitly named template (fetched lazily through the
    spec resolver and cached by name, case-insensitively), then the primary
    template paired with the event.
    """

    def __init__(self, primary: DataStructureTemplate, spec_resolver: SpecResolver | None = None) -> None:
        self.primary = primary
        self._spec_resolver = spec_resolver
        self._templates: dict[str, DataStructureTemplate | None] = {primary.template_name.upper(): primary}

    @property
    def primary_name(self) -> str:
        return self.primary.template_name

    def get(self, template_name: str | None) -> DataStructureTemplate | None:
        if template_name is None or not template_name.strip():
            return None

        key = template_name.strip().upper()
        if key in self._templates:
            return self._templates[key]
        if self._spec_resolver is None:
            return None

        template = self._spec_resolver.get_data_structure_template(template_name.strip())
        if template is not None:
            self._templates[key] = template
        return template

    def resolve_item(self, item_id: str | None, template_name: str | None = None):
        """Template item for item_id: explicit template first, then the primary."""
        if item_id is None or not item_id.strip():
            return None

        if template_name and template_name.strip().upper() != self.primary_name.upper():
            template = self.get(template_name)
            item = template.try_get_item(item_id) if template is not None else None
            if item is not None:
                return item
            logger.debug("Item %s not found in template %s; trying %s", item_id, template_name, self.primary_name)

        return self.primary.try_get_item(item_id)
