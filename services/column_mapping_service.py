"""
Column Mapping Service - Binds raw CSV headers to canonical fields

Resolution is deterministic: property fields are resolved before transaction
fields, each in table order, and every field binds the first of its aliases
that matches a header not already claimed.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from logging_config import get_logger
from services.enums import (
    CANONICAL_FIELD_NAMES,
    PROPERTY_FIELD_NAMES,
    TRANSACTION_FIELD_NAMES,
    ImportSource,
)
from services.import_mappings import (
    LOCATION_TYPE_COLUMN,
    REQUIRED_FIELDS,
    SKIP_FIELDS,
    AliasTable,
    alias_tables_for,
    normalize_header,
)
from services.import_models import AutoMapResult, ColumnMapping
from services.source_detection_service import SourceDetectionService

logger = get_logger(__name__)


class ColumnMappingService:
    """Proposes and checks the raw column -> canonical field mapping for a file"""

    def __init__(self,
                 source_detector: Optional[SourceDetectionService] = None,
                 alias_tables: Optional[Mapping[ImportSource, Tuple[AliasTable, AliasTable]]] = None,
                 skip_fields: Sequence[str] = SKIP_FIELDS):
        """
        Args:
            source_detector: Used when resolve() is called without a source
            alias_tables: Per-source (property table, transaction table) overrides;
                sources not listed fall back to the standard tables
            skip_fields: Raw column names that must never be bound
        """
        self.source_detector = source_detector or SourceDetectionService()
        self.alias_tables = dict(alias_tables or {})
        self.skip_fields = tuple(skip_fields)
        self._skip_keys = frozenset(normalize_header(name) for name in self.skip_fields)

    def tables_for(self, source: ImportSource) -> Tuple[AliasTable, AliasTable]:
        if source in self.alias_tables:
            return self.alias_tables[source]
        return alias_tables_for(source)

    def is_skipped(self, header: str) -> bool:
        return normalize_header(header) in self._skip_keys

    def resolve(self, headers: Iterable[str], source: Optional[ImportSource] = None) -> AutoMapResult:
        """
        Auto-map a header list.

        Args:
            headers: Raw column names in file order
            source: Data provider; detected from the headers when omitted

        Returns:
            AutoMapResult with both mappings, leftover columns and warnings
        """
        headers = [h for h in (headers or []) if isinstance(h, str)]
        if source is None:
            source = self.source_detector.detect_source(headers)

        property_table, transaction_table = self.tables_for(source)
        used_headers = set()

        property_mapping = self._bind(property_table, headers, used_headers)
        transaction_mapping = self._bind(transaction_table, headers, used_headers)

        result = self._finish(headers, property_mapping, transaction_mapping, source, [])
        logger.info(
            "Columns auto-mapped",
            source=source.value,
            property_columns=len(result.property_mapping),
            transaction_columns=len(result.transaction_mapping),
            unmapped_columns=len(result.unmapped_columns),
            warnings=len(result.warnings)
        )
        return result

    def apply_overrides(self,
                        headers: Iterable[str],
                        column_mapping: Optional[Mapping[str, str]],
                        source: ImportSource = ImportSource.MANUAL) -> AutoMapResult:
        """
        Build an AutoMapResult from a user-edited flat mapping.

        Entries with an empty target, a target outside the canonical
        vocabulary, a column missing from the file, or a skip-listed column
        are dropped. Invalid targets are reported as warnings.
        """
        headers = [h for h in (headers or []) if isinstance(h, str)]
        header_set = set(headers)
        warnings: List[str] = []
        property_mapping: ColumnMapping = {}
        transaction_mapping: ColumnMapping = {}

        for column, target in (column_mapping or {}).items():
            target = getattr(target, 'value', target)
            if not target:
                continue
            if target not in CANONICAL_FIELD_NAMES:
                warnings.append(f"Skipped invalid column mapping: {column} -> {target}")
                continue
            if column not in header_set or self.is_skipped(column):
                continue
            if target in PROPERTY_FIELD_NAMES:
                property_mapping[column] = target
            elif target in TRANSACTION_FIELD_NAMES:
                transaction_mapping[column] = target

        if warnings:
            logger.warning("Dropped invalid column mappings", count=len(warnings))

        return self._finish(headers, property_mapping, transaction_mapping, source, warnings)

    def _bind(self, table: AliasTable, headers: List[str], used_headers: set) -> ColumnMapping:
        """Bind each field in table order to its first available alias

        An alias matches the first header equal to it after normalization.
        When that header is already bound the next alias is tried; later
        headers differing only in case or spacing are never considered.
        """
        by_key: Dict[str, str] = {}
        for header in headers:
            by_key.setdefault(normalize_header(header), header)

        mapping: ColumnMapping = {}
        for field, aliases in table:
            field_name = getattr(field, 'value', field)
            header = self._first_unused(aliases, by_key, used_headers)
            if header is not None:
                mapping[header] = field_name
                used_headers.add(header)
        return mapping

    @staticmethod
    def _first_unused(aliases: Sequence[str], by_key: Dict[str, str], used_headers: set) -> Optional[str]:
        for alias in aliases:
            header = by_key.get(normalize_header(alias))
            if header is not None and header not in used_headers:
                return header
        return None

    def _finish(self, headers: List[str], property_mapping: ColumnMapping,
                transaction_mapping: ColumnMapping, source: ImportSource,
                warnings: List[str]) -> AutoMapResult:
        """Un-bind skip-listed columns, collect leftovers and add structural warnings"""
        for mapping in (property_mapping, transaction_mapping):
            for column in [c for c in mapping if self.is_skipped(c)]:
                del mapping[column]
                if normalize_header(column) == normalize_header(LOCATION_TYPE_COLUMN):
                    warnings.append(
                        f'WARNING: "{LOCATION_TYPE_COLUMN}" was mapped. '
                        'This is NOT an address field and has been removed.'
                    )
                else:
                    warnings.append(
                        f'WARNING: "{column}" is on the skip list and has been removed from the mapping.'
                    )
                logger.warning("Skip-listed column was mapped", column=column)

        mapped = set(property_mapping) | set(transaction_mapping)
        unmapped_columns = [
            header for header in headers
            if header not in mapped and not self.is_skipped(header)
        ]

        mapped_fields = set(property_mapping.values())
        for required in REQUIRED_FIELDS:
            if required.value not in mapped_fields:
                warnings.append(
                    f"CRITICAL: No {required.value} column found. Import will fail for all rows."
                )

        return AutoMapResult(
            property_mapping=property_mapping,
            transaction_mapping=transaction_mapping,
            unmapped_columns=unmapped_columns,
            warnings=warnings,
            detected_source=source
        )


_default_service = ColumnMappingService()


def resolve(headers: Iterable[str], source: Optional[ImportSource] = None) -> AutoMapResult:
    """Auto-map a header list with the standard alias tables"""
    return _default_service.resolve(headers, source)


def auto_map_columns(headers: Iterable[str]) -> AutoMapResult:
    """Detect the source, then auto-map"""
    return _default_service.resolve(headers)
