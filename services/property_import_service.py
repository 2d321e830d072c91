"""
PropertyImportService - Entry point for commercial property CSV imports

Ties source detection, column mapping and row transformation together for
one uploaded file. Persistence is left to the caller through ``row_handler``.
"""

import re
import time
from collections.abc import Sized
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from config import get_config
from logging_config import get_logger, import_audit_logger, ImportAuditLogger
from services.column_mapping_service import ColumnMappingService
from services.common.result import Result
from services.enums import ImportSource
from services.import_diagnostics import ImportDiagnostics
from services.import_models import AutoMapResult, ImportRowResult
from services.row_transform_service import RowTransformService

logger = get_logger(__name__)

RowHandler = Callable[[int, ImportRowResult], Any]
ProgressCallback = Callable[[int, Optional[int]], Any]

_STREET_SUFFIXES = re.compile(
    r'\s(?:street|st|avenue|ave|boulevard|blvd|drive|dr|road|rd|lane|ln|'
    r'court|ct|place|pl|way)\b\.?'
)
_DIRECTIONS = re.compile(r'\s(?:north|south|east|west|n|s|e|w)\b\.?')
_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]')


def normalize_address_key(address: Optional[str]) -> str:
    """Key used to match an incoming property against existing ones

    '123 N. Main Street' and '123 main st' both become '123main'.
    """
    if not address:
        return ''
    key = ' '.join(str(address).lower().split())
    key = key.rstrip('.')
    key = _STREET_SUFFIXES.sub('', key)
    key = _DIRECTIONS.sub('', key)
    return _NON_ALPHANUMERIC.sub('', key)


@dataclass
class ImportBatchReport:
    """Everything produced by one transform_rows call

    ``results`` is only filled when no row handler was given; with a handler
    each result is handed off and dropped, so memory does not grow with the
    file.
    """

    results: List[Tuple[int, ImportRowResult]] = field(default_factory=list)
    diagnostics: ImportDiagnostics = field(default_factory=ImportDiagnostics)
    processing_time: float = 0.0
    max_error_samples: int = 10

    @property
    def total_rows(self) -> int:
        return self.diagnostics.rows_processed

    def to_dict(self) -> Dict[str, Any]:
        summary = self.diagnostics.summary(self.max_error_samples)
        summary['processing_time'] = self.processing_time
        return summary


class PropertyImportService:
    """Service for mapping and transforming CoStar, Crexi and manual CSV exports"""

    def __init__(self,
                 column_mapping_service: Optional[ColumnMappingService] = None,
                 row_transform_service: Optional[RowTransformService] = None,
                 audit_logger: Optional[ImportAuditLogger] = None,
                 batch_size: Optional[int] = None,
                 max_error_samples: Optional[int] = None):
        """Initialize service with its collaborators

        Args:
            column_mapping_service: Resolves headers to canonical fields
            row_transform_service: Builds canonical records from rows
            audit_logger: Receives batch-level import events
            batch_size: Rows per batch (defaults to IMPORT_BATCH_SIZE)
            max_error_samples: Rows listed in report samples (defaults to IMPORT_MAX_ERROR_SAMPLES)
        """
        settings = get_config()
        self.column_mapping_service = column_mapping_service or ColumnMappingService()
        self.row_transform_service = row_transform_service or RowTransformService()
        self.audit_logger = audit_logger or import_audit_logger
        self.batch_size = batch_size or settings.IMPORT_BATCH_SIZE
        self.max_error_samples = (
            settings.IMPORT_MAX_ERROR_SAMPLES if max_error_samples is None else max_error_samples
        )

    def auto_map(self,
                 headers: Optional[List[str]],
                 source: Optional[ImportSource] = None,
                 column_mapping: Optional[Mapping[str, str]] = None) -> Result:
        """Propose (or check a user-edited) column mapping for a file

        Args:
            headers: Raw column names from the file
            source: Data provider; detected when omitted
            column_mapping: Flat raw column -> field mapping edited by the user

        Returns:
            Result containing an AutoMapResult
        """
        if not headers:
            return Result.failure("No headers found in CSV", code="NO_HEADERS")

        try:
            if column_mapping is not None:
                if source is None:
                    source = self.column_mapping_service.source_detector.detect_source(headers)
                auto_map = self.column_mapping_service.apply_overrides(headers, column_mapping, source)
            else:
                auto_map = self.column_mapping_service.resolve(headers, source)
        except Exception as e:
            logger.error("Column mapping failed", error=str(e))
            return Result.failure(f"Column mapping failed: {str(e)}", code="IMPORT_ERROR")

        self.audit_logger.log_auto_map(
            auto_map.detected_source.value,
            mapped=len(auto_map.mapped_columns),
            unmapped=len(auto_map.unmapped_columns),
            warnings=len(auto_map.warnings)
        )
        for warning in auto_map.warnings:
            self.audit_logger.log_structural_warning(warning)
        if auto_map.has_critical_warnings:
            logger.warning(
                "Required columns missing; every row will fail validation",
                source=auto_map.detected_source.value
            )

        return Result.success(auto_map)

    def transform_rows(self,
                       rows: Iterable[Mapping[str, Any]],
                       auto_map_result: AutoMapResult,
                       row_handler: Optional[RowHandler] = None,
                       progress_callback: Optional[ProgressCallback] = None,
                       batch_size: Optional[int] = None) -> Result:
        """Transform rows in batches and hand each result to ``row_handler``

        A handler that raises is recorded against its row and processing
        continues. Only a failing row source aborts the run.

        Args:
            rows: Row dicts in file order
            auto_map_result: Mapping from auto_map()
            row_handler: Called as row_handler(row_number, result); row numbers start at 1.
                When omitted, results are collected on the report instead
            progress_callback: Called as progress_callback(processed, total) after each
                batch; total is None when ``rows`` has no length
            batch_size: Overrides the service batch size for this call

        Returns:
            Result containing an ImportBatchReport
        """
        batch_size = batch_size or self.batch_size
        total = len(rows) if isinstance(rows, Sized) else None
        report = ImportBatchReport(
            diagnostics=ImportDiagnostics.from_auto_map(auto_map_result),
            max_error_samples=self.max_error_samples
        )
        start_time = time.time()

        try:
            batch = []
            for row_number, row in enumerate(rows, start=1):
                batch.append((row_number, row))
                if len(batch) >= batch_size:
                    self._process_batch(batch, auto_map_result, row_handler, report)
                    batch = []
                    if progress_callback:
                        progress_callback(report.total_rows, total)

            if batch:
                self._process_batch(batch, auto_map_result, row_handler, report)
                if progress_callback:
                    progress_callback(report.total_rows, total)
        except Exception as e:
            logger.error("Row import failed", error=str(e), rows_processed=report.total_rows)
            return Result.failure(f"Import failed: {str(e)}", code="IMPORT_ERROR")

        report.processing_time = time.time() - start_time
        self.audit_logger.log_batch_complete(
            rows=report.diagnostics.rows_processed,
            rows_with_errors=report.diagnostics.rows_with_errors,
            duration_ms=round(report.processing_time * 1000, 2),
            handler_failures=report.diagnostics.handler_failures
        )
        return Result.success(report)

    def _process_batch(self,
                       batch: List[Tuple[int, Mapping[str, Any]]],
                       auto_map_result: AutoMapResult,
                       row_handler: Optional[RowHandler],
                       report: ImportBatchReport) -> None:
        """Transform one batch and fold its diagnostics into the report"""
        rows_with_errors = report.diagnostics.rows_with_errors

        for row_number, row in batch:
            result = self.row_transform_service.transform_row(
                row,
                auto_map_result.property_mapping,
                auto_map_result.transaction_mapping
            )

            handler_error = None
            if row_handler is not None:
                try:
                    row_handler(row_number, result)
                except Exception as e:
                    handler_error = f"Row handler failed: {str(e)}"
                    logger.warning(
                        "Row handler failed",
                        row=row_number,
                        address_key=normalize_address_key(result.property.get('address')),
                        error=str(e)
                    )
            else:
                report.results.append((row_number, result))

            report.diagnostics.update(ImportDiagnostics.from_row(row_number, result, handler_error))

        logger.debug(
            "Batch processed",
            rows=len(batch),
            rows_with_errors=report.diagnostics.rows_with_errors - rows_with_errors
        )
