"""
Import Diagnostics - Batch-level error and warning report

from_auto_map, from_row and merge return new objects; update folds another
report into an existing one in place, which is what a long-running import
uses. Merging is commutative and associative, so rows can be processed in
any chunking or order and still produce the same report.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from services.import_models import AutoMapResult, ImportRowResult

# Pulls the field name out of "Transform error for X: ..." / "Validation failed for X: ..."
_ERROR_FIELD = re.compile(r'^(?:Transform error|Validation failed) for ([^:]+):')

HANDLER_ERROR_FIELD = '_handler'


def error_field(message: str) -> str:
    """Canonical field named by a row error string, '_other' when none"""
    match = _ERROR_FIELD.match(message)
    return match.group(1) if match else '_other'


@dataclass
class ImportDiagnostics:
    """Aggregate counts for one import run"""

    rows_processed: int = 0
    rows_with_errors: int = 0
    field_error_counts: Counter = field(default_factory=Counter)
    row_errors: Dict[int, Tuple[str, ...]] = field(default_factory=dict)
    unmapped_columns: Counter = field(default_factory=Counter)
    warnings: Counter = field(default_factory=Counter)
    handler_failures: int = 0

    @classmethod
    def from_auto_map(cls, auto_map: AutoMapResult) -> 'ImportDiagnostics':
        """File-level part of the report: unmapped columns and mapping warnings"""
        return cls(
            unmapped_columns=Counter(auto_map.unmapped_columns),
            warnings=Counter(auto_map.warnings)
        )

    @classmethod
    def from_row(cls, row_number: int, result: ImportRowResult,
                 handler_error: Optional[str] = None) -> 'ImportDiagnostics':
        """Report for a single transformed row

        Args:
            row_number: 1-based data row number, unique within an import
            result: Output of the row transformer
            handler_error: Message from a failed persistence handler, if any
        """
        errors = list(result.errors)
        if handler_error is not None:
            errors.append(handler_error)

        field_errors = Counter(error_field(message) for message in result.errors)
        if handler_error is not None:
            field_errors[HANDLER_ERROR_FIELD] += 1

        return cls(
            rows_processed=1,
            rows_with_errors=1 if errors else 0,
            field_error_counts=field_errors,
            row_errors={row_number: tuple(errors)} if errors else {},
            handler_failures=1 if handler_error is not None else 0
        )

    def merge(self, other: 'ImportDiagnostics') -> 'ImportDiagnostics':
        """Combine two reports covering disjoint sets of rows"""
        combined = ImportDiagnostics()
        combined.update(self)
        return combined.update(other)

    def update(self, other: 'ImportDiagnostics') -> 'ImportDiagnostics':
        """Fold ``other`` into this report in place

        Cost is proportional to ``other`` only, so folding in every row of a
        large import one at a time stays linear.
        """
        overlap = [row_number for row_number in other.row_errors if row_number in self.row_errors]
        if overlap:
            raise ValueError(f"Row numbers reported twice: {sorted(overlap)}")

        self.rows_processed += other.rows_processed
        self.rows_with_errors += other.rows_with_errors
        self.field_error_counts += other.field_error_counts
        self.row_errors.update(other.row_errors)
        self.unmapped_columns += other.unmapped_columns
        self.warnings += other.warnings
        self.handler_failures += other.handler_failures
        return self

    def __add__(self, other: 'ImportDiagnostics') -> 'ImportDiagnostics':
        if not isinstance(other, ImportDiagnostics):
            return NotImplemented
        return self.merge(other)

    def __iadd__(self, other: 'ImportDiagnostics') -> 'ImportDiagnostics':
        if not isinstance(other, ImportDiagnostics):
            return NotImplemented
        return self.update(other)

    @property
    def error_count(self) -> int:
        return sum(len(errors) for errors in self.row_errors.values())

    def summary(self, max_error_samples: int = 10) -> Dict[str, Any]:
        """Deterministic dict for the review screen and logs"""
        sample_rows = sorted(self.row_errors)[:max(max_error_samples, 0)]
        return {
            'rows_processed': self.rows_processed,
            'rows_with_errors': self.rows_with_errors,
            'error_count': self.error_count,
            'handler_failures': self.handler_failures,
            'field_errors': dict(sorted(self.field_error_counts.items())),
            'unmapped_columns': sorted(self.unmapped_columns),
            'warnings': sorted(self.warnings),
            'error_samples': [
                {'row': row_number, 'errors': list(self.row_errors[row_number])}
                for row_number in sample_rows
            ],
        }
