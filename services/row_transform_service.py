"""
Row Transform Service - Turns one raw CSV row into canonical records

Fail-soft per field: a transform that raises or a value that fails its
validator nulls that field and records an error string. Every mapped column
is always attempted and transform_row never raises.
"""

from collections.abc import Mapping as MappingABC
from typing import Any, Dict, List, Mapping, Optional

from logging_config import get_logger
from services.common.cell_value import CellValue
from services.field_transforms import FIELD_TRANSFORMS
from services.field_validators import FIELD_VALIDATORS
from services.import_models import ColumnMapping, ImportRowResult

logger = get_logger(__name__)


class RowTransformService:
    """Applies a column mapping to rows through the transform and validator tables"""

    def __init__(self,
                 transforms: Optional[Mapping[str, Any]] = None,
                 validators: Optional[Mapping[str, Any]] = None):
        self.transforms = FIELD_TRANSFORMS if transforms is None else transforms
        self.validators = FIELD_VALIDATORS if validators is None else validators

    def transform_row(self,
                      row: Optional[Mapping[str, Any]],
                      property_mapping: Optional[ColumnMapping],
                      transaction_mapping: Optional[ColumnMapping]) -> ImportRowResult:
        """
        Build the property and transaction records for one row.

        Args:
            row: Raw column -> cell value; missing columns read as absent
            property_mapping: Raw column -> property field
            transaction_mapping: Raw column -> transaction field

        Returns:
            ImportRowResult; errors lists every field that was nulled
        """
        if not isinstance(row, MappingABC):
            row = {}

        errors: List[str] = []
        property_data: Dict[str, Any] = {}
        transaction_data: Dict[str, Any] = {}

        for column, field in (property_mapping or {}).items():
            value = self._transform(field, self._read(row, column), errors)
            if value is not None and not self._validate(field, value):
                errors.append(f"Validation failed for {field}: {value}")
                value = None
            property_data[field] = value

        # Transaction values are transformed but not validated
        for column, field in (transaction_mapping or {}).items():
            transaction_data[field] = self._transform(field, self._read(row, column), errors)

        return ImportRowResult(property=property_data, transaction=transaction_data, errors=errors)

    @staticmethod
    def _read(row: Mapping[str, Any], column: str) -> Any:
        try:
            return row.get(column)
        except Exception:
            return None

    def _transform(self, field: str, raw: Any, errors: List[str]) -> Any:
        transform = self.transforms.get(field)
        if transform is None:
            return raw
        try:
            return transform(CellValue.from_raw(raw))
        except Exception as e:
            errors.append(f"Transform error for {field}: {e}")
            logger.debug("Transform failed", field=field, error=str(e))
            return None

    def _validate(self, field: str, value: Any) -> bool:
        rule = self.validators.get(field)
        if rule is None:
            return True
        try:
            return bool(rule(value))
        except Exception as e:
            logger.debug("Validator raised", field=field, error=str(e))
            return False


_default_service = RowTransformService()


def transform_row(row: Optional[Mapping[str, Any]],
                  property_mapping: Optional[ColumnMapping],
                  transaction_mapping: Optional[ColumnMapping]) -> ImportRowResult:
    """Transform one row with the standard registries"""
    return _default_service.transform_row(row, property_mapping, transaction_mapping)
