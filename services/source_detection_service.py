"""
Source Detection Service - Classifies a CSV header set by data provider
"""

from typing import Iterable, Optional, Sequence

from logging_config import get_logger
from services.enums import ImportSource
from services.import_mappings import (
    COSTAR_DETECTION_FIELDS,
    CREXI_DETECTION_FIELDS,
    CREXI_UNIQUE_MARKER,
    DETECTION_THRESHOLD,
    normalize_header,
)

logger = get_logger(__name__)


class SourceDetectionService:
    """
    Fingerprint vote over the header set.

    CoStar wins with enough CoStar fingerprints, then Crexi with enough Crexi
    fingerprints, then Crexi again on its unique marker column alone.
    Everything else is a manual file. LoopNet is never returned.
    """

    def __init__(self,
                 costar_fields: Sequence[str] = COSTAR_DETECTION_FIELDS,
                 crexi_fields: Sequence[str] = CREXI_DETECTION_FIELDS,
                 threshold: int = DETECTION_THRESHOLD):
        self.costar_fields = tuple(normalize_header(f) for f in costar_fields)
        self.crexi_fields = tuple(normalize_header(f) for f in crexi_fields)
        self.threshold = threshold

    def detect_source(self, headers: Optional[Iterable[str]]) -> ImportSource:
        """Classify a header list

        Args:
            headers: Raw column names from the first line of the file

        Returns:
            Detected ImportSource (MANUAL when nothing matches)
        """
        header_set = {normalize_header(h) for h in (headers or [])}
        header_set.discard('')

        costar_matches = self.count_matches(header_set, self.costar_fields)
        crexi_matches = self.count_matches(header_set, self.crexi_fields)

        if costar_matches >= self.threshold:
            source = ImportSource.COSTAR
        elif crexi_matches >= self.threshold:
            source = ImportSource.CREXI
        elif normalize_header(CREXI_UNIQUE_MARKER) in header_set:
            source = ImportSource.CREXI
        else:
            source = ImportSource.MANUAL

        logger.debug(
            "Import source detected",
            source=source.value,
            costar_matches=costar_matches,
            crexi_matches=crexi_matches,
            header_count=len(header_set)
        )
        return source

    @staticmethod
    def count_matches(header_set: set, fingerprints: Sequence[str]) -> int:
        return sum(1 for fingerprint in fingerprints if fingerprint in header_set)


_default_detector = SourceDetectionService()


def detect_source(headers: Optional[Iterable[str]]) -> ImportSource:
    """Classify a header list with the standard fingerprints"""
    return _default_detector.detect_source(headers)
