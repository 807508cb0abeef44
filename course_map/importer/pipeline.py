"""Import orchestrator: GeoJSON FeatureCollection -> spatial store.

Each run handles one document for one course:

1. **Transform**: for every feature, in document order, extract
   ``featureType`` / ``name`` / ``properties``, decode the geometry,
   simplify LineStrings, and encode WKT into a ``FeatureRow``.  Every
   feature is transformed before the store is touched, so bad input
   aborts the run with nothing written.
2. **Commit**: inside one store transaction, optionally delete the
   course's existing rows, then insert every staged row.  Any failure
   rolls back the deletes and the inserts together.

Nothing is retried.  A failed run is reported to the caller, who decides
whether to re-run.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from course_map.core.constants import FEATURE_COLLECTION, UNKNOWN_FEATURE_TYPE
from course_map.core.exceptions import ValidationError
from course_map.geometry.decoder import decode_geometry
from course_map.geometry.wkt import encode_wkt
from course_map.models.feature import FeatureRow
from course_map.simplify.bridge import simplify_geometry
from course_map.simplify.factory import get_simplifier

if TYPE_CHECKING:
    from course_map.core.config import ImporterConfig
    from course_map.simplify.base import LineSimplifier
    from course_map.store.base import SpatialStore

logger = logging.getLogger("course_map.importer.pipeline")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DocumentError(ValidationError):
    """Raised when the input document cannot be imported."""

    default_stage = "import_features"
    default_code = "DOCUMENT_INVALID"


class DocumentReadError(DocumentError):
    """Raised when the input file cannot be read or is not valid JSON."""

    default_code = "DOCUMENT_READ_FAILED"


class UnsupportedDocumentTypeError(DocumentError):
    """Raised when the top-level type is not ``FeatureCollection``."""

    default_code = "DOCUMENT_UNSUPPORTED_TYPE"


class MalformedDocumentError(DocumentError):
    """Raised when ``features`` is missing or a feature is not an object."""

    default_code = "DOCUMENT_MALFORMED"


# ---------------------------------------------------------------------------
# Document loading
# ---------------------------------------------------------------------------


def load_document(path: Path | str) -> dict[str, object]:
    """Read and parse a GeoJSON file.

    Raises:
        DocumentReadError: If the file is missing, unreadable, or not a JSON object.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read GeoJSON file {path}: {exc}"
        raise DocumentReadError(msg) from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Not valid JSON in {path}: {exc}"
        raise DocumentReadError(msg) from exc

    if not isinstance(document, dict):
        msg = f"GeoJSON root must be an object in {path}, got {type(document).__name__}"
        raise DocumentReadError(msg)
    return document


def _features_of(document: object) -> list[object]:
    """Return the ``features`` array after checking the document type."""
    doc_type = document.get("type") if isinstance(document, Mapping) else None
    if doc_type != FEATURE_COLLECTION:
        msg = f"Only {FEATURE_COLLECTION} is supported, got {doc_type!r}"
        raise UnsupportedDocumentTypeError(msg)

    features = document.get("features")  # type: ignore[union-attr]
    if not isinstance(features, list):
        msg = f"{FEATURE_COLLECTION} 'features' must be an array, got {type(features).__name__}"
        raise MalformedDocumentError(msg)
    return features


# ---------------------------------------------------------------------------
# Importer
# ---------------------------------------------------------------------------


class FeatureImporter:
    """Transforms a FeatureCollection and commits it as one atomic unit.

    Args:
        store: The spatial store receiving the rows.
        simplifier: Routine applied to LineString geometry.
        epsilon_m: Simplification tolerance in metres.
    """

    def __init__(
        self,
        store: SpatialStore,
        *,
        simplifier: LineSimplifier,
        epsilon_m: float,
    ) -> None:
        self._store = store
        self._simplifier = simplifier
        self._epsilon_m = epsilon_m

    @classmethod
    def from_config(cls, config: ImporterConfig, store: SpatialStore) -> FeatureImporter:
        return cls(
            store,
            simplifier=get_simplifier(config.simplifier),
            epsilon_m=config.simplify_epsilon_m,
        )

    def transform_feature(self, feature: object, course_id: str, index: int) -> FeatureRow:
        """Turn one GeoJSON feature into a staged row.

        Raises:
            MalformedDocumentError: If the feature is not an object.
            GeometryDecodeError: If its geometry is invalid.
        """
        if not isinstance(feature, Mapping):
            msg = f"Feature #{index} must be an object, got {type(feature).__name__}"
            raise MalformedDocumentError(msg)

        properties = feature.get("properties")
        if not isinstance(properties, Mapping):
            properties = {}

        feature_type = properties.get("featureType")
        feature_type = UNKNOWN_FEATURE_TYPE if feature_type is None else str(feature_type)
        name = properties.get("name")
        name = None if name is None else str(name)

        context = f"feature #{index}" + (f" '{name}'" if name else "")
        geometry = decode_geometry(feature.get("geometry"), context=context)
        geometry = simplify_geometry(geometry, self._epsilon_m, self._simplifier)

        return FeatureRow(
            course_id=course_id,
            feature_type=feature_type,
            name=name,
            wkt=encode_wkt(geometry),
            properties_json=json.dumps(properties),
        )

    def transform(self, document: object, course_id: str) -> list[FeatureRow]:
        """Transform every feature of *document*, in order, without touching the store."""
        features = _features_of(document)
        return [self.transform_feature(f, course_id, i) for i, f in enumerate(features)]

    def run(self, document: object, course_id: str, *, replace: bool = False) -> int:
        """Import *document* under *course_id*.

        Args:
            document: Parsed GeoJSON FeatureCollection.
            course_id: Course key stamped on every row.
            replace: Delete the course's existing rows first (same transaction).

        Returns:
            Number of inserted rows.

        Raises:
            DocumentError: Unsupported or malformed document.
            GeometryDecodeError: Invalid geometry in any feature.
            StoreError: Any store failure; the transaction is rolled back.
        """
        rows = self.transform(document, course_id)
        logger.info(
            "Import staged | course=%s | features=%d | replace=%s",
            course_id,
            len(rows),
            replace,
        )

        with self._store.transaction() as tx:
            if replace:
                deleted = tx.delete_course(course_id)
                logger.info(
                    "Deleted %d existing feature(s) | course=%s",
                    deleted,
                    course_id,
                )
            for row in rows:
                tx.insert_feature(row)

        logger.info("Import committed | course=%s | inserted=%d", course_id, len(rows))
        return len(rows)
