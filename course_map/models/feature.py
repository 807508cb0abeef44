"""Row-level data models exchanged with the spatial store.

``FeatureRow`` is what the importer stages for insertion: the course key,
the extracted properties, and the geometry already encoded as WKT.
``StoredFeature`` and ``FeatureMatch`` are what the store hands back to
the validator and to the query service.
"""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FeatureRow:
    """A single feature staged for insertion.

    Attributes:
        course_id: Caller-supplied grouping key.
        feature_type: Category (``"boundary"`` is reserved).
        name: Optional display name.
        wkt: Geometry encoded as WKT in ``(lon, lat)`` order.
        properties_json: The feature's original ``properties`` object,
            serialised verbatim.
    """

    course_id: str
    feature_type: str
    name: str | None
    wkt: str
    properties_json: str = "{}"

    @property
    def properties(self) -> dict[str, object]:
        """Return the stored properties as a dict."""
        return json.loads(self.properties_json)  # type: ignore[no-any-return]


@dataclass(frozen=True, slots=True)
class StoredFeature:
    """A feature read back from the store."""

    feature_type: str
    name: str | None
    wkt: str = ""


@dataclass(frozen=True, slots=True)
class FeatureMatch:
    """A query hit: the feature's identity and, for distance queries, its distance."""

    feature_type: str
    name: str | None
    distance_m: float | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise to the JSON shape returned by the query endpoints."""
        result: dict[str, object] = {"featureType": self.feature_type, "name": self.name}
        if self.distance_m is not None:
            result["distanceMeters"] = self.distance_m
        return result
