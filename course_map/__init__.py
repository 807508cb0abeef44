"""Course Map importer.

Imports golf-course features from GeoJSON into a spatial store, simplifies
dense line geometry, validates that a single boundary polygon contains every
other feature, and answers point / radius / nearest lookups.
"""

__version__ = "0.1.0"
