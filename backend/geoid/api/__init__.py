"""API router subpackage for the GeoID features backend.

Each module exposes its own APIRouter for composition in the application's
main FastAPI instance.

Submodules:
    - features: Viewport feature lookup, cache statistics and feature
      type labels.
    - pois: Nearby points of interest, POI display catalog and fault
      deep-dive content.
"""
