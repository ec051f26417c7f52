"""GeoID backend package for geological map features.

This package serves the explore map of the GeoID rock identification app.
Its core is a viewport-scoped cache in front of the upstream
geological-features lookup, so panning and zooming the map does not
re-issue an expensive, rate-limited query for every small change of the
visible region.

- Viewport rectangle geometry (containment, padding) in WGS84 degrees
- Bounded FIFO cache store with a time-to-live, owned per application
- Fetch-and-populate orchestration that degrades to empty results on
  upstream failure
- Thin wrappers for explore-map POIs and fault deep-dive content
- FastAPI routers exposing all of the above to the mobile client

See module sub-docstrings for details on each component.
"""
