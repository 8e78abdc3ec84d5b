"""Gallery services: directory index cache and range streaming."""
