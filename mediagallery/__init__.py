"""Media gallery: TTL-refreshed directory index and range-request streaming."""

__version__ = "0.1.0"
