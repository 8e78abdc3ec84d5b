"""HTTP API for the media gallery."""
