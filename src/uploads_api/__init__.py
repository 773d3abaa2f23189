"""HTTP API for storing and retrieving files uploaded per task."""
