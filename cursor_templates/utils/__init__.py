"""Small shared helpers (JSON documents, logging)."""
