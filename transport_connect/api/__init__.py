# transport_connect/api/__init__.py
"""HTTP API (FastAPI)."""
