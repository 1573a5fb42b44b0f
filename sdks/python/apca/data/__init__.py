"""Market data API endpoints."""
