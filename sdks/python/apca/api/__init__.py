"""Trading API endpoints."""
