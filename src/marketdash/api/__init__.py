"""HTTP surface for the analytics endpoints."""
