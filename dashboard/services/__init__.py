"""Dashboard features built from backend resources and the analytics helpers."""
