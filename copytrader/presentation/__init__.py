"""Presentation layer - FastAPI control API."""
