"""In-memory OData data source backed by annotated pydantic models."""

__version__ = "0.1.0"
