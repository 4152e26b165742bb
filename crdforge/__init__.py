"""CRD template service: schema-driven form fields and manifest generation."""

__version__ = "0.1.0"
