"""siteintel_api — HTTP API over the siteintel pipelines."""

__version__ = "0.1.0"
