from siteintel_api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
