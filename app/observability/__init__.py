"""Request observability: structlog setup, the request-history ring buffer,
and the ASGI middleware that feeds it.
"""
