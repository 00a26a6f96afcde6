"""Web services backing the HTTP controllers."""

from xdefi.web.services.quote_service import QuoteService

__all__ = ["QuoteService"]
