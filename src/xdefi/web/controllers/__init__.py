"""HTTP controllers for web API endpoints.

These controllers never sign or broadcast: they return quotes and encoded
payloads for the client's wallet.
"""

from xdefi.web.controllers.quotes import router as quotes_router
from xdefi.web.controllers.swaps import router as swaps_router

__all__ = [
    "quotes_router",
    "swaps_router",
]
