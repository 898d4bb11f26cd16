from functools import lru_cache

from .database import DatabaseClient
from .extraction import InvoiceExtractor


@lru_cache(maxsize=1)
def get_db() -> DatabaseClient:
    return DatabaseClient()


@lru_cache(maxsize=1)
def get_extractor() -> InvoiceExtractor:
    return InvoiceExtractor()
