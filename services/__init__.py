"""
services - Business-logic layer sitting between the CLI and the store.
"""

from services.catalog_service import CatalogService, CatalogState    # noqa: F401
from services.link_service import LinkService                        # noqa: F401
from services.search_service import (                                # noqa: F401
    SearchService, SearchKind, PartLink, ModelLink,
)
from services.errors import (                                        # noqa: F401
    CatalogError, NotReady, DuplicateName, DuplicatePartNumber,
    NotFound, PersistenceError, InitializationError, QueryError,
)
