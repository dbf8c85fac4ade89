"""
Catalog package for the bookshelf API.

This package contains the schemas, listing queries, the ``BookCatalog``
service and the route definitions that expose the book collection over
a small REST API: listing with search, genre filter, sorting and
pagination, confirmed add/update, delete, statistics, export and the
save/load/clear storage commands.
"""

from .router import router as catalog_router  # noqa: F401
