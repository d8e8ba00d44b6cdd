"""
Discovery package for the book explorer.

This package holds the engine that lets a reader search a remote book
catalogue and then narrow, sort and page through the results locally.
A submitted query is parsed for inline directives (``directives``),
fetched in bounded batches (``fetcher`` over ``googlebooks_service``),
filtered and sorted (``filters``) and sliced into pages
(``pagination``). ``session.ExplorerSession`` ties these together for
one reader and ``router`` exposes sessions over HTTP.
"""

from .router import router as explorer_router  # noqa: F401
