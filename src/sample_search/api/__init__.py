"""
API module - HTTP tool surface.

Endpoints:
- GET  /search            keyword search
- GET  /semantic-search   embedding similarity search
- GET  /fetch/{name}      raw sample content
- GET  /index/status      indexing progress
- POST /index/run         start a fresh indexing run
"""

from sample_search.api.app import create_app

__all__ = ["create_app"]
