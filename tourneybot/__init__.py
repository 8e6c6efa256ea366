"""TourneyBot: versioned tournament state behind a small HTTP API.

Subpackages
-----------
events
    Event document validation, versioned storage backends, and the update
    service enforcing optimistic concurrency.
api
    Falcon ASGI application exposing the update and read endpoints.
assets
    Build-time helpers that hash and rename published CSS/JS assets.
"""
