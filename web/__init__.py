"""
Web package: the HTTP boundary of the chess game service.

Provides a FastAPI application exposing game creation, inspection, move
application and deletion as a JSON REST API. Run it with the ``chess-api``
console script or ``uvicorn web.app:app``.
"""
