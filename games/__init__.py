"""
Chess game session package.

This package holds the stateful core of the service: a registry of
in-progress games, the protocol for applying a move to one of them, and the
derivation of a user-facing status from a position. Chess rules themselves
(move generation, notation, outcome detection) come from python-chess and are
reached only through the rules adapter.

Modules:
    errors  — Exception hierarchy shared by the core and the web layer
    rules   — Thin adapter over python-chess (UCI, SAN, FEN, outcome)
    status  — Ongoing / Checkmate / Stalemate / Draw derivation
    session — Immutable GameSession value and its read-side snapshot
    store   — SessionStore registry guarded by a readers-writer lock
    moves   — Move application protocol
"""
