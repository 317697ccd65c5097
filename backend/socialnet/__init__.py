"""
SocialNet Backend — Application Package
=========================================

REST backend for a small social network: accounts, text posts, comments
and likes, served by FastAPI over an async SQLAlchemy database.

Layers (each only calls the one below it):

    ┌─────────────────────────────────────┐
    │   routes/        HTTP + envelopes   │
    ├─────────────────────────────────────┤
    │   services/      business rules     │
    ├─────────────────────────────────────┤
    │   repositories/  queries            │
    ├─────────────────────────────────────┤
    │   models/        ORM tables         │
    └─────────────────────────────────────┘

schemas/ holds the request/response models shared by routes and services.
"""

__version__ = "1.0.0"
