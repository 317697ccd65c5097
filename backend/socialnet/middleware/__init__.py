"""
SocialNet Backend — Middleware Package
========================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [Rate Limit] → [GZip] → [CORS] → Route

    - Request ID sets the correlation ID used by the access log and error bodies,
      including the 429s written by the rate limiter
    - Access log records method, path, status and duration
    - Rate limit rejects over-quota clients before routing

Starlette runs middleware in reverse order of registration; see create_app().
"""
