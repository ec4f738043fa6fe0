"""API middleware package.

Manifesto:
    Cross-cutting concerns (request ids, error mapping) belong in
    middleware so routers stay focused on calling the engine.

Tags:
    hookd, api, middleware, cross-cutting

Doc-Types:
    api-reference
"""
