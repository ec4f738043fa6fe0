"""API routers package.

Manifesto:
    Each router module owns one group of endpoints (hooks, instances,
    health) and delegates to ``hookd.execution`` for the actual work.

Tags:
    hookd, api, routers, REST

Doc-Types:
    api-reference
"""
