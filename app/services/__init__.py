"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services receive the request's ``Storage`` unit of work as their first
argument and never import a storage backend directly; ``container`` builds
the process-wide instances stored on ``app.state.services``.
"""
