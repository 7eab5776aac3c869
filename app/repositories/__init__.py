"""레포지토리 패키지 — 저장소 계층.

Repository package — Storage layer.
The relational repositories extend BaseRepository for generic CRUD and add
domain-specific queries; ``mongo`` holds the MongoDB implementations of the
same interfaces. ``Storage`` groups one backend's repositories into a unit
of work.
"""
