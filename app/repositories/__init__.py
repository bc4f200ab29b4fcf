"""
Data access layer.

One repository per resource; each takes an `AsyncSession` and is wired into
routers through its `get_*_repository` dependency, so tests can swap in fakes
with `app.dependency_overrides`.
"""
