"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that feature packages use (settings, DB
pool and fetch helpers, query building, row decoding, error kinds). Keep
feature-specific SQL and business logic in the feature package
(e.g. `provinces/`).
"""
