"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every resource uses (DB wiring, settings,
errors, validation, the generic CRUD operations). Resource-specific rules
and messages live in the feature packages (`users/`, `products/`).
"""
