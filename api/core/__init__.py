"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that multiple features use
(DB wiring, settings, logging, error mapping, SQL binding). Keep resource
specific configuration in `resources/` and the CRUD shape in `crud/`.
"""
