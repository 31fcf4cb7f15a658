"""Request-scoped services: the admin guard, dependencies and listing/carrier logic."""
