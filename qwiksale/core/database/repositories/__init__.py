"""
Database repository layer using SQLModel.

This package contains all repository classes organized by table. Each module
provides typed data access operations for its corresponding SQLModel entities.

Modules:
- base: AsyncBaseRepository interface, the default SQLRepository and AsyncQueryBuilder
- users: Account lookups, admin search and role counters
- listings: Catalog and admin queries shared by products and services
- products: Product repository
- services: Service repository with runtime table probing
- carriers: Carrier profiles, vehicles and dashboard aggregates
- audit_logs: Admin audit trail
- bundle: SqlRepoBundle for dependency injection
"""

from .bundle import SqlRepoBundle, build_sql_repos_from_session

__all__ = ["SqlRepoBundle", "build_sql_repos_from_session"]
