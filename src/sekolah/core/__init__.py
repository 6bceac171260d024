"""Core services and cross-cutting concerns.

Submodules are not re-exported here to avoid circular imports. Import
directly from them:

- sekolah.core.database: Base, get_db, mixins
- sekolah.core.errors: AppException, ForbiddenError, etc.
- sekolah.core.auth: token verification and user dependencies
- sekolah.core.permissions: evaluator, role parsing and route guards
"""
