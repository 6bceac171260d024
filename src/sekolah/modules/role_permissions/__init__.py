"""Role permissions module: roles, permission catalog and the rule matrix."""

from fastapi import APIRouter


router = APIRouter(tags=["role-permissions"])

# Import routes to register them (must be after router is defined)
from sekolah.modules.role_permissions import routes  # noqa: F401, E402


# Module metadata
__module_info__ = {
    "name": "role_permissions",
    "version": "1.0.0",
    "description": "Administration of roles and role/permission rules",
    "dependencies": [],
}
