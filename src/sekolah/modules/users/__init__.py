"""Users module: the principals whose roles drive access decisions."""

from fastapi import APIRouter


router = APIRouter(prefix="/users", tags=["users"])

# Import routes to register them (must be after router is defined)
from sekolah.modules.users import routes  # noqa: F401, E402


# Module metadata
__module_info__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User role assignment and current principal",
    "dependencies": ["role_permissions"],
}
