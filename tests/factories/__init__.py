"""Test factories for generating test data."""

from tests.factories.rules import RolePermissionFactory
from tests.factories.user import UserFactory


__all__ = [
    "RolePermissionFactory",
    "UserFactory",
]
