"""YAML rule files.

A rule file describes roles, the permission catalog and role/permission
rules in one document. The CLI evaluates against it directly and the
seed command loads it into the database.

Example:
    roles:
      - name: GURU
        description: Guru mata pelajaran
    catalog:
      - resource: jurnal
        action: view
        label: Jurnal Guru
        category: HALAMAN
    rules:
      - role: GURU
        resource: jurnal
        action: manage
"""

import importlib.resources
import re
from importlib.resources import as_file
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from sekolah.core.constants import ROLE_DELIMITER_PATTERN, WILDCARD
from sekolah.core.permissions.evaluator import PermissionRule


DEFAULT_RULE_FILE = "default_permissions.yaml"


def _check_role_name(value: str) -> str:
    if re.search(ROLE_DELIMITER_PATTERN, value):
        raise ValueError("Role name must not contain ',' or '|'")
    return value


class RoleSpec(BaseModel):
    """A role declared in a rule file."""

    name: str = Field(..., min_length=1, description="Role name, stored upper-case")
    description: str | None = None
    is_default: bool = False

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: str) -> str:
        return _check_role_name(v.strip().upper())


class CatalogEntry(BaseModel):
    """A permission catalog entry declared in a rule file."""

    resource: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    category: str = "HALAMAN"
    description: str | None = None


class RuleSpec(BaseModel):
    """A rule declared in a rule file."""

    role: str = Field(..., min_length=1, description="Role name or '*'")
    resource: str = Field(..., min_length=1, description="Resource or '*'")
    action: str = Field(..., min_length=1, description="Action, '*' or 'manage'")
    is_allowed: bool = True

    @field_validator("role")
    @classmethod
    def upper_role(cls, v: str) -> str:
        v = _check_role_name(v.strip())
        return v if v == WILDCARD else v.upper()

    def to_rule(self) -> PermissionRule:
        return PermissionRule(
            role=self.role,
            resource=self.resource.strip(),
            action=self.action.strip(),
            is_allowed=self.is_allowed,
        )


class RuleFile(BaseModel):
    """Contents of a rule file."""

    roles: list[RoleSpec] = Field(default_factory=list)
    catalog: list[CatalogEntry] = Field(default_factory=list)
    rules: list[RuleSpec] = Field(default_factory=list)

    def permission_rules(self) -> list[PermissionRule]:
        return [spec.to_rule() for spec in self.rules]


def load_rule_file(path: Path) -> RuleFile:
    """Load and validate a rule file.

    Args:
        path: Path to the YAML document

    Returns:
        The parsed rule file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Rule file '{path}' not found")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in rule file: {e}") from e

    try:
        return RuleFile.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Invalid rule file: {e}") from e


def get_default_rule_file_path() -> Path:
    """Get the path to the rule file shipped with the package."""
    ref = importlib.resources.files("sekolah").joinpath("data", DEFAULT_RULE_FILE)
    with as_file(ref) as p:
        return Path(p)
