"""Tests for sekolah CLI commands."""

from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from typer.testing import CliRunner

from sekolah import __version__
from sekolah.cli import app
from sekolah.commands.seed import apply_rule_file
from sekolah.modules.role_permissions.repos import (
    PermissionCatalogRepository,
    RolePermissionRepository,
    RoleRepository,
)
from sekolah.rulefile import load_rule_file
from tests.helpers import make_rule


runner = CliRunner()


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCheckCommand:
    """Tests for sekolah check."""

    def test_allowed(self, rules_file: Path) -> None:
        """Verify an allowed check exits 0."""
        result = runner.invoke(
            app, ["check", str(rules_file), "jurnal", "delete", "--role", "guru"]
        )

        assert result.exit_code == 0
        assert "ALLOWED" in result.stdout

    def test_denied(self, rules_file: Path) -> None:
        """Verify a denied check exits 1."""
        result = runner.invoke(
            app, ["check", str(rules_file), "nilai", "view", "-r", "GURU"]
        )

        assert result.exit_code == 1
        assert "DENIED" in result.stdout

    def test_hierarchy(self, rules_file: Path) -> None:
        result = runner.invoke(
            app, ["check", str(rules_file), "master.siswa", "view", "-r", "waka"]
        )

        assert result.exit_code == 0

    def test_default_action_is_view(self, rules_file: Path) -> None:
        result = runner.invoke(app, ["check", str(rules_file), "dashboard"])

        assert result.exit_code == 0

    def test_deny_overrides(self, rules_file: Path) -> None:
        """GURU is denied master view, WAKA allowed; the flag decides."""
        args = ["check", str(rules_file), "master", "view", "-r", "GURU|WAKA"]

        assert runner.invoke(app, args).exit_code == 0
        assert runner.invoke(app, [*args, "--deny-overrides"]).exit_code == 1

    def test_admin(self, rules_file: Path) -> None:
        result = runner.invoke(
            app, ["check", str(rules_file), "anything", "delete", "-r", "Admin"]
        )

        assert result.exit_code == 0
        assert "admin_override" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["check", str(tmp_path / "missing.yaml"), "jurnal", "view"]
        )

        assert result.exit_code == 2
        assert "Error" in result.stdout


class TestExplainCommand:
    """Tests for sekolah explain."""

    def test_explain(self, rules_file: Path) -> None:
        result = runner.invoke(
            app, ["explain", str(rules_file), "master", "view", "-r", "GURU"]
        )

        assert result.exit_code == 0
        assert "DENIED" in result.stdout
        assert "no_matching_rule" in result.stdout

    def test_explain_all(self, rules_file: Path) -> None:
        result = runner.invoke(
            app, ["explain", str(rules_file), "master", "view", "--all"]
        )

        assert result.exit_code == 0
        assert "WAKA" in result.stdout


class TestRolesCommand:
    """Tests for sekolah roles."""

    def test_roles(self) -> None:
        result = runner.invoke(app, ["roles", "guru, admin|GURU"])

        assert result.exit_code == 0
        assert "GURU" in result.stdout
        assert "ADMIN" in result.stdout
        assert "Administrator: yes" in result.stdout

    def test_no_roles(self) -> None:
        result = runner.invoke(app, ["roles", " , | "])

        assert result.exit_code == 0
        assert "No roles found" in result.stdout


@pytest.mark.integration
class TestApplyRuleFile:
    """Tests for loading a rule file into the database."""

    async def test_apply(self, db: AsyncSession, rules_file: Path) -> None:
        counts = await apply_rule_file(db, load_rule_file(rules_file))

        assert counts["roles"] == 2
        assert counts["catalog"] == 2
        assert counts["created"] == 4
        assert [r.name for r in await RoleRepository(db).list_all()] == ["GURU", "WAKA"]
        assert len(await PermissionCatalogRepository(db).list_all()) == 2

    async def test_apply_twice_updates(self, db: AsyncSession, rules_file: Path) -> None:
        rule_file = load_rule_file(rules_file)
        await apply_rule_file(db, rule_file)

        counts = await apply_rule_file(db, rule_file)

        assert counts["roles"] == 0
        assert counts["created"] == 0
        assert counts["updated"] == 4

    async def test_reset(self, db: AsyncSession, rules_file: Path) -> None:
        await make_rule(db, "KAMAD", "nilai", "view")

        counts = await apply_rule_file(db, load_rule_file(rules_file), reset=True)

        rules = await RolePermissionRepository(db).list_all()
        assert counts["deleted"] == 1
        assert "KAMAD" not in {r.role_name for r in rules}
