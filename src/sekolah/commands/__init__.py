"""CLI commands for sekolah."""
