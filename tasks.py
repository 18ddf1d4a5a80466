#!/usr/bin/env python3
"""Invoke tasks for smush-lut project automation."""

import shutil
import sys
from pathlib import Path

from invoke.context import Context
from invoke.tasks import task

# Ensure UTF-8 encoding for Windows console (for emoji support)
if sys.platform == "win32":
    if sys.stdout.encoding != "utf-8":
        sys.stdout.reconfigure(encoding="utf-8")
    if sys.stderr.encoding != "utf-8":
        sys.stderr.reconfigure(encoding="utf-8")


@task
def clean(_: Context) -> None:
    """Clean build artifacts, cache files, and temporary files."""
    print("🧹 Cleaning build artifacts and cache files...")

    for pattern in ["build", "dist", ".pytest_cache", ".ruff_cache", "htmlcov", ".coverage"]:
        if Path(pattern).exists():
            print(f"  Removing: {pattern}")
            if Path(pattern).is_dir():
                shutil.rmtree(pattern, ignore_errors=True)
            else:
                Path(pattern).unlink(missing_ok=True)

    for pattern in ["*.egg-info", "__pycache__"]:
        for path in Path(".").glob(f"**/{pattern}"):
            print(f"  Removing directory: {path}")
            shutil.rmtree(path, ignore_errors=True)

    print("✅ Clean completed")


@task
def format(ctx: Context) -> None:
    """Format code with ruff."""
    print("🎨 Formatting code with ruff...")
    ctx.run("ruff format src tests")
    print("✅ Code formatting completed")


@task
def lint(ctx: Context, fix: bool = False) -> None:
    """Run linting with ruff.

    Args:
        fix: Automatically fix fixable issues (default: False)
    """
    print("🔍 Linting code with ruff...")
    cmd = "ruff check src tests"
    if fix:
        cmd += " --fix"
    ctx.run(cmd)
    print("✅ Linting completed")


@task
def typecheck(ctx: Context) -> None:
    """Run type checking with pyright."""
    print("🔬 Type checking with pyright...")
    ctx.run("pyright src/smush_lut")
    print("✅ Type checking completed")


@task
def test(ctx: Context, coverage: bool = True, verbose: bool = False) -> None:
    """Run tests with pytest.

    Args:
        coverage: Generate coverage report (default: True)
        verbose: Run with verbose output (default: False)
    """
    print("🧪 Running tests with pytest...")

    cmd = "pytest"
    if coverage:
        cmd += " --cov=smush_lut --cov-report=term-missing"
    if verbose:
        cmd += " -v"
    cmd += " tests"

    ctx.run(cmd)
    print("✅ Tests completed")


@task(pre=[format, lint, typecheck])
def quality(_: Context) -> None:
    """Run code quality checks: format, lint and typecheck.

    Does NOT run tests - use 'invoke test' separately for functional testing.
    """
    print("🎯 Quality checks completed successfully!")


@task(pre=[clean])
def build(ctx: Context) -> None:
    """Build the package for distribution."""
    print("🔨 Building package...")
    ctx.run("uv build")

    dist_path = Path("dist")
    if dist_path.exists():
        print("\n📦 Built files:")
        for file in sorted(dist_path.glob("*")):
            print(f"  {file.name} ({file.stat().st_size / 1024:.1f}K)")

    print("✅ Build completed")


@task
def install(ctx: Context, dev: bool = False) -> None:
    """Install the package in editable mode.

    Args:
        dev: Install with development dependencies (default: False)
    """
    print("📥 Installing package...")
    ctx.run("uv pip install -e .[dev]" if dev else "uv pip install -e .")
    print("✅ Installation completed")


@task
def all(ctx: Context) -> None:
    """Run complete CI pipeline: clean, quality checks, tests, and build."""
    print("🎯 Running complete CI pipeline...")
    clean(ctx)
    quality(ctx)
    test(ctx)
    build(ctx)
    print("🎉 Complete pipeline finished successfully!")
