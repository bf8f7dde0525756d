#!/usr/bin/env python3
"""
Development scripts for chibi-kernel.

These scripts integrate with uv to run the test suite, linters, type checkers,
demos and README examples.
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

PACKAGE_DIR = "src/chibi/kernel/"


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if successful."""
    print(f"\n🔄 {description}...")
    print(f"Running: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True, capture_output=False)
        print(f"✅ {description} passed")
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False


def run_all(checks: list[tuple[list[str], str]]) -> bool:
    all_passed = True
    for cmd, desc in checks:
        if not run_command(cmd, desc):
            all_passed = False
    return all_passed


def run_tests() -> int:
    """Run the test suite."""
    print("🧪 Running test suite")
    success = run_command(["uv", "run", "pytest", "-v"], "Tests")
    return 0 if success else 1


def run_lint() -> int:
    """Run linting checks."""
    print("🔍 Running linting checks")

    all_passed = run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )

    if not all_passed:
        print("\n💡 To auto-fix formatting issues, run: uv run ruff format .")
        print("💡 To auto-fix some linting issues, run: uv run ruff check --fix .")

    return 0 if all_passed else 1


def run_typecheck() -> int:
    """Run type checking with both mypy and pyright."""
    print("🔬 Running type checking")

    all_passed = run_all(
        [
            (["uv", "run", "mypy", PACKAGE_DIR], "MyPy type checking"),
            (["uv", "run", "pyright", PACKAGE_DIR], "Pyright type checking"),
        ]
    )
    return 0 if all_passed else 1


def run_demos() -> int:
    """Run all demo scripts to ensure they work correctly."""
    print("🎭 Running demo scripts")

    demo_dir = Path("demo")
    if not demo_dir.exists():
        print("❌ Demo directory not found")
        return 1

    demo_files = [path for path in sorted(demo_dir.glob("*.py")) if not path.name.startswith("_")]
    if not demo_files:
        print("⚠️  No demo files found in demo directory")
        return 0

    all_passed = run_all(
        [(["uv", "run", "python", str(path)], f"Demo: {path.name}") for path in demo_files]
    )
    return 0 if all_passed else 1


def run_readme_validation() -> int:
    """Validate that code examples in README.md are working."""
    print("📖 Validating README code examples")

    readme_path = Path("README.md")
    if not readme_path.exists():
        print("❌ README.md not found")
        return 1

    test_file_path = Path("test_readme.py")
    test_file_path.unlink(missing_ok=True)

    gen_cmd = ["uv", "run", "phmdoctest", str(readme_path), "--outfile", str(test_file_path)]
    if not run_command(gen_cmd, "Generating README tests"):
        return 1

    try:
        success = run_command(
            ["uv", "run", "pytest", str(test_file_path), "-v"], "README code examples"
        )
    finally:
        test_file_path.unlink(missing_ok=True)

    return 0 if success else 1


def check_all() -> int:
    """Run all checks: tests, linting, type checking, demos, and README validation."""
    print("🚀 Running all checks for chibi-kernel")
    print("=" * 50)

    results: dict[str, bool] = {}
    for name, func in COMMANDS.items():
        if name == "check":
            continue
        print(f"\n{'=' * 20} {name} {'=' * 20}")
        results[name] = func() == 0

    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{name:<15} {status}")

    if all(results.values()):
        print("\n🎉 All checks passed!")
        return 0

    print("\n💥 Some checks failed. Please fix the issues above.")
    return 1


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
    "check": check_all,
}


if __name__ == "__main__":
    available = ", ".join(COMMANDS)
    if len(sys.argv) < 2:
        print(f"Available commands: {available}")
        print("Usage: python scripts.py <command>")
        sys.exit(0)

    command = COMMANDS.get(sys.argv[1])
    if command is None:
        print(f"Unknown command: {sys.argv[1]}")
        print(f"Available commands: {available}")
        sys.exit(1)

    sys.exit(command())
