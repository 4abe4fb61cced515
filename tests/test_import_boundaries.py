"""
Import boundary guards.

- src/dropvault/ui/ never imports sqlmodel, sqlalchemy or any dropvault
  ORM/DB/service module; pages talk to the backend through the API client.
- src/dropvault/services/ never imports fastapi.
- src/dropvault/uploads/ stays framework-free so the tracker runs the same
  under Streamlit, asyncio, and tests.
"""

import ast
from collections.abc import Callable
from pathlib import Path

REPO_ROOT = Path(__file__).parent.parent
PACKAGE_ROOT = REPO_ROOT / "src" / "dropvault"

UI_BANNED_MODULES = {"sqlmodel", "sqlalchemy"}
UI_BANNED_PREFIXES = (
    "dropvault.models",
    "dropvault.db",
    "dropvault.infra",
    "dropvault.services",
    "dropvault.storage",
)

UPLOADS_BANNED_PREFIXES = ("streamlit", "fastapi", "sqlmodel", "sqlalchemy", "httpx", "dropvault.")


def _file_imports_any(path: Path, is_banned: Callable[[str], bool]) -> bool:
    """Parse *path* with AST and return True if any import matches *is_banned*."""
    source = path.read_text(encoding="utf-8")
    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError:
        return True

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if is_banned(alias.name):
                    return True
        elif isinstance(node, ast.ImportFrom):
            if is_banned(node.module or ""):
                return True

    return False


def _violations(root: Path, is_banned: Callable[[str], bool]) -> list[str]:
    return [
        py_file.relative_to(REPO_ROOT).as_posix()
        for py_file in sorted(root.rglob("*.py"))
        if _file_imports_any(py_file, is_banned)
    ]


def test_ui_import_boundaries() -> None:
    def is_banned(module: str) -> bool:
        return module in UI_BANNED_MODULES or module.startswith(UI_BANNED_PREFIXES)

    violations = _violations(PACKAGE_ROOT / "ui", is_banned)
    assert not violations, (
        "UI files must use the API client instead of ORM/DB imports:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_service_import_boundaries() -> None:
    """Service files must not import from fastapi."""
    _is_fastapi = lambda m: m.startswith("fastapi")  # noqa: E731
    violations = _violations(PACKAGE_ROOT / "services", _is_fastapi)
    assert not violations, (
        "Service files must not import fastapi:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_uploads_package_is_framework_free() -> None:
    def is_banned(module: str) -> bool:
        if module.startswith("dropvault.uploads"):
            return False
        return module.startswith(UPLOADS_BANNED_PREFIXES)

    violations = _violations(PACKAGE_ROOT / "uploads", is_banned)
    assert not violations, (
        "dropvault.uploads may only import the stdlib and itself:\n"
        + "\n".join(f"  {v}" for v in violations)
    )
