"""
Import-boundary enforcement for the layered packages.

1. Engine purity      -- textile_engines/** may not import the ORM, the
                         kernel persistence layers, services or config.
2. Engine no-impure   -- textile_engines/** may not read the wall clock or
                         the environment.
3. Config centralisation -- only textile_config/ and its package entrypoint
                         may use the loader directly.
4. Dependency direction -- validates the package DAG.

All scanning is done via AST; these tests are read-only.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(package: str) -> list[Path]:
    """All .py files under *package*, sorted for deterministic order."""
    return sorted((ROOT / package).rglob("*.py"))


def _parse(filepath: Path) -> ast.AST | None:
    try:
        return ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))
    except (SyntaxError, UnicodeDecodeError):
        return None


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """(line_number, module) for every import in *filepath*."""
    tree = _parse(filepath)
    if tree is None:
        return []
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            results.extend((node.lineno, alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _extract_attribute_calls(filepath: Path) -> list[tuple[int, str]]:
    """(line_number, 'receiver.attr') for two-level attribute references."""
    tree = _parse(filepath)
    if tree is None:
        return []
    return [
        (node.lineno, f"{node.value.id}.{node.attr}")
        for node in ast.walk(tree)
        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name)
    ]


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _relative(filepath: Path) -> str:
    return filepath.relative_to(ROOT).as_posix()


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

class TestEnginePurity:
    """Engines see only the pure domain layer and the logging setup."""

    FORBIDDEN_PREFIXES = (
        "sqlalchemy",
        "sqlite3",
        "yaml",
        "textile_kernel.models",
        "textile_kernel.db",
        "textile_kernel.selectors",
        "textile_kernel.services",
        "textile_services",
        "textile_config",
    )

    def test_engine_files_have_no_forbidden_imports(self):
        violations = [
            f"  {_relative(path)}:{lineno} imports '{module}'"
            for path in _python_files("textile_engines")
            for lineno, module in _extract_imports(path)
            if _matches_any(module, self.FORBIDDEN_PREFIXES)
        ]
        assert not violations, (
            "Engine purity violation:\n" + "\n".join(violations)
        )


class TestEngineNoImpureFunctions:
    """Engines take time from an injected Clock.  time.monotonic is allowed
    for trace durations."""

    FORBIDDEN_CALLS = frozenset({
        "datetime.now",
        "datetime.utcnow",
        "date.today",
        "time.time",
        "os.environ",
        "os.getenv",
    })

    def test_no_impure_calls_in_engines(self):
        violations = [
            f"  {_relative(path)}:{lineno} calls '{qualname}'"
            for path in _python_files("textile_engines")
            for lineno, qualname in _extract_attribute_calls(path)
            if qualname in self.FORBIDDEN_CALLS
        ]
        assert not violations, (
            "Engine impurity violation; use an explicit clock:\n" + "\n".join(violations)
        )


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestConfigCentralization:
    """Outside textile_config/, configuration comes from get_active_config()."""

    FORBIDDEN_INTERNAL_MODULES = ("textile_config.loader",)

    def test_no_external_import_of_config_internals(self):
        violations = [
            f"  {_relative(path)}:{lineno} imports '{module}'"
            for package in ("textile_kernel", "textile_engines", "textile_services", "scripts")
            for path in _python_files(package)
            for lineno, module in _extract_imports(path)
            if _matches_any(module, self.FORBIDDEN_INTERNAL_MODULES)
        ]
        assert not violations, (
            "Config centralisation violation:\n" + "\n".join(violations)
        )


# ---------------------------------------------------------------------------
# Dependency direction
# ---------------------------------------------------------------------------

class TestDependencyDirection:
    """
    Allowed edges (-> means "may import"):
        textile_services -> textile_kernel, textile_engines
        textile_config   -> textile_kernel (exceptions, logging)
        textile_engines  -> textile_kernel.domain, textile_kernel.logging_config
        textile_kernel   -> (stdlib, sqlalchemy + internal)
    """

    RULES: list[tuple[str, tuple[str, ...]]] = [
        ("textile_kernel", ("textile_engines", "textile_services", "textile_config")),
        ("textile_engines", ("textile_services", "textile_config")),
        ("textile_services", ("textile_config",)),
        ("textile_config", ("textile_engines", "textile_services")),
    ]

    def test_dependency_dag(self):
        violations: list[str] = []
        for package, forbidden in self.RULES:
            for path in _python_files(package):
                for lineno, module in _extract_imports(path):
                    if _matches_any(module, forbidden):
                        violations.append(f"  {_relative(path)}:{lineno} imports '{module}'")
        assert not violations, (
            "Dependency direction violation:\n" + "\n".join(violations)
        )

    def test_packages_exist(self):
        for package, _ in self.RULES:
            assert _python_files(package), f"{package} has no modules"
