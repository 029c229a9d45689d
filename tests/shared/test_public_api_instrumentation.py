"""Static checks for public API invocation logging decorators.

Every public method declared on a component contract must be decorated with
``public_api_logged`` in the concrete implementation.
"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[2]

_CONTRACTS = (
    (
        "services/state/attribute_mapping/service.py",
        "AttributeMappingService",
        "services/state/attribute_mapping/implementation.py",
        "DefaultAttributeMappingService",
    ),
    (
        "services/action/device_search/service.py",
        "DeviceSearchService",
        "services/action/device_search/implementation.py",
        "DefaultDeviceSearchService",
    ),
    (
        "resources/adapters/inventory/adapter.py",
        "InventoryAdapter",
        "resources/adapters/inventory/inventory_adapter.py",
        "HttpInventoryAdapter",
    ),
)


@pytest.mark.parametrize(
    ("contract_file", "contract_class", "impl_file", "impl_class"), _CONTRACTS
)
def test_contract_methods_are_decorated(
    contract_file: str, contract_class: str, impl_file: str, impl_class: str
) -> None:
    """Require invocation logging on all public contract methods."""
    contract_methods = _public_method_names(
        file_path=_REPO_ROOT / contract_file, class_name=contract_class
    )
    decorated_methods = _decorated_public_api_methods(
        file_path=_REPO_ROOT / impl_file, class_name=impl_class
    )

    assert contract_methods
    missing = sorted(contract_methods - decorated_methods)
    assert not missing, f"Missing @public_api_logged on {impl_class}: {missing}"


def _class_node(*, file_path: Path, class_name: str) -> ast.ClassDef:
    module = ast.parse(file_path.read_text(encoding="utf-8"))
    for node in module.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return node
    raise AssertionError(f"{class_name} not found in {file_path}")


def _public_method_names(*, file_path: Path, class_name: str) -> set[str]:
    """Return public method names declared directly on one class."""
    node = _class_node(file_path=file_path, class_name=class_name)
    return {
        child.name
        for child in node.body
        if isinstance(child, ast.FunctionDef) and not child.name.startswith("_")
    }


def _decorated_public_api_methods(*, file_path: Path, class_name: str) -> set[str]:
    """Return method names carrying a ``public_api_logged(...)`` decorator."""
    node = _class_node(file_path=file_path, class_name=class_name)
    names: set[str] = set()
    for child in node.body:
        if not isinstance(child, ast.FunctionDef):
            continue
        for decorator in child.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if isinstance(target, ast.Name) and target.id == "public_api_logged":
                names.add(child.name)
    return names
