from __future__ import annotations

import json
from typing import Any

from paramguard.errors import DeclarationError
from paramguard.introspection import call_layout, get_introspector
from paramguard.registry import DeclarationKey, MetadataStore, get_registry


def _describe_declaration(registry: MetadataStore, key: DeclarationKey) -> dict[str, Any]:
    tagged = registry.positions(key)
    func = registry.wrapped_callable(key)
    entry: dict[str, Any] = {
        "declaration": str(key),
        "line": key.line,
        "validated": func is not None,
    }
    if func is None:
        entry["parameters"] = [
            {"position": position, "tags": sorted(tag.value for tag in tags)} for position, tags in tagged.items()
        ]
        return entry

    parameters = call_layout(func).parameters
    try:
        type_names = [descriptor.name for descriptor in get_introspector().parameter_types(func)]
    except DeclarationError as exc:
        entry["error"] = exc.issue.to_dict()
        type_names = []

    described: list[dict[str, Any]] = []
    for position, parameter in enumerate(parameters):
        item: dict[str, Any] = {
            "position": position,
            "name": parameter.name,
            "tags": sorted(tag.value for tag in tagged.get(position, ())),
        }
        if position < len(type_names):
            item["type"] = type_names[position]
        described.append(item)
    entry["parameters"] = described
    return entry


def describe_declarations(module: str | None = None, registry: MetadataStore | None = None) -> list[dict[str, Any]]:
    """Summaries of every registered declaration, optionally limited to one module."""
    store = registry or get_registry()
    return [
        _describe_declaration(store, key)
        for key in store.declarations()
        if module is None or key.module == module or key.module.startswith(f"{module}.")
    ]


def render_yaml(declarations: list[dict[str, Any]]) -> str:
    import yaml

    return yaml.safe_dump({"declarations": declarations}, sort_keys=False)


def render_json(declarations: list[dict[str, Any]]) -> str:
    return json.dumps({"declarations": declarations}, indent=2)


__all__ = ["describe_declarations", "render_json", "render_yaml"]
