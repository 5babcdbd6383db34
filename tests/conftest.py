from __future__ import annotations

import pytest

from paramguard import introspection, registry, settings
from paramguard.introspection import SignatureIntrospector
from paramguard.registry import MetadataStore
from paramguard.settings import Settings


@pytest.fixture(autouse=True)
def store(monkeypatch: pytest.MonkeyPatch) -> MetadataStore:
    fresh = MetadataStore()
    monkeypatch.setattr(registry, "_REGISTRY", fresh)
    monkeypatch.setattr(settings, "_SETTINGS", Settings())
    monkeypatch.setattr(introspection, "_INTROSPECTOR", SignatureIntrospector())
    return fresh
