"""Tests for the engine catalog loader and the engine registry."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from epredict.core.errors import ConfigurationError, EngineNotFoundError
from epredict.core.registry.loader import load_engine_catalog
from epredict.core.registry.models import CatalogEntry, EngineDescriptor, VersionedEngine
from epredict.core.registry.registry import EngineRegistry, build_registry


class _Engine:
    def __init__(self, name: str, version: str = "1.2.3") -> None:
        self._name = name
        self._version = version

    @property
    def name(self) -> str:
        return self._name

    def version(self) -> str:
        return self._version


# ---------------------------------------------------------------------------
# Catalog loader
# ---------------------------------------------------------------------------

class TestCatalogLoader:
    def test_packaged_catalog_lists_all_engines(self, catalog):
        assert list(catalog) == ["QRisk3", "QDiabetes", "QFracture", "X05"]
        assert catalog["QRisk3"].uri == "http://endhealth.info/im#Qrisk3"
        assert catalog["X05"].description

    def test_custom_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("engines:\n  - name: QRisk3\n    uri: urn:test:qrisk3\n")
        catalog = load_engine_catalog(path)
        assert catalog == {"QRisk3": CatalogEntry("QRisk3", "urn:test:qrisk3")}

    def test_empty_file_is_empty_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("")
        assert load_engine_catalog(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_engine_catalog(tmp_path / "nope.yaml")

    def test_entry_without_uri(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("engines:\n  - name: QRisk3\n")
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_engine_catalog(path)

    def test_duplicate_entry(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "engines:\n"
            "  - {name: QRisk3, uri: 'urn:a'}\n"
            "  - {name: QRisk3, uri: 'urn:b'}\n"
        )
        with pytest.raises(ConfigurationError, match="Duplicate"):
            load_engine_catalog(path)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestBuildRegistry:
    def test_descriptor_combines_engine_and_catalog(self, catalog):
        registry = build_registry([_Engine("QRisk3", "2017.0")], catalog)
        assert registry.lookup("QRisk3") == EngineDescriptor(
            name="QRisk3", version="2017.0", uri="http://endhealth.info/im#Qrisk3"
        )

    def test_every_installed_engine_is_registered(self, engine_registry):
        assert len(engine_registry) == 4
        assert engine_registry.names() == ["QRisk3", "QDiabetes", "QFracture", "X05"]

    def test_engine_without_catalog_entry(self, catalog):
        with pytest.raises(ConfigurationError, match="no entry"):
            build_registry([_Engine("QStroke")], catalog)

    def test_duplicate_engine_names(self, catalog):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            build_registry([_Engine("QRisk3"), _Engine("QRisk3")], catalog)

    def test_mock_engines_satisfy_protocol(self, mock_engines):
        assert all(isinstance(e, VersionedEngine) for e in mock_engines)


class TestLookup:
    def test_lookup_is_exact(self, engine_registry):
        assert engine_registry.lookup("QRisk3").name == "QRisk3"
        with pytest.raises(EngineNotFoundError):
            engine_registry.lookup("qrisk3")

    def test_not_found_message_and_name(self, engine_registry):
        with pytest.raises(EngineNotFoundError) as excinfo:
            engine_registry.lookup("QStroke")
        assert str(excinfo.value) == "No engine was found with the name: QStroke"
        assert excinfo.value.engine_name == "QStroke"

    def test_not_found_is_configuration_and_lookup_error(self, engine_registry):
        with pytest.raises(ConfigurationError):
            engine_registry.lookup("QStroke")
        with pytest.raises(LookupError):
            engine_registry.lookup("QStroke")

    def test_contains(self, engine_registry):
        assert "X05" in engine_registry
        assert "QStroke" not in engine_registry


class TestImmutability:
    def test_no_mutation_api(self, engine_registry):
        for attr in ("register", "add", "remove", "unregister"):
            assert not hasattr(engine_registry, attr)

    def test_internal_mapping_is_read_only(self, engine_registry):
        with pytest.raises(TypeError):
            engine_registry._by_name["QStroke"] = SimpleNamespace()

    def test_all_returns_a_copy(self, engine_registry):
        engine_registry.all().clear()
        assert len(engine_registry.all()) == 4

    def test_descriptors_are_frozen(self, engine_registry):
        descriptor = engine_registry.lookup("QRisk3")
        with pytest.raises(AttributeError):
            descriptor.version = "tampered"

    def test_registry_from_descriptors(self):
        registry = EngineRegistry([EngineDescriptor("A", "1", "urn:a")])
        assert registry.all()[0].to_dict() == {"name": "A", "version": "1", "uri": "urn:a"}
