"""Tests for the complex registry."""
import logging

import pytest

from inquiry_complex.exceptions import NotFoundError, ValidationError
from inquiry_complex.graph import ComplexRegistry
from inquiry_complex.models import NodeType


def test_create_and_get(registry):
    inquiry = registry.create("Is X true?", "X is true")

    assert inquiry.id in registry
    assert len(registry) == 1
    assert registry.get(inquiry.id) is inquiry


def test_get_missing(registry):
    with pytest.raises(NotFoundError):
        registry.get("missing")


def test_list_in_creation_order(registry):
    first = registry.create("Q1", "C1")
    second = registry.create("Q2", "C2")

    assert registry.list() == [first, second]


def test_delete(registry):
    inquiry = registry.create("Q", "C")

    registry.delete(inquiry.id)

    assert inquiry.id not in registry
    with pytest.raises(NotFoundError):
        registry.get(inquiry.id)
    with pytest.raises(NotFoundError):
        registry.delete(inquiry.id)


def test_registries_are_isolated():
    first = ComplexRegistry()
    second = ComplexRegistry()

    inquiry = first.create("Q", "C")

    assert inquiry.id in first
    assert inquiry.id not in second


def test_export_import(registry):
    """Test moving a complex between registries through its serialized form."""
    inquiry = registry.create("Q", "C")
    registry.factory.add_node(inquiry, inquiry.central_point_id, NodeType.OBJECTION, "But")
    data = registry.export_complex(inquiry.id)

    other = ComplexRegistry()
    restored = other.import_complex(data)

    assert restored.id == inquiry.id
    assert other.get(inquiry.id) is restored
    assert restored is not inquiry
    assert len(restored.nodes) == 2


def test_import_replaces_existing(registry, caplog):
    inquiry = registry.create("Q", "C")
    data = registry.export_complex(inquiry.id)

    with caplog.at_level(logging.WARNING):
        restored = registry.import_complex(data)

    assert len(registry) == 1
    assert registry.get(inquiry.id) is restored
    assert "Replacing complex" in caplog.text


def test_import_invalid(registry):
    with pytest.raises(ValidationError):
        registry.import_complex({"id": "c1"})
    assert len(registry) == 0


def test_export_missing(registry):
    with pytest.raises(NotFoundError):
        registry.export_complex("missing")
