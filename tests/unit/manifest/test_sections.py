"""Tests for headings and section documents."""

import pytest

from gdxbuild.manifest.sections import Heading, SectionDocument


class TestHeading:
    def test_property_order_does_not_matter(self):
        first = Heading("ext_resource", {"type": "Script", "id": 1})
        second = Heading("ext_resource", {"id": 1, "type": "Script"})

        assert first == second
        assert hash(first) == hash(second)

    def test_changed_value_is_unequal(self):
        assert Heading("node", {"name": "Root"}) != Heading("node", {"name": "Child"})

    def test_changed_name_is_unequal(self):
        assert Heading("node") != Heading("resource")

    def test_bool_and_int_are_distinct(self):
        assert Heading("flags", {"enabled": True}) != Heading("flags", {"enabled": 1})

    def test_nested_values_compare_by_content(self):
        first = Heading("node", {"meta": {"a": 1, "b": [1, 2]}})
        second = Heading("node", {"meta": {"b": [1, 2], "a": 1}})
        assert first == second
        assert len({first, second}) == 1

    def test_properties_are_read_only(self):
        heading = Heading("node", {"name": "Root"})
        with pytest.raises(TypeError):
            heading.properties["name"] = "Other"  # type: ignore[index]

    def test_properties_copied_on_construction(self):
        source = {"name": "Root"}
        heading = Heading("node", source)
        source["name"] = "Changed"
        assert heading.properties["name"] == "Root"

    def test_declaration_order_preserved(self):
        heading = Heading("node", {"z": 1, "a": 2})
        assert list(heading.properties) == ["z", "a"]


class TestSectionDocument:
    def test_lookup_by_name(self):
        document = SectionDocument([("configuration", {"entry_symbol": "swift_entry_point"})])
        assert document["configuration"] == {"entry_symbol": "swift_entry_point"}
        assert "configuration" in document
        assert "libraries" not in document

    def test_order_preserved(self):
        document = SectionDocument()
        for name in ("configuration", "libraries", "dependencies"):
            document.add(name, {})
        assert [heading.name for heading in document] == ["configuration", "libraries", "dependencies"]

    def test_replacing_section_keeps_position(self):
        document = SectionDocument([("a", {"x": 1}), ("b", {})])
        document.add("a", {"x": 2})
        assert [heading.name for heading in document.headings()] == ["a", "b"]
        assert document["a"] == {"x": 2}

    def test_equality_ignores_section_order(self):
        first = SectionDocument([("a", {"x": 1}), ("b", {"y": 2})])
        second = SectionDocument([("b", {"y": 2}), ("a", {"x": 1})])
        assert first == second
        assert len(first) == 2
