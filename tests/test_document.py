"""Tests for Document and ExtractedPattern."""

import pytest

from stencil import Document, DocumentConsumedError, ExtractedPattern, Options
from stencil.ast import Conditional, Pattern
from stencil.exceptions import UnsetVariableError
from stencil.options import ErrorLevel


LIST_TEMPLATE = "<ul>{%pattern item}<li>{text}</li>{%end}</ul>"


def test_render_without_variables_keeps_placeholders():
    source = "Dear {name}, your order {order_id} ships {when}."
    assert Document.from_string(source).render() == source


def test_set_and_render():
    doc = Document.from_string("One: {one} | Two: {two} | Three: {three}")
    doc.set("one", "1")
    doc.set("three", "3")
    assert doc.render() == "One: 1 | Two: {two} | Three: 3"


def test_if_set_with_empty_string_takes_else():
    doc = Document.from_string("{%if-set v}A{%else}B{%end}")
    doc.set("v", "")
    assert doc.render() == "B"


def test_if_set_with_value_takes_body():
    doc = Document.from_string("{%if-set v}A{%else}B{%end}")
    doc.set("v", "anything")
    assert doc.render() == "A"


def test_set_command_value_can_be_overridden():
    doc = Document.from_string("{%set greeting Hello}{greeting}!")
    assert doc.variables == {"greeting": "Hello"}
    doc.set("greeting", "Howdy")
    assert doc.render() == "Howdy!"


def test_set_command_value_keeps_percent_sign():
    doc = Document.from_string("{%set discount 50%}{discount} off")
    assert doc.render() == "50% off"


def test_stray_end_renders_nothing():
    assert Document.from_string("a{%end}b").render() == "ab"


def test_clear_variables():

    doc = Document.from_string("{%set a 1}{a}{b}")
    doc.set("b", "2")
    doc.clear_variables()
    assert doc.variables == {}
    assert doc.render() == "{a}{b}"


def test_unset():
    doc = Document.from_string("{a}")
    doc.set("a", "1")
    doc.unset("a")
    doc.unset("never-set")
    assert doc.render() == "{a}"


def test_render_consumes_document():
    doc = Document.from_string("hello")
    assert doc.render() == "hello"
    assert doc.consumed
    with pytest.raises(DocumentConsumedError):
        doc.render()
    with pytest.raises(DocumentConsumedError):
        doc.set("a", "b")


def test_copy_is_independent():
    doc = Document.from_string("{a}")
    doc.set("a", "1")
    clone = doc.copy()
    clone.set("a", "2")
    assert clone.render() == "2"
    assert doc.render() == "1"


def test_from_file_records_path(tmp_path):
    path = tmp_path / "t.tpl"
    path.write_text("hi {who}", encoding="utf-8")
    doc = Document.from_file(path)
    assert doc.path == path
    assert Document.from_string("x").path is None


def test_strict_options_fail_on_unset_variable():
    doc = Document.from_string("{missing}", Options(unset_variable=ErrorLevel.ERROR))
    with pytest.raises(UnsetVariableError):
        doc.render()


def test_nested_structure_from_source():
    doc = Document.from_string("{%pattern p}{%if-set v}{%end}{%end}")
    assert doc.nodes == [Pattern("p", [Conditional("v")])]


# =============================================================================
# Patterns
# =============================================================================


class TestPatterns:
    def test_get_missing_pattern(self):
        assert Document.from_string(LIST_TEMPLATE).get_pattern("nope") is None

    def test_pattern_names(self):
        doc = Document.from_string(
            "{%pattern a}{%if-set x}{%pattern b}{%end}{%end}{%end}{%pattern a}{%end}"
        )
        assert doc.pattern_names() == ["a", "b"]

    def test_unregistered_pattern_renders_empty(self):
        assert Document.from_string(LIST_TEMPLATE).render() == "<ul></ul>"

    def test_two_instances_concatenate_in_order(self):
        doc = Document.from_string(LIST_TEMPLATE)
        first = doc.get_pattern("item")
        second = doc.get_pattern("item")
        first.set("text", "one")
        second.set("text", "two")
        doc.add_pattern(first)
        doc.add_pattern(second)
        assert doc.render() == "<ul><li>one</li><li>two</li></ul>"

    def test_extracted_pattern_inherits_variables(self):
        doc = Document.from_string("{%pattern row}{sep}{cell}{%end}")
        doc.set("sep", "|")
        row = doc.get_pattern("row")
        row.set("cell", "a")
        assert row.render() == "|a"

    def test_extraction_is_a_deep_copy(self):
        doc = Document.from_string(LIST_TEMPLATE)
        extracted = doc.get_pattern("item")
        extracted.set("text", "changed")
        assert "text" not in doc.variables
        assert doc.nodes[1] == Pattern("item", extracted.document.nodes)
        assert doc.nodes[1].body is not extracted.document.nodes

    def test_rename_keeps_registration_slot(self):
        doc = Document.from_string(LIST_TEMPLATE)
        extracted = doc.get_pattern("item")
        extracted.label = "renamed"
        extracted.set("text", "x")
        doc.add_pattern(extracted)
        assert doc.patterns == {"item": ["<li>x</li>"]}
        assert extracted.name == "item"

    def test_extracted_copy(self):
        doc = Document.from_string(LIST_TEMPLATE)
        template = doc.get_pattern("item")
        for text in ("a", "b", "c"):
            instance = template.copy()
            instance.set("text", text)
            doc.add_pattern(instance)
        assert doc.render() == "<ul><li>a</li><li>b</li><li>c</li></ul>"
        assert isinstance(template, ExtractedPattern)

    def test_register_pattern_instance_directly(self):
        doc = Document.from_string("[{%pattern p}ignored{%end}]")
        doc.register_pattern_instance("p", "x")
        doc.register_pattern_instance("p", "y")
        doc.register_pattern_instance("other", "z")
        assert doc.render() == "[xy]"

    def test_nested_pattern_extracted_from_pattern(self):
        doc = Document.from_string(
            "{%pattern table}<table>{%pattern row}<tr>{v}</tr>{%end}</table>{%end}"
        )
        table = doc.get_pattern("table")
        for v in ("1", "2"):
            row = table.document.get_pattern("row")
            row.set("v", v)
            table.document.add_pattern(row)
        doc.add_pattern(table)
        assert doc.render() == "<table><tr>1</tr><tr>2</tr></table>"
