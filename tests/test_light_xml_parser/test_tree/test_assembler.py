"""Tests for stack-based tree assembly."""

import logging
import time

import pytest

from light_xml_parser.shared import ParseMetrics, ParserConfig, XMLParseError
from light_xml_parser.tokenization import Section, SectionKind, iter_sections
from light_xml_parser.tree import (
    Cdata,
    Comment,
    Element,
    EmptyElement,
    FinishedElement,
    OpenFrame,
    PendingContent,
    PendingNode,
    TreeAssembler,
    assemble,
)


def _assemble(document, config=None):
    assembler = TreeAssembler(config)
    for section in iter_sections(document):
        assembler.feed(section)
    return assembler.finish(), assembler.metrics


class TestWellFormedDocuments:
    """Test assembly of well-formed input."""

    def test_single_element_with_text(self):
        """Test one element with one text run."""
        nodes, _ = _assemble("<a>text</a>")

        assert nodes == [Element("a", {}, ("text",), ())]

    def test_whitespace_between_siblings_is_dropped(self):
        """Test that blank runs never reach contents."""
        nodes, _ = _assemble("<a><b/>\n  <c/></a>")

        assert nodes == [Element("a", {}, (), (EmptyElement("b"), EmptyElement("c")))]

    def test_nesting_preserves_order(self):
        """Test nested children keep document order."""
        nodes, _ = _assemble("<a><b><c/></b><d/></a>")

        a = nodes[0]
        assert [child.name for child in a.children] == ["b", "d"]
        assert a.children[0].children == (EmptyElement("c"),)

    def test_contents_and_children_keep_their_own_order(self):
        """Test both accumulators are restored to document order."""
        nodes, _ = _assemble("<a>one<b/>two<c/>three</a>")

        assert nodes[0].contents == ("one", "two", "three")
        assert nodes[0].children == (EmptyElement("b"), EmptyElement("c"))

    def test_mixed_child_kinds(self):
        """Test comments, CDATA and elements as children."""
        nodes, _ = _assemble("<a><!-- c --><![CDATA[<x>]]><b>t</b></a>")

        assert nodes[0].children == (Comment("c"), Cdata("<x>"), Element("b", {}, ("t",), ()))

    def test_multiple_top_level_nodes(self):
        """Test declaration, comment and root stay in document order."""
        nodes, _ = _assemble('<?xml version="1"?><!-- note --><root/>')

        assert nodes == [
            EmptyElement("xml", {"version": ("1",)}),
            Comment("note"),
            EmptyElement("root"),
        ]

    def test_nodes_after_root_element_are_lost(self):
        """Test that a closed element stays on the stack until input ends."""
        nodes, metrics = _assemble("<a></a><!-- after --><b>x</b>")

        assert nodes == [Element("a"), Element("b", {}, ("x",), ())]
        assert metrics.discarded_entries == 1

    def test_comment_after_closed_root_is_discarded(self):
        """Test that a trailing comment is pushed, then dropped when draining."""
        nodes, _ = _assemble("<a></a><!-- c -->")

        assert nodes == [Element("a")]

    def test_declaration_inside_element_is_a_child(self):
        """Test that a declaration inside an element is treated as an empty element."""
        nodes, _ = _assemble('<a><?pi x="1"?></a>')

        assert nodes[0].children == (EmptyElement("pi", {"x": ("1",)}),)

    def test_deep_nesting_has_no_depth_limit(self):
        """Test nesting well past the recursion limit."""
        depth = 3000
        document = "".join(f"<n{i}>" for i in range(depth)) + "leaf"
        document += "".join(f"</n{i}>" for i in reversed(range(depth)))

        nodes, metrics = _assemble(document)

        node = nodes[0]
        for i in range(1, depth):
            node = node.children[0]
            assert node.name == f"n{i}"
        assert node.contents == ("leaf",)
        assert metrics.is_structurally_clean


class TestStructuralTolerance:
    """Test that structural mismatches are tolerated silently."""

    def test_mismatched_inner_frame_is_discarded(self):
        """Test that an unclosed inner element is dropped, its text kept."""
        nodes, metrics = _assemble("<a><b>x</a>")

        assert nodes == [Element("a", {}, ("x",), ())]
        assert metrics.discarded_entries == 1

    def test_unmatched_end_tag_is_ignored(self):
        """Test an end tag with no open element of that name."""
        nodes, metrics = _assemble("<a></b></a>")

        assert nodes == [Element("a")]
        assert metrics.unmatched_end_tags == 1

    def test_unmatched_end_tag_at_top_level(self):
        """Test a stray end tag before any element."""
        nodes, _ = _assemble("</x><a/>")

        assert nodes == [EmptyElement("a")]

    def test_unterminated_root_keeps_finished_elements(self):
        """Test draining keeps finished elements and drops the open frame."""
        nodes, metrics = _assemble("<root><a>t</a>")

        assert nodes == [Element("a", {}, ("t",), ())]
        assert metrics.discarded_entries == 1

    def test_unterminated_root_drops_pending_nodes(self):
        """Test that empty elements under an unclosed element are lost."""
        nodes, _ = _assemble("<root><a/>")

        assert nodes == []

    def test_text_outside_elements_is_orphaned(self):
        """Test that top-level text never becomes a node."""
        nodes, metrics = _assemble("hello<a>x</a>bye")

        assert nodes == [Element("a", {}, ("x",), ())]
        assert metrics.orphaned_content == 2
        assert metrics.discarded_entries == 2

    def test_orphaned_text_is_pushed_onto_the_stack(self):
        """Test that leading text keeps later empty elements off the output."""
        assembler = TreeAssembler()
        for section in iter_sections("text<b/>"):
            assembler.feed(section)

        assert assembler.stack == [PendingContent("text"), PendingNode(EmptyElement("b"))]
        assert assembler.finish() == []
        assert assembler.metrics.orphaned_content == 1

    def test_mismatch_is_logged(self, caplog):
        """Test that ignored end tags are reported as warnings."""
        with caplog.at_level(logging.WARNING, logger="light_xml_parser"):
            _assemble("<a></b></a>")

        assert any(
            record.getMessage() == "Ignoring end tag without matching start tag"
            and record.component == "tree_assembler"
            for record in caplog.records
        )


class TestAssemblerState:
    """Test the assembler's stack handling and lifecycle."""

    def test_stack_entries_are_tagged(self):
        """Test the kinds of entries on the stack while parsing."""
        assembler = TreeAssembler()
        for section in iter_sections("<a>t<b></b>"):
            assembler.feed(section)

        assert assembler.stack == [
            OpenFrame("a", {}),
            PendingContent("t"),
            FinishedElement(Element("b")),
        ]
        assert assembler.depth == 1

    def test_blank_content_fed_directly_is_skipped(self):
        """Test blank content sections do not reach the stack."""
        assembler = TreeAssembler()
        assembler.feed(Section(SectionKind.TAG, "<a>"))
        assembler.feed(Section(SectionKind.CONTENT, " \n "))

        assert assembler.stack == [OpenFrame("a", {})]

    def test_feed_after_finish_raises(self):
        """Test the assembler cannot be reused after finishing."""
        assembler = TreeAssembler()
        assembler.finish()

        with pytest.raises(RuntimeError, match="Cannot feed sections after finish"):
            assembler.feed(Section(SectionKind.TAG, "<a/>"))

    def test_finish_is_idempotent(self):
        """Test repeated finish calls return the same nodes."""
        assembler = TreeAssembler()
        assembler.feed(Section(SectionKind.TAG, "<a/>"))

        assert assembler.finish() == assembler.finish() == [EmptyElement("a")]

    def test_metrics_are_updated(self):
        """Test counters on a supplied metrics object."""
        metrics = ParseMetrics()
        assembler = TreeAssembler(metrics=metrics)
        for section in iter_sections("<a>x</a><b/>"):
            assembler.feed(section)
        assembler.finish()

        assert metrics.sections_processed == 4
        assert metrics.nodes_emitted == 1
        assert metrics.discarded_entries == 1

    def test_max_depth_guard(self):
        """Test the optional nesting limit."""
        config = ParserConfig(max_depth=2)

        nodes, _ = _assemble("<a><b><c/></b></a>", config)
        assert nodes[0].name == "a"

        with pytest.raises(XMLParseError) as exc_info:
            _assemble("<a><b><c></c></b></a>", config)
        assert exc_info.value.expected == "at most 2 open elements"

    def test_malformed_tag_aborts(self):
        """Test that lexical errors propagate out of feed()."""
        with pytest.raises(XMLParseError):
            _assemble("<a>text</a")

    def test_assemble_helper(self):
        """Test the functional helper."""
        assert assemble(iter_sections("<a/>")) == [EmptyElement("a")]


class TestPerformance:
    """Test that assembly stays linear in the document size."""

    def test_wide_document_closes_in_linear_time(self):
        """Test many finished siblings under one open root."""
        document = "<r>" + "<i>x</i>" * 20000 + "</r>"

        start_time = time.time()
        nodes, metrics = _assemble(document)
        total_time = time.time() - start_time

        assert len(nodes[0].children) == 20000
        assert metrics.is_structurally_clean
        assert total_time < 5.0

    def test_end_tag_lookup_tracks_discarded_frames(self):
        """Test that frames dropped on mismatch no longer match later end tags."""
        nodes, metrics = _assemble("<a><b></a></b><c/>")

        assert nodes == [Element("a")]
        assert metrics.discarded_entries == 2
        assert metrics.unmatched_end_tags == 1
