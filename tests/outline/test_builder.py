"""Tests for outline construction."""

from __future__ import annotations

import threading
from textwrap import dedent

import pytest

from taloutline.outline.builder import OutlineBuilder, build_outline, outline_text
from taloutline.outline.document import LinesDocument
from taloutline.outline.models import OutlineNode, SourcePosition, SymbolKind


def _src(text: str) -> str:
    return dedent(text).strip("\n")


def _names(nodes: tuple[OutlineNode, ...]) -> list[str]:
    return [node.name for node in nodes]


class _CountdownToken:
    """Reports cancellation once it has been polled more than ``allowed`` times."""

    def __init__(self, allowed: int) -> None:
        self.allowed = allowed
        self.polls = 0

    def is_set(self) -> bool:
        self.polls += 1
        return self.polls > self.allowed


class TestEmptyOutlines:
    def test_zero_line_document(self) -> None:
        result = build_outline(LinesDocument(()))

        assert result.symbols == ()
        assert result.status == "completed"
        assert result.lines_scanned == 0

    def test_empty_text(self) -> None:
        assert outline_text("").symbols == ()

    def test_no_constructs(self) -> None:
        source = _src(
            """
            int x := 1;
            call write(x);
            ?nolist
            """
        )

        assert outline_text(source).symbols == ()

    def test_commented_out_header(self) -> None:
        assert outline_text("-- proc ShouldNotMatch\nint x;").symbols == ()


class TestProcedures:
    def test_single_procedure(self) -> None:
        source = _src(
            """
            int proc Foo begin
              x := 1;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.name == "Foo"
        assert foo.kind is SymbolKind.PROCEDURE
        assert foo.detail is None
        assert foo.range.lines == (0, 2)
        assert foo.range.end == SourcePosition(2, 4)
        assert foo.selection_range.lines == (0, 0)
        assert foo.children == ()

    def test_begin_on_its_own_line(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              x := 1;
            end;
            proc Bar;
            begin
            end;
            """
        )

        foo, bar = outline_text(source).symbols

        assert foo.range.lines == (0, 3)
        assert bar.range.lines == (4, 6)

    def test_locals_before_begin_do_not_end_body(self) -> None:
        source = _src(
            """
            proc Foo (a);
              int a;
              string buf[0:7];
            begin
              buf := a;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.range.lines == (0, 5)

    def test_nested_blocks_do_not_end_body_early(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              if a then
              begin
                b := 1;
              end;
              while c do
              begin
                c := c - 1;
              end;
            end;
            proc Next;
            """
        )

        foo, nxt = outline_text(source).symbols

        assert foo.range.lines == (0, 10)
        assert nxt.name == "Next"
        assert nxt.range.lines == (11, 11)

    def test_nested_blocks_with_begin_on_header(self) -> None:
        source = _src(
            """
            proc Foo begin
              begin
              end;
              begin
              end;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.range.lines == (0, 5)

    def test_end_in_comment_or_string_ignored(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              x := 1; -- end
              ! end ! y := 2;
              msg ':=' "the end";
              z^end := 3;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.range.lines == (0, 6)

    def test_unterminated_body_clamped_to_last_line(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              x := 1;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.range.end == SourcePosition(2, len("  x := 1;"))

    def test_header_on_last_line(self) -> None:
        (foo,) = outline_text("int x;\nproc Foo;").symbols

        assert foo.range.lines == (1, 1)
        assert foo.kind is SymbolKind.PROCEDURE

    def test_proc_inside_unterminated_body_is_swallowed(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
            proc Bar;
            """
        )

        assert _names(outline_text(source).symbols) == ["Foo"]


class TestForwardDeclarations:
    def test_forward_on_single_last_line(self) -> None:
        (foo,) = outline_text("proc Foo forward;").symbols

        assert foo.name == "Foo"
        assert foo.detail == "forward"
        assert foo.kind is SymbolKind.FORWARD_PROCEDURE
        assert foo.range.lines == (0, 0)
        assert foo.range.end == SourcePosition(0, len("proc Foo forward;"))

    def test_external_on_header_followed_by_more_code(self) -> None:
        source = _src(
            """
            int proc Ext (a) EXTERNAL;
            proc Foo;
            begin
            end;
            """
        )

        ext, foo = outline_text(source).symbols

        assert ext.detail == "external"
        assert ext.range.lines == (0, 0)
        assert foo.range.lines == (1, 3)

    def test_forward_marker_before_begin(self) -> None:
        source = _src(
            """
            proc Foo (a);
              int a;
              forward;
            proc Bar;
            begin
            end;
            """
        )

        foo, bar = outline_text(source).symbols

        assert foo.kind is SymbolKind.FORWARD_PROCEDURE
        assert foo.detail == "forward"
        assert foo.range.lines == (0, 2)
        assert bar.range.lines == (3, 5)

    def test_forward_after_begin_is_not_a_marker(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              forward := 1;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.kind is SymbolKind.PROCEDURE
        assert foo.detail is None
        assert foo.range.lines == (0, 3)

    def test_forward_in_comment_ignored(self) -> None:
        source = _src(
            """
            proc Foo; -- forward declared elsewhere too
            begin
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert foo.detail is None
        assert foo.range.lines == (0, 2)

    def test_forward_in_string_ignored(self) -> None:
        source = 'proc Foo; msg := "forward";\nbegin\nend;'

        (foo,) = outline_text(source).symbols

        assert foo.kind is SymbolKind.PROCEDURE
        assert foo.range.lines == (0, 2)


class TestSubprocedures:
    def test_subprocedure_and_main_body(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              subproc Bar;
              begin
              end;
              call Bar;
            end;
            """
        )

        (foo,) = outline_text(source).symbols
        bar, main = foo.children

        assert foo.range.lines == (0, 6)
        assert bar.name == "Bar"
        assert bar.kind is SymbolKind.SUBPROCEDURE
        assert bar.range.lines == (2, 4)
        assert main.name == "main: Foo"
        assert main.kind is SymbolKind.MAIN_BODY
        assert main.range.start == SourcePosition(5, 0)
        assert main.range.end == foo.range.end
        assert main.selection_range.lines == (5, 5)

    def test_single_line_subprocedure(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              subproc Bar begin end;
              call Bar;
            end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert _names(foo.children) == ["Bar", "main: Foo"]
        assert foo.children[0].range.lines == (2, 2)
        assert foo.children[1].range.lines == (3, 4)
        assert foo.range.lines == (0, 4)

    def test_multiple_subprocedures(self) -> None:
        source = _src(
            """
            int proc Calc (n);
              int n;
            begin
              int subproc Twice;
              begin
                return n * 2;
              end;
              subproc Log;
              begin
                if n then
                begin
                  call write(n);
                end;
              end;
              call Log;
              return Twice;
            end;
            """
        )

        (calc,) = outline_text(source).symbols

        assert _names(calc.children) == ["Twice", "Log", "main: Calc"]
        assert calc.children[0].range.lines == (3, 6)
        assert calc.children[1].range.lines == (7, 13)
        assert calc.children[2].range.lines == (14, 16)
        assert calc.range.lines == (0, 16)

    def test_given_subprocedure_header_opens_block_when_scanned_then_enclosing_depth_unaffected(
        self,
    ) -> None:
        source = _src(
            """
            proc Foo;
            begin
              subproc Bar; begin
                x := 1;
              end;
              call Bar;
            end;
            proc Next;
            begin
            end;
            """
        )

        foo, following = outline_text(source).symbols

        assert foo.range.lines == (0, 6)
        assert _names(foo.children) == ["Bar", "main: Foo"]
        assert foo.children[0].range.lines == (2, 4)
        assert foo.children[1].range.lines == (5, 6)
        assert following.name == "Next"
        assert following.range.lines == (7, 9)

    def test_no_main_body_when_subprocedure_ends_procedure(self) -> None:
        source = _src(
            """
            proc Foo;
            begin
              subproc Bar;
              begin
              end; end;
            """
        )

        (foo,) = outline_text(source).symbols

        assert _names(foo.children) == ["Bar"]
        assert foo.range.lines == (0, 4)

    def test_subprocedure_header_on_last_line(self) -> None:
        (foo,) = outline_text("proc Foo;\nbegin\n  subproc Bar;").symbols

        (bar,) = foo.children
        assert bar.range.lines == (2, 2)
        assert foo.range.lines == (0, 2)

    def test_custom_main_prefix(self) -> None:
        source = "proc Foo;\nbegin\nsubproc Bar begin end;\nx := 1;\nend;"

        (foo,) = outline_text(source, main_prefix="body of ").symbols

        assert foo.children[-1].name == "body of Foo"


class TestSectionsAndPages:
    def test_section_with_page(self) -> None:
        (alpha,) = outline_text('?section Alpha\n?page "Intro"').symbols

        assert alpha.name == "Alpha"
        assert alpha.kind is SymbolKind.SECTION
        assert alpha.range.end == SourcePosition(1, len('?page "Intro"'))
        (intro,) = alpha.children
        assert intro.name == "Intro"
        assert intro.kind is SymbolKind.PAGE
        assert intro.range.lines == (1, 1)

    def test_section_closes_at_line_before_next_section(self) -> None:
        source = _src(
            """
            ?section Alpha
            int x;
            ?section Beta
            int y;
            int z;
            """
        )

        alpha, beta = outline_text(source).symbols

        assert alpha.range.end == SourcePosition(1, len("int x;"))
        assert beta.range.lines == (2, 4)

    def test_page_before_any_section_is_top_level(self) -> None:
        source = _src(
            """
            ?page "Cover"
            ?page "Preface"
            ?section Main
            ?page "Body"
            """
        )

        cover, preface, main = outline_text(source).symbols

        assert cover.kind is SymbolKind.PAGE
        assert preface.kind is SymbolKind.PAGE
        assert preface.children == ()
        assert _names(main.children) == ["Body"]

    def test_page_without_heading_ignored(self) -> None:
        (alpha,) = outline_text("?section Alpha\n?page\n").symbols

        assert alpha.children == ()
        assert alpha.range.lines == (0, 2)

    def test_sections_suppressed_when_procedures_present(self) -> None:
        source = _src(
            """
            ?section Globals
            int x;
            ?section Code
            proc Foo;
            begin
            end;
            """
        )

        assert _names(outline_text(source).symbols) == ["Foo"]


class TestScanProperties:
    SOURCE = _src(
        """
        ?section Main
        proc Ext forward;
        int proc Foo;
        begin
          subproc A;
          begin
            if x then begin y := 1; end;
          end;
          subproc B begin end;
          call A;
          call B;
        end;
        proc Tail;
        begin
        """
    )

    def test_idempotent(self) -> None:
        assert outline_text(self.SOURCE) == outline_text(self.SOURCE)

    def test_range_invariants(self) -> None:
        for top in outline_text(self.SOURCE).symbols:
            for node in top.walk():
                assert node.range.contains(node.selection_range)
                previous = None
                for child in node.children:
                    assert node.range.contains(child.range)
                    if previous is not None:
                        assert previous.range.end < child.range.start
                    previous = child

    def test_top_level_order(self) -> None:
        assert _names(outline_text(self.SOURCE).symbols) == ["Ext", "Foo", "Tail"]


class TestCancellation:
    def test_cancelled_before_start(self) -> None:
        event = threading.Event()
        event.set()

        result = outline_text("proc Foo;\nbegin\nend;", event)

        assert result.status == "cancelled"
        assert result.cancelled
        assert result.symbols == ()
        assert result.lines_scanned == 0

    def test_cancelled_mid_body_keeps_partial_node(self) -> None:
        source = "proc Foo;\nbegin\n  x := 1;\n  y := 2;\nend;"

        result = outline_text(source, _CountdownToken(allowed=3))

        assert result.cancelled
        (foo,) = result.symbols
        assert foo.range.lines == (0, 2)
        assert result.lines_scanned == 3

    def test_cancelled_inside_subprocedure(self) -> None:
        source = "proc Foo;\nbegin\nsubproc Bar;\nbegin\nx := 1;\nend;\nend;"

        result = outline_text(source, _CountdownToken(allowed=4))

        assert result.cancelled
        (foo,) = result.symbols
        assert _names(foo.children) == ["Bar"]

    def test_cancelled_in_outer_loop_keeps_sections(self) -> None:
        source = '?section A\n?page "P"\n?section B\n'

        result = outline_text(source, _CountdownToken(allowed=2))

        assert result.cancelled
        (section,) = result.symbols
        assert section.range.lines == (0, 1)

    @pytest.mark.parametrize("allowed", range(0, 12))
    def test_never_raises_for_any_cancellation_point(self, allowed: int) -> None:
        result = outline_text(TestScanProperties.SOURCE, _CountdownToken(allowed=allowed))

        assert result.status in ("completed", "cancelled")

    def test_builder_accepts_no_token(self) -> None:
        result = OutlineBuilder(LinesDocument.from_text("proc Foo forward;")).build()

        assert result.status == "completed"
