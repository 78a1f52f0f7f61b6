import pytest

from pagestore.common import BUFFER_LENGTH
from pagestore.printer import Context, RecordPrinter


def test_context_starts_empty():
    ctx = Context()
    assert ctx.output() == ""
    assert ctx.offset == 0
    assert ctx.ellipsis is False


def test_separator_single_column():
    ctx = Context()
    RecordPrinter(1).print_separator(ctx)
    assert ctx.output() == "+" + "-" * 18 + "+\n"
    assert ctx.offset == len(ctx.output())


def test_record_line_matches_separator_width():
    for num_cols in (1, 2, 3):
        ctx = Context()
        printer = RecordPrinter(num_cols)
        printer.print_separator(ctx)
        printer.print_record(["x"] * num_cols, ctx)
        sep, rec, _ = ctx.output().split("\n")
        assert len(sep) == len(rec)


def test_record_is_right_aligned():
    ctx = Context()
    RecordPrinter(1).print_record(["Tables"], ctx)
    out = ctx.output()
    assert out.startswith("| ")
    assert out.endswith(" Tables |\n")


def test_long_values_are_truncated():
    ctx = Context()
    RecordPrinter(1).print_record(["abcdefghijklmnopqrst"], ctx)
    assert "abcdefghijklm..." in ctx.output()
    assert "n" not in ctx.output()


def test_value_of_exact_width_is_kept():
    value = "a" * RecordPrinter.COL_WIDTH
    ctx = Context()
    RecordPrinter(1).print_record([value], ctx)
    assert value in ctx.output()
    assert "..." not in ctx.output()


def test_record_count_without_ellipsis():
    ctx = Context()
    RecordPrinter.print_record_count(3, ctx)
    assert ctx.output() == "Total record(s): 3\n"


def test_output_is_capped_and_marked_with_ellipsis():
    ctx = Context()
    printer = RecordPrinter(2)
    printer.print_separator(ctx)
    for i in range(1000):
        printer.print_record([str(i), "v"], ctx)
    assert ctx.ellipsis is True
    assert ctx.offset < BUFFER_LENGTH

    before = ctx.output()
    printer.print_record(["more", "rows"], ctx)
    printer.print_separator(ctx)
    assert ctx.output() == before

    RecordPrinter.print_record_count(1000, ctx)
    out = ctx.output()
    assert out.endswith("... ...\nTotal record(s): 1000\n")
    assert len(out.encode()) <= BUFFER_LENGTH


def test_wrong_column_count_rejected():
    with pytest.raises(ValueError):
        RecordPrinter(2).print_record(["only one"], Context())


def test_zero_columns_rejected():
    with pytest.raises(ValueError):
        RecordPrinter(0)