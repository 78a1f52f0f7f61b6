import pytest

from pagestore.common import ColType
from pagestore.errors import ColumnNotFoundError, IndexNotFoundError, InternalError, TableNotFoundError
from pagestore.meta import ColMeta, DbMeta, IndexMeta, TabMeta


def _table():
    a = ColMeta("t", "a", ColType.INT, 4, 0, False)
    b = ColMeta("t", "b", ColType.FLOAT, 4, 4, True)
    c = ColMeta("t", "c", ColType.STRING, 16, 8, False)
    idx = IndexMeta("t", 8, 2, [a, b])
    return TabMeta("t", [a, b, c], [idx])


def test_col_meta_text_form():
    col = ColMeta("t", "a", ColType.INT, 4, 0, False)
    assert str(col) == "t a 0 4 0 0"


def test_empty_db_dumps():
    assert DbMeta("db").dumps() == "db\n0\n"


def test_round_trip_with_indexes():
    db = DbMeta("shop")
    db.set_tab_meta("t", _table())
    db.set_tab_meta("empty", TabMeta("empty"))
    loaded = DbMeta.loads(db.dumps())
    assert loaded == db
    assert loaded.get_table("t").get_col("b").type is ColType.FLOAT
    assert loaded.get_table("t").get_col("b").index is True


def test_dumps_orders_tables_by_name():
    db = DbMeta("x")
    db.set_tab_meta("zeta", TabMeta("zeta"))
    db.set_tab_meta("alpha", TabMeta("alpha"))
    text = db.dumps()
    assert text.index("alpha") < text.index("zeta")
    assert [t.name for t in db.sorted_tables()] == ["alpha", "zeta"]


def test_is_col_and_get_col():
    tab = _table()
    assert tab.is_col("c")
    assert not tab.is_col("missing")
    assert tab.get_col("c").offset == 8
    with pytest.raises(ColumnNotFoundError):
        tab.get_col("missing")


def test_index_lookup():
    tab = _table()
    assert tab.is_index(["a", "b"])
    assert not tab.is_index(["b", "a"])
    assert not tab.is_index(["a"])
    assert tab.get_index_meta(["a", "b"]).col_tot_len == 8


def test_missing_index_raises():
    tab = _table()
    with pytest.raises(IndexNotFoundError) as info:
        tab.get_index_meta(["x", "y"])
    assert "Index not found: t.(x, y)" in str(info.value)


def test_get_table():
    db = DbMeta("d")
    tab = _table()
    db.set_tab_meta("t", tab)
    assert db.is_table("t")
    assert db.get_table("t") is tab
    assert not db.is_table("u")
    with pytest.raises(TableNotFoundError):
        db.get_table("u")


def test_truncated_text_raises():
    text = DbMeta("d", {"t": _table()}).dumps()
    with pytest.raises(InternalError):
        DbMeta.loads(text[: len(text) // 2])


def test_bad_number_raises():
    with pytest.raises(InternalError):
        DbMeta.loads("d many")