from refchat.client.feedback import FeedbackTracker
from refchat.client.table_view import format_table, table_rows
from refchat.domain.models import Table


def test_missing_cells_render_placeholder():
    table = Table(columns=["Company", "Q1", "Q2"], rows=[{"Company": "Acme", "Q1": "10"}, {"Q2": None}])
    assert table_rows(table) == [["Company", "Q1", "Q2"], ["Acme", "10", "-"], ["-", "-", "-"]]


def test_empty_tables_render_nothing():
    assert table_rows(None) == []
    assert table_rows(Table(columns=[], rows=[{"a": 1}])) == []
    assert format_table(Table(columns=["a"], rows=[])) == ""


def test_format_table_aligns_columns():
    text = format_table(Table(columns=["Name", "N"], rows=[{"Name": "a", "N": 12}]))
    assert text.splitlines() == ["Name | N", "-----+---", "a    | 12"]


def test_feedback_toggle():
    fb = FeedbackTracker()
    assert fb.toggle_like("a1") == "like"
    assert fb.toggle_dislike("a1") == "dislike"
    assert fb.vote("a1") == "dislike"
    assert fb.toggle_dislike("a1") is None
    assert fb.vote("a1") is None
