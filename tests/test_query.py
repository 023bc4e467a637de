from chtypes.query import Query


def test_new_has_empty_id():
    query = Query("SELECT 1")
    assert query.sql == "SELECT 1"
    assert query.id == ""


def test_with_id_keeps_sql():
    query = Query("SELECT 1").with_id("q-1")
    assert query.id == "q-1"
    assert query.sql == "SELECT 1"


def test_with_id_leaves_original_untouched():
    original = Query("SELECT 1")
    original.with_id("q-1")
    assert original.id == ""


def test_map_sql_keeps_id():
    query = Query("SELECT 1", "q-2").map_sql(lambda s: s + " LIMIT 1")
    assert query.sql.startswith("SELECT 1")
    assert query.sql.endswith(" LIMIT 1")
    assert query.id == "q-2"


def test_equality():
    assert Query("SELECT 1").with_id("a") == Query("SELECT 1", "a")
    assert not Query("SELECT 1") == Query("SELECT 2")