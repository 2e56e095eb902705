from cafe.database import DatabaseManager, ROW_LOCATORS


def test_count_and_query(db):
    assert db.count("SELECT * FROM Menu WHERE type = :type", {"type": "Drinks"}) == 2
    rows = db.query("SELECT itemName FROM Menu WHERE price > :price ORDER BY price", {"price": 4})
    assert [r[0] for r in rows] == ["Latte", "Iced Latte"]


def test_scalar_returns_none_without_rows(db):
    assert db.scalar("SELECT price FROM Menu WHERE itemName = :name", {"name": "Scone"}) is None
    assert db.scalar("SELECT price FROM Menu WHERE itemName = :name", {"name": "Bagel"}) == 2.25


def test_print_query_prints_header_and_tab_separated_rows(db, capsys):
    count = db.print_query("SELECT itemName, price FROM Menu WHERE itemName = :name", {"name": "Latte"})
    lines = capsys.readouterr().out.splitlines()
    assert count == 1
    assert "itemName\tprice" in lines[0]
    assert lines[1] == "Latte\t4.5"


def test_print_query_without_rows_prints_nothing(db, capsys):
    assert db.print_query("SELECT * FROM Menu WHERE itemName = :name", {"name": "nope"}) == 0
    assert capsys.readouterr().out == ""


def test_bound_parameters_are_not_interpreted_as_sql(db):
    # a quote in user input neither breaks nor widens the statement
    assert db.count("SELECT * FROM Menu WHERE itemName = :name", {"name": "x' OR '1'='1"}) == 0


def test_execute_reports_rowcount(db):
    result = db.execute("UPDATE Menu SET price = :price WHERE itemName = :name", {"price": 9.0, "name": "Bagel"})
    assert result.rowcount == 1
    assert db.scalar("SELECT price FROM Menu WHERE itemName = 'Bagel'") == 9.0


def test_row_locator_per_dialect(db):
    assert db.dialect == "sqlite"
    assert db.row_locator == ROW_LOCATORS["sqlite"] == "rowid"
    assert ROW_LOCATORS["postgresql"] == "ctid"


def test_file_database(tmp_path):
    database = DatabaseManager(f"sqlite:///{tmp_path / 'cafe.db'}")
    database.conn.exec_driver_sql("CREATE TABLE t (x INTEGER)")
    database.execute("INSERT INTO t (x) VALUES (:x)", {"x": 1})
    database.close()

    reopened = DatabaseManager(f"sqlite:///{tmp_path / 'cafe.db'}")
    assert reopened.scalar("SELECT x FROM t") == 1
    reopened.close()
