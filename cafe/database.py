import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, CursorResult, Row
from termcolor import cprint

from cafe.config import DATABASE_URL, DB_DRIVER, DB_HOST

log = logging.getLogger(__name__)

Params = Mapping[str, Any]

# physical row id per dialect, for deleting one of several identical rows
ROW_LOCATORS = {
    "postgresql": "ctid",
    "sqlite": "rowid",
}


def build_url(dbname: str, port: str, user: str) -> URL | str:
    """connection url for <dbname> <port> <user>; password is always empty"""
    if DATABASE_URL:
        return DATABASE_URL
    return URL.create(
        DB_DRIVER,
        username=user,
        password="",
        host=DB_HOST,
        port=int(port),
        database=dbname,
    )


class DatabaseManager:
    """own one connection and run one-shot statements against it"""
    def __init__(self, url: URL | str, **engine_kwargs):
        self.engine = create_engine(url, **engine_kwargs)
        # connect eagerly so a bad target fails at startup
        self.conn = self.engine.connect().execution_options(isolation_level="AUTOCOMMIT")
        log.info("connected to %s", self.engine.url.render_as_string(hide_password=True))

    @classmethod
    def connect(cls, dbname: str, port: str, user: str) -> "DatabaseManager":
        return cls(build_url(dbname, port, user))

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def row_locator(self) -> str | None:
        return ROW_LOCATORS.get(self.dialect)

    def execute(self, sql: str, params: Params | None = None) -> CursorResult:
        """run a statement; each one commits on its own"""
        log.debug("sql: %s | %s", " ".join(sql.split()), params or {})
        return self.conn.execute(text(sql), params or {})

    def query(self, sql: str, params: Params | None = None) -> Sequence[Row]:
        """return all result rows"""
        return self.execute(sql, params).fetchall()

    def count(self, sql: str, params: Params | None = None) -> int:
        """return the number of result rows"""
        return len(self.query(sql, params))

    def scalar(self, sql: str, params: Params | None = None) -> Any:
        """return the first column of the first row (or none)"""
        return self.execute(sql, params).scalar()

    def print_query(self, sql: str, params: Params | None = None) -> int:
        """print a header line and one tab-separated line per row; returns row count"""
        result = self.execute(sql, params)
        rows = result.fetchall()
        if rows:
            cprint("\t".join(result.keys()), attrs=["bold"])
        for row in rows:
            print("\t".join("" if v is None else str(v) for v in row))
        return len(rows)

    def close(self):
        self.conn.close()
        self.engine.dispose()
        log.info("disconnected")
