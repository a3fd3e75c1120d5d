import logging
from pathlib import Path

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()

REQUIRED_TABLES = ("users", "posts")


class SchemaError(RuntimeError):
    """Raised when the schema file cannot be read or did not create the tables."""


def _split_statements(sql: str) -> list[str]:
    return [stmt.strip() for stmt in sql.split(";") if stmt.strip()]


class Store:
    """
    Owns the SQLAlchemy engine and session factory.

    Created once at startup with `open()`, which applies the schema file
    (every statement is create-if-absent), and released with `close()`.
    """

    def __init__(self, database_url: str, schema_path: Path):
        self.database_url = database_url
        self.schema_path = Path(schema_path)
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def open(self) -> "Store":
        try:
            schema = self.schema_path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaError(f"Cannot read schema file {self.schema_path}: {e}") from e

        connect_args = {}
        if self.database_url.startswith("sqlite"):
            # sync endpoints run in a threadpool
            connect_args["check_same_thread"] = False

        self.engine = create_engine(self.database_url, connect_args=connect_args)
        try:
            with self.engine.begin() as conn:
                for stmt in _split_statements(schema):
                    conn.exec_driver_sql(stmt)
            tables = set(inspect(self.engine).get_table_names())
        except SQLAlchemyError as e:
            self.close()
            raise SchemaError(f"Cannot apply schema {self.schema_path}: {e}") from e

        missing = [t for t in REQUIRED_TABLES if t not in tables]
        if missing:
            self.close()
            raise SchemaError(f"Schema {self.schema_path} did not create tables: {', '.join(missing)}")

        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        logger.info("Opened store at %s", self.engine.url.render_as_string(hide_password=True))
        return self

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Store is not open")
        return self._session_factory()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Closed store")
        self.engine = None
        self._session_factory = None
