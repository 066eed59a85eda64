"""SQLAlchemy engine, the inventory store handle and session management.

The draw transaction runs in an explicit unit of work opened on the
``InventoryStore``; the plain CRUD endpoints use a session-per-request.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from flask import Flask, current_app, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from lottery.errors import ConnectionExhaustion
from lottery.models.base import Base

logger = logging.getLogger(__name__)


def _assume_role_with_vercel_oidc(region: str) -> dict[str, str] | None:
    """Assume AWS_ROLE_ARN using VERCEL_OIDC_TOKEN if available.

    Returns a minimal credential dict compatible with boto3 clients.
    """

    token = os.getenv("VERCEL_OIDC_TOKEN")
    role_arn = os.getenv("AWS_ROLE_ARN")
    if not token or not role_arn:
        return None

    import boto3

    sts = boto3.client("sts", region_name=region)
    resp = sts.assume_role_with_web_identity(
        RoleArn=role_arn,
        RoleSessionName="lottery-rds",
        WebIdentityToken=token,
    )
    c = resp["Credentials"]
    return {
        "aws_access_key_id": c["AccessKeyId"],
        "aws_secret_access_key": c["SecretAccessKey"],
        "aws_session_token": c["SessionToken"],
    }


def _generate_rds_iam_token(*, host: str, port: int, user: str, region: str) -> str:
    """Generate an RDS IAM auth token to use as the database password."""

    import boto3

    creds = _assume_role_with_vercel_oidc(region)
    if creds:
        rds = boto3.client("rds", region_name=region, **creds)
    else:
        # Falls back to whatever AWS credentials are configured locally.
        rds = boto3.client("rds", region_name=region)

    return rds.generate_db_auth_token(
        DBHostname=host,
        Port=port,
        DBUsername=user,
        Region=region,
    )


def _iam_creator(url: URL, region: str) -> Any:
    """Build a DBAPI ``creator`` that fetches a fresh IAM token per connection."""

    host = str(url.host)
    username = str(url.username)
    database = str(url.database)
    backend = url.get_backend_name()

    if backend == "postgresql":
        import psycopg2

        port = int(url.port or 5432)
        sslmode = (url.query or {}).get("sslmode") or os.getenv("PGSSLMODE") or "require"

        def _creator() -> object:
            token = _generate_rds_iam_token(host=host, port=port, user=username, region=region)
            return psycopg2.connect(
                host=host,
                port=port,
                user=username,
                password=token,
                dbname=database,
                sslmode=sslmode,
            )

        return _creator

    import pymysql

    port = int(url.port or 3306)
    ca = os.getenv("DB_SSL_CA")

    def _creator() -> object:
        token = _generate_rds_iam_token(host=host, port=port, user=username, region=region)
        return pymysql.connect(
            host=host,
            port=port,
            user=username,
            password=token,
            database=database,
            charset="utf8mb4",
            ssl={"ca": ca} if ca else {"check_hostname": False},
        )

    return _creator


def _pool_options(url: URL, pool_size: int, max_overflow: int, pool_timeout: int) -> dict[str, Any]:
    # In-memory SQLite uses a per-thread singleton pool without queue options.
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
    }


def _enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """Start every SQLite transaction with BEGIN IMMEDIATE.

    SQLite ignores ``FOR UPDATE``; taking the write lock up front gives the
    same serialization between concurrent draws.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_app_engine(
    database_url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 0,
    pool_timeout: int = 10,
) -> Engine:
    url = make_url(database_url)
    pool = _pool_options(url, pool_size, max_overflow, pool_timeout)

    # Without a static password, try IAM auth.
    if url.get_backend_name() in ("postgresql", "mysql") and not url.password:
        region = os.getenv("AWS_REGION")
        if region and url.host and url.username and url.database:
            return create_engine(
                f"{url.drivername}://",
                creator=_iam_creator(url, region),
                pool_pre_ping=True,
                **pool,
            )

    if url.get_backend_name() == "sqlite":
        connect_args = {"timeout": float(max(pool_timeout, 1))}
        engine = create_engine(database_url, connect_args=connect_args, **pool)
        _enable_sqlite_immediate_transactions(engine)
        return engine

    return create_engine(database_url, pool_pre_ping=True, **pool)


class InventoryStore:
    """Handle on the prize database.

    Opened once at process start and closed at shutdown. Owns the engine
    (and its connection pool) and the session factory.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._closed = False

    @classmethod
    def open(
        cls,
        database_url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 10,
    ) -> "InventoryStore":
        engine = create_app_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
        )
        logger.info("Opened inventory store on %s", engine.url.render_as_string(hide_password=True))
        return cls(engine)

    def create_all(self) -> None:
        """Create tables (production would use migrations)."""

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Yield a session inside one transaction.

        Commits when the block exits normally and rolls back on any
        exception, including ``BaseException`` raised by worker shutdown.
        The session always goes back to the pool.
        """

        session = self.session_factory()
        try:
            try:
                session.begin()
                yield session
                session.commit()
            except BaseException:
                session.rollback()
                raise
            finally:
                session.close()
        except PoolTimeoutError as exc:
            raise ConnectionExhaustion(details=str(exc)) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.engine.dispose()
        logger.info("Closed inventory store")


def init_db(app: Flask, store: InventoryStore) -> None:
    """Attach the store to the app and manage per-request sessions."""

    store.create_all()

    app.extensions["inventory_store"] = store

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = g.pop("db", None)
        if session is None:
            return

        try:
            if exc is None and session.is_active:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_store() -> InventoryStore:
    store: InventoryStore | None = current_app.extensions.get("inventory_store")
    if store is None:
        raise RuntimeError("Inventory store not initialized")
    return store


def get_session() -> Session:
    """Get the current request's SQLAlchemy session (opened lazily)."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        session = get_store().session_factory()
        g.db = session  # type: ignore[attr-defined]
    return session
