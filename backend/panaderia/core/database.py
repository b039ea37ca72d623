"""
Conexión a base de datos PostgreSQL

Este módulo centraliza el acceso a la base de datos:
- Pool de conexiones psycopg2 (ThreadedConnectionPool) con retry al abrir
- transaction(): scope transaccional que posee UNA conexión del pool
- get_database(): dependency de FastAPI (el pool vive en app.state, no es global)

Todas las conexiones usan RealDictCursor (filas como dicts).
"""
import threading
import time
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor
from fastapi import Request

from panaderia.core.config import Settings
from panaderia.domain.errors import OrderError, InfrastructureFailure, StorageFailure

logger = logging.getLogger(__name__)

# Faults that roll the transaction back and may succeed on a later attempt
# (connection loss, lock timeout, deadlock, serialization failure)
TRANSIENT_ERRORS = (psycopg2.OperationalError, psycopg2.InterfaceError)


def create_pool_with_retry(database_url, min_conn=1, max_conn=10, max_retries=3, retry_delay=1.0):
    """
    Create a ThreadedConnectionPool with automatic retry on connection failures

    Args:
        database_url: PostgreSQL DSN
        min_conn: Connections opened eagerly
        max_conn: Upper bound; getconn() beyond it raises PoolError
        max_retries: Maximum number of attempts (default: 3)
        retry_delay: Initial delay between retries in seconds, doubled each attempt

    Returns:
        psycopg2.pool.ThreadedConnectionPool

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    if not database_url:
        raise psycopg2.OperationalError("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database pool attempt {attempt}/{max_retries}")
            db_pool = pool.ThreadedConnectionPool(
                min_conn,
                max_conn,
                database_url,
                cursor_factory=RealDictCursor,
            )
            logger.debug(f"Database pool ready on attempt {attempt}")
            return db_pool

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error


class Database:
    """
    Store handle passed explicitly to repositories and services

    Owns the connection pool. Each call to transaction() checks out one
    connection that is used exclusively by the caller until the scope ends.
    """

    def __init__(
        self,
        database_url: Optional[str],
        min_conn: int = 1,
        max_conn: int = 10,
        lock_timeout_ms: int = 5000,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.database_url = database_url
        self.min_conn = min_conn
        self.max_conn = max_conn
        self.lock_timeout_ms = lock_timeout_ms
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._pool = None
        self._pool_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            min_conn=settings.DB_POOL_MIN_CONN,
            max_conn=settings.DB_POOL_MAX_CONN,
            lock_timeout_ms=settings.DB_LOCK_TIMEOUT_MS,
            max_retries=settings.DB_CONNECT_RETRIES,
            retry_delay=settings.DB_RETRY_DELAY,
        )

    @property
    def is_open(self) -> bool:
        return self._pool is not None and not self._pool.closed

    def open(self, max_retries: Optional[int] = None) -> None:
        with self._pool_lock:
            if self.is_open:
                return
            self._pool = create_pool_with_retry(
                self.database_url,
                min_conn=self.min_conn,
                max_conn=self.max_conn,
                max_retries=max_retries or self.max_retries,
                retry_delay=self.retry_delay,
            )
            logger.info(f"Database pool opened ({self.min_conn}-{self.max_conn} connections)")

    def close(self) -> None:
        with self._pool_lock:
            if self.is_open:
                self._pool.closeall()
                logger.info("Database pool closed")
            self._pool = None

    def _acquire(self):
        """Check out a connection; pool exhaustion or an unreachable DB is retryable"""
        try:
            if not self.is_open:
                self.open(max_retries=1)
            return self._pool.getconn()
        except (pool.PoolError, psycopg2.OperationalError) as e:
            logger.error(f"Could not acquire database connection: {e}")
            raise InfrastructureFailure(e) from e

    def _release(self, conn, discard: bool = False) -> None:
        try:
            self._pool.putconn(conn, close=discard or bool(conn.closed))
        except Exception as e:
            logger.error(f"Error returning connection to pool: {e}")

    @staticmethod
    def _rollback(conn) -> bool:
        """Roll back; returns False when the connection is unusable afterwards"""
        try:
            conn.rollback()
            return True
        except psycopg2.Error as e:
            logger.error(f"Rollback failed, discarding connection: {e}")
            return False

    @contextmanager
    def transaction(self) -> Iterator:
        """
        Transactional scope over one pooled connection

        - commit if the block finishes
        - rollback if it raises (any exception, including cancellation)
        - the connection goes back to the pool in every case, even when
          commit or rollback fail

        psycopg2 transient faults are re-raised as InfrastructureFailure,
        any other psycopg2.Error as StorageFailure (not retryable).
        OrderError and other exceptions propagate unchanged.

        Usage:
            with db.transaction() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT ...")
        """
        conn = self._acquire()
        discard = False
        try:
            if self.lock_timeout_ms:
                with conn.cursor() as cursor:
                    cursor.execute("SET LOCAL lock_timeout = %s", (f"{self.lock_timeout_ms}ms",))
            yield conn
            conn.commit()
        except OrderError:
            discard = not self._rollback(conn)
            raise
        except TRANSIENT_ERRORS as e:
            discard = not self._rollback(conn)
            logger.warning(f"Transaction aborted by database fault: {e}")
            raise InfrastructureFailure(e) from e
        except psycopg2.Error as e:
            discard = not self._rollback(conn)
            logger.error(f"Transaction rejected by database: {e}")
            raise StorageFailure(e) from e
        except BaseException:
            discard = not self._rollback(conn)
            raise
        finally:
            self._release(conn, discard=discard)

    def ping(self) -> float:
        """Run SELECT 1 and return the latency in milliseconds"""
        start = time.time()
        with self.transaction() as conn:
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        return round((time.time() - start) * 1000, 2)


def get_database(request: Request) -> Database:
    """
    FastAPI dependency para obtener el Database de la aplicación

    Usage:
        @router.get("/items")
        def read_items(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.db
