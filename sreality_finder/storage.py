"""
MySQL storage for searches and their results.
"""
import json
import logging
import uuid
from typing import Any, Optional

import mysql.connector
from mysql.connector import Error

from .config import MySQLConfig, get_config
from .errors import StorageError
from .models.listing import CanonicalListing


logger = logging.getLogger(__name__)


SEARCHES_TABLE = """
    CREATE TABLE IF NOT EXISTS searches (
        id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(255),
        params_json TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

RESULTS_TABLE = """
    CREATE TABLE IF NOT EXISTS results (
        id VARCHAR(36) PRIMARY KEY,
        search_id VARCHAR(36) NOT NULL,
        data_json MEDIUMTEXT NOT NULL,
        ai_score DECIMAL(5, 2),
        ai_reason TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        INDEX idx_results_search_id (search_id),
        FOREIGN KEY (search_id) REFERENCES searches(id) ON DELETE CASCADE
    )
"""


class SearchStore:
    """Append-only store of searches and the listings each one returned."""

    def __init__(self, config: Optional[MySQLConfig] = None):
        self.config = config or get_config().mysql

    @property
    def _connect_args(self) -> dict[str, Any]:
        return {
            "host": self.config.host,
            "port": self.config.port,
            "user": self.config.user,
            "password": self.config.password,
            "database": self.config.database,
        }

    def get_connection(self):
        """Get a MySQL database connection."""
        try:
            return mysql.connector.connect(**self._connect_args)
        except Error as e:
            # If database doesn't exist, create it
            if "Unknown database" in str(e):
                self.create_database()
                return mysql.connector.connect(**self._connect_args)
            raise

    def create_database(self):
        """Create the database if it doesn't exist."""
        args = self._connect_args
        database = args.pop("database")
        conn = mysql.connector.connect(**args)
        try:
            cursor = conn.cursor()
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{database}`")
        finally:
            conn.close()

    def init_db(self):
        """Initialize database tables."""
        try:
            conn = self.get_connection()
        except Error as e:
            raise StorageError(f"Failed to connect to MySQL: {e}") from e

        try:
            cursor = conn.cursor()
            cursor.execute(SEARCHES_TABLE)
            cursor.execute(RESULTS_TABLE)
            conn.commit()
        except Error as e:
            raise StorageError(f"Failed to create tables: {e}") from e
        finally:
            conn.close()

    def record_search(self, params: dict[str, Any], user_id: Optional[str] = None) -> str:
        """
        Store a search request.

        Returns:
            The generated search id
        """
        search_id = str(uuid.uuid4())
        try:
            conn = self.get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO searches (id, user_id, params_json)
                    VALUES (%s, %s, %s)
                    """,
                    (search_id, user_id, json.dumps(params, ensure_ascii=False)),
                )
                conn.commit()
            finally:
                conn.close()
        except Error as e:
            raise StorageError(f"Failed to persist search: {e}") from e

        logger.info(f"Recorded search {search_id}")
        return search_id

    def record_results(self, search_id: str, items: list[CanonicalListing]) -> None:
        """Store the listings returned for a search. Does nothing for an empty list."""
        if not items:
            return

        rows = [
            (
                str(uuid.uuid4()),
                search_id,
                json.dumps(item.to_public_dict(), ensure_ascii=False),
                item.ai_score,
                item.ai_reason,
            )
            for item in items
        ]

        try:
            conn = self.get_connection()
            try:
                cursor = conn.cursor()
                cursor.executemany(
                    """
                    INSERT INTO results (id, search_id, data_json, ai_score, ai_reason)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    rows,
                )
                conn.commit()
            finally:
                conn.close()
        except Error as e:
            raise StorageError(f"Failed to persist results: {e}") from e

        logger.info(f"Recorded {len(rows)} results for search {search_id}")

