# ==============================================
# MySQLRowStore
# ==============================================
#
# PURPOSE:
#   RowStore backed by MySQL through PyMySQL. Each metadata table
#   is created on first use:
#
#     id            BIGINT AUTO_INCREMENT PRIMARY KEY
#     <foreign_key> VARCHAR(64) NOT NULL
#     `key`         VARCHAR(255) NOT NULL
#     type          VARCHAR(32) NULL
#     value         LONGTEXT NULL
#     UNIQUE (<foreign_key>, `key`)
#
# CLASS: MySQLRowStore
# --------------------
#   Stateful: holds connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection. Create database if it doesn't exist.
#
#   - disconnect() -> None
#       Close connection cleanly.
#
#   - ensure_table(table_name: str, foreign_key: str) -> None
#       CREATE TABLE IF NOT EXISTS, once per process per table.
#
#   - fetch_all / insert / update / delete
#       The RowStore contract. insert() is an upsert on
#       (<foreign_key>, key) so a second row for the same key
#       overwrites the first. update() returns False when the id
#       no longer matches a row.
#
# ==============================================

import re
from typing import Any, Dict, List, Set, Tuple, cast

import pymysql
import pymysql.cursors
from pymysql.constants import CLIENT

from modelmeta.errors import ConfigError
from modelmeta.storage.base import RowStore

IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _check_identifier(name: str) -> str:
    # Table and column names are interpolated into SQL
    if not IDENTIFIER_PATTERN.match(name or ""):
        raise ConfigError(f"Invalid SQL identifier: {name!r}")
    return name


class MySQLRowStore(RowStore):
    def __init__(self, host, port, user, password, database):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = _check_identifier(database)
        self.connection = None
        self._ensured: Set[Tuple[str, str]] = set()

    def connect(self) -> None:
        # Establish connection to MySQL, create database if it doesn't exist
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            charset="utf8mb4",
            # rowcount reports matched rows, not only changed ones
            client_flag=CLIENT.FOUND_ROWS,
        )
        cursor = self.connection.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS {self.database}")
        cursor.execute(f"USE {self.database}")
        cursor.close()
        print(f"Connected to MySQL database '{self.database}'.")

    def disconnect(self) -> None:
        # Close connection cleanly
        if self.connection:
            self.connection.close()
            self.connection = None
            self._ensured.clear()

    def _require_connection(self):
        if self.connection is None:
            raise RuntimeError("Not connected to MySQL")
        return self.connection

    def ensure_table(self, table_name: str, foreign_key: str) -> None:
        if (table_name, foreign_key) in self._ensured:
            return
        connection = self._require_connection()
        table = _check_identifier(table_name)
        fk = _check_identifier(foreign_key)
        cursor = connection.cursor()
        cursor.execute(
            f"CREATE TABLE IF NOT EXISTS {table} ("
            f"id BIGINT AUTO_INCREMENT PRIMARY KEY, "
            f"{fk} VARCHAR(64) NOT NULL, "
            f"`key` VARCHAR(255) NOT NULL, "
            f"type VARCHAR(32) NULL, "
            f"value LONGTEXT NULL, "
            f"UNIQUE KEY uq_{table}_{fk}_key ({fk}, `key`))"
        )
        connection.commit()
        cursor.close()
        self._ensured.add((table_name, foreign_key))
        print(f"Ensured metadata table '{table}' (foreign key '{fk}').")

    def fetch_all(self, table: str, foreign_key: str, owner_id: Any) -> List[Dict[str, Any]]:
        self.ensure_table(table, foreign_key)
        cursor = self._require_connection().cursor(pymysql.cursors.DictCursor)
        cursor.execute(
            f"SELECT id, {foreign_key}, `key`, type, value FROM {table} "
            f"WHERE {foreign_key} = %s ORDER BY id",
            (str(owner_id),)
        )
        rows = cast(List[Dict[str, Any]], cursor.fetchall())
        cursor.close()
        return list(rows)

    def insert(self, table: str, foreign_key: str, row: Dict[str, Any]) -> int:
        self.ensure_table(table, foreign_key)
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            # LAST_INSERT_ID(id) makes lastrowid report the existing row on a duplicate
            cursor.execute(
                f"INSERT INTO {table} ({foreign_key}, `key`, type, value) "
                f"VALUES (%s, %s, %s, %s) "
                f"ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id), "
                f"type = VALUES(type), value = VALUES(value)",
                (str(row[foreign_key]), row["key"], row.get("type"), row.get("value"))
            )
            row_id = cursor.lastrowid
            connection.commit()
        except pymysql.MySQLError:
            connection.rollback()
            raise
        finally:
            cursor.close()
        return row_id

    def update(self, table: str, row_id: Any, row: Dict[str, Any]) -> bool:
        connection = self._require_connection()
        columns = [_check_identifier(col) for col in row if col != "id"]
        set_clause = ", ".join(f"`{col}` = %s" for col in columns)
        cursor = connection.cursor()
        try:
            cursor.execute(
                f"UPDATE {_check_identifier(table)} SET {set_clause} WHERE id = %s",
                tuple(row[col] for col in columns) + (row_id,)
            )
            matched = cursor.rowcount > 0
            connection.commit()
        except pymysql.MySQLError:
            connection.rollback()
            raise
        finally:
            cursor.close()
        return matched

    def delete(self, table: str, row_id: Any) -> None:
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            cursor.execute(f"DELETE FROM {_check_identifier(table)} WHERE id = %s", (row_id,))
            connection.commit()
        except pymysql.MySQLError:
            connection.rollback()
            raise
        finally:
            cursor.close()
