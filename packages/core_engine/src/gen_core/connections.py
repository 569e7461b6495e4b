"""Opening DB-API connections for the supported engines.

The loaders never own a connection; this module is the caller-side helper
that opens one from a ConnectionConfig. Drivers are imported lazily so only
the driver for the engine in use needs to be installed.
"""

import importlib
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Tuple

logger = logging.getLogger(__name__)

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"

# engine id -> (driver module, pyproject extra providing it)
_DRIVERS: Dict[str, Tuple[str, str]] = {
    "sqlite3": ("sqlite3", ""),
    "sqlite": ("sqlite3", ""),
    "postgres": ("psycopg2", "postgres"),
    "postgresql": ("psycopg2", "postgres"),
    "mysql": ("mysql.connector", "mysql"),
    "mssql": ("pyodbc", "mssql"),
    "sqlserver": ("pyodbc", "mssql"),
}


@dataclass
class ConnectionConfig:
    """Where and how to connect; ``database`` is a file path for SQLite.

    ``extra`` holds engine specific settings: ``odbc_driver`` and an ``odbc``
    mapping of additional ODBC attributes for SQL Server, and ``connect_args``
    passed through to the driver's ``connect`` for the other engines.
    """

    sql_type: str
    host: str = ""
    port: int = 0
    database: str = ""
    user: str = ""
    password: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


def check_driver(sql_type: str) -> Tuple[bool, str]:
    """Report whether the driver module for ``sql_type`` can be imported."""
    entry = _DRIVERS.get(sql_type.lower())
    if entry is None:
        return False, f"No driver known for {sql_type}"
    module, extra = entry
    try:
        importlib.import_module(module)
    except ImportError:
        return False, f"{module} is not installed; install gen-core[{extra}]"
    return True, f"{module} available"


def odbc_attributes(config: ConnectionConfig) -> Dict[str, str]:
    """Connection string attributes for SQL Server, in emission order."""
    attributes = {
        "DRIVER": "{%s}" % config.extra.get("odbc_driver", DEFAULT_ODBC_DRIVER),
        "SERVER": f"{config.host or 'localhost'},{config.port or 1433}",
        "DATABASE": config.database or "master",
    }
    if config.user:
        attributes["UID"] = config.user
        attributes["PWD"] = config.password
    else:
        attributes["Trusted_Connection"] = "yes"
    for key, value in config.extra.get("odbc", {}).items():
        attributes[key] = str(value)
    return attributes


def build_odbc_conn_string(config: ConnectionConfig) -> str:
    return ";".join(f"{key}={value}" for key, value in odbc_attributes(config).items())


def _connect_sqlite(config: ConnectionConfig) -> Any:
    return sqlite3.connect(config.database or ":memory:", **config.extra.get("connect_args", {}))


def _connect_postgres(config: ConnectionConfig) -> Any:
    import psycopg2

    return psycopg2.connect(
        host=config.host,
        port=config.port or 5432,
        dbname=config.database,
        user=config.user,
        password=config.password,
        **config.extra.get("connect_args", {}),
    )


def _connect_mysql(config: ConnectionConfig) -> Any:
    import mysql.connector

    return mysql.connector.connect(
        host=config.host,
        port=config.port or 3306,
        database=config.database,
        user=config.user,
        password=config.password,
        **config.extra.get("connect_args", {}),
    )


def _connect_mssql(config: ConnectionConfig) -> Any:
    import pyodbc

    return pyodbc.connect(build_odbc_conn_string(config))


_CONNECTORS: Dict[str, Callable[[ConnectionConfig], Any]] = {
    "sqlite3": _connect_sqlite,
    "sqlite": _connect_sqlite,
    "postgres": _connect_postgres,
    "postgresql": _connect_postgres,
    "mysql": _connect_mysql,
    "mssql": _connect_mssql,
    "sqlserver": _connect_mssql,
}


def open_connection(config: ConnectionConfig) -> Any:
    """Open a connection; the caller is responsible for closing it."""
    connect = _CONNECTORS.get(config.sql_type.lower())
    if connect is None:
        raise ValueError(f"Unknown sql type: {config.sql_type}")
    logger.debug("Opening %s connection to %s", config.sql_type, config.database or config.host)
    return connect(config)
