"""ClickHouse column types, values, decimals, column containers and connection options."""

__version__ = "0.1.0"

__all__ = [
    "columns",
    "decimal",
    "enums",
    "from_sql",
    "options",
    "query",
    "sql_type",
    "string_pool",
    "value",
    "value_ref",
]