#!/usr/bin/env python3
"""
Command line entry point for db-scaffold.

Usage:
    python -m db_scaffold [options]

Examples:
    python -m db_scaffold -c postgresql+psycopg://app@localhost/shop -p app/models -n app.models -e
    python -m db_scaffold -c "mssql+pyodbc://..." -t Users -f
    python -m db_scaffold --config scaffold.yaml --delete
"""

from __future__ import annotations

from db_scaffold.codegen.main import main

if __name__ == "__main__":
    main()
