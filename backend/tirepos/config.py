# backend/tirepos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the process working directory by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///tirepos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # WAL lets read-only report/export queries run while an invoice is being written
    SQLITE_WAL = os.environ.get("SQLITE_WAL", "true").lower() == "true"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    INVOICE_LIST_LIMIT = int(os.environ.get("INVOICE_LIST_LIMIT", "100"))
    REPORT_TOP_N = int(os.environ.get("REPORT_TOP_N", "10"))
    SLOW_MOVER_DAYS = int(os.environ.get("SLOW_MOVER_DAYS", "30"))
    DEFAULT_LOW_STOCK_THRESHOLD = int(os.environ.get("DEFAULT_LOW_STOCK_THRESHOLD", "10"))
