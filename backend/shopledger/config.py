# backend/shopledger/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/shopledger.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///shopledger.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Period keys (YYYY-MM-DD / YYYY-MM) are computed in the shop's zone.
    # New shops get this zone unless one is given explicitly.
    DEFAULT_SHOP_TIMEZONE = os.environ.get("DEFAULT_SHOP_TIMEZONE", "America/Argentina/Buenos_Aires")

    # Ledger transactions retry on write conflicts before giving up
    LEDGER_TX_ATTEMPTS = int(os.environ.get("LEDGER_TX_ATTEMPTS", "5"))
    LEDGER_TX_BACKOFF = float(os.environ.get("LEDGER_TX_BACKOFF", "0.05"))

    # Bearer identity tokens expire after five days
    AUTH_TOKEN_MAX_AGE = int(os.environ.get("AUTH_TOKEN_MAX_AGE", str(60 * 60 * 24 * 5)))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
