# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fail-closed rules:
- DEBUG forced off, SECRET_KEY / ALLOWED_HOSTS / DATABASE_URL required
- PostgreSQL only: the inventory compare-and-swap and the debt row lock
  (select_for_update) need real row-level locking
- settlement engine knobs validated at boot, not at the first sale
- CORS/CSRF explicit and https only
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import (  # explicit for Ruff (F405)
    BASE_DIR,
    DEBT_DEFAULT_TERM_DAYS,
    LOGGING,
    MIDDLEWARE,
    ORDER_PAYMENT_MISMATCH_POLICY,
    SETTLEMENT_REQUEST_TIMEOUT_SECONDS,
    env,
)

DEBUG = False

# ----------------------------
# Secrets / hosts
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
if not SECRET_KEY or SECRET_KEY == "dev-insecure-change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
if not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set in production.")

# ----------------------------
# Database (PostgreSQL only)
# ----------------------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
if not _database_url:
    raise ImproperlyConfigured("DATABASE_URL must be set in production (PostgreSQL).")
if not _database_url.startswith(("postgres://", "postgresql://", "pgsql://")):
    raise ImproperlyConfigured("Settlement storage requires PostgreSQL in production.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)
DATABASES["default"]["CONN_HEALTH_CHECKS"] = True
DATABASES["default"].setdefault("OPTIONS", {})
# Statements never outlive the request deadline.
DATABASES["default"]["OPTIONS"]["options"] = (
    f"-c statement_timeout={int(SETTLEMENT_REQUEST_TIMEOUT_SECONDS * 1000)}"
)

# ----------------------------
# Settlement engine
# ----------------------------
if ORDER_PAYMENT_MISMATCH_POLICY not in ("open_debt", "reject"):
    raise ImproperlyConfigured("ORDER_PAYMENT_MISMATCH_POLICY must be 'open_debt' or 'reject'.")
if SETTLEMENT_REQUEST_TIMEOUT_SECONDS <= 0:
    raise ImproperlyConfigured("SETTLEMENT_REQUEST_TIMEOUT_SECONDS must be positive.")
if DEBT_DEFAULT_TERM_DAYS < 0:
    raise ImproperlyConfigured("DEBT_DEFAULT_TERM_DAYS cannot be negative.")

# ----------------------------
# Static files (admin + API docs only)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# TLS proxy / cookies / headers
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF (explicit, https only)
# ----------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])
CORS_ALLOW_CREDENTIALS = False

for _name, _origins in (
    ("CORS_ALLOWED_ORIGINS", CORS_ALLOWED_ORIGINS),
    ("CSRF_TRUSTED_ORIGINS", CSRF_TRUSTED_ORIGINS),
):
    if not _origins:
        raise ImproperlyConfigured(f"{_name} must be set in production.")
    if any(not o.startswith("https://") for o in _origins):
        raise ImproperlyConfigured(f"{_name} must only contain https:// origins in production.")

# ----------------------------
# Logging: settlement audit trail at INFO regardless of LOG_LEVEL
# ----------------------------
LOGGING["loggers"]["settlements"]["level"] = "INFO"
LOGGING["loggers"]["django"]["level"] = "ERROR"
