"""Firebase Admin wiring for the notes store."""

from __future__ import annotations

import logging
from pathlib import Path

import firebase_admin
from firebase_admin import App, credentials, firestore

LOGGER = logging.getLogger(__name__)


def _credentials(service_account: str | Path | None) -> credentials.Base:
    """Pick the key file when one is given, else Application Default Credentials."""

    if service_account is None:
        LOGGER.debug("No service account key given; using application default credentials")
        return credentials.ApplicationDefault()
    key_path = Path(service_account).expanduser()
    if not key_path.is_file():
        raise FileNotFoundError(f"Service account key not found: {key_path}")
    LOGGER.debug("Using service account key %s", key_path)
    return credentials.Certificate(key_path)


def initialize_app(
    service_account: str | Path | None,
    project_id: str | None = None,
    *,
    app_name: str | None = None,
) -> App:
    """Return the named Firebase app, creating it on first use."""

    name = app_name or firebase_admin._DEFAULT_APP_NAME  # type: ignore[attr-defined]
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        pass
    options = {"projectId": project_id} if project_id else None
    return firebase_admin.initialize_app(_credentials(service_account), options, name=name)


def initialize_firestore(
    service_account: str | Path | None,
    project_id: str | None = None,
    *,
    app_name: str | None = None,
) -> firestore.Client:
    """Firestore client for the notes collection, sharing one app per process."""

    return firestore.client(app=initialize_app(service_account, project_id, app_name=app_name))


__all__ = ["initialize_app", "initialize_firestore"]
