#!/usr/bin/env python3
"""Import, list, and edit notes stored in the Firestore ``tasks`` collection.

Usage examples::

    python scripts/sync_notes.py --service-account key.json bootstrap
    python scripts/sync_notes.py --service-account key.json list --json
    python scripts/sync_notes.py rename 8mQk2 "Groceries"
    python scripts/sync_notes.py delete 8mQk2

``bootstrap`` imports the notes served by the notes API the first time it runs
and does nothing afterwards. Settings fall back to the environment variables
read by ``Settings.from_env`` when a flag is omitted.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable

from firebase_admin import exceptions as firebase_exceptions
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from scripts.notes_sync import (
    BootstrapOutcome,
    Bootstrapper,
    EmptyTitle,
    Note,
    NoteService,
    NoteStore,
    NotesError,
    Settings,
    SyncFlag,
    WebService,
    initialize_firestore,
    normalize_title,
)


FAILED_OUTCOMES = (
    BootstrapOutcome.FETCH_FAILED,
    BootstrapOutcome.STORE_UNAVAILABLE,
    BootstrapOutcome.PARTIAL,
)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--service-account",
        "--credentials",
        dest="service_account",
        type=Path,
        help="Path to the Firebase service account JSON key (default: GOOGLE_APPLICATION_CREDENTIALS)",
    )
    parser.add_argument(
        "--project-id",
        dest="project_id",
        help="Override the Firebase project ID if the key omits it",
    )
    parser.add_argument(
        "--collection",
        help="Firestore collection holding the notes (default: NOTES_COLLECTION or 'tasks')",
    )
    parser.add_argument(
        "--state-file",
        dest="state_file",
        type=Path,
        help="Where the one-time import flag is stored (default: NOTES_STATE_FILE)",
    )
    parser.add_argument(
        "--api-url",
        dest="api_url",
        help="Notes API endpoint used by bootstrap (default: NOTES_API_URL)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log request and response details",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("bootstrap", help="Import the API notes if that has not happened yet")
    list_parser = commands.add_parser("list", help="Print the stored notes")
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON instead of formatted text",
    )
    commands.add_parser("refresh", help="Reload the notes and print how many were found")
    rename = commands.add_parser("rename", help="Change the title of a stored note")
    rename.add_argument("note_id", help="Firestore document id of the note")
    rename.add_argument("title", help="New title")
    delete = commands.add_parser("delete", help="Delete a stored note")
    delete.add_argument("note_id", help="Firestore document id of the note")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.service_account is not None:
        settings.service_account = args.service_account
    if args.project_id:
        settings.project_id = args.project_id
    if args.collection:
        settings.collection = args.collection
    if args.state_file is not None:
        settings.state_file = args.state_file
    if args.api_url:
        settings.api_url = args.api_url
    return settings


def _note_to_dict(note: Note) -> dict[str, Any]:
    payload = asdict(note)
    payload["identifier"] = note.identifier
    return payload


def _print_text(notes: list[Note]) -> None:
    if not notes:
        print("No notes yet.")
        return
    for note in notes:
        print(f"{note.identifier}  {note.title}")
        print(f"    nid={note.nid} image={note.image}")


def _run(args: argparse.Namespace, settings: Settings) -> int:
    client = initialize_firestore(settings.service_account, settings.project_id)
    store = NoteStore(client, settings.collection)

    if args.command == "bootstrap":
        service = NoteService(settings.api_url, WebService(timeout=settings.timeout))
        outcome = Bootstrapper(SyncFlag(settings.state_file), service, store).run_once()
        print(f"Bootstrap: {outcome.value} ({len(store.notes)} notes stored)")
        return 2 if outcome in FAILED_OUTCOMES else 0

    if args.command == "list":
        if store.last_error is not None:
            return 2
        if args.json:
            json.dump([_note_to_dict(note) for note in store.notes], sys.stdout, indent=2, sort_keys=True)
            sys.stdout.write("\n")
        else:
            _print_text(store.notes)
        return 0

    if args.command == "refresh":
        notes = store.fetch_all()
        if store.last_error is not None:
            return 2
        print(f"Loaded {len(notes)} notes.")
        return 0

    if args.command == "rename":
        try:
            title = normalize_title(args.title)
        except EmptyTitle as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        note = store.get(args.note_id)
        if note is None:
            return 2
        error = store.update_title(note, title)
        if error is not None:
            return 2
        print(f"Renamed {note.identifier} to {title!r}.")
        return 0

    if args.command == "delete":
        error = store.delete(args.note_id)
        if error is not None:
            return 2
        print(f"Deleted {args.note_id}.")
        return 0

    raise NotesError(f"Unknown command: {args.command}")


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = resolve_settings(args)
        return _run(args, settings)
    except (FileNotFoundError, ValueError, GoogleAuthError) as exc:
        logging.error("%s", exc)
        return 1
    except (firebase_exceptions.FirebaseError, GoogleAPIError) as exc:
        logging.error("Firebase error: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
