from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from scripts.notes_sync import firebase


class InitializeAppTest(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.object(firebase.firebase_admin, "get_app", side_effect=ValueError("no app"))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_missing_key_file(self) -> None:
        with mock.patch.object(firebase.firebase_admin, "initialize_app") as init:
            with self.assertRaises(FileNotFoundError):
                firebase.initialize_app("/nonexistent/key.json")
        init.assert_not_called()

    def test_key_file_is_used_as_certificate(self) -> None:
        with tempfile.NamedTemporaryFile(suffix=".json") as key:
            with mock.patch.object(firebase.credentials, "Certificate") as certificate, mock.patch.object(
                firebase.firebase_admin, "initialize_app"
            ) as init:
                firebase.initialize_app(key.name, "notes-project", app_name="notes")
        certificate.assert_called_once_with(Path(key.name))
        init.assert_called_once_with(certificate.return_value, {"projectId": "notes-project"}, name="notes")

    def test_application_default_without_key(self) -> None:
        with mock.patch.object(firebase.credentials, "ApplicationDefault") as adc, mock.patch.object(
            firebase.firebase_admin, "initialize_app"
        ) as init:
            firebase.initialize_app(None, app_name="notes")
        init.assert_called_once_with(adc.return_value, None, name="notes")


class ExistingAppTest(unittest.TestCase):
    def test_existing_app_is_reused(self) -> None:
        app = object()
        with mock.patch.object(firebase.firebase_admin, "get_app", return_value=app), mock.patch.object(
            firebase.firebase_admin, "initialize_app"
        ) as init:
            self.assertIs(firebase.initialize_app("/nonexistent/key.json"), app)
        init.assert_not_called()


if __name__ == "__main__":
    unittest.main()
