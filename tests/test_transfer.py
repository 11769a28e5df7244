import json
import tempfile
import unittest
from pathlib import Path

from neoncgpa.services.snapshot import SnapshotError, dump_session, load_session
from neoncgpa.services.transfer import export_session, import_session, read_import, write_export
from neoncgpa.state.session_state import add_semester, default_session, remove_subject, update_subject


def _sample_session():
    session = add_semester(default_session())
    session = update_subject(session, 1, 1, "name", "Maths")
    session = update_subject(session, 1, 1, "grade", "A+")
    session = update_subject(session, 1, 2, "credits", "1.5")
    session = update_subject(session, 1, 2, "marks", 64)
    session = update_subject(session, 2, 4, "is_fr", True)
    return remove_subject(session, 1, 3)


class SnapshotTests(unittest.TestCase):
    def test_wire_format(self):
        payload = json.loads(dump_session(default_session()))
        self.assertEqual(len(payload), 1)
        self.assertEqual(payload[0]["id"], 1)
        self.assertEqual(
            payload[0]["subjects"][0],
            {"id": 1, "name": "", "credits": 3, "grade": "", "marks": "", "isFR": False},
        )

    def test_integer_numbers_are_exported_as_entered(self):
        text = dump_session(update_subject(default_session(), 1, 2, "marks", 88))
        self.assertIn('"credits": 3,', text)
        self.assertIn('"marks": 88,', text)
        self.assertNotIn("3.0", text)
        self.assertNotIn("88.0", text)

    def test_fractional_numbers_survive_round_trip(self):
        session = update_subject(default_session(), 1, 1, "credits", 1.5)
        restored = import_session(export_session(session))
        self.assertEqual(restored.find_subject(1, 1).credits, 1.5)
        self.assertIn('"credits": 1.5,', export_session(restored))

    def test_null_fields_load_as_blank(self):
        raw = '[{"id": 1, "subjects": [{"id": 1, "name": null, "grade": null, "marks": null, "isFR": null, "credits": 4}]}]'
        subject = import_session(raw).find_subject(1, 1)
        self.assertEqual(subject.name, "")
        self.assertEqual(subject.grade, "")
        self.assertIsNone(subject.marks)
        self.assertFalse(subject.is_fr)
        self.assertEqual(subject.credits, 4)

    def test_export_is_indented(self):
        text = export_session(default_session())
        self.assertIn('\n  {\n    "id": 1', text)

    def test_export_import_reproduces_session(self):
        session = _sample_session()
        restored = import_session(export_session(session))
        self.assertEqual(restored, session)

    def test_import_accepts_original_files(self):
        raw = json.dumps(
            [
                {"id": 3, "subjects": [{"id": 7, "name": "Chem", "credits": "4", "grade": "B", "marks": "", "isFR": False}]},
                {"id": 5, "subjects": []},
            ]
        )
        session = import_session(raw)
        self.assertEqual([s.id for s in session.semesters], [3, 5])
        subject = session.find_subject(3, 7)
        self.assertEqual(subject.credits, "4")
        self.assertEqual(subject.grade, "B")
        self.assertEqual(session.next_semester_id, 6)
        self.assertEqual(session.next_subject_id, 8)

    def test_missing_fields_take_defaults(self):
        session = load_session('[{"id": 1, "subjects": [{"id": 2}]}]')
        subject = session.find_subject(1, 2)
        self.assertEqual(subject.credits, 3)
        self.assertFalse(subject.is_fr)

    def test_invalid_content(self):
        for raw in ("not json", "{}", '{"id": 1}', '[{"subjects": []}]', "[1, 2]"):
            with self.assertRaises(SnapshotError, msg=raw):
                import_session(raw)

    def test_file_round_trip(self):
        session = _sample_session()
        with tempfile.TemporaryDirectory() as tmp:
            path = write_export(session, Path(tmp) / "neon_cgpa_backup.json")
            self.assertEqual(read_import(path), session)

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SnapshotError):
                read_import(Path(tmp) / "missing.json")


if __name__ == "__main__":
    unittest.main()
