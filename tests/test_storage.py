import os
import tempfile
import unittest

from neoncgpa.services.storage import LoadStatus, SnapshotStore
from neoncgpa.state.session_state import add_semester, default_session, update_subject


class SnapshotStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, "nested", "neoncgpa.db")
        self.store = SnapshotStore(self.db_path, "cgpa_neon_v1", ("cgpa_v2_data",))

    def tearDown(self):
        self.store.close()
        self.tmp.cleanup()

    def test_missing_snapshot_loads_defaults(self):
        result = self.store.load()
        self.assertIs(result.status, LoadStatus.DEFAULT_MISSING)
        self.assertTrue(result.is_default)
        self.assertEqual(result.session, default_session())

    def test_save_then_load(self):
        session = update_subject(add_semester(default_session()), 2, 4, "grade", "A")
        self.assertTrue(self.store.save(session))

        reopened = SnapshotStore(self.db_path, "cgpa_neon_v1")
        try:
            result = reopened.load()
        finally:
            reopened.close()
        self.assertIs(result.status, LoadStatus.LOADED)
        self.assertEqual(result.session, session)

    def test_save_overwrites(self):
        self.store.save(add_semester(default_session()))
        self.store.save(default_session())
        self.assertEqual(len(self.store.load().session.semesters), 1)

    def test_empty_list_loads_defaults(self):
        self.store.write_raw("[]")
        result = self.store.load()
        self.assertIs(result.status, LoadStatus.DEFAULT_MISSING)
        self.assertEqual(result.session, default_session())

    def test_corrupt_snapshot_loads_defaults(self):
        self.store.write_raw("{broken")
        result = self.store.load()
        self.assertIs(result.status, LoadStatus.DEFAULT_ERROR)
        self.assertIsNotNone(result.error)
        self.assertEqual(result.session, default_session())

    def test_unopenable_store_loads_defaults(self):
        blocker = os.path.join(self.tmp.name, "file")
        with open(blocker, "w") as fh:
            fh.write("x")
        store = SnapshotStore(os.path.join(blocker, "db.sqlite"), "cgpa_neon_v1")
        result = store.load()
        self.assertIs(result.status, LoadStatus.DEFAULT_ERROR)
        self.assertFalse(store.save(default_session()))
        self.assertFalse(store.clear())

    def test_clear_removes_current_and_legacy_keys(self):
        self.store.save(add_semester(default_session()))
        legacy = SnapshotStore(self.db_path, "cgpa_v2_data")
        try:
            legacy.write_raw("[]")
            self.assertTrue(self.store.clear())
            self.assertIsNone(legacy.read_raw())
        finally:
            legacy.close()
        self.assertIsNone(self.store.read_raw())
        self.assertIs(self.store.load().status, LoadStatus.DEFAULT_MISSING)


if __name__ == "__main__":
    unittest.main()
