import os
import logging
import tempfile
import unittest

from fabmsp.common.errors import ArtifactNotFoundError
from fabmsp.crypto.selector import find_newest, newest_artifact, list_dir
from fabmsp.tests.unit.fixtures import write_file, BASE_TIME


class TestSelector(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.folder = os.path.join(self.tmp.name, "signcerts")
        os.makedirs(self.folder)

    def tearDown(self):
        self.tmp.cleanup()

    def test_newest_by_modification_time(self):
        write_file(os.path.join(self.folder, "a.pem"), "a", BASE_TIME + 100)
        write_file(os.path.join(self.folder, "b.pem"), "b", BASE_TIME + 300)
        write_file(os.path.join(self.folder, "c.pem"), "c", BASE_TIME + 200)

        artifact = newest_artifact(self.folder)
        assert artifact.name == "b.pem"
        assert artifact.path == os.path.join(self.folder, "b.pem")

    def test_stale_duplicate_not_selected(self):
        write_file(os.path.join(self.folder, "A_old.pem"), "old", BASE_TIME)
        write_file(os.path.join(self.folder, "A.pem"), "new", BASE_TIME + 60)

        assert newest_artifact(self.folder).name == "A.pem"

    def test_tie_is_stable(self):
        for name in ["z.pem", "m.pem", "k.pem"]:
            write_file(os.path.join(self.folder, name), name, BASE_TIME)

        names = {newest_artifact(self.folder).name for _ in range(5)}
        assert names == {"k.pem"}

    def test_subdirectories_ignored(self):
        write_file(os.path.join(self.folder, "cert.pem"), "cert", BASE_TIME)
        os.makedirs(os.path.join(self.folder, "nested"))
        os.utime(os.path.join(self.folder, "nested"), (BASE_TIME + 500, BASE_TIME + 500))

        assert newest_artifact(self.folder).name == "cert.pem"

    def test_empty_folder(self):
        assert find_newest(self.folder) is None

        with self.assertRaises(ArtifactNotFoundError) as ctx:
            newest_artifact(self.folder)
        assert ctx.exception.folder == self.folder
        assert self.folder in str(ctx.exception)

    def test_missing_folder_lists_empty(self):
        missing = os.path.join(self.tmp.name, "missing")
        assert list_dir(missing) == []
        assert find_newest(missing) is None


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    unittest.main()
