import os
import unittest
from unittest import mock

from watchdog.events import DirModifiedEvent, FileModifiedEvent

from backend.config import CONFIG_LOCAL_PATH, CONFIG_PATH
from backend.main import ConfigEventHandler


class TestConfigEventHandler(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("backend.main.reload_settings")
        self.reload = patcher.start()
        self.addCleanup(patcher.stop)
        self.handler = ConfigEventHandler()

    def test_reloads_for_config_files(self):
        self.handler.on_modified(FileModifiedEvent(CONFIG_PATH))
        self.handler.on_modified(FileModifiedEvent(CONFIG_LOCAL_PATH))
        self.assertEqual(self.reload.call_count, 2)

    def test_ignores_directories_and_other_files(self):
        self.handler.on_modified(DirModifiedEvent(os.path.dirname(CONFIG_PATH)))
        self.handler.on_modified(FileModifiedEvent(os.path.join(os.path.dirname(CONFIG_PATH), "main.py")))
        self.reload.assert_not_called()


if __name__ == "__main__":
    unittest.main()
