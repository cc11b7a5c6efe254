import os
import sys
import unittest
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import start_server
from api.main import app


class ParseArgsTest(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            args = start_server.parse_args([])
        self.assertEqual(args.host, "0.0.0.0")
        self.assertEqual(args.port, 8080)
        self.assertEqual(args.threads, 4)
        self.assertEqual(args.log_level, "info")
        self.assertIsNone(args.event_log)
        self.assertEqual(args.max_events, 1000)

    def test_environment_overrides(self):
        env = {"API_PORT": "9001", "API_THREADS": "8", "LOG_LEVEL": "DEBUG"}
        with mock.patch.dict(os.environ, env, clear=True):
            args = start_server.parse_args([])
        self.assertEqual(args.port, 9001)
        self.assertEqual(args.threads, 8)
        self.assertEqual(args.log_level, "debug")

    def test_flags_override_environment(self):
        with mock.patch.dict(os.environ, {"API_PORT": "9001"}, clear=True):
            args = start_server.parse_args(["--port", "9100", "--threads", "2"])
        self.assertEqual(args.port, 9100)
        self.assertEqual(args.threads, 2)

    def test_rejects_zero_threads(self):
        with self.assertRaises(SystemExit):
            start_server.parse_args(["--threads", "0"])

    def test_rejects_invalid_thread_count_from_environment(self):
        with mock.patch.dict(os.environ, {"API_THREADS": "0"}, clear=True), \
                mock.patch("sys.stderr"):
            with self.assertRaises(SystemExit) as ctx:
                start_server.parse_args([])
        self.assertEqual(ctx.exception.code, 2)

    def test_rejects_unknown_log_level_from_environment(self):
        with mock.patch.dict(os.environ, {"LOG_LEVEL": "verbose"}, clear=True), \
                mock.patch("sys.stderr"):
            with self.assertRaises(SystemExit) as ctx:
                start_server.parse_args([])
        self.assertEqual(ctx.exception.code, 2)

    def test_log_level_flag_is_case_insensitive(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            args = start_server.parse_args(["--log-level", "WARNING"])
        self.assertEqual(args.log_level, "warning")


class MainTest(unittest.TestCase):
    def test_main_runs_single_process_server(self):
        with mock.patch.dict(os.environ, {}, clear=True), \
                mock.patch.object(start_server.uvicorn, "run") as run:
            start_server.main(["--port", "9200", "--threads", "4"])
        run.assert_called_once_with(app, host="0.0.0.0", port=9200, log_level="info")
        self.assertEqual(app.state.worker_threads, 4)
        self.assertEqual(app.state.max_events, 1000)
        self.assertIsNone(app.state.event_log_path)


if __name__ == "__main__":
    unittest.main()
