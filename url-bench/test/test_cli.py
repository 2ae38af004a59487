"""
Basic tests for the command-line entry point.
"""

import unittest
import tempfile
import json
import os
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli import UrlBenchCLI
from configuration import SERVER_PORT, ATTEMPT_TIMEOUT_SECONDS, PROBE_TIMEOUT_SECONDS


class TestConfiguration(unittest.TestCase):
    """Test configuration constants."""

    def test_defaults(self):
        self.assertIsInstance(SERVER_PORT, int)
        self.assertEqual(ATTEMPT_TIMEOUT_SECONDS, 10)
        self.assertEqual(PROBE_TIMEOUT_SECONDS, 5)


class TestRunCommand(unittest.TestCase):
    """Test the run command with spec files."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.cli = UrlBenchCLI()

    def _write_specs(self, specs):
        path = os.path.join(self.tmpdir.name, "specs.json")
        with open(path, "w") as f:
            json.dump(specs, f)
        return path

    def test_run_writes_results(self):
        """Test that results are written in order with wire field names."""
        spec_file = self._write_specs([
            {"url": "not a url", "method": "GET", "req_count": 3, "c_req_count": 1},
            {"url": "http://localhost:1/", "method": "PUT", "req_count": 0, "c_req_count": 2},
        ])
        output = os.path.join(self.tmpdir.name, "results.json")

        exit_code = self.cli.run(["run", "--spec-file", spec_file, "--output", output])

        self.assertEqual(exit_code, 0)
        with open(output) as f:
            results = json.load(f)
        self.assertEqual(len(results), 2)
        self.assertEqual(results[0]["successful_requests"], 0)
        self.assertEqual(results[0]["failed_requests"], 3)
        self.assertIn("Invalid URL", results[0]["logs"])
        self.assertEqual(results[1]["method"], "PUT")
        self.assertEqual(results[1]["failed_requests"], 0)

    def test_invalid_spec_fails(self):
        spec_file = self._write_specs([
            {"url": "http://localhost:1/", "method": "GET", "req_count": 3, "c_req_count": 0},
        ])
        self.assertEqual(self.cli.run(["run", "--spec-file", spec_file]), 1)

    def test_missing_spec_file(self):
        missing = os.path.join(self.tmpdir.name, "nope.json")
        self.assertEqual(self.cli.run(["run", "--spec-file", missing]), 1)

    def test_no_command(self):
        self.assertEqual(self.cli.run([]), 1)

    def test_dispatch_choice(self):
        args = self.cli.parser.parse_args(["run", "--spec-file", "x.json", "--dispatch", "pool"])
        self.assertEqual(args.dispatch, "pool")
        with self.assertRaises(SystemExit):
            self.cli.parser.parse_args(["run", "--spec-file", "x.json", "--dispatch", "bursty"])


if __name__ == '__main__':
    unittest.main()
