import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from http_service.__main__ import main


class CliTests(unittest.TestCase):
    def _run(self, argv, env):
        out, err = io.StringIO(), io.StringIO()
        with mock.patch.dict(os.environ, env, clear=True), redirect_stdout(out), redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_check_ok(self) -> None:
        code, out, err = self._run(["--no-dotenv", "check"], {})
        self.assertEqual(code, 0)
        self.assertIn("configuration ok", out)
        self.assertEqual(err, "")

    def test_check_reports_every_error(self) -> None:
        env = {"LOG_FORMAT": "xml", "SERVER_READ_TIMEOUT": "-5s"}
        code, _, err = self._run(["--no-dotenv", "check"], env)
        self.assertEqual(code, 1)
        lines = err.splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("LOG_FORMAT", lines[0])
        self.assertIn("SERVER_READ_TIMEOUT", lines[1])

    def test_check_reads_dotenv(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dotenv = Path(tmp) / ".env"
            dotenv.write_text("LOG_LEVEL=loud\n", encoding="utf-8")
            code, _, err = self._run(["--dotenv", str(dotenv), "check"], {})
        self.assertEqual(code, 1)
        self.assertIn("LOG_LEVEL", err)

    def test_environment_wins_over_dotenv(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dotenv = Path(tmp) / ".env"
            dotenv.write_text("LOG_LEVEL=loud\n", encoding="utf-8")
            code, _, _ = self._run(["--dotenv", str(dotenv), "check"], {"LOG_LEVEL": "debug"})
        self.assertEqual(code, 0)

    def test_show_prints_effective_config(self) -> None:
        env = {"SERVER_IDLE_TIMEOUT": "90s", "LOG_OUTPUT": "STDERR"}
        with mock.patch("http_service.__main__.init_logging") as init_logging:
            code, out, _ = self._run(["--no-dotenv", "show"], env)
        self.assertEqual(code, 0)
        self.assertIn("server.idle_timeout=1m30s", out.splitlines())
        self.assertIn("log.output=stderr", out.splitlines())
        init_logging.assert_called_once()
        self.assertEqual(init_logging.call_args.args[0].output, "stderr")

    def test_show_falls_back_unless_strict(self) -> None:
        env = {"SERVER_WRITE_TIMEOUT": "never"}
        with mock.patch("http_service.__main__.init_logging"):
            code, out, _ = self._run(["--no-dotenv", "show"], env)
            self.assertEqual(code, 0)
            self.assertIn("server.write_timeout=10s", out.splitlines())

            code, out, err = self._run(["--no-dotenv", "show", "--strict"], env)
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("SERVER_WRITE_TIMEOUT", err)


if __name__ == "__main__":
    unittest.main()
