"""Unit tests for PacmanReader.

Tests for the pacman snapshot reader implementation.
"""

import logging
import subprocess
from unittest.mock import patch

import pytest
from pacman_exporter.models.snapshot import QueryKind
from pacman_exporter.scanners.pacman import DEFAULT_PACMAN_PATH, PacmanReader
from pacman_exporter.utils.shell import CommandResult


class TestPacmanReader:
    """Tests for PacmanReader class."""

    @pytest.fixture
    def reader(self) -> PacmanReader:
        """Create PacmanReader instance."""
        return PacmanReader(timeout=5.0)

    def test_defaults(self) -> None:
        """Reader uses /usr/bin/pacman by default."""
        assert PacmanReader().binary == DEFAULT_PACMAN_PATH

    def test_is_available(self, reader: PacmanReader) -> None:
        """is_available checks the configured binary."""
        with patch("pacman_exporter.scanners.pacman.command_exists") as mock_exists:
            mock_exists.return_value = True
            assert reader.is_available() is True
            mock_exists.assert_called_once_with(DEFAULT_PACMAN_PATH)

    def test_read_installed_runs_query(
        self, reader: PacmanReader, mock_installed_output: bytes
    ) -> None:
        """read_installed_snapshot runs pacman -Q with the timeout."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout=mock_installed_output, stderr="", returncode=0
            )

            snapshot = reader.read_installed_snapshot()

        mock_run.assert_called_once_with([DEFAULT_PACMAN_PATH, "-Q"], timeout=5.0)
        assert snapshot.kind == QueryKind.INSTALLED
        assert snapshot.success is True
        assert snapshot.output == mock_installed_output

    def test_read_upgrades_runs_query(
        self, reader: PacmanReader, mock_upgrade_output: bytes
    ) -> None:
        """read_upgrade_snapshot runs pacman -Qu."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout=mock_upgrade_output, stderr="", returncode=0
            )

            snapshot = reader.read_upgrade_snapshot()

        mock_run.assert_called_once_with([DEFAULT_PACMAN_PATH, "-Qu"], timeout=5.0)
        assert snapshot.kind == QueryKind.UPGRADES
        assert snapshot.output == mock_upgrade_output

    def test_no_upgrades_is_success(self, reader: PacmanReader) -> None:
        """pacman -Qu exiting 1 with no output means nothing to upgrade."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout=b"", stderr="", returncode=1)

            snapshot = reader.read_upgrade_snapshot()

        assert snapshot.success is True
        assert snapshot.output == b""

    def test_installed_exit_one_is_failure(self, reader: PacmanReader) -> None:
        """Exit status 1 is only tolerated for the upgrade query."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout=b"", stderr="", returncode=1)

            snapshot = reader.read_installed_snapshot()

        assert snapshot.success is False
        assert "exited with status 1" in (snapshot.error or "")

    def test_nonzero_exit_keeps_partial_output(
        self, reader: PacmanReader, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing query keeps its stdout and records stderr in the error."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout=b"bash 5.1.0-1\n",
                stderr="error: could not open database\n",
                returncode=1,
            )

            with caplog.at_level(logging.WARNING):
                snapshot = reader.read_installed_snapshot()

        assert snapshot.success is False
        assert snapshot.output == b"bash 5.1.0-1\n"
        assert "could not open database" in (snapshot.error or "")
        assert "failed" in caplog.text

    def test_missing_binary_degrades_to_empty(
        self, reader: PacmanReader, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A binary that cannot be started yields an empty failed snapshot."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.side_effect = FileNotFoundError("No such file or directory")

            with caplog.at_level(logging.WARNING):
                snapshot = reader.read_installed_snapshot()

        assert snapshot.success is False
        assert snapshot.output == b""
        assert "could not be started" in (snapshot.error or "")
        assert "Cannot query installed packages" in caplog.text

    def test_timeout_degrades_to_empty(self, reader: PacmanReader) -> None:
        """A query exceeding the timeout yields an empty failed snapshot."""
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="pacman", timeout=5.0)

            snapshot = reader.read_upgrade_snapshot()

        assert snapshot.success is False
        assert snapshot.output == b""
        assert "timed out" in (snapshot.error or "")

    def test_custom_binary(self) -> None:
        """A custom binary path is used for both queries."""
        reader = PacmanReader(binary="/opt/pacman", timeout=None)
        with patch("pacman_exporter.scanners.pacman.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout=b"", stderr="", returncode=0)

            reader.read_installed_snapshot()
            reader.read_upgrade_snapshot()

        assert [c.args[0][0] for c in mock_run.call_args_list] == ["/opt/pacman", "/opt/pacman"]
