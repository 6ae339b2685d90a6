"""Unit tests for the pacman output parsers."""

import logging

import pytest
from pacman_exporter.models.package import IgnoredUpgrade, InstalledPackage, UpgradeCandidate
from pacman_exporter.parsers.pacman import iter_complete_lines, parse_installed, parse_upgrades


class TestIterCompleteLines:
    """Tests for newline-terminated line splitting."""

    def test_yields_terminated_lines(self) -> None:
        """Each newline-terminated line is yielded without its newline."""
        assert list(iter_complete_lines(b"a b\nc d\n")) == ["a b", "c d"]

    def test_drops_trailing_partial_line(self) -> None:
        """A final line without newline is dropped."""
        assert list(iter_complete_lines(b"a b\nc d")) == ["a b"]

    def test_empty_input(self) -> None:
        """Empty input yields nothing."""
        assert list(iter_complete_lines(b"")) == []

    def test_no_newline_at_all(self) -> None:
        """Input with no newline is one partial line and yields nothing."""
        assert list(iter_complete_lines(b"bash 5.1.0-1")) == []

    def test_does_not_trim_carriage_return(self) -> None:
        """Carriage returns are kept as part of the line."""
        assert list(iter_complete_lines(b"a b\r\n")) == ["a b\r"]

    def test_undecodable_bytes_are_replaced(self) -> None:
        """Invalid UTF-8 does not raise."""
        lines = list(iter_complete_lines(b"caf\xe9 1.0\n"))
        assert lines == ["caf\ufffd 1.0"]


class TestParseInstalled:
    """Tests for parse_installed."""

    def test_parses_example(self) -> None:
        """Two valid lines produce two records in order."""
        result = parse_installed(b"bash 5.1.0-1\nvim 9.0.1-2\n")

        assert result == [
            InstalledPackage(name="bash", installed_version="5.1.0-1"),
            InstalledPackage(name="vim", installed_version="9.0.1-2"),
        ]

    def test_parses_fixture(self, mock_installed_output: bytes) -> None:
        """All fixture lines are decoded in input order."""
        result = parse_installed(mock_installed_output)

        assert [p.name for p in result] == ["bash", "glibc", "linux", "vim"]

    def test_empty_input(self) -> None:
        """Empty output produces no records."""
        assert parse_installed(b"") == []

    @pytest.mark.parametrize("line", [b"", b"bash", b"bash 5.1.0-1 extra"])
    def test_wrong_field_count_is_skipped(
        self, line: bytes, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Lines with 0, 1, or 3+ fields are skipped without affecting others."""
        data = b"zsh 5.9-1\n" + line + b"\nvim 9.0.1-2\n"

        with caplog.at_level(logging.WARNING):
            result = parse_installed(data)

        assert [p.name for p in result] == ["zsh", "vim"]
        assert "Wrong number of items" in caplog.text

    def test_trailing_partial_line_is_not_parsed(self) -> None:
        """A valid-looking last line without newline is dropped silently."""
        result = parse_installed(b"bash 5.1.0-1\nvim 9.0.1-2")

        assert result == [InstalledPackage(name="bash", installed_version="5.1.0-1")]

    def test_empty_field_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """A two-field line with an empty name or version is skipped."""
        with caplog.at_level(logging.WARNING):
            result = parse_installed(b" 5.1.0-1\nbash \nvim 9.0.1-2\n")

        assert result == [InstalledPackage(name="vim", installed_version="9.0.1-2")]
        assert len(caplog.records) == 2

    def test_does_not_deduplicate(self) -> None:
        """Repeated lines are reported as-is."""
        result = parse_installed(b"bash 5.1.0-1\nbash 5.1.0-1\n")

        assert len(result) == 2

    def test_is_idempotent(self, mock_installed_output: bytes) -> None:
        """Parsing the same input twice yields equal records."""
        assert parse_installed(mock_installed_output) == parse_installed(mock_installed_output)


class TestParseUpgrades:
    """Tests for parse_upgrades."""

    def test_plain_upgrade(self) -> None:
        """An arrow line yields one candidate and no ignored record."""
        result = parse_upgrades(b"glibc 2.35-1 -> 2.36-1\n")

        assert result.upgrades == (UpgradeCandidate("glibc", "2.35-1", "2.36-1"),)
        assert result.ignored == ()

    def test_ignored_upgrade(self) -> None:
        """An [ignored] line yields both a candidate and an ignored record."""
        result = parse_upgrades(b"linux 5.10-1 -> 5.15-1 [ignored]\n")

        assert result.upgrades == (UpgradeCandidate("linux", "5.10-1", "5.15-1"),)
        assert result.ignored == (IgnoredUpgrade("linux", "5.10-1", "5.15-1"),)

    def test_wrong_arrow_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """A wrong separator token yields no records and one warning."""
        with caplog.at_level(logging.WARNING):
            result = parse_upgrades(b"foo 1.0 => 2.0\n")

        assert result.upgrades == ()
        assert result.ignored == ()
        assert len(caplog.records) == 1
        assert '"=>"' in caplog.text
        assert "foo 1.0 => 2.0" in caplog.text

    def test_unknown_marker_keeps_candidate(self, caplog: pytest.LogCaptureFixture) -> None:
        """An unrecognized fifth field keeps the candidate but no ignored record."""
        with caplog.at_level(logging.WARNING):
            result = parse_upgrades(b"bar 1.0 -> 2.0 [held]\n")

        assert result.upgrades == (UpgradeCandidate("bar", "1.0", "2.0"),)
        assert result.ignored == ()
        assert "Unknown format" in caplog.text

    def test_extra_fields_after_marker_keep_candidate(self) -> None:
        """Six or more fields are reported as unknown format, candidate only."""
        result = parse_upgrades(b"bar 1.0 -> 2.0 [ignored] x\n")

        assert len(result.upgrades) == 1
        assert result.ignored == ()

    @pytest.mark.parametrize("line", [b"", b"foo", b"foo 1.0", b"foo 1.0 ->"])
    def test_short_line_is_skipped(self, line: bytes, caplog: pytest.LogCaptureFixture) -> None:
        """Lines too short to hold an upgrade are skipped instead of raising."""
        data = line + b"\nglibc 2.35-1 -> 2.36-1\n"

        with caplog.at_level(logging.WARNING):
            result = parse_upgrades(data)

        assert [p.name for p in result.upgrades] == ["glibc"]
        assert "Too few items" in caplog.text

    def test_empty_upgrade_version_is_skipped(self) -> None:
        """A doubled space leaving an empty version field is skipped."""
        result = parse_upgrades(b"foo 1.0 ->  2.0\n")

        assert result.upgrades == ()

    def test_malformed_lines_do_not_affect_others(
        self, mock_malformed_upgrade_output: bytes
    ) -> None:
        """Only the well-formed lines survive, in order."""
        result = parse_upgrades(mock_malformed_upgrade_output)

        assert [p.name for p in result.upgrades] == ["glibc", "bar"]
        assert result.ignored == ()

    def test_fixture_order_preserved(self, mock_upgrade_output: bytes) -> None:
        """Candidates and ignored records keep input order."""
        result = parse_upgrades(mock_upgrade_output)

        assert [p.name for p in result.upgrades] == ["glibc", "linux", "vim"]
        assert [p.name for p in result.ignored] == ["linux"]

    def test_trailing_partial_line_is_not_parsed(self) -> None:
        """A last line without newline is dropped even if it is valid."""
        result = parse_upgrades(b"glibc 2.35-1 -> 2.36-1\nlinux 5.10-1 -> 5.15-1 [ignored]")

        assert len(result.upgrades) == 1
        assert result.ignored == ()

    def test_is_idempotent(self, mock_upgrade_output: bytes) -> None:
        """Parsing the same input twice yields equal records."""
        assert parse_upgrades(mock_upgrade_output) == parse_upgrades(mock_upgrade_output)
