"""Unit tests for the Reporter."""

from capsim.reporting import Reporter


def test_warnings_are_collected_and_logged(caplog):
    reporter = Reporter()
    with caplog.at_level("WARNING", logger="capsim"):
        reporter.report_warning("Class 'Workers' has no money")

    assert reporter.warnings == ["Class 'Workers' has no money"]
    assert reporter.fatals == []
    assert "has no money" in caplog.text


def test_fatals_are_collected_and_logged(caplog):
    reporter = Reporter()
    with caplog.at_level("ERROR", logger="capsim"):
        reporter.report_fatal("store is gone")

    assert reporter.fatals == ["store is gone"]
    assert "store is gone" in caplog.text


def test_clear():
    reporter = Reporter()
    reporter.report_warning("a")
    reporter.report_fatal("b")
    reporter.clear()
    assert reporter.warnings == [] and reporter.fatals == []
