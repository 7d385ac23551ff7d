"""Runs the example scripts and checks their documented output."""

import runpy
from pathlib import Path

import pytest

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_quickstart_output(capsys: pytest.CaptureFixture[str]) -> None:
    """Every '# Output:' line of the quickstart is printed."""
    runpy.run_path(str(EXAMPLES / "quickstart.py"), run_name="__main__")
    printed = capsys.readouterr().out.splitlines()

    expected = [
        "Hello World!",
        "9.5",
        "Decimal('9.50')",
        "Total: $1,234.50",
        "Total: 1.234,50\xa0€",
        "Literal \\${name} and ${unclosed",
        "3 items",
        "2024-07-01 08:00:00.000",
        "Hi !",
        "NULL_DEREFERENCE",
    ]
    for line in expected:
        assert line in printed
