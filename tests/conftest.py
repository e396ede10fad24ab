import pytest

from cssbaseline import CompatibilityDatabase


@pytest.fixture(scope="session")
def database():
    """The bundled compatibility snapshot, loaded once."""
    return CompatibilityDatabase.default()


def messages(diagnostics):
    """Diagnostics reduced to what a reader of the report sees."""
    return [
        (d.message_id, d.data, (d.range.line, d.range.column, d.range.end_line, d.range.end_column))
        for d in diagnostics
    ]
