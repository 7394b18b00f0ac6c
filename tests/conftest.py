import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def passthrough():
    """Markup reformatter that returns its input unchanged."""

    def _reformat(text, options):
        return text

    return _reformat
