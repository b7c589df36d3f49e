#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from vardump.options import configure


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_options():
    """Restore module-wide default options around every test."""
    configure(preset="default")
    yield
    configure(preset="default")


@pytest.fixture
def no_format_env(monkeypatch):
    """Remove environment variables driving output format detection."""
    for name in ("VARDUMP_FORMAT", "NO_COLOR", "TERM"):
        monkeypatch.delenv(name, raising=False)
