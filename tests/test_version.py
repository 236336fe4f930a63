"""Test version information."""

import buildgate


def test_version() -> None:
    """Test that version is accessible."""
    assert hasattr(buildgate, "__version__")
    assert isinstance(buildgate.__version__, str)
    assert buildgate.__version__ == "0.1.0"
