"""
Basic sanity tests for package setup
"""

import fluxline


def test_version():
    """Test that version is defined"""
    assert hasattr(fluxline, "__version__")
    assert fluxline.__version__ == "0.1.0"


def test_import():
    """Test that package can be imported"""
    import fluxline.cli
    import fluxline.core
    import fluxline.operators
    import fluxline.protocol
    import fluxline.sql
    import fluxline.utils

    assert fluxline is not None


def test_public_api():
    """Test that the main entry points are exported"""
    for name in ("decode", "encode", "interpret", "aggregate", "Session"):
        assert hasattr(fluxline, name)
