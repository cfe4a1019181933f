"""Basic tests for psqlm."""

import pytest


def test_version():
    """Test version is set."""
    from psqlm import __version__

    assert __version__ == "0.1.0"


def test_public_api():
    """Top-level package exposes the main building blocks."""
    import psqlm

    for name in ("AssistantClient", "PsqlConnector", "Schema", "SchemaIntrospector"):
        assert hasattr(psqlm, name)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
