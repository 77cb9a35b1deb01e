import pytest


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real config file and global git excludes."""
    monkeypatch.setenv("QUICKPROJ_CONFIG", str(tmp_path / "quickproj-config" / "config.toml"))
    monkeypatch.setattr("quickproj.walker.global_excludes_path", lambda: None)
