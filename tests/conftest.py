import pytest

from stepleague.config import Config


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path_factory, monkeypatch):
    """Keep log files out of the working tree."""
    monkeypatch.setattr(Config, 'LOG_DIR', str(tmp_path_factory.mktemp('logs')))
