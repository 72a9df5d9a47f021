import os

import pytest


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path, monkeypatch):
    """Keep the user's real configuration and credentials out of the tests.

    ``HOME`` points to an empty directory, the working directory has no
    ``.commitairc`` above it, and provider credentials are removed from
    the environment.
    """
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(work)
    for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.upper().startswith("COMMITAI_"):
            monkeypatch.delenv(name, raising=False)
    yield
