import os
from pathlib import Path

from sfconnect import env_loader
from sfconnect.env_loader import load_env_files


def test_load_env_files_loads_first_existing(tmp_path, monkeypatch):
    env1 = tmp_path / ".env"
    env2 = tmp_path / ".dotenv"
    env1.write_text("SF_CLIENT_ID=dummy\n")
    env2.write_text("SHOULD_NOT_BE_USED=1\n")

    calls = []

    def fake_load_dotenv(path, override=False):
        calls.append((Path(path), override))
        return True

    monkeypatch.setattr(env_loader, "load_dotenv", fake_load_dotenv)

    loaded = load_env_files(candidates=[env1, env2], quiet=True)

    assert loaded == env1
    assert calls == [(env1, False)]


def test_load_env_files_no_existing_files(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(env_loader, "load_dotenv", lambda *a, **kw: calls.append(a))

    assert load_env_files(candidates=[tmp_path / "missing.env"], quiet=True) is None
    assert calls == []


def test_load_env_files_defaults_to_cwd(tmp_path, monkeypatch):
    (tmp_path / ".dotenv").write_text("SF_USERNAME=from-dotenv\n")
    monkeypatch.chdir(tmp_path)

    loaded = load_env_files()

    assert loaded == tmp_path / ".dotenv"
    assert os.environ["SF_USERNAME"] == "from-dotenv"


def test_existing_environment_wins(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("SF_USERNAME=from-file\n")
    monkeypatch.setenv("SF_USERNAME", "from-shell")

    load_env_files(candidates=[tmp_path / ".env"])

    assert os.environ["SF_USERNAME"] == "from-shell"
