# File: tests/conftest.py

import pytest
import os
import sys
import json
import stat
import tempfile
import textwrap
from pathlib import Path

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Force a throwaway SQLite database before anything reads the settings
os.environ.setdefault("USE_SQLITE", "true")
os.environ.setdefault("SQLITE_PATH", str(Path(tempfile.mkdtemp(prefix="scribe_tests_")) / "scribe_test.db"))

import sqlalchemy
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

from scribe.core.config.settings import settings
from scribe.core.database.connection import engine, init_db


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures the DB exists and every table is created.
    """
    if not database_exists(engine.url):
        create_database(engine.url)

    init_db()

    yield


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    with engine.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(engine.url)

        inspector = sqlalchemy.inspect(engine)
        table_names = inspector.get_table_names()

        if table_names:
            if is_sqlite:
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield


# --- Fake whisper CLI ---
# Behaviour is picked per test through FAKE_WHISPER_* environment variables,
# which the child process inherits. Every call is appended to FAKE_WHISPER_LOG.

FAKE_WHISPER_SOURCE = textwrap.dedent('''
    import json
    import os
    import sys
    import time
    from pathlib import Path

    args = sys.argv[1:]
    if "--help" in args:
        print("usage: whisper [options] audio [audio ...]")
        sys.exit(int(os.environ.get("FAKE_WHISPER_HELP_EXIT", "0")))

    out_dir = Path(args[args.index("--output_dir") + 1])
    log_path = os.environ.get("FAKE_WHISPER_LOG")
    if log_path:
        with open(log_path, "a", encoding="utf-8") as log:
            log.write(json.dumps({"argv": args, "output_dir": str(out_dir)}) + "\\n")

    audio = Path(args[0])
    base = os.path.splitext(audio.name)[0]
    mode = os.environ.get("FAKE_WHISPER_MODE", "txt")
    if "broken" in audio.name:
        mode = "fail"

    document = {
        "text": " Hello from JSON.",
        "language": "en",
        "duration": 4.2,
        "segments": [
            {"id": 0, "seek": 0, "start": 0.0, "end": 2.0, "text": " Hello"},
            {"id": 1, "seek": 0, "start": 2.0, "end": 4.2, "text": " from JSON.  "},
        ],
    }

    def write_txt():
        (out_dir / (base + ".txt")).write_text(os.environ.get("FAKE_WHISPER_TEXT", "hello world"), encoding="utf-8")

    if mode == "fail":
        sys.stderr.write("RuntimeError: Failed to load audio: unsupported format\\n")
        sys.exit(2)
    if mode == "sleep":
        time.sleep(float(os.environ.get("FAKE_WHISPER_SLEEP", "30")))
        write_txt()
    elif mode == "txt":
        write_txt()
    elif mode == "json":
        (out_dir / (base + ".json")).write_text(json.dumps(document), encoding="utf-8")
    elif mode == "both":
        write_txt()
        (out_dir / (base + ".json")).write_text(json.dumps(document), encoding="utf-8")
    elif mode == "badjson":
        write_txt()
        (out_dir / (base + ".json")).write_text("{not valid json", encoding="utf-8")
    elif mode == "none":
        pass
    sys.exit(0)
''')


class FakeWhisper:
    def __init__(self, binary: Path, log_path: Path):
        self.binary = str(binary)
        self.log_path = log_path

    def calls(self):
        if not self.log_path.exists():
            return []
        return [json.loads(line) for line in self.log_path.read_text(encoding="utf-8").splitlines() if line]


@pytest.fixture
def fake_whisper(tmp_path, monkeypatch):
    """
    Installs a scriptable stand-in for the whisper CLI and points settings at it.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    source = bin_dir / "fake_whisper.py"
    source.write_text(FAKE_WHISPER_SOURCE, encoding="utf-8")

    # exec keeps a single process, so terminate() hits the interpreter itself
    script = bin_dir / "whisper"
    script.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{source}" "$@"\n', encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log_path = tmp_path / "whisper_calls.jsonl"
    monkeypatch.setenv("FAKE_WHISPER_LOG", str(log_path))
    monkeypatch.setattr(settings, "WHISPER_BINARY", str(script))

    return FakeWhisper(script, log_path)


@pytest.fixture
def audio_file(tmp_path):
    """An input file; the fake CLI never decodes it, only the name matters."""
    path = tmp_path / "sample.mp3"
    path.write_bytes(b"FAKE_AUDIO")
    return path
