import pytest
from fastapi.testclient import TestClient

from gamedev_hub.core.config import ConfigError, build_settings
from gamedev_hub.database import SchemaError, Store
from gamedev_hub.main import create_app

REQUIRED = ("CLIENT_ID", "CLIENT_SECRET", "SESSION_SECRET")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_required_settings_fail_fast(clean_env):
    with pytest.raises(ConfigError) as exc:
        build_settings(env_file=None)
    for name in REQUIRED:
        assert name in str(exc.value)


def test_blank_secret_is_rejected(clean_env):
    clean_env.setenv("CLIENT_ID", "id")
    clean_env.setenv("CLIENT_SECRET", "secret")
    clean_env.setenv("SESSION_SECRET", "   ")
    with pytest.raises(ConfigError, match="SESSION_SECRET"):
        build_settings(env_file=None)


def test_create_app_without_config_aborts(clean_env):
    with pytest.raises(ConfigError):
        create_app()


def test_settings_from_env_and_defaults(clean_env):
    clean_env.setenv("CLIENT_ID", "id")
    clean_env.setenv("CLIENT_SECRET", "secret")
    clean_env.setenv("SESSION_SECRET", "s3")
    clean_env.setenv("DATABASE_URL", "postgres://u:p@db/gdh")

    s = build_settings(env_file=None)

    assert s.CLIENT_ID == "id"
    assert s.DATABASE_URL == "postgresql://u:p@db/gdh"
    assert s.GUILD_ID == "489531295848726528"
    assert s.OAUTH_AUTH_STYLE == "form"
    assert s.SCHEMA_PATH.name == "schema.sql"
    assert s.SCHEMA_PATH.exists()


def test_settings_from_dotenv_file(clean_env, tmp_path):
    env = tmp_path / "custom.env"
    env.write_text("CLIENT_ID=file-id\nCLIENT_SECRET=file-secret\nSESSION_SECRET=file-session\n")

    s = build_settings(env_file=str(env))

    assert s.CLIENT_ID == "file-id"
    assert s.SESSION_SECRET == "file-session"


def test_unreadable_schema_aborts(tmp_path):
    store = Store(f"sqlite:///{tmp_path / 'x.db'}", tmp_path / "missing.sql")
    with pytest.raises(SchemaError):
        store.open()


def test_schema_without_tables_aborts(tmp_path):
    schema = tmp_path / "empty.sql"
    schema.write_text("CREATE TABLE IF NOT EXISTS something (id INTEGER);")
    store = Store(f"sqlite:///{tmp_path / 'x.db'}", schema)
    with pytest.raises(SchemaError, match="users"):
        store.open()


def test_broken_schema_statement_aborts_and_releases_engine(tmp_path):
    schema = tmp_path / "broken.sql"
    schema.write_text("CREATE TABLE IF NOT EXISTS users (id INTEGER);\nCREATE TABLE oops (;")
    store = Store(f"sqlite:///{tmp_path / 'x.db'}", schema)

    with pytest.raises(SchemaError, match="Cannot apply schema"):
        store.open()
    assert store.engine is None


def test_schema_is_idempotent(settings):
    Store(settings.DATABASE_URL, settings.SCHEMA_PATH).open().close()
    store = Store(settings.DATABASE_URL, settings.SCHEMA_PATH).open()
    store.close()


def test_app_startup_fails_on_bad_schema(settings, http_client, tmp_path):
    bad = settings.model_copy(update={"SCHEMA_PATH": tmp_path / "nope.sql"})
    app = create_app(bad, http_client=http_client)
    with pytest.raises(SchemaError):
        with TestClient(app):
            pass
