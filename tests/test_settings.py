from todo_api.settings import get_settings

ENV_VARS = [
    "MONGO_URI",
    "MONGO_DB",
    "MONGO_COLLECTION",
    "MONGO_TIMEOUT_MS",
    "HOST",
    "PORT",
    "SHUTDOWN_TIMEOUT",
    "IDLE_TIMEOUT",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
]


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    s = get_settings()
    assert s.mongo_uri == "mongodb://localhost:27017/"
    assert s.mongo_db == "golang_todo"
    assert s.mongo_collection == "todo"
    assert s.port == 9000
    assert s.shutdown_timeout == 5
    assert s.idle_timeout == 60
    assert s.log_level == "INFO"
    assert s.cors_allow_origins == ["*"]


def test_overrides(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/")
    monkeypatch.setenv("MONGO_DB", "todos")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SHUTDOWN_TIMEOUT", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.example, http://b.example,")
    s = get_settings()
    assert s.mongo_uri == "mongodb://db:27017/"
    assert s.mongo_db == "todos"
    assert s.port == 8080
    assert s.shutdown_timeout == 10
    assert s.log_level == "DEBUG"
    assert s.cors_allow_origins == ["http://a.example", "http://b.example"]


def test_invalid_numbers_fall_back(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("SHUTDOWN_TIMEOUT", "-3")
    s = get_settings()
    assert s.port == 9000
    assert s.shutdown_timeout == 5
