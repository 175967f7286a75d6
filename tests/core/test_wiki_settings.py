from tome.core.settings import WikiSettings


def test_defaults():
    settings = WikiSettings.from_mapping({})

    assert settings.database_uri == "sqlite://"
    assert settings.sql_echo is False
    assert settings.log_level == "INFO"
    assert settings.is_sqlite is True


def test_from_mapping_parses_values():
    settings = WikiSettings.from_mapping(
        {
            "TOME_DATABASE_URI": "mysql+pymysql://user:pw@db/tome",
            "TOME_SQL_ECHO": "yes",
            "TOME_POOL_RECYCLE": "600",
            "TOME_LOG_LEVEL": "debug",
        }
    )

    assert settings.sql_echo is True
    assert settings.pool_recycle == 600
    assert settings.log_level == "DEBUG"
    assert settings.is_sqlite is False


def test_invalid_integer_falls_back_to_default():
    settings = WikiSettings.from_mapping({"TOME_POOL_RECYCLE": "soon"})

    assert settings.pool_recycle == 1800


def test_engine_options_for_server_databases():
    options = WikiSettings(database_uri="mysql+pymysql://db/tome", pool_recycle=300).engine_options()

    assert options["pool_pre_ping"] is True
    assert options["pool_recycle"] == 300
    assert options["connect_args"] == {"connect_timeout": 10}


def test_engine_options_for_sqlite_skip_pool_sizing():
    options = WikiSettings(engine_overrides={"echo": True}).engine_options()

    assert "pool_size" not in options
    assert options["echo"] is True


def test_from_env_reads_given_mapping():
    settings = WikiSettings.from_env({"TOME_DATABASE_URI": "sqlite:///wiki.db"})

    assert settings.database_uri == "sqlite:///wiki.db"
