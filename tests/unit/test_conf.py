import logging

from sendgrid_rt.conf import (
    DEFAULTS,
    build_logging_config,
    get_rt_endpoint,
    get_setting,
    get_verbosity,
    load_config_file,
)


class TestGetSetting:
    def test_falls_back_to_defaults(self, settings):
        settings.SENDGRID_RT = {}
        assert get_setting("PORT") == 9090
        assert get_setting("ADDRESS") == "localhost"
        assert get_setting("DEFAULT") == {"queue": "General", "action": "correspond"}

    def test_settings_override_defaults(self, settings):
        settings.SENDGRID_RT = {"PORT": 8000}
        assert get_setting("PORT") == 8000

    def test_environment_overrides_settings(self, settings, monkeypatch):
        settings.SENDGRID_RT = {"PORT": 8000, "KEY": "from-settings"}
        monkeypatch.setenv("SGRT_PORT", "7000")
        monkeypatch.setenv("SGRT_KEY", "from-env")

        assert get_setting("PORT") == 7000
        assert get_setting("KEY") == "from-env"

    def test_invalid_integer_in_environment_uses_default(self, monkeypatch):
        monkeypatch.setenv("SGRT_TIMEOUT", "soon")
        assert get_setting("TIMEOUT") == DEFAULTS["TIMEOUT"]

    def test_environment_does_not_override_structured_settings(self, settings, monkeypatch):
        settings.SENDGRID_RT = {"RULES": []}
        monkeypatch.setenv("SGRT_RULES", "a@x.com")
        assert get_setting("RULES") == []

    def test_unknown_setting_is_none(self):
        assert get_setting("NOPE") is None

    def test_rt_endpoint(self, settings):
        settings.SENDGRID_RT = {"RT_URL": "https://rt.example.test/"}
        assert get_rt_endpoint() == "https://rt.example.test/REST/1.0/NoAuth/mail-gateway"


class TestGetVerbosity:
    def test_defaults_to_quiet(self):
        assert get_verbosity({}) == 0

    def test_reads_loaded_config(self):
        assert get_verbosity({"VERBOSE": 1}) == 1

    def test_environment_overrides_config(self, monkeypatch):
        monkeypatch.setenv("SGRT_VERBOSE", "2")
        assert get_verbosity({"VERBOSE": 1}) == 2

    def test_non_integer_environment_value_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("SGRT_VERBOSE", "yes")

        with caplog.at_level(logging.WARNING, logger="sendgrid_rt"):
            assert get_verbosity({}) == 0

        assert "SGRT_VERBOSE" in caplog.text

    def test_non_integer_config_value_falls_back(self):
        assert get_verbosity({"VERBOSE": "loud"}) == 0

    def test_boolean_config_value(self):
        assert get_verbosity({"VERBOSE": True}) == 1
        assert get_verbosity({"VERBOSE": False}) == 0


class TestLoadConfigFile:
    def test_loads_first_file_found(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (second / "sendgrid-rt.yaml").write_text("port: 1\n")
        (first / "sendgrid-rt.yml").write_text(
            "port: 9191\n"
            "rt_url: https://rt.example.test\n"
            "key: s3cret\n"
            "default:\n"
            "  queue: Triage\n"
            "  action: correspond\n"
            "rules:\n"
            "  - address: support@example.com\n"
            "    queue: Support\n"
            "    action: correspond\n"
        )

        config = load_config_file(paths=(str(first), str(second)))

        assert config["PORT"] == 9191
        assert config["RT_URL"] == "https://rt.example.test"
        assert config["KEY"] == "s3cret"
        assert config["DEFAULT"] == {"queue": "Triage", "action": "correspond"}
        assert config["RULES"] == [
            {"address": "support@example.com", "queue": "Support", "action": "correspond"}
        ]

    def test_missing_file_yields_empty_config(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="sendgrid_rt"):
            assert load_config_file(paths=(str(tmp_path),)) == {}
        assert "No sendgrid-rt.yaml found" in caplog.text

    def test_invalid_yaml_yields_empty_config(self, tmp_path, caplog):
        (tmp_path / "sendgrid-rt.yaml").write_text("rules: [unclosed\n")

        with caplog.at_level(logging.WARNING, logger="sendgrid_rt"):
            assert load_config_file(paths=(str(tmp_path),)) == {}
        assert "Error reading config" in caplog.text

    def test_non_mapping_yields_empty_config(self, tmp_path):
        (tmp_path / "sendgrid-rt.yaml").write_text("- just\n- a list\n")
        assert load_config_file(paths=(str(tmp_path),)) == {}

    def test_empty_file_yields_empty_config(self, tmp_path):
        (tmp_path / "sendgrid-rt.yaml").write_text("")
        assert load_config_file(paths=(str(tmp_path),)) == {}


class TestBuildLoggingConfig:
    def test_info_by_default(self):
        config = build_logging_config(0)
        assert config["loggers"]["sendgrid_rt"]["level"] == "INFO"

    def test_debug_when_verbose(self):
        config = build_logging_config(2)
        assert config["loggers"]["sendgrid_rt"]["level"] == "DEBUG"

    def test_logs_to_stdout(self):
        config = build_logging_config()
        assert config["handlers"]["stdout"]["stream"] == "ext://sys.stdout"
        assert config["loggers"]["sendgrid_rt"]["handlers"] == ["stdout"]
