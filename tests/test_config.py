"""Unit tests for mail settings."""

import logging

from jobready.config import MailSettings


class TestMailSettings:
    """Test loading and checking SMTP settings."""

    def test_defaults(self, empty_settings):
        assert empty_settings.smtp_port == 587
        assert empty_settings.smtp_secure is False
        assert empty_settings.is_complete is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
        monkeypatch.setenv("SMTP_PORT", "465")
        monkeypatch.setenv("SMTP_SECURE", "true")
        monkeypatch.setenv("SMTP_USER", "mailer")
        monkeypatch.setenv("SMTP_PASS", "secret")
        monkeypatch.setenv("SMTP_FROM", "noreply@heubert.com")
        monkeypatch.setenv("ADMIN_EMAIL", "admissions@heubert.com")

        settings = MailSettings(_env_file=None)

        assert settings.smtp_port == 465
        assert settings.smtp_secure is True
        assert settings.is_complete is True
        assert settings.missing_settings() == []

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SMTP_HOST=smtp.example.com\nADMIN_EMAIL=admissions@heubert.com\n")

        settings = MailSettings(_env_file=env_file)

        assert settings.smtp_host == "smtp.example.com"
        assert settings.missing_settings() == ["SMTP_USER", "SMTP_PASS", "SMTP_FROM"]

    def test_blank_values_count_as_missing(self, mail_settings):
        settings = mail_settings.model_copy(update={"smtp_pass": "   "})
        assert settings.missing_settings() == ["SMTP_PASS"]

    def test_log_summary_never_logs_values(self, mail_settings, caplog):
        with caplog.at_level(logging.INFO, logger="jobready.config"):
            mail_settings.log_summary()

        assert "SMTP_PASS" in caplog.text
        assert "secret" not in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_log_summary_reports_missing_settings(self, empty_settings, caplog):
        with caplog.at_level(logging.INFO, logger="jobready.config"):
            empty_settings.log_summary()

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "SMTP_HOST" in errors[0].getMessage()
