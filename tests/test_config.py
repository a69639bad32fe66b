"""Tests for settings and layered configuration files."""

from pathlib import Path

from video_atlas.config import (
    DEFAULT_CHANNEL_IDS,
    FALLBACK_API_KEY,
    FALLBACK_AUTHORIZED_EMAILS,
    Settings,
    load_authorized_emails,
    load_youtube_api_key,
    read_properties,
    resolve_api_key,
)


def write(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


class TestReadProperties:
    """Tests for the properties file parser."""

    def test_parses_pairs_and_skips_comments(self, tmp_path) -> None:
        path = tmp_path / "config.properties"
        write(path, "# comment\n! also comment\n\nyoutubeApiKey = abc123\nother:value\nflag\n")

        properties = read_properties(path)

        assert properties == {"youtubeApiKey": "abc123", "other": "value", "flag": ""}

    def test_value_may_contain_separators(self, tmp_path) -> None:
        path = tmp_path / "config.properties"
        write(path, "url=https://example.com/a=b\n")

        assert read_properties(path)["url"] == "https://example.com/a=b"


class TestApiKeyLoading:
    """Tests for layered API key lookup."""

    def test_first_file_wins(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "youtubeApiKey=local-key\n")
        write(tmp_path / "config.properties.ci", "youtubeApiKey=ci-key\n")

        assert load_youtube_api_key(tmp_path) == "local-key"

    def test_falls_through_missing_files(self, tmp_path) -> None:
        write(tmp_path / "config.properties.ci", "youtubeApiKey=ci-key\n")

        assert load_youtube_api_key(tmp_path) == "ci-key"

    def test_skips_placeholder_and_blank(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "youtubeApiKey=\n")
        write(tmp_path / "config.properties.ci", "youtubeApiKey=YOUR_YOUTUBE_API_KEY_HERE\n")
        write(tmp_path / "config.properties.template", "youtubeApiKey=template-key\n")

        assert load_youtube_api_key(tmp_path) == "template-key"

    def test_strips_quotes_and_backticks(self, tmp_path) -> None:
        write(tmp_path / "config.properties", 'youtubeApiKey="`quoted-key`"\n')

        assert load_youtube_api_key(tmp_path) == "quoted-key"

    def test_fallback_when_nothing_found(self, tmp_path) -> None:
        assert load_youtube_api_key(tmp_path) == FALLBACK_API_KEY

    def test_settings_key_wins(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "youtubeApiKey=file-key\n")

        settings = Settings(youtube_api_key="env-key", config_dir=tmp_path)

        assert resolve_api_key(settings) == "env-key"

    def test_settings_without_key_uses_files(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "youtubeApiKey=file-key\n")

        settings = Settings(youtube_api_key=None, config_dir=tmp_path)

        assert resolve_api_key(settings) == "file-key"


class TestAuthorizedEmails:
    """Tests for layered authorized account lookup."""

    def test_splits_and_trims(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "authorized_emails= a@example.com , ,b@example.com\n")

        assert load_authorized_emails(tmp_path) == ["a@example.com", "b@example.com"]

    def test_blank_falls_through(self, tmp_path) -> None:
        write(tmp_path / "config.properties", "authorized_emails=\n")
        write(tmp_path / "config.properties.template", "authorized_emails=t@example.com\n")

        assert load_authorized_emails(tmp_path) == ["t@example.com"]

    def test_fallback(self, tmp_path) -> None:
        assert load_authorized_emails(tmp_path) == FALLBACK_AUTHORIZED_EMAILS


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.max_pages_per_channel == 5
    assert settings.detail_batch_size == 50
    assert settings.cache_ttl_hours == 24
    assert settings.channel_ids == DEFAULT_CHANNEL_IDS
