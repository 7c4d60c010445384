"""Tests for the CLI entry point."""

from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from codelens_cli.cli import _build_store, main
from codelens_cli.client import ClientError
from codelens_core.errors import ConfigError
from codelens_store.memory import MemoryStore
from codelens_store.models import ReviewRecord
from codelens_store.sqlite import SQLiteStore

JS_SNIPPET = "function add(a,b){return a+b}"


def _make_config(**overrides):
    config = {
        "provider": "openrouter",
        "model": None,
        "temperature": 0.3,
        "max_tokens": 800,
        "timeout": 60,
        "store_url": "memory://",
        "host": "127.0.0.1",
        "port": 5002,
        "server_url": "http://localhost:5002",
        "openrouter_api_key": "or-key",
        "openai_api_key": None,
        "anthropic_api_key": None,
        "github_token": None,
    }
    config.update(overrides)
    return config


def _make_record(review_id="abc123", code=JS_SNIPPET, review="## Score\n**7/10**", optimized="const add = 1;"):
    return ReviewRecord(
        id=review_id,
        code=code,
        review=review,
        optimized_code=optimized,
        created_at="2026-10-19T10:00:00.000000+00:00",
    )


def _patch_config(mocker, config=None):
    cfg = config or _make_config()
    mocker.patch("codelens_core.config.load_config", return_value=cfg)
    return cfg


def _patch_client(mocker, module: str):
    client = MagicMock()
    mocker.patch(f"codelens_cli.commands.{module}.ReviewClient", return_value=client)
    return client


# ---------------------------------------------------------------------------
# _build_store
# ---------------------------------------------------------------------------


class TestBuildStore:
    def test_sqlite_url(self, tmp_path):
        store = _build_store({"store_url": f"sqlite:///{tmp_path / 'r.db'}"})
        assert isinstance(store, SQLiteStore)
        store.close()
        assert (tmp_path / "r.db").exists()

    def test_bare_path_is_sqlite(self, tmp_path):
        store = _build_store({"store_url": str(tmp_path / "r.db")})
        assert isinstance(store, SQLiteStore)
        store.close()

    def test_memory_url(self):
        assert isinstance(_build_store({"store_url": "memory://"}), MemoryStore)

    def test_gist_url(self, mocker):
        mock_gist = mocker.patch("codelens_store.gist.GistStore")
        _build_store({"store_url": "gist://abc123", "github_token": "tok"})
        mock_gist.assert_called_once_with(gist_id="abc123", token="tok")

    def test_gist_without_token_rejected(self):
        with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
            _build_store({"store_url": "gist://abc123", "github_token": None})

    def test_sqlite_url_with_two_slashes_rejected(self):
        with pytest.raises(ConfigError, match="sqlite:///"):
            _build_store({"store_url": "sqlite://reviews.db"})

    def test_unknown_scheme_rejected(self):
        with pytest.raises(ConfigError, match="mongodb"):
            _build_store({"store_url": "mongodb://localhost/reviews"})


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


class TestServe:
    def test_refuses_to_start_without_api_key(self, mocker):
        _patch_config(mocker, _make_config(openrouter_api_key=None))
        mock_run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code != 0
        assert "OPENROUTER_API_KEY" in result.output
        mock_run.assert_not_called()

    def test_missing_key_for_selected_provider(self, mocker):
        _patch_config(mocker)
        mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve", "--provider", "anthropic"])

        assert result.exit_code != 0
        assert "ANTHROPIC_API_KEY" in result.output

    def test_starts_uvicorn_with_configured_port(self, mocker):
        _patch_config(mocker)
        mocker.patch("codelens_core.generator.get_generator", return_value=MagicMock())
        mock_run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve", "--port", "6000"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 6000
        assert mock_run.call_args.kwargs["host"] == "127.0.0.1"

    def test_bad_store_url_is_usage_error(self, mocker):
        _patch_config(mocker, _make_config(store_url="ftp://nowhere"))
        mocker.patch("codelens_core.generator.get_generator", return_value=MagicMock())
        mock_run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code != 0
        assert "ftp" in result.output
        mock_run.assert_not_called()


# ---------------------------------------------------------------------------
# review
# ---------------------------------------------------------------------------


class TestReviewCommand:
    def test_reviews_file(self, mocker, tmp_path):
        _patch_config(mocker)
        client = _patch_client(mocker, "review")
        client.submit.return_value = {"review": "Quality Score: 8/10", "optimizedCode": "const add = 1;"}
        client.list_reviews.return_value = [_make_record()]
        source = tmp_path / "add.js"
        source.write_text(JS_SNIPPET)

        result = CliRunner().invoke(main, ["review", str(source)])

        assert result.exit_code == 0, result.output
        client.submit.assert_called_once_with(JS_SNIPPET)
        assert "Quality Score" in result.output
        assert "const add = 1;" in result.output

    def test_reads_stdin(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "review")
        client.submit.return_value = {"review": "ok", "optimizedCode": ""}
        client.list_reviews.return_value = []

        result = CliRunner().invoke(main, ["review"], input=JS_SNIPPET)

        assert result.exit_code == 0, result.output
        client.submit.assert_called_once_with(JS_SNIPPET)

    def test_empty_input_rejected_before_request(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "review")

        result = CliRunner().invoke(main, ["review"], input="   \n")

        assert result.exit_code != 0
        assert "Please enter some code!" in result.output
        client.submit.assert_not_called()

    def test_server_failure_prints_generic_message(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "review")
        client.submit.side_effect = ClientError("Error processing AI request", status=500)

        result = CliRunner().invoke(main, ["review"], input=JS_SNIPPET)

        assert result.exit_code == 1
        assert "Error analyzing code" in result.output

    def test_server_option_overrides_config(self, mocker):
        _patch_config(mocker)
        mock_cls = mocker.patch("codelens_cli.commands.review.ReviewClient")
        mock_cls.return_value.submit.return_value = {"review": "ok", "optimizedCode": ""}
        mock_cls.return_value.list_reviews.return_value = []

        CliRunner().invoke(main, ["review", "--server", "http://review.internal:9000"], input=JS_SNIPPET)

        mock_cls.assert_called_once_with("http://review.internal:9000")

    def test_plain_strips_markdown(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "review")
        client.submit.return_value = {"review": "## Score\n**7/10**", "optimizedCode": ""}
        client.list_reviews.return_value = []

        result = CliRunner().invoke(main, ["review", "--plain"], input=JS_SNIPPET)

        assert "7/10" in result.output
        assert "**" not in result.output
        assert "##" not in result.output


# ---------------------------------------------------------------------------
# history / show / delete
# ---------------------------------------------------------------------------


class TestHistoryCommand:
    def test_lists_records(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "history")
        client.list_reviews.return_value = [_make_record(review_id="newest"), _make_record(review_id="older")]

        result = CliRunner().invoke(main, ["history"])

        assert result.exit_code == 0, result.output
        assert result.output.index("newest") < result.output.index("older")
        assert "function add" in result.output

    def test_limit(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "history")
        client.list_reviews.return_value = [_make_record(review_id=f"rec{i}") for i in range(5)]

        result = CliRunner().invoke(main, ["history", "--limit", "2"])

        assert "rec1" in result.output
        assert "rec2" not in result.output

    def test_empty_history(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "history")
        client.list_reviews.return_value = []

        result = CliRunner().invoke(main, ["history"])

        assert "No previous reviews yet" in result.output

    def test_server_unreachable(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "history")
        client.list_reviews.side_effect = ClientError("Could not reach codelens server")

        result = CliRunner().invoke(main, ["history"])

        assert result.exit_code != 0
        assert "Could not reach" in result.output


class TestShowCommand:
    def test_shows_stored_review_without_submitting(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "show")
        client.list_reviews.return_value = [_make_record()]

        result = CliRunner().invoke(main, ["show", "abc123"])

        assert result.exit_code == 0, result.output
        assert JS_SNIPPET in result.output
        assert "const add = 1;" in result.output
        client.submit.assert_not_called()

    def test_unknown_id(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "show")
        client.list_reviews.return_value = [_make_record()]

        result = CliRunner().invoke(main, ["show", "nope"])

        assert result.exit_code != 0
        assert "No review with id nope" in result.output

    def test_server_unreachable_is_not_reported_as_unknown_id(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "show")
        client.list_reviews.side_effect = ClientError("Could not reach codelens server: refused")

        result = CliRunner().invoke(main, ["show", "abc123"])

        assert result.exit_code != 0
        assert "Could not reach" in result.output
        assert "No review with id" not in result.output


class TestDeleteCommand:
    def test_deletes(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "delete")
        client.delete.return_value = True

        result = CliRunner().invoke(main, ["delete", "abc123"])

        assert result.exit_code == 0
        client.delete.assert_called_once_with("abc123")
        assert "Deleted review abc123" in result.output

    def test_missing_id_is_not_an_error(self, mocker):
        _patch_config(mocker)
        client = _patch_client(mocker, "delete")
        client.delete.return_value = False

        result = CliRunner().invoke(main, ["delete", "abc123"])

        assert result.exit_code == 0
        assert "nothing to delete" in result.output


class TestDisplayHelpers:
    def test_strip_markdown(self):
        from codelens_cli.display import strip_markdown

        assert strip_markdown("### Title\n**bold** text") == "Title\nbold text"

    def test_code_preview_truncates(self):
        from codelens_cli.display import code_preview

        assert code_preview("a" * 50) == "a" * 30 + "..."
        assert code_preview("def f():\n    pass") == "def f(): pass..."
