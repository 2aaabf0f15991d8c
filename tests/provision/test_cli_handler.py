import io

import pytest

from provision.cli_handler import (
    assume_no,
    assume_yes,
    cli_prompt_for_confirmation,
    confirmation_provider_for,
    format_configuration,
    view_configuration,
)


@pytest.fixture
def interactive_settings(settings_factory):
    return settings_factory(interactive=True)


@pytest.mark.parametrize(
    "answer,expected",
    [("y", True), ("YES", True), (" Yes ", True), ("", False), ("n", False), ("maybe", False)],
)
def test_prompt_only_affirmative_answers_confirm(
    monkeypatch, interactive_settings, mock_logger, answer, expected
):
    monkeypatch.setattr("builtins.input", lambda prompt: answer)

    assert cli_prompt_for_confirmation("Download?", interactive_settings, mock_logger) is expected


def test_prompt_eof_means_no(monkeypatch, interactive_settings, mock_logger):
    def _eof(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)

    assert cli_prompt_for_confirmation("Download?", interactive_settings, mock_logger) is False
    assert "EOF" in mock_logger.warning.call_args.args[0]


class _FakePipe(io.StringIO):
    """Stdin with a file descriptor that is not a terminal."""

    def fileno(self):
        return 0

    def isatty(self):
        return False


class _FakeTty(_FakePipe):
    def isatty(self):
        return True


def test_prompt_timeout_means_no(monkeypatch, settings_factory, mock_logger):
    settings = settings_factory(interactive=True, prompt_timeout_seconds=1)
    monkeypatch.setattr("provision.cli_handler.sys.stdin", _FakeTty("y\n"))
    monkeypatch.setattr(
        "provision.cli_handler.select.select", lambda r, w, x, timeout: ([], [], [])
    )

    assert cli_prompt_for_confirmation("Download?", settings, mock_logger) is False
    assert "No answer within 1s" in mock_logger.warning.call_args.args[0]


def test_prompt_on_terminal_reads_answer_before_timeout(monkeypatch, settings_factory, mock_logger):
    settings = settings_factory(interactive=True, prompt_timeout_seconds=1)
    fake_stdin = _FakeTty("y\n")
    monkeypatch.setattr("provision.cli_handler.sys.stdin", fake_stdin)
    monkeypatch.setattr(
        "provision.cli_handler.select.select", lambda r, w, x, timeout: (r, [], [])
    )

    assert cli_prompt_for_confirmation("Download?", settings, mock_logger) is True


def test_prompt_timeout_applies_to_idle_pipe(monkeypatch, settings_factory, mock_logger):
    settings = settings_factory(interactive=True, prompt_timeout_seconds=1)
    monkeypatch.setattr("provision.cli_handler.sys.stdin", _FakePipe(""))
    waited = []

    def _select(r, w, x, timeout):
        waited.append(timeout)
        return [], [], []

    monkeypatch.setattr("provision.cli_handler.select.select", _select)

    assert cli_prompt_for_confirmation("Download?", settings, mock_logger) is False
    assert waited == [1]
    assert "No answer within 1s" in mock_logger.warning.call_args.args[0]


def test_prompt_without_descriptor_uses_input(monkeypatch, settings_factory, mock_logger):
    settings = settings_factory(interactive=True, prompt_timeout_seconds=1)
    monkeypatch.setattr("provision.cli_handler.sys.stdin", io.StringIO())
    monkeypatch.setattr("builtins.input", lambda prompt: "yes")

    assert cli_prompt_for_confirmation("Download?", settings, mock_logger) is True


def test_fixed_providers(app_settings, mock_logger):
    assert assume_yes("Download?", app_settings, mock_logger) is True
    assert assume_no("Download?", app_settings, mock_logger) is False


def test_provider_selection(settings_factory):
    assert confirmation_provider_for(settings_factory(interactive=True)) is cli_prompt_for_confirmation
    assert confirmation_provider_for(settings_factory(interactive=False)) is assume_no
    assert confirmation_provider_for(settings_factory(interactive=False, assume_yes=True)) is assume_yes


def test_configuration_masks_secrets(settings_factory):
    settings = settings_factory(
        services={"openai_api_key": "sk-very-secret", "s3_secret_access_key": "hunter2"}
    )

    text = format_configuration(settings)

    assert "sk-very-secret" not in text
    assert "hunter2" not in text
    assert "[SET]" in text
    assert str(settings.paths.workspace_root) in text


def test_view_configuration_logs_at_requested_level(app_settings, mock_logger):
    text = view_configuration(app_settings, mock_logger, level="debug")

    assert mock_logger.debug.call_count == 2
    assert text in mock_logger.debug.call_args.args[0]
