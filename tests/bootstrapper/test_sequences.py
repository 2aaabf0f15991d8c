import functools
from unittest.mock import MagicMock

from bootstrapper.sequences import (
    BOOTSTRAP_SEQUENCE_ORDER,
    DOWNLOAD_SAMPLE_MODELS_TAG,
    build_step_sequence,
    unknown_step_tags,
)
from provision.step_executor import FailurePolicy

GPU_TAGS = [
    "GPU_CHECK",
    "CLONE_REPOSITORY",
    "ENSURE_DIRECTORIES",
    "CREATE_VENV",
    "INSTALL_DEPENDENCIES",
    "INSTALL_GPU_MONITORING",
    "VERIFY_TORCH_CUDA",
    "WRITE_ENV_FILE",
    "DOWNLOAD_SAMPLE_MODELS",
    "INSTALL_HELPER_SCRIPTS",
    "FIX_PERMISSIONS",
    "PRINT_SUMMARY",
]
DEV_TAGS = [
    "CLONE_REPOSITORY",
    "ENSURE_DIRECTORIES",
    "CREATE_VENV",
    "INSTALL_DEPENDENCIES",
    "INSTALL_NODE_TOOLING",
    "WRITE_ENV_FILE",
    "DOWNLOAD_SAMPLE_MODELS",
    "INSTALL_HELPER_SCRIPTS",
    "FIX_PERMISSIONS",
    "PRINT_SUMMARY",
]


def test_catalog_tags_are_unique():
    tags = [entry["tag"] for entry in BOOTSTRAP_SEQUENCE_ORDER]
    assert len(tags) == len(set(tags))


def test_gpu_profile_sequence(app_settings):
    steps = build_step_sequence(app_settings)

    assert [s.tag for s in steps] == GPU_TAGS
    assert all(s.on_failure is FailurePolicy.WARN_AND_CONTINUE for s in steps)


def test_dev_profile_sequence(dev_settings):
    assert [s.tag for s in build_step_sequence(dev_settings)] == DEV_TAGS


def test_node_tooling_can_be_enabled_for_gpu(settings_factory):
    settings = settings_factory(node={"enabled": True})

    assert "INSTALL_NODE_TOOLING" in [s.tag for s in build_step_sequence(settings)]


def test_steps_with_preconditions(app_settings):
    guarded = {s.tag for s in build_step_sequence(app_settings) if s.precondition}

    assert guarded == {"CLONE_REPOSITORY", "CREATE_VENV", "DOWNLOAD_SAMPLE_MODELS"}


def test_skip_and_abort_configuration(settings_factory, mock_logger):
    settings = settings_factory(
        skip_steps=["GPU_CHECK", "VERIFY_TORCH_CUDA"],
        abort_on_failure=["CLONE_REPOSITORY"],
    )

    steps = build_step_sequence(settings, current_logger=mock_logger)
    by_tag = {s.tag: s for s in steps}

    assert "GPU_CHECK" not in by_tag
    assert "VERIFY_TORCH_CUDA" not in by_tag
    assert by_tag["CLONE_REPOSITORY"].on_failure is FailurePolicy.ABORT
    assert by_tag["FIX_PERMISSIONS"].on_failure is FailurePolicy.WARN_AND_CONTINUE


def test_unknown_tags_are_reported(settings_factory, mock_logger):
    settings = settings_factory(skip_steps=["NOT_A_STEP"], abort_on_failure=["NOT_A_STEP", "ALSO_NOT"])

    assert unknown_step_tags(settings) == ["NOT_A_STEP", "ALSO_NOT"]
    build_step_sequence(settings, current_logger=mock_logger)
    assert mock_logger.warning.call_count == 2


def test_confirmation_provider_is_bound_to_download_step(app_settings):
    confirm = MagicMock(return_value=False)

    steps = build_step_sequence(app_settings, confirm=confirm)
    download = next(s for s in steps if s.tag == DOWNLOAD_SAMPLE_MODELS_TAG)

    assert isinstance(download.action, functools.partial)
    assert download.action.keywords == {"confirm": confirm}


def test_selection_messages_go_through_log_bootstrap(mocker, settings_factory, mock_logger):
    mock_log = mocker.patch("bootstrapper.sequences.log_bootstrap")
    settings = settings_factory(skip_steps=["GPU_CHECK", "NOT_A_STEP"])

    build_step_sequence(settings, current_logger=mock_logger)

    levels = [(c.args[1], c.args[2], c.args[3]) for c in mock_log.call_args_list]
    assert levels == [
        ("warning", mock_logger, settings),
        ("info", mock_logger, settings),
    ]
    assert "NOT_A_STEP" in mock_log.call_args_list[0].args[0]
    assert "GPU_CHECK" in mock_log.call_args_list[1].args[0]
    mock_logger.warning.assert_not_called()
