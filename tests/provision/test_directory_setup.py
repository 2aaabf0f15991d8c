from provision.directory_setup import ensure_workspace_directories, fix_permissions


def test_creates_every_directory_and_chowns_them(shell, app_settings, mock_logger):
    ensure_workspace_directories(app_settings, mock_logger)

    expected = app_settings.paths.owned_directories()
    assert all(d.is_dir() for d in expected)
    assert shell.ran("chown") == [
        ["chown", "-R", "tester:testers", *[str(d) for d in expected]]
    ]


def test_existing_directories_are_kept(shell, app_settings, mock_logger):
    data_dir = app_settings.paths.data_dir
    data_dir.mkdir(parents=True)
    (data_dir / "notes.txt").write_text("keep me")

    ensure_workspace_directories(app_settings, mock_logger)

    assert (data_dir / "notes.txt").read_text() == "keep me"


def test_extra_directories_are_created(shell, settings_factory, tmp_path, mock_logger):
    settings = settings_factory()
    settings.paths.extra_dirs = [tmp_path / "workspace-cache"]

    ensure_workspace_directories(settings, mock_logger)

    assert (tmp_path / "workspace-cache").is_dir()
    assert str(tmp_path / "workspace-cache") in shell.ran("chown")[0]


def test_fix_permissions_always_chowns(shell, app_settings, mock_logger):
    for d in app_settings.paths.owned_directories():
        d.mkdir(parents=True, exist_ok=True)

    fix_permissions(app_settings, mock_logger)
    fix_permissions(app_settings, mock_logger)

    assert len(shell.ran("chown", "-R", "tester:testers")) == 2
