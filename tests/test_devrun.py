import pytest

from metaplaycli.devrun import dev_image_run_args, resolve_local_image


def test_run_args_structure():
    args = dev_image_run_args("mygame:test", [])
    assert args[:2] == ["run", "--rm"]
    index = args.index("mygame:test")
    assert args[index + 1] == "gameserver"
    assert "-p=127.0.0.1:5550:5550" in args
    assert "-p=127.0.0.1:9090:9090" in args
    assert "--Database:SqliteInMemory=true" in args


def test_run_args_environment_family():
    args = dev_image_run_args("mygame:test")
    index = args.index("-e")
    assert args[index + 1] == "METAPLAY_ENVIRONMENT_FAMILY=Local"


def test_run_args_extra_args_appended():
    extra = ["-LogLevel=Warning", "--foo"]
    with_extra = dev_image_run_args("mygame:test", extra)
    without = dev_image_run_args("mygame:test", [])
    assert with_extra[-2:] == extra
    assert with_extra[: len(without)] == without


def test_resolve_explicit_image_unchanged():
    assert resolve_local_image("mygame:test", []) == "mygame:test"


def test_resolve_latest_local_picks_first():
    assert resolve_local_image("latest-local", ["game:2", "game:1"]) == "game:2"


def test_resolve_latest_local_without_images():
    with pytest.raises(ValueError, match="build an image first"):
        resolve_local_image("latest-local", [])


def test_resolve_empty_image():
    with pytest.raises(ValueError):
        resolve_local_image("", ["game:1"])