from metaplaycli.devserver import dotnet_build_args, dotnet_run_args


def test_build_args():
    assert dotnet_build_args() == ["build"]


def test_run_args_without_extra():
    assert dotnet_run_args() == ["run", "--no-build"]


def test_run_args_appends_extra_in_order():
    extra = ["-LogLevel=Warning", "-ExitAfter=00:00:30"]
    args = dotnet_run_args(extra)
    assert args[:2] == ["run", "--no-build"]
    assert args[2:] == extra


def test_run_args_returns_fresh_list():
    first = dotnet_run_args()
    first.append("x")
    assert dotnet_run_args() == ["run", "--no-build"]