"""End-to-end runs with a fake compiler standing in for ``pdc``."""

from dataclasses import replace
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from pdi_builder import cli
from pdi_builder.config import BuilderSettings
from pdi_builder.errors import CompilerError, MissingToolError, WorkspaceError
from pdi_builder.infrastructure.toolchain import PdcCompiler, package_path_for, require_tool
from pdi_builder.pipeline import runner
from pdi_builder.pipeline.runner import run


class FakeCompiler:
    """Mimics pdc: nests a .pdi per staged PNG inside ``<staging>.pdx``."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[Path] = []

    def ensure_available(self) -> str:
        return "/usr/bin/pdc"

    def compile(self, staging_dir: Path) -> Path:
        self.calls.append(staging_dir)
        if self.fail:
            raise CompilerError("pdc exited with status 1")
        assert (staging_dir / "main.lua").exists()
        package = package_path_for(staging_dir)
        (package / "images").mkdir(parents=True)
        (package / "pdxinfo").write_text("name=build")
        (package / "main.pdz").write_bytes(b"")
        for png in staging_dir.glob("*.png"):
            (package / "images" / (png.stem + ".pdi")).write_bytes(png.read_bytes())
        return package


def _settings(tmp_path, **overrides) -> BuilderSettings:
    source = tmp_path / "src"
    source.mkdir(exist_ok=True)
    values = dict(
        source_dir=str(source),
        build_dir=str(tmp_path / "__build_temp"),
        output_dir=str(tmp_path / "__final_pdi_assets"),
        use_processes=False,
    )
    values.update(overrides)
    return BuilderSettings(**values)


def _write_sources(directory: Path) -> None:
    Image.new("L", (30, 30), 25).save(directory / "dark.png")
    Image.new("RGB", (500, 250), (200, 90, 40)).save(directory / "wide.png")
    (directory / "broken.png").write_bytes(b"nope")


def test_run_leaves_only_compiled_assets(tmp_path):
    settings = _settings(tmp_path)
    _write_sources(Path(settings.source_dir))
    compiler = FakeCompiler()

    report = run(settings, compiler=compiler, report=lambda message: None)

    assert (report.summary.succeeded, report.summary.failed) == (2, 1)
    assert report.assets == 2
    assert sorted(path.name for path in report.output_dir.iterdir()) == ["dark.pdi", "wide.pdi"]
    assert not Path(settings.build_dir).exists()
    assert not package_path_for(Path(settings.build_dir)).exists()


def test_run_keep_build_preserves_staging(tmp_path):
    settings = _settings(tmp_path, keep_build=True)
    _write_sources(Path(settings.source_dir))

    run(settings, compiler=FakeCompiler(), report=lambda message: None)

    assert (Path(settings.build_dir) / "dark.png").exists()


def test_run_skips_compiler_when_nothing_converted(tmp_path):
    settings = _settings(tmp_path)
    compiler = FakeCompiler()

    report = run(settings, compiler=compiler, report=lambda message: None)

    assert compiler.calls == []
    assert report.assets == 0
    assert report.output_dir.is_dir()


def test_compiler_failure_propagates_and_cleans_up(tmp_path):
    settings = _settings(tmp_path)
    _write_sources(Path(settings.source_dir))

    with pytest.raises(CompilerError):
        run(settings, compiler=FakeCompiler(fail=True), report=lambda message: None)
    assert not Path(settings.build_dir).exists()


def test_missing_tool_fails_before_touching_disk(tmp_path):
    settings = _settings(tmp_path, compiler="pdc-does-not-exist")
    stale = Path(settings.output_dir)
    stale.mkdir()

    with pytest.raises(MissingToolError):
        run(settings, report=lambda message: None)
    assert stale.exists()


def test_require_tool_uses_lookup():
    assert require_tool("pdc", which=lambda name: "/opt/sdk/bin/pdc") == "/opt/sdk/bin/pdc"
    with pytest.raises(MissingToolError):
        require_tool("pdc", which=lambda name: None)


def test_pdc_compiler_reports_non_zero_exit(tmp_path, monkeypatch):
    class Completed:
        returncode = 2
        stdout = ""
        stderr = "error: no main.lua"

    monkeypatch.setattr(
        "pdi_builder.infrastructure.toolchain.subprocess.run", lambda *args, **kwargs: Completed()
    )

    with pytest.raises(CompilerError, match="no main.lua"):
        PdcCompiler().compile(tmp_path / "build")


def test_cli_reports_counts(tmp_path, monkeypatch):
    settings = _settings(tmp_path)
    _write_sources(Path(settings.source_dir))
    monkeypatch.setattr(runner, "PdcCompiler", lambda executable: FakeCompiler())

    result = CliRunner().invoke(
        cli.main,
        [
            settings.source_dir,
            "--output",
            settings.output_dir,
            "--build-dir",
            settings.build_dir,
            "--threads",
            "--max-size",
            "120x120",
            "--local-contrast",
            "8x25%",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Converted: 2 succeeded, 1 failed; 2 assets" in result.output


def test_cli_exits_non_zero_without_compiler(tmp_path, monkeypatch):
    monkeypatch.setattr("pdi_builder.infrastructure.toolchain.shutil.which", lambda name: None)

    result = CliRunner().invoke(cli.main, [str(tmp_path), "--build-dir", str(tmp_path / "b")])

    assert result.exit_code == 1
    assert "pdc" in result.output


def test_cli_rejects_bad_size(tmp_path):
    result = CliRunner().invoke(cli.main, [str(tmp_path), "--max-size", "big"])

    assert result.exit_code == 2


@pytest.mark.parametrize("field", ["output_dir", "build_dir"])
def test_run_refuses_folders_that_would_delete_sources(tmp_path, field):
    settings = _settings(tmp_path)
    keep = Path(settings.source_dir) / "keep.png"
    Image.new("L", (4, 4), 100).save(keep)

    for target in (settings.source_dir, str(tmp_path)):
        with pytest.raises(WorkspaceError):
            run(replace(settings, **{field: target}), compiler=FakeCompiler(), report=lambda message: None)

    assert keep.exists()


def test_run_refuses_shared_build_and_output(tmp_path):
    settings = _settings(tmp_path)
    shared = replace(settings, output_dir=settings.build_dir)

    with pytest.raises(WorkspaceError):
        run(shared, compiler=FakeCompiler(), report=lambda message: None)


def test_cli_rejects_output_equal_to_source(tmp_path):
    source = tmp_path / "src"
    source.mkdir()
    keep = source / "keep.png"
    Image.new("L", (4, 4), 100).save(keep)

    result = CliRunner().invoke(cli.main, [str(source), "--output", str(source)])

    assert result.exit_code == 2
    assert keep.exists()


def test_cli_rejects_missing_source_directory(tmp_path):
    result = CliRunner().invoke(cli.main, [str(tmp_path / "nowhere")])

    assert result.exit_code == 2
