import os
import textwrap
from pathlib import Path

import pytest

from rules_translator import cli, commands


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "rules-translator"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every CLI test from tmp_path without inherited settings."""

    for key in list(os.environ):
        if key.startswith("RULES_TRANSLATOR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


def _rules(tmp_path: Path) -> Path:
    rules_dir = tmp_path / "agent-rules"
    rules_dir.mkdir()
    (rules_dir / "a.md").write_text(
        "---\ntitle: A\n---\nContent A\n", encoding="utf-8"
    )
    (rules_dir / "b.md").write_text(
        "---\n_excludeForProviders: claude\n---\nContent B\n", encoding="utf-8"
    )
    return rules_dir


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


@pytest.mark.parametrize("flag", ["version", "--version", "-V"])
def test_version_aliases(flag, capsys):
    code = cli.main([flag])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_help_flag_shows_usage(capsys):
    code = cli.main(["--help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: rules-translator" in captured.out
    assert "Available commands:" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    for name in ("build", "providers", "validate", "init", "config"):
        assert name in captured.out


def test_help_known_command(capsys):
    code = cli.main(["help", "validate"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Run `rules-translator validate --help`" in captured.out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "nope"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'nope'." in captured.err


def test_unknown_command_errors(capsys):
    code = cli.main(["frobnicate"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'frobnicate'." in captured.err
    assert "Available commands:" in captured.err


def test_bare_flags_route_to_build(monkeypatch):
    seen = {}

    def fake_build(argv):
        seen["argv"] = argv
        return 0

    monkeypatch.setattr(commands, "build_main", fake_build)

    assert cli.main(["--dry-run", "--quiet"]) == 0
    assert seen["argv"] == ["--dry-run", "--quiet"]

    assert cli.main([]) == 0
    assert seen["argv"] == []


def test_dispatch_propagates_system_exit_code(monkeypatch):
    def fake_build(argv):
        raise SystemExit(3)

    monkeypatch.setattr(commands, "build_main", fake_build)

    assert cli.main(["build"]) == 3


def test_dispatch_handles_system_exit_message(monkeypatch, capsys):
    def fake_build(argv):
        raise SystemExit("bad things")

    monkeypatch.setattr(commands, "build_main", fake_build)

    assert cli.main(["build"]) == 1
    assert "bad things" in capsys.readouterr().err


def test_dispatch_normalizes_non_int_return(monkeypatch):
    monkeypatch.setattr(commands, "providers_main", lambda argv: None)

    assert cli.main(["providers"]) == 0


def test_build_help_exits_cleanly(capsys):
    code = cli.main(["build", "--help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "--no-builtin" in captured.out


def test_build_writes_default_providers(tmp_path, capsys):
    _rules(tmp_path)

    code = cli.main([])
    captured = capsys.readouterr()

    assert code == 0
    assert "Build completed successfully!" in captured.out
    assert (tmp_path / ".cursor" / "rules" / "a.mdc").is_file()
    assert (tmp_path / ".clinerules" / "b.md").read_text(encoding="utf-8") == (
        "Content B\n"
    )
    assert (tmp_path / "CLAUDE.md").read_text(encoding="utf-8") == (
        "## A\n\nContent A\n"
    )


def test_build_respects_output_and_provider_flags(tmp_path, capsys):
    rules_dir = _rules(tmp_path)
    out = tmp_path / "out"

    code = cli.main(
        [
            "build",
            "--input",
            str(rules_dir),
            "--output",
            str(out),
            "--providers",
            "openai,windsurf",
            "--quiet",
        ]
    )
    captured = capsys.readouterr()

    assert code == 0
    assert captured.out == ""
    assert (out / "AGENTS.md").is_file()
    assert sorted(p.name for p in (out / ".windsurf" / "rules").iterdir()) == [
        "a.md",
        "b.md",
    ]
    assert not (out / "CLAUDE.md").exists()


def test_build_dry_run_writes_nothing(tmp_path, capsys):
    _rules(tmp_path)

    code = cli.main(["--dry-run"])
    captured = capsys.readouterr()

    assert code == 0
    assert "DRY RUN - No files will be modified" in captured.out
    assert "Provider: cursor (CursorProvider)" in captured.out
    assert not (tmp_path / ".cursor").exists()
    assert not (tmp_path / "CLAUDE.md").exists()


def test_build_reads_config_file(tmp_path, capsys):
    _rules(tmp_path)
    (tmp_path / "rules_translator.toml").write_text(
        '[build]\nproviders = ["replit"]\n', encoding="utf-8"
    )

    code = cli.main(["build", "--quiet"])

    assert code == 0
    assert (tmp_path / "replit.md").is_file()
    assert not (tmp_path / ".cursor").exists()


def test_build_writes_json_log(tmp_path, capsys):
    _rules(tmp_path)

    code = cli.main(["--quiet", "--log-dir", "logs"])

    assert code == 0
    log_text = (tmp_path / "logs" / "rules-translator.log").read_text(
        encoding="utf-8"
    )
    assert "Completed build" in log_text


def test_build_missing_input_reports_error(tmp_path, capsys):
    code = cli.main(["--input", str(tmp_path / "missing")])
    captured = capsys.readouterr()

    assert code == 1
    assert "Error: Source directory not found" in captured.err


def test_verbose_failure_reports_only_the_error_line(tmp_path, capsys):
    rules_dir = tmp_path / "agent-rules"
    rules_dir.mkdir()
    (rules_dir / "broken.md").write_text(
        "---\ntitle: [oops\n---\nBody\n", encoding="utf-8"
    )

    code = cli.main(
        ["--input", str(rules_dir), "--output", str(tmp_path / "out"), "--verbose"]
    )
    captured = capsys.readouterr()

    assert code == 1
    assert captured.err.startswith("Error: Invalid front-matter in broken.md")
    assert "Traceback" not in captured.err
    assert "Build failed" not in captured.err
    assert "Initializing providers..." in captured.out


def test_debug_env_adds_traceback(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("RULES_TRANSLATOR_DEBUG", "1")

    code = cli.main(["--input", str(tmp_path / "missing")])
    captured = capsys.readouterr()

    assert code == 1
    assert captured.err.startswith("Error: Source directory not found")
    assert "Traceback" in captured.err


def test_undecodable_rule_error_names_the_file(tmp_path, capsys):
    rules_dir = tmp_path / "agent-rules"
    rules_dir.mkdir()
    (rules_dir / "latin1.md").write_bytes(b"caf\xe9\n")

    code = cli.main(["--quiet"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Error: Cannot decode latin1.md as UTF-8" in captured.err


def test_build_unknown_provider_reports_error(tmp_path, capsys):
    _rules(tmp_path)

    code = cli.main(["--providers", "emacs"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Unknown provider ID: emacs" in captured.err


def test_build_without_any_provider_reports_error(tmp_path, capsys):
    _rules(tmp_path)

    code = cli.main(["--no-builtin"])
    captured = capsys.readouterr()

    assert code == 1
    assert "No providers specified" in captured.err


def test_build_rejects_verbose_with_quiet(capsys):
    code = cli.main(["--verbose", "--quiet"])

    assert code == 2
    assert "not allowed with argument" in capsys.readouterr().err


def test_build_custom_provider_runs_alongside_builtins(tmp_path, capsys):
    _rules(tmp_path)
    custom = tmp_path / "listing_provider.py"
    custom.write_text(
        textwrap.dedent(
            """
            from pathlib import Path


            class ListingProvider:
                id = "listing"

                def init(self):
                    self.names = []

                def handle(self, rule):
                    self.names.append(rule.filename)

                def finish(self):
                    Path("listing.txt").write_text(
                        "\\n".join(sorted(self.names)), encoding="utf-8"
                    )
            """
        ),
        encoding="utf-8",
    )

    code = cli.main(
        ["--providers", "claude", "--provider", str(custom), "--quiet"]
    )

    assert code == 0
    assert (tmp_path / "listing.txt").read_text(encoding="utf-8") == "a.md\nb.md"
    assert (tmp_path / "CLAUDE.md").is_file()


def test_providers_command_lists_builtins(capsys):
    code = cli.main(["providers"])
    captured = capsys.readouterr()

    assert code == 0
    assert "Built-in Providers" in captured.out
    for provider_id in ("cursor", "cline", "claude", "windsurf", "openai", "replit"):
        assert provider_id in captured.out
    assert "Total: 6 providers available" in captured.out


def test_validate_success(tmp_path, capsys):
    path = tmp_path / "good_provider.py"
    path.write_text(
        textwrap.dedent(
            """
            class GoodProvider:
                id = "good"

                def init(self):
                    pass

                def handle(self, rule):
                    pass

                def finish(self):
                    pass
            """
        ),
        encoding="utf-8",
    )

    code = cli.main(["validate", str(path)])
    captured = capsys.readouterr()

    assert code == 0
    assert "Provider validation successful:" in captured.out
    assert "ID: good" in captured.out
    assert "Class: GoodProvider" in captured.out
    assert "Methods: init, handle, finish" in captured.out


def test_validate_failure(tmp_path, capsys):
    path = tmp_path / "bad_provider.py"
    path.write_text(
        "class BadProvider:\n    id = 'bad'\n", encoding="utf-8"
    )

    code = cli.main(["validate", str(path)])
    captured = capsys.readouterr()

    assert code == 1
    assert "Provider validation failed:" in captured.err
    assert "'init' method" in captured.err


def test_config_init_writes_template(tmp_path, capsys):
    code = cli.main(["config", "init"])
    captured = capsys.readouterr()

    target = tmp_path / "rules_translator.toml"
    assert code == 0
    assert target.exists()
    assert "Wrote rules-translator config" in captured.out

    assert cli.main(["config", "init"]) == 1
    assert "already exists" in capsys.readouterr().err

    assert cli.main(["config", "init", "--force"]) == 0


def test_config_init_custom_path(tmp_path, capsys):
    code = cli.main(["config", "init", "--path", "conf/custom.toml"])

    assert code == 0
    assert (tmp_path / "conf" / "custom.toml").exists()


def test_init_with_yes_copies_bundled_rules(tmp_path, capsys):
    code = cli.main(["init", "--yes"])
    captured = capsys.readouterr()

    rules_dir = tmp_path / "agent-rules"
    assert code == 0
    assert "Copied bundled rules" in captured.out
    assert (rules_dir / "git.md").is_file()
    assert "Initialization complete" in captured.out
