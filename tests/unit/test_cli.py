"""Test CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.testing import CliRunner

from storygraph import __version__
from storygraph.artifacts.codec import deserialize, serialize
from storygraph.cli import app

if TYPE_CHECKING:
    from pathlib import Path

    import pytest

    from storygraph.models.story_graph import StoryGraph

runner = CliRunner()


def _flat(output: str) -> str:
    """Collapse whitespace so console line wrapping doesn't matter."""
    return " ".join(output.split())


def test_version_command() -> None:
    """Test sgraph version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"v{__version__}" in result.stdout


def test_no_args_shows_help() -> None:
    """Test that no arguments shows help."""
    result = runner.invoke(app, [])
    # no_args_is_help=True returns exit code 2 (not 0 like --help)
    assert result.exit_code == 2
    assert "storygraph" in result.stdout


# --- New Command Tests ---


def test_new_creates_story(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """sgraph new writes a document with one start node."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "intro.storygraph.yaml"

    result = runner.invoke(app, ["new", str(path), "--title", "Intro", "-d", "Opening act"])

    assert result.exit_code == 0
    assert "Created" in result.stdout
    doc = deserialize(path.read_text(encoding="utf-8"))
    assert doc.metadata.title == "Intro"
    assert doc.metadata.description == "Opening act"
    assert len(doc.nodes) == 1


def test_new_uses_configured_default_title(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without --title the project's default_title is used."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "storygraph.yaml").write_text("default_title: Draft\n", encoding="utf-8")

    result = runner.invoke(app, ["new", "a.storygraph.yaml"])

    assert result.exit_code == 0
    doc = deserialize((tmp_path / "a.storygraph.yaml").read_text(encoding="utf-8"))
    assert doc.metadata.title == "Draft"


def test_new_refuses_existing_file(tmp_path: Path) -> None:
    """sgraph new never overwrites."""
    path = tmp_path / "a.storygraph.yaml"
    path.write_text("keep me", encoding="utf-8")

    result = runner.invoke(app, ["new", str(path)])

    assert result.exit_code == 1
    assert "already exists" in _flat(result.stdout)
    assert path.read_text(encoding="utf-8") == "keep me"


# --- Inspection Command Tests ---


def _write(tmp_path: Path, doc: StoryGraph) -> Path:
    path = tmp_path / "story.storygraph.yaml"
    path.write_text(serialize(doc), encoding="utf-8")
    return path


def test_validate_valid_story(tmp_path: Path, linear_story: StoryGraph) -> None:
    """A valid story exits 0."""
    result = runner.invoke(app, ["validate", str(_write(tmp_path, linear_story))])

    assert result.exit_code == 0
    assert "is valid" in _flat(result.stdout)


def test_validate_invalid_story(tmp_path: Path, linear_story: StoryGraph) -> None:
    """An invalid story lists its problems and exits 1."""
    del linear_story.nodes["end-good"]

    result = runner.invoke(app, ["validate", str(_write(tmp_path, linear_story))])

    assert result.exit_code == 1
    assert "missing an end node" in _flat(result.stdout)
    assert "Edge e2" in _flat(result.stdout)


def test_validate_missing_file(tmp_path: Path) -> None:
    """A missing file is reported and exits 1."""
    result = runner.invoke(app, ["validate", str(tmp_path / "nope.storygraph.yaml")])

    assert result.exit_code == 1
    assert "File not found" in _flat(result.stdout)


def test_validate_unparseable_file(tmp_path: Path) -> None:
    """A file that doesn't parse is reported and exits 1."""
    path = tmp_path / "bad.storygraph.yaml"
    path.write_text("nodes: [unclosed", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Could not load" in _flat(result.stdout)


def test_summary_command(tmp_path: Path, linear_story: StoryGraph) -> None:
    """sgraph summary prints the fixed-format digest."""
    result = runner.invoke(app, ["summary", str(_write(tmp_path, linear_story))])

    assert result.exit_code == 0
    assert 'Story: "The Tavern"' in result.stdout
    assert "Scenes: 1" in result.stdout
    assert "End Nodes: 1" in result.stdout


def test_nodes_command(tmp_path: Path, branching_story: StoryGraph) -> None:
    """sgraph nodes lists every node."""
    result = runner.invoke(app, ["nodes", str(_write(tmp_path, branching_story))])

    assert result.exit_code == 0
    assert "Crossroads" in result.stdout
    assert "end-bad" in result.stdout


def test_log_flag_writes_jsonl(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """--log appends events to ./logs/storygraph.jsonl."""
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["--log", "new", "x.storygraph.yaml"])

    assert result.exit_code == 0
    assert (tmp_path / "logs" / "storygraph.jsonl").exists()


# --- Stories Directory Tests ---


def test_new_relative_path_goes_to_stories_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A relative path lands in the configured stories directory when it exists."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "storygraph.yaml").write_text("stories_dir: tales\n", encoding="utf-8")
    (tmp_path / "tales").mkdir()

    result = runner.invoke(app, ["new", "intro.storygraph.yaml"])

    assert result.exit_code == 0
    assert (tmp_path / "tales" / "intro.storygraph.yaml").exists()
    assert not (tmp_path / "intro.storygraph.yaml").exists()


def test_summary_finds_story_in_stories_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, linear_story: StoryGraph
) -> None:
    """Inspection commands look up relative names under the stories directory."""
    monkeypatch.chdir(tmp_path)
    stories = tmp_path / "stories"
    stories.mkdir()
    (stories / "tavern.storygraph.yaml").write_text(serialize(linear_story), encoding="utf-8")

    result = runner.invoke(app, ["summary", "tavern.storygraph.yaml"])

    assert result.exit_code == 0
    assert 'Story: "The Tavern"' in result.stdout


def test_stories_dir_env_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, linear_story: StoryGraph
) -> None:
    """SG_STORIES_DIR redirects story lookup."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SG_STORIES_DIR", "drafts")
    (tmp_path / "drafts").mkdir()
    (tmp_path / "drafts" / "t.storygraph.yaml").write_text(
        serialize(linear_story), encoding="utf-8"
    )

    result = runner.invoke(app, ["validate", "t.storygraph.yaml"])

    assert result.exit_code == 0
    assert "is valid" in _flat(result.stdout)


def test_list_shows_project_stories(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    linear_story: StoryGraph,
    branching_story: StoryGraph,
) -> None:
    """sgraph list shows each story file with its title and verdict."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "storygraph.yaml").write_text("name: saga\n", encoding="utf-8")
    stories = tmp_path / "stories"
    (stories / "act2").mkdir(parents=True)
    (stories / "a.storygraph.yaml").write_text(serialize(linear_story), encoding="utf-8")
    (stories / "act2" / "b.storygraph.yaml").write_text(
        serialize(branching_story), encoding="utf-8"
    )
    (stories / "hero.character.yaml").write_text("name: Hero\n", encoding="utf-8")

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    output = _flat(result.stdout)
    assert "saga" in output
    assert "The Tavern" in output
    assert "Crossroads" in output
    assert "act2/b.storygraph.yaml" in output
    assert "hero.character" not in output


def test_list_without_stories_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """sgraph list exits 1 when the stories directory is missing."""
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 1
    assert "Stories directory not found" in _flat(result.stdout)
