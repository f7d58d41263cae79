from __future__ import annotations

from pathlib import Path

from tagcut.core.result import Err, Ok
from tagcut.git.memory import InMemoryRepository
from tagcut.git.repository import GitError
from tagcut.output.console import MockConsole
from tagcut.services.release.model import ReleaseRefs
from tagcut.services.release.publish import load_local_release, publish_release, push_targets
from tagcut.services.release.semver import ReleaseVersion

V020 = ReleaseVersion(0, 2, 0, text="0.2.0")
SHA = "1" * 40


def _refs() -> ReleaseRefs:
    return ReleaseRefs(version=V020, commit=SHA)


def test_push_targets_order() -> None:
    assert push_targets(_refs()) == ("HEAD", "refs/heads/v0.2.0", "refs/tags/v0.2.0")


def test_publish_pushes_in_order(tmp_path: Path) -> None:
    client = InMemoryRepository(tmp_path)
    console = MockConsole()

    result = publish_release(client, _refs(), remote="origin", console=console)

    assert result == Ok(None)
    assert client.pushed == [
        ("origin", "HEAD"),
        ("origin", "refs/heads/v0.2.0"),
        ("origin", "refs/tags/v0.2.0"),
    ]
    assert len(console.find("pushed ")) == 3


def test_publish_stops_at_first_failure(tmp_path: Path) -> None:
    client = InMemoryRepository(
        tmp_path,
        fail={"push refs/heads/v0.2.0": GitError(command="push", message="remote rejected")},
    )

    result = publish_release(client, _refs(), remote="origin", console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "publish_failed"
    assert "refs/heads/v0.2.0" in result.error.message
    assert "already pushed: HEAD" in result.error.message
    assert result.error.hint is not None
    assert "tagcut publish 0.2.0" in result.error.hint
    assert client.pushed == [("origin", "HEAD")]


class TestLoadLocalRelease:
    def test_resolves_tag_commit(self, tmp_path: Path) -> None:
        client = InMemoryRepository(
            tmp_path, refs={"refs/heads/v0.2.0": SHA, "refs/tags/v0.2.0": SHA}
        )

        result = load_local_release(client, V020)

        assert result == Ok(ReleaseRefs(version=V020, commit=SHA))

    def test_missing_tag(self, tmp_path: Path) -> None:
        client = InMemoryRepository(tmp_path, refs={"refs/heads/v0.2.0": SHA})

        result = load_local_release(client, V020)

        assert isinstance(result, Err)
        assert result.error.kind == "usage_error"
        assert "refs/tags/v0.2.0" in result.error.message
