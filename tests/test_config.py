"""Tests for BlockFSConfig and shard slugs."""

from __future__ import annotations

from pathlib import Path

import pytest

from blockfs.config import BlockFSConfig, shard_slug


class TestShardSlug:
    def test_safe_id_kept(self):
        assert shard_slug("myapp") == "myapp"
        assert shard_slug("my-app_v1.2") == "my-app_v1.2"

    @pytest.mark.parametrize("shard_id", ["has space", ".hidden", "ünïcode", "x" * 200])
    def test_unsafe_id_hashed(self, shard_id: str):
        slug = shard_slug(shard_id)
        assert len(slug) == 64
        assert slug == shard_slug(shard_id)

    def test_distinct_ids_distinct_slugs(self):
        assert shard_slug("a b") != shard_slug("a  b")


class TestUrlFor:
    def test_in_memory_default(self):
        config = BlockFSConfig()
        assert not config.persistent
        assert config.url_for("docs") == "sqlite+aiosqlite://"

    def test_data_dir(self, tmp_path: Path):
        config = BlockFSConfig(data_dir=tmp_path)
        assert config.persistent
        assert config.url_for("docs") == f"sqlite+aiosqlite:///{tmp_path / 'docs.db'}"

    def test_data_dir_string_is_path(self, tmp_path: Path):
        config = BlockFSConfig(data_dir=str(tmp_path))  # type: ignore[arg-type]
        assert isinstance(config.data_dir, Path)

    def test_template_wins(self, tmp_path: Path):
        config = BlockFSConfig(
            data_dir=tmp_path,
            url_template="postgresql+asyncpg://db.internal/{shard}",
        )
        assert config.url_for("docs") == "postgresql+asyncpg://db.internal/docs"

    def test_template_requires_placeholder(self):
        with pytest.raises(ValueError, match="placeholder"):
            BlockFSConfig(url_template="sqlite+aiosqlite:///one.db")


class TestFromEnv:
    def test_no_env(self, monkeypatch: pytest.MonkeyPatch):
        for var in ("BLOCKFS_DATA_DIR", "BLOCKFS_URL_TEMPLATE", "BLOCKFS_ECHO"):
            monkeypatch.delenv(var, raising=False)
        config = BlockFSConfig.from_env()
        assert config.data_dir is None
        assert config.url_template is None
        assert config.echo is False

    def test_env_values(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("BLOCKFS_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BLOCKFS_URL_TEMPLATE", "sqlite+aiosqlite:///x/{shard}.sqlite")
        monkeypatch.setenv("BLOCKFS_ECHO", "true")
        config = BlockFSConfig.from_env()
        assert config.data_dir == tmp_path
        assert config.url_template == "sqlite+aiosqlite:///x/{shard}.sqlite"
        assert config.echo is True

    def test_explicit_arguments_win(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("BLOCKFS_DATA_DIR", "/nonexistent/env-dir")
        monkeypatch.delenv("BLOCKFS_URL_TEMPLATE", raising=False)
        config = BlockFSConfig.from_env(data_dir=tmp_path)
        assert config.data_dir == tmp_path

    @pytest.mark.parametrize(
        ("value", "expected"), [("1", True), ("on", True), ("0", False), ("", False)]
    )
    def test_echo_flag(self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool):
        monkeypatch.setenv("BLOCKFS_ECHO", value)
        assert BlockFSConfig.from_env().echo is expected
