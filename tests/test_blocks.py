"""Tests for the block codec and BlockService."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from blockfs.fs.blocks import (
    BLOCK_SIZE,
    BlockService,
    assemble_blocks,
    block_count,
    split_into_blocks,
)
from blockfs.fs.exceptions import ConsistencyError
from blockfs.models.blocks import Block
from blockfs.models.entries import Entry, EntryKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def _pattern(size: int) -> bytes:
    return bytes(i % 251 for i in range(size))


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class TestBlockCount:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            pytest.param(0, 0, id="empty"),
            pytest.param(1, 1, id="one-byte"),
            pytest.param(BLOCK_SIZE, 1, id="exact-block"),
            pytest.param(BLOCK_SIZE + 1, 2, id="one-over"),
            pytest.param(10 * BLOCK_SIZE, 10, id="ten-blocks"),
        ],
    )
    def test_count(self, size: int, expected: int):
        assert block_count(size) == expected

    def test_block_size_is_fixed(self):
        assert BLOCK_SIZE == 4096


class TestSplitIntoBlocks:
    def test_empty_yields_nothing(self):
        assert split_into_blocks(b"") == []

    def test_short_content_single_block(self):
        assert split_into_blocks(b"hello") == [(0, b"hello")]

    def test_exact_block(self):
        data = _pattern(BLOCK_SIZE)
        blocks = split_into_blocks(data)
        assert len(blocks) == 1
        assert blocks[0] == (0, data)

    def test_last_block_is_short(self):
        data = _pattern(BLOCK_SIZE * 2 + 100)
        blocks = split_into_blocks(data)
        assert [index for index, _ in blocks] == [0, 1, 2]
        assert [len(payload) for _, payload in blocks] == [BLOCK_SIZE, BLOCK_SIZE, 100]
        assert blocks[1][1] == data[BLOCK_SIZE : 2 * BLOCK_SIZE]


class TestAssembleBlocks:
    def test_out_of_order_input(self):
        data = _pattern(BLOCK_SIZE * 3 - 7)
        shuffled = list(reversed(split_into_blocks(data)))
        assert assemble_blocks(len(data), shuffled) == data

    def test_empty(self):
        assert assemble_blocks(0, []) == b""

    def test_missing_block(self):
        blocks = split_into_blocks(_pattern(BLOCK_SIZE * 2))
        with pytest.raises(ConsistencyError, match="Expected 2"):
            assemble_blocks(BLOCK_SIZE * 2, blocks[:1], "a/f")

    def test_gap_in_indices(self):
        blocks = [(0, b"x" * BLOCK_SIZE), (2, b"y")]
        with pytest.raises(ConsistencyError, match="Missing block 1"):
            assemble_blocks(BLOCK_SIZE + 1, blocks)

    def test_extra_block(self):
        with pytest.raises(ConsistencyError):
            assemble_blocks(3, [(0, b"abc"), (1, b"d")])

    def test_wrong_payload_length(self):
        with pytest.raises(ConsistencyError, match="holds 2 bytes"):
            assemble_blocks(3, [(0, b"ab")])

    def test_short_middle_block(self):
        blocks = [(0, b"x" * 10), (1, b"y" * 10)]
        with pytest.raises(ConsistencyError):
            assemble_blocks(BLOCK_SIZE + 10, blocks)


# ---------------------------------------------------------------------------
# BlockService
# ---------------------------------------------------------------------------


async def _add_file_entry(session: AsyncSession, path: str, size: int) -> None:
    session.add(Entry(path=path, kind=EntryKind.FILE.value, size=size))
    await session.flush()


class TestBlockService:
    async def test_replace_inserts_blocks(self, async_session: AsyncSession):
        svc = BlockService(Block)
        data = _pattern(BLOCK_SIZE + 1)
        await _add_file_entry(async_session, "d/f.bin", len(data))

        count = await svc.replace_blocks(async_session, "d/f.bin", data)

        assert count == 2
        assert await svc.count_blocks(async_session, "d/f.bin") == 2
        stored = await svc.list_blocks(async_session, "d/f.bin")
        assert assemble_blocks(len(data), stored) == data

    async def test_replace_drops_stale_tail(self, async_session: AsyncSession):
        svc = BlockService(Block)
        await _add_file_entry(async_session, "d/f.bin", 0)
        await svc.replace_blocks(async_session, "d/f.bin", _pattern(BLOCK_SIZE * 5))

        count = await svc.replace_blocks(async_session, "d/f.bin", b"tiny")

        assert count == 1
        assert await svc.list_blocks(async_session, "d/f.bin") == [(0, b"tiny")]

    async def test_replace_with_empty_content(self, async_session: AsyncSession):
        svc = BlockService(Block)
        await _add_file_entry(async_session, "d/f.bin", 0)
        await svc.replace_blocks(async_session, "d/f.bin", b"content")

        assert await svc.replace_blocks(async_session, "d/f.bin", b"") == 0
        assert await svc.count_blocks(async_session, "d/f.bin") == 0

    async def test_delete_blocks_returns_count(self, async_session: AsyncSession):
        svc = BlockService(Block)
        await _add_file_entry(async_session, "d/f.bin", 0)
        await svc.replace_blocks(async_session, "d/f.bin", _pattern(BLOCK_SIZE * 3))

        assert await svc.delete_blocks(async_session, "d/f.bin") == 3
        assert await svc.delete_blocks(async_session, "d/f.bin") == 0

    async def test_blocks_scoped_to_path(self, async_session: AsyncSession):
        svc = BlockService(Block)
        await _add_file_entry(async_session, "d/a", 0)
        await _add_file_entry(async_session, "d/b", 0)
        await svc.replace_blocks(async_session, "d/a", b"aaa")
        await svc.replace_blocks(async_session, "d/b", b"bbb")

        await svc.delete_blocks(async_session, "d/a")

        assert await svc.list_blocks(async_session, "d/b") == [(0, b"bbb")]

    def test_block_model_property(self):
        assert BlockService(Block).block_model is Block
