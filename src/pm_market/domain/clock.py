"""Block clock — the externally observed ordinal that drives market phases.

Operations read the current block; nothing in this codebase advances it
except ManualBlockClock, which exists for tests and local simulation.
"""

from typing import Protocol


class BlockClockProtocol(Protocol):
    async def current_block(self) -> int: ...


class ManualBlockClock:
    def __init__(self, block: int = 0) -> None:
        self._block = block

    async def current_block(self) -> int:
        return self._block

    def set_block(self, block: int) -> None:
        if block < self._block:
            raise ValueError(f"Block height cannot regress: {block} < {self._block}")
        self._block = block

    def advance(self, blocks: int = 1) -> int:
        self.set_block(self._block + blocks)
        return self._block
