"""Recursive resolution of Notion block trees.

This module lists the children of a page or block, builds them, and
recurses into every child that has nested content. Synced blocks are
followed through their reference, column lists and tables are resolved into
their column/row structure. A failure inside one subtree leaves that subtree
empty and is recorded on the result; siblings are still resolved.
"""

import logging
from typing import AbstractSet, Any, Callable, Dict, List, Optional

from ..notion_api.api_wrapper import APIWrapper
from ..notion_api.errors import SyncError
from ..notion_api.pagination import list_all
from .block_builder import build_block
from .models import (
    Block,
    BlockKind,
    BlockTree,
    Column,
    ColumnListPayload,
    NESTING_KINDS,
    SubtreeFailure,
    SyncedBlockPayload,
    TablePayload,
    TableRow,
    TableRowPayload,
)
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)


class BlockResolver:
    """Resolves the full block tree under a container id.

    Resolution within one call is sequential, so children always come back
    in listing order. The ids being resolved on the current call path are
    tracked; meeting one of them again (a synced block cycle) yields an
    empty child list.

    Example:
        >>> resolver = BlockResolver(api)
        >>> tree = resolver.resolve(post.page_id)
        >>> for failure in tree.failures:
        ...     print(f"{failure.block_id}: {failure.error}")
    """

    def __init__(
        self,
        api: APIWrapper,
        snapshot_store: Optional[SnapshotStore] = None,
        save_snapshots: bool = False,
    ):
        """Initialize the resolver.

        Args:
            api: APIWrapper used to list children
            snapshot_store: Optional store consulted before listing remotely
            save_snapshots: Write every remote listing to snapshot_store
        """
        self._api = api
        self._snapshots = snapshot_store
        self._save_snapshots = save_snapshots

    def resolve(self, container_id: str) -> BlockTree:
        """Resolve every block under a container.

        Args:
            container_id: Page or block id

        Returns:
            BlockTree with top-level blocks and any subtree failures

        Raises:
            SyncError: If the container's own children cannot be listed
        """
        tree = BlockTree(container_id=container_id)
        tree.blocks = self._resolve_children(container_id, frozenset({container_id}), tree.failures)

        if tree.failures:
            logger.warning(
                f"Resolved {container_id} with {len(tree.failures)} failed subtree(s)"
            )
        return tree

    def get_all_blocks(self, container_id: str) -> List[Block]:
        """Resolve a container and return only its blocks."""
        return self.resolve(container_id).blocks

    def get_block(self, block_id: str) -> Block:
        """Fetch and build a single block without resolving its children."""
        return build_block(self._api.retrieve_block(block_id))

    def _list_children(self, container_id: str) -> List[Dict[str, Any]]:
        if self._snapshots is not None and not self._save_snapshots:
            raw = self._snapshots.load(container_id)
            if raw is not None:
                return raw

        raw = list_all(self._api.list_block_children, block_id=container_id)

        if self._snapshots is not None and self._save_snapshots:
            self._snapshots.save(container_id, raw)
        return raw

    def _resolve_children(
        self,
        container_id: str,
        active: AbstractSet[str],
        failures: List[SubtreeFailure],
    ) -> List[Block]:
        blocks = [build_block(raw) for raw in self._list_children(container_id)]
        logger.debug(f"Container {container_id} has {len(blocks)} children")

        for block in blocks:
            if block.has_children:
                self._resolve_subtree(block, active, failures)
        return blocks

    def _guarded(
        self,
        block_id: str,
        failures: List[SubtreeFailure],
        resolve: Callable[[], Any],
    ) -> Optional[str]:
        """Run one subtree resolution, recording a failure instead of raising.

        Returns:
            The error message if resolution failed, None otherwise
        """
        try:
            resolve()
        except SyncError as e:
            logger.warning(f"Failed to resolve children of {block_id}: {e}")
            failures.append(SubtreeFailure(block_id=block_id, error=str(e)))
            return str(e)
        return None

    def _resolve_subtree(
        self,
        block: Block,
        active: AbstractSet[str],
        failures: List[SubtreeFailure],
    ) -> None:
        if block.kind is BlockKind.COLUMN_LIST:
            block.children_error = self._guarded(
                block.id, failures, lambda: self._resolve_columns(block, active, failures)
            )
        elif block.kind is BlockKind.TABLE:
            block.children_error = self._guarded(
                block.id, failures, lambda: self._resolve_rows(block)
            )
        elif block.kind is BlockKind.SYNCED_BLOCK:
            block.children_error = self._guarded(
                block.id, failures, lambda: self._resolve_synced(block, active, failures)
            )
        elif block.kind in NESTING_KINDS:
            block.children_error = self._guarded(
                block.id, failures, lambda: self._resolve_nested(block, active, failures)
            )
        else:
            logger.debug(f"Not descending into {block.raw_type} block {block.id}")

    def _resolve_nested(
        self,
        block: Block,
        active: AbstractSet[str],
        failures: List[SubtreeFailure],
    ) -> None:
        if block.id in active:
            logger.debug(f"Block {block.id} already on the resolution path, skipping")
            return
        block.children = self._resolve_children(block.id, active | {block.id}, failures)

    def _resolve_synced(
        self,
        block: Block,
        active: AbstractSet[str],
        failures: List[SubtreeFailure],
    ) -> None:
        payload = block.payload
        if not isinstance(payload, SyncedBlockPayload):
            return
        target_id = payload.synced_from or block.id

        if block.id in active or target_id in active:
            logger.debug(
                f"Synced block cycle at {block.id} -> {target_id}, leaving children empty"
            )
            return

        if payload.is_reference:
            logger.debug(f"Synced block {block.id} follows reference {target_id}")
        block.children = self._resolve_children(
            target_id, active | {block.id, target_id}, failures
        )

    def _resolve_columns(
        self,
        block: Block,
        active: AbstractSet[str],
        failures: List[SubtreeFailure],
    ) -> None:
        payload = block.payload
        if not isinstance(payload, ColumnListPayload):
            return
        path = active | {block.id}

        for raw_column in self._list_children(block.id):
            column = Column(id=raw_column.get('id', ''))
            payload.columns.append(column)
            if not raw_column.get('has_children', False):
                continue

            def _fill(column: Column = column) -> None:
                column.children = self._resolve_children(column.id, path | {column.id}, failures)

            self._guarded(column.id, failures, _fill)

    def _resolve_rows(self, block: Block) -> None:
        payload = block.payload
        if not isinstance(payload, TablePayload):
            return

        for row_block in (build_block(raw) for raw in self._list_children(block.id)):
            row_payload = row_block.payload
            cells = row_payload.cells if isinstance(row_payload, TableRowPayload) else []
            payload.rows.append(TableRow(id=row_block.id, cells=cells))
