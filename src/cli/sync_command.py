"""Sync command orchestration for CLI.

This module provides the SyncCommand class that orchestrates one sync run:
it loads the post catalog, resolves the block tree of every post, downloads
referenced images and optionally writes a JSON export of the result.
"""

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict
from enum import Enum
from typing import Dict, Iterator, List, Optional

from src.blocks.models import BlockKind, FileObject, FilePayload, walk_blocks
from src.blocks.resolver import BlockResolver
from src.blocks.snapshot import SnapshotStore
from src.catalog.post_catalog import PostCatalog
from src.catalog.sync_cache import SyncCache
from src.cli.errors import ConfigError, ConfigNotFoundError
from src.cli.models import ExitCode, PostFailure, SyncReport, SyncSettings
from src.cli.output import OutputHandler
from src.images.image_pipeline import ImagePipeline, ImageResult
from src.notion_api.api_wrapper import APIWrapper
from src.notion_api.auth import Authenticator
from src.notion_api.errors import (
    InvalidCredentialsError,
    ObjectNotFoundError,
    SyncError,
    SyncFailure,
    TransientError,
)
from src.notion_api.retry_logic import RetryPolicy

logger = logging.getLogger(__name__)


def _json_default(value):
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class SyncCommand:
    """Orchestrates the complete sync workflow for the CLI.

    The sync workflow:
        1. Load the database metadata and the published posts (cached)
        2. Resolve the block tree of every post concurrently
        3. Download images referenced by blocks, covers and featured images
        4. Write the JSON export if requested
        5. Return the exit code matching the outcome

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(settings, output_handler=output)
        >>> exit_code = sync_cmd.run(output_path="content.json")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        output_handler: Optional[OutputHandler] = None,
        api: Optional[APIWrapper] = None,
        catalog: Optional[PostCatalog] = None,
        resolver: Optional[BlockResolver] = None,
        image_pipeline: Optional[ImagePipeline] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            settings: Run settings (defaults used if omitted)
            output_handler: OutputHandler for terminal output (optional)
            api: APIWrapper for Notion calls (optional)
            catalog: PostCatalog over the blog database (optional)
            resolver: BlockResolver for post content (optional)
            image_pipeline: ImagePipeline for downloads (optional)

        Note:
            All dependencies are optional to support testing. Missing ones
            are built from settings when run() starts.
        """
        self.settings = settings or SyncSettings()
        self.output_handler = output_handler or OutputHandler()
        self.api = api
        self.catalog = catalog
        self.resolver = resolver
        self.image_pipeline = image_pipeline

    def _build_components(self) -> None:
        settings = self.settings
        authenticator = Authenticator(token=settings.notion_token, database_id=settings.database_id)

        if not self.api:
            self.api = APIWrapper(
                authenticator,
                page_size=settings.page_size,
                timeout_ms=settings.request_timeout_ms,
                retry_policy=RetryPolicy(max_retries=settings.max_retries),
                notion_version=settings.notion_version,
            )

        if not self.catalog:
            credentials = authenticator.get_credentials()
            self.catalog = PostCatalog(
                self.api,
                credentials.database_id,
                cache=SyncCache(),
                posts_per_page=settings.posts_per_page,
            )

        if not self.resolver:
            store = SnapshotStore(settings.snapshot_dir) if settings.snapshot_dir else None
            self.resolver = BlockResolver(
                self.api,
                snapshot_store=store,
                save_snapshots=settings.save_snapshots,
            )

        if not self.image_pipeline:
            self.image_pipeline = ImagePipeline(
                output_dir=settings.image_dir,
                width=settings.image_width,
                timeout_ms=settings.request_timeout_ms,
            )

    def run(self, skip_images: bool = False, output_path: Optional[str] = None) -> ExitCode:
        """Execute one sync run.

        This is the main entry point. It translates exceptions to exit codes.

        Args:
            skip_images: If True, leave image URLs remote
            output_path: Optional JSON export destination

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            self._build_components()

            with self.output_handler.spinner("Loading posts..."):
                report = self.sync(skip_images=skip_images)

            if output_path:
                self.write_export(report, output_path)
                self.output_handler.info(f"Wrote {output_path}")

            self.output_handler.print_sync_summary(
                posts=len(report.posts),
                post_failures=len(report.post_failures),
                subtree_failures=sum(len(f) for f in report.subtree_failures.values()),
                images_downloaded=report.images_downloaded,
                images_skipped=len(report.images_skipped),
            )

            if report.has_failures:
                return ExitCode.PARTIAL
            return ExitCode.SUCCESS

        except (InvalidCredentialsError, ObjectNotFoundError) as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check NOTION_TOKEN and DATABASE_ID, and that the database is shared with the integration"
            )
            return ExitCode.AUTH_ERROR

        except (SyncFailure, TransientError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except SyncError as e:
            logger.error(f"Sync error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def sync(self, skip_images: bool = False) -> SyncReport:
        """Load the catalog, resolve every post and fetch images.

        Catalog failures propagate; failures inside one post are recorded
        in the report.
        """
        if not self.catalog:
            self._build_components()

        report = SyncReport()
        report.database = self.catalog.database()
        report.posts = self.catalog.all_posts()
        logger.info(f"Catalog has {len(report.posts)} published post(s)")

        self._resolve_posts(report)

        if skip_images:
            logger.info("Skipping image downloads")
        else:
            self._download_images(report)

        return report

    def _resolve_posts(self, report: SyncReport) -> None:
        if not report.posts:
            return

        resolved = {}
        errors = {}
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            futures = {
                executor.submit(self.resolver.resolve, post.page_id): post
                for post in report.posts
            }
            for future in as_completed(futures):
                post = futures[future]
                try:
                    resolved[post.page_id] = future.result()
                except SyncError as e:
                    logger.warning(f"Could not resolve post '{post.slug}': {e}")
                    errors[post.page_id] = str(e)

        # Keep catalog order regardless of completion order
        for post in report.posts:
            if post.page_id in errors:
                report.post_failures.append(PostFailure(post.page_id, post.slug, errors[post.page_id]))
            tree = resolved.get(post.page_id)
            report.blocks[post.page_id] = tree.blocks if tree else []
            report.subtree_failures[post.page_id] = tree.failures if tree else []
            if tree and tree.failures:
                logger.warning(f"Post '{post.slug}' has {len(tree.failures)} unresolved subtree(s)")

    def _collect_images(self, report: SyncReport) -> Dict[str, List[FileObject]]:
        """Map each image URL to every file reference that points at it."""
        targets: Dict[str, List[FileObject]] = {}

        def _add(file_obj: Optional[FileObject]) -> None:
            if file_obj and file_obj.url:
                targets.setdefault(file_obj.url, []).append(file_obj)

        for post in report.posts:
            _add(post.featured_image)
            _add(post.cover)
            for file_obj in self._iter_image_files(report.blocks.get(post.page_id, [])):
                _add(file_obj)

        if report.database:
            _add(report.database.cover)

        return targets

    @staticmethod
    def _iter_image_files(blocks) -> Iterator[FileObject]:
        for block in walk_blocks(blocks):
            if block.kind is BlockKind.IMAGE and isinstance(block.payload, FilePayload):
                if block.payload.file:
                    yield block.payload.file

    def _download_images(self, report: SyncReport) -> None:
        targets = self._collect_images(report)
        if not targets:
            return

        logger.info(f"Downloading {len(targets)} image(s)")
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            results: List[ImageResult] = list(
                executor.map(self.image_pipeline.fetch_and_store, targets)
            )

        for result in results:
            if result.ok:
                report.images_downloaded += 1
                for file_obj in targets[result.url]:
                    file_obj.local_path = result.web_path
            else:
                report.images_skipped.append(result.url)

    def write_export(self, report: SyncReport, output_path: str) -> None:
        """Write the report as JSON.

        Args:
            report: Report produced by sync()
            output_path: Destination file (parent directories are created)
        """
        export = {
            'database': asdict(report.database) if report.database else None,
            'posts': [asdict(post) for post in report.posts],
            'blocks': {
                page_id: [asdict(block) for block in blocks]
                for page_id, blocks in report.blocks.items()
            },
            'failures': {
                'posts': [asdict(f) for f in report.post_failures],
                'subtrees': {
                    page_id: [asdict(f) for f in failures]
                    for page_id, failures in report.subtree_failures.items()
                    if failures
                },
                'images': list(report.images_skipped),
            },
        }

        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(export, f, ensure_ascii=False, indent=2, default=_json_default)
        logger.info(f"Exported {len(report.posts)} post(s) to {output_path}")
