""" This module contains the CLI for Tumblegrab. """

import signal
import sys
from dataclasses import replace
from pathlib import Path
import logging

import click

from tumblegrab.downloader import Downloader
from tumblegrab.events import EventKind, PageBoundaryEvent, WalkErrorEvent
from tumblegrab.logger import TumblegrabLogger
from tumblegrab.session import ScrapeSession
from tumblegrab.tumblr import TumblrClient
from tumblegrab.typing_custom import WalkOptions, WalkState
from tumblegrab.utils import get_version, load_config

@click.command()
@click.argument("blog")
@click.argument("output_dir", type = Path)
@click.option(
    "--config", "-f",
    metavar = "FILENAME",
    type = Path,
    help = "JSON file with the Tumblr client configuration.",
)
@click.option(
    "--debug", "-d",
    is_flag = True,
    help = "Turn on debug mode.",
)
@click.option("--page", "-n", type = click.IntRange(min=1), default = 1, show_default = True, help = "Page number to start from.")
@click.option("--offset", type = click.IntRange(min=0), default = 0, show_default = True, help = "Post offset to start from.")
@click.option("--max-pages", "-r", type = click.IntRange(min=1), help = "Stop once this page number has been reached.")
@click.option("--max-index", "-i", type = click.IntRange(min=1), help = "Stop after downloading this many pages.")
@click.option("--stop-at", multiple = True, metavar = "POST_ID", help = "Stop when this post (or a photo file stem of it) is reached. Can be repeated.")
@click.option(
    "--skip-existing/--no-skip-existing",
    default = True,
    show_default = True,
    help = "Skip photos that were already saved to OUTPUT_DIR.",
)
@click.option("--proxy", "-x", envvar = "TUMBLEGRAB_PROXY_URL", help = "Proxy URL used for every request.")
@click.option("--api-token", envvar = "TUMBLEGRAB_API_TOKEN", help = "Tumblr API bearer token.")
@click.version_option(get_version(), message="%(version)s")
# pylint: disable=too-many-arguments,too-many-locals
def cli(blog: str, output_dir: Path, config: Path, debug: bool, page: int, offset: int,
        max_pages: int, max_index: int, stop_at: tuple[str, ...], skip_existing: bool,
        proxy: str, api_token: str):
    """
    BLOG is the name of the Tumblr blog to download
    OUTPUT_DIR is the directory where the downloaded photos will be saved
    """
    def exit_handler(*_):
        logger.info("Ctrl+C detected! Stopping...")
        sys.exit(0)

    def on_page(event: PageBoundaryEvent):
        logger.info("Finished a page of %s, %d photos found", event.blog, len(event.records))

    def on_error(event: WalkErrorEvent):
        if event.fatal:
            logger.error("Error downloading from blog %s: %s", event.scope, event.error)
        else:
            logger.warning("Skipped post %s: %s", event.error.post_id, event.error)

    logger = TumblegrabLogger(level=logging.DEBUG if debug else logging.INFO)

    logger.info("Welcome to Tumblegrab!")

    logger.debug("Reading client configuration")
    tumblr_config = load_config(config)
    if proxy:
        tumblr_config = replace(tumblr_config, proxy_url=proxy)
    if api_token:
        tumblr_config = replace(tumblr_config, api_token=api_token)

    session = ScrapeSession(TumblrClient(tumblr_config, logger), logger)
    downloader = Downloader(tumblr_config, logger)
    logger.set_session(session)

    session.on(EventKind.PAGE_BOUNDARY, on_page, scope=blog)
    session.on(EventKind.WALK_ERROR, on_error, scope=blog)

    walk = session.walk(blog, WalkOptions(
        start_page=page,
        start_offset=offset,
        max_pages=max_pages,
        max_index=max_index,
        # Saved files are named {post}_{n}, only the post id is matched
        stop_at=frozenset(post_id.split("_")[0] for post_id in stop_at),
    ))
    signal.signal(signal.SIGINT, exit_handler)

    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading blog %s to %s", blog, output_dir)

    for record in walk:
        if skip_existing and (existing := downloader.existing(record, output_dir)) is not None:
            logger.debug("Photo %s has already been saved to %s, skipping", record.id, existing)
            continue

        if downloader.download(record, output_dir) is None:
            logger.info("Failed to download photo %s", record.id)
        else:
            logger.info("Downloaded photo %s by %s", record.id, record.author)

    if walk.state is WalkState.FAILED:
        if walk.error.cursor is not None:
            logger.info("Resume with --page %d --offset %d", walk.error.cursor.page_number, walk.error.cursor.offset)
        sys.exit(1)

    logger.info("Download complete!")
