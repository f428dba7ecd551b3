import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from bibcapture.config import CaptureConfig, load_config
from bibcapture.errors import CaptureError
from bibcapture.logging import add_log_file, get_logger, set_log_level
from bibcapture.model.capture import CaptureContext
from bibcapture.pipeline import CapturePipeline

logger = get_logger("cli")


def _load(config_path: Optional[str]) -> CaptureConfig:
    if config_path:
        return load_config(config_path)
    if Path("config.yaml").exists():
        return load_config("config.yaml")
    return CaptureConfig()


def read_links(file_path: Path) -> List[str]:
    """One link per line; blank lines and ``#`` comments are skipped."""
    links = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                links.append(line)
    return links


async def capture(args) -> int:
    config = _load(args.config)
    pipeline = CapturePipeline(config)
    query = {"silent": args.silent}
    if args.html_path:
        query["html_path"] = args.html_path

    context = CaptureContext(link=args.link, title=args.title or "", query=query)
    try:
        record = await pipeline.process_capture(context)
    except CaptureError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(record.text)
    return 0


async def batch(args) -> int:
    config = _load(args.config)
    pipeline = CapturePipeline(config)
    links = read_links(Path(args.file))
    logger.info(f"Capturing {len(links)} links from {args.file}")

    failed = 0
    with tqdm(total=len(links), desc="Capturing", unit="link") as pbar:
        for link in links:
            context = CaptureContext(link=link, query={"silent": True})
            try:
                record = await pipeline.process_capture(context)
                tqdm.write(record.text + "\n")
            except CaptureError as e:
                logger.error(f"{link}: {e}")
                failed += 1
            pbar.update(1)

    logger.info(f"Batch finished: {len(links) - failed} captured, {failed} failed")
    return 1 if failed else 0


def cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog = "bibcapture")
    parser.add_argument("--log-level", default=None, help = "Override the log level")
    parser.add_argument("--log-file", default=None, help = "Also write the log to this file")
    subparsers = parser.add_subparsers(dest = "command")

    capture_parser = subparsers.add_parser("capture", help = "Capture a single link")
    capture_parser.add_argument("link")
    capture_parser.add_argument("--title", default="", help = "Title of the captured page")
    capture_parser.add_argument("--html-path", default=None, help = "Pre-fetched page content")
    capture_parser.add_argument("--config", default=None, help = "YAML configuration file")
    capture_parser.add_argument("--silent", action="store_true", help = "Do not report duplicates")

    batch_parser = subparsers.add_parser("batch", help = "Capture every link listed in a file")
    batch_parser.add_argument("file")
    batch_parser.add_argument("--config", default=None, help = "YAML configuration file")

    args = parser.parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    if args.log_file:
        add_log_file(args.log_file, level=(args.log_level or "INFO").upper())

    if args.command == "capture":
        return asyncio.run(capture(args))
    elif args.command == "batch":
        return asyncio.run(batch(args))
    else:
        parser.print_help()
        return 0
