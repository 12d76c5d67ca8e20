"""Command line entry point: sample, connect, classify, encode, write."""

from __future__ import annotations

import argparse
import logging
import sys

from chunkgrid.config import settings
from chunkgrid.engine.config import PipelineConfig, Placement, WidthMode
from chunkgrid.engine.pipeline import create_pipeline
from chunkgrid.errors import ConfigurationError
from chunkgrid.export import export_run

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    level = level or settings.chunkgrid_log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = PipelineConfig()
    parser = argparse.ArgumentParser(
        prog="chunkgrid",
        description="Connect rare chunks with a spanning tree and export a raster and schematic",
    )
    parser.add_argument(
        "--offset", type=int, nargs=2, metavar=("X", "Z"), default=list(defaults.offset),
        help="Chunk coordinate where the scan starts",
    )
    parser.add_argument("--scan-width", type=int, default=defaults.scan_width,
                        help="Chunks per scanned column (along z)")
    parser.add_argument("--cluster-size", type=int, default=defaults.cluster_size,
                        help="Number of cluster chunks to find")
    parser.add_argument("--hash-space", type=int, default=defaults.hash_space_size,
                        help="Hash space size, a power of two")
    parser.add_argument("--max-scan-area", type=int, default=defaults.max_scan_area,
                        help="Give up after scanning this many chunks")
    parser.add_argument("--placement", choices=[p.value for p in Placement],
                        default=defaults.placement.value)
    parser.add_argument("--width-mode", choices=[m.value for m in WidthMode],
                        default=defaults.width_mode.value,
                        help="'legacy' caps packed fields at 2 bits")
    parser.add_argument("--chunk-size", type=int, default=defaults.chunk_size)
    parser.add_argument("--region-name", default=defaults.region_name)
    parser.add_argument("--name", default=defaults.schematic_name, help="Schematic name")
    parser.add_argument("--author", default=None)
    parser.add_argument("--description", default=None)
    parser.add_argument("-o", "--out-dir", default=None,
                        help="Output directory (default: $CHUNKGRID_OUT_DIR or ./out)")
    parser.add_argument("--log-level", default=None)
    return parser


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        offset=tuple(args.offset),
        scan_width=args.scan_width,
        cluster_size=args.cluster_size,
        hash_space_size=args.hash_space,
        max_scan_area=args.max_scan_area,
        placement=Placement(args.placement),
        width_mode=WidthMode(args.width_mode),
        chunk_size=args.chunk_size,
        region_name=args.region_name,
        schematic_name=args.name,
        author=args.author,
        description=args.description,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = config_from_args(args)
        pipeline = create_pipeline(config)
        ctx = pipeline.run()
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2

    summary = export_run(ctx, args.out_dir or settings.chunkgrid_out_dir)
    print(summary.model_dump_json(indent=2))
    logger.info("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
