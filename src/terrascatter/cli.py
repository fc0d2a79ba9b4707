"""Command-line interface for scene generation."""

import argparse
import logging
import time
import tomllib
from pathlib import Path

import structlog
from pydantic import ValidationError

from .config import SceneConfig, find_config, load_config
from .exceptions import TerrascatterError


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a Diamond-Square heightfield and scatter objects over it"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path or name of a scene TOML config (default: built-in defaults)",
    )
    parser.add_argument("--size", type=int, default=None, help="Heightfield size")
    parser.add_argument(
        "--roughness", type=float, default=None, help="Heightfield roughness"
    )
    parser.add_argument(
        "--min-distance",
        type=float,
        default=None,
        help="Minimum distance between scattered objects",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Candidates tried per frontier point",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="saves/scene.npz",
        help="Output path (default: saves/scene.npz)",
    )
    parser.add_argument(
        "--preview",
        type=str,
        default=None,
        help="Also write a PNG preview to this path",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def apply_overrides(config: SceneConfig, args: argparse.Namespace) -> SceneConfig:
    """Return a copy of config with command-line overrides applied.

    Raises:
        pydantic.ValidationError: If an override is out of range.
    """
    data = config.model_dump()
    if args.seed is not None:
        data["seed"] = args.seed
    if args.size is not None:
        data["heightfield"]["size"] = args.size
    if args.roughness is not None:
        data["heightfield"]["roughness"] = args.roughness
    if args.min_distance is not None:
        data["scatter"]["minimum_distance"] = args.min_distance
    if args.iterations is not None:
        data["scatter"]["iterations_per_point"] = args.iterations
    return SceneConfig.model_validate(data)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for scene generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .generator import generate_and_save_scene
    from .preview import save_preview

    try:
        if args.config:
            config_path = find_config(args.config)
            config = load_config(config_path)
            logger.info("config_loaded", path=str(config_path))
        else:
            config = SceneConfig()
            logger.info("using_default_config")
        config = apply_overrides(config, args)
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.error("config_error", error=str(e))
        raise SystemExit(1)

    output_path = Path(args.output)

    start_time = time.time()
    try:
        result = generate_and_save_scene(config, output_path)
    except TerrascatterError as e:
        logger.error("generation_failed", error=str(e))
        raise SystemExit(1)
    gen_time = time.time() - start_time

    if args.preview:
        save_preview(
            Path(args.preview), result.heights, result.objects, config.footprint
        )
        logger.info("preview_saved", path=args.preview)

    logger.info(
        "generation_complete",
        seconds=round(gen_time, 2),
        objects=len(result.objects),
        valid=result.validation.passed,
        output=str(output_path),
    )


if __name__ == "__main__":
    main()
