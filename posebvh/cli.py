"""
Command-line interface for pose capture and BVH export.
"""

import argparse
from pathlib import Path
from typing import List, Optional

import yaml
from rich.console import Console

from posebvh import __version__
from posebvh.app import load_config, setup_logging
from posebvh.config import AppConfig, ConfigError
from posebvh.core.frames import FrameFormatError, load_frames_json
from posebvh.core.types import Frame
from posebvh.export.bvh_export import BVHExporter, EmptyInputError, ExportWriteError

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="posebvh",
        description="Pose capture to BVH motion export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert captured frames (JSON) to BVH
  posebvh convert frames.json --output motion.bvh

  # Capture from a video file
  posebvh capture input.mp4 --output motion.bvh

  # Capture 300 frames from the default webcam
  posebvh capture 0 --max-frames 300

  # Write the default configuration for editing
  posebvh --write-config posebvh.yaml
        """,
    )

    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (YAML)",
    )

    parser.add_argument(
        "--write-config",
        type=Path,
        metavar="PATH",
        help="Write the default configuration to PATH and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    convert = subparsers.add_parser("convert", help="Convert a JSON frame file to BVH")
    convert.add_argument("frames", type=Path, help="JSON file with captured frames")
    _add_export_arguments(convert)

    capture = subparsers.add_parser("capture", help="Capture a video or camera to BVH")
    capture.add_argument("source", help="Video file path or camera index")
    capture.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after this many captured frames",
    )
    _add_export_arguments(capture)

    return parser


def _add_export_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output BVH file path",
    )
    parser.add_argument(
        "--frame-rate",
        type=float,
        help="Frame rate written to the BVH file (default: from config, 30)",
    )
    parser.add_argument(
        "--scale",
        type=float,
        help="World units per normalized screen width (default: from config, 200)",
    )


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    if args.frame_rate is not None:
        config.export.frame_rate = args.frame_rate
    if args.scale is not None:
        config.export.scale = args.scale


def _export(config: AppConfig, frames: List[Frame], output_path: Path) -> int:
    exporter = BVHExporter.from_config(config.export)

    try:
        exporter.export(frames, output_path)
    except EmptyInputError:
        console.print("[red]Error:[/red] No frames to export")
        return 1
    except ExportWriteError as e:
        console.print(f"[red]Error writing BVH:[/red] {e}")
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid export settings:[/red] {e}")
        return 1

    console.print(f"[green]✓[/green] Exported BVH: {output_path}")
    console.print(f"  Total frames: {len(frames)}")
    return 0


def run_convert(config: AppConfig, args: argparse.Namespace) -> int:
    """Convert a JSON frame file to BVH."""
    try:
        frames = load_frames_json(args.frames)
    except OSError as e:
        console.print(f"[red]Error reading frames:[/red] {e}")
        return 1
    except FrameFormatError as e:
        console.print(f"[red]Invalid frame file:[/red] {e}")
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid JSON in {args.frames}:[/red] {e}")
        return 1

    output_path = args.output or args.frames.with_suffix(".bvh")
    return _export(config, frames, output_path)


def run_capture(config: AppConfig, args: argparse.Namespace) -> int:
    """Capture frames from a video or camera and export them."""
    from posebvh.capture.pose_source import PoseSampler

    source = int(args.source) if args.source.isdigit() else args.source
    output_path = args.output or Path(f"{config.export.filename_prefix}.bvh")

    console.print(f"\n[bold green]Capturing:[/bold green] {source}")

    frames: List[Frame] = []
    try:
        with PoseSampler.from_config(source, config.capture) as sampler:
            for frame in sampler.frames(max_frames=args.max_frames):
                frames.append(frame)
                if len(frames) % 30 == 0:
                    console.print(f"  Captured {len(frames)} frames...", end="\r")
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped by user[/yellow]")
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Error capturing:[/red] {e}")
        return 1

    console.print(f"\nCaptured {len(frames)} frames")
    return _export(config, frames, output_path)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        console.print(f"posebvh version {__version__}")
        return 0

    try:
        config = load_config(args.config)
    except (OSError, ConfigError, TypeError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        return 1

    setup_logging("DEBUG" if args.verbose else config.log_level)

    if args.write_config:
        config.to_yaml(args.write_config)
        console.print(f"[green]✓[/green] Wrote configuration: {args.write_config}")
        return 0

    if args.command is None:
        parser.print_help()
        return 2

    _apply_overrides(config, args)

    # Validate configuration
    issues = config.validate()
    if issues:
        console.print("[yellow]Configuration warnings:[/yellow]")
        for issue in issues:
            console.print(f"  - {issue}")

    if args.command == "convert":
        return run_convert(config, args)
    return run_capture(config, args)
