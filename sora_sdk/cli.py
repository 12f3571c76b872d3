#!/usr/bin/env python3
"""
Sora SDK - Command line

Usage:
    # Generate and download a video
    sora-sdk generate "A serene waterfall" --aspect-ratio 16:9 --quality high -o waterfall.mp4

    # Check or wait on an existing job
    sora-sdk status task_123
    sora-sdk wait task_123 --poll-interval 10

    # Download a finished video
    sora-sdk download https://.../content/video?api-version=preview out.mp4

    # Preview dimensions for a ratio
    sora-sdk dimensions 21:9 --quality ultra

    # Get prompt suggestions
    sora-sdk enhance "A forest scene" -n 3
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from sora_sdk.core.config import PromptEnhancerConfig, SoraConfig
from sora_sdk.core.errors import SoraError
from sora_sdk.services.prompt_enhancement import PromptEnhancer
from sora_sdk.services.video_generation import (
    AspectRatioAndQuality,
    ExplicitDimensions,
    GenerationRequest,
    JobSnapshot,
    SoraClient,
    get_common_dimensions,
)

logger = logging.getLogger("sora_sdk")


def _print_progress(snapshot: JobSnapshot):
    progress = f" {snapshot.progress_percentage}%" if snapshot.progress_percentage is not None else ""
    print(f"  {snapshot.job_id}: {snapshot.status.value}{progress}")


def _build_request(args: argparse.Namespace) -> GenerationRequest:
    if args.width is not None or args.height is not None:
        dimensions = ExplicitDimensions(width=args.width or 0, height=args.height or 0)
    else:
        dimensions = AspectRatioAndQuality(args.aspect_ratio, args.quality)

    return GenerationRequest(
        prompt=args.prompt,
        dimensions=dimensions,
        duration_seconds=args.duration,
        frame_rate=args.frame_rate,
        seed=args.seed,
        style=args.style,
    )


async def run_generate(args: argparse.Namespace) -> int:
    request = _build_request(args)
    async with SoraClient(SoraConfig.from_env(), on_progress=_print_progress) as client:
        outcome = await client.generate(
            request,
            destination=args.output,
            poll_interval=args.poll_interval,
            max_wait_time=args.max_wait,
        )
    print(f"Job {outcome.job_id} finished ({outcome.width}x{outcome.height})")
    print(f"Video URL: {outcome.result_url}")
    if outcome.local_path:
        print(f"Saved to: {outcome.local_path}")
    return 0


async def run_status(args: argparse.Namespace) -> int:
    async with SoraClient(SoraConfig.from_env()) as client:
        snapshot = await client.poll(args.job_id)
    print(f"Job {snapshot.job_id}: {snapshot.status.value} (server: {snapshot.raw_status})")
    if snapshot.result_url:
        print(f"Video URL: {snapshot.result_url}")
    if snapshot.error_message:
        print(f"Error: {snapshot.error_message}")
    return 0


async def run_wait(args: argparse.Namespace) -> int:
    async with SoraClient(SoraConfig.from_env(), on_progress=_print_progress) as client:
        url = await client.wait_for_completion(
            args.job_id,
            poll_interval=args.poll_interval,
            max_wait_time=args.max_wait,
        )
    print(f"Video URL: {url}")
    return 0


async def run_download(args: argparse.Namespace) -> int:
    async with SoraClient(SoraConfig.from_env()) as client:
        path = await client.download(args.url, args.output)
    print(f"Saved to: {path}")
    return 0


async def run_enhance(args: argparse.Namespace) -> int:
    async with PromptEnhancer(PromptEnhancerConfig.from_env()) as enhancer:
        suggestions = await enhancer.suggest_prompts(args.prompt, max_suggestions=args.count)
    if not suggestions:
        print("No suggestions returned")
    for i, suggestion in enumerate(suggestions, 1):
        print(f"{i}. {suggestion}")
    return 0


def run_dimensions(args: argparse.Namespace) -> int:
    try:
        width, height = get_common_dimensions(args.ratio, args.quality)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    print(f"{args.ratio} ({args.quality}): {width}x{height}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sora-sdk",
        description="Azure OpenAI video generation client",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Submit a job and wait for the video")
    generate.add_argument("prompt", help="Text description of the video")
    generate.add_argument("--width", type=int, help="Explicit width in pixels")
    generate.add_argument("--height", type=int, help="Explicit height in pixels")
    generate.add_argument("--aspect-ratio", default="16:9", help="Aspect ratio (default: 16:9)")
    generate.add_argument(
        "--quality", default="medium", choices=["low", "medium", "high", "ultra"],
        help="Dimension preset (default: medium)",
    )
    generate.add_argument("--duration", type=int, default=5, help="Duration in seconds")
    generate.add_argument("--frame-rate", type=int, help="Frames per second")
    generate.add_argument("--seed", type=int, help="Seed for reproducible output")
    generate.add_argument("--style", help="Style preset")
    generate.add_argument("-o", "--output", help="Download the video to this path")
    generate.add_argument("--poll-interval", type=float, help="Seconds between status checks")
    generate.add_argument("--max-wait", type=float, help="Give up after this many seconds")

    status = subparsers.add_parser("status", help="Show the status of a job")
    status.add_argument("job_id")

    wait = subparsers.add_parser("wait", help="Wait for a job to finish")
    wait.add_argument("job_id")
    wait.add_argument("--poll-interval", type=float, help="Seconds between status checks")
    wait.add_argument("--max-wait", type=float, help="Give up after this many seconds")

    download = subparsers.add_parser("download", help="Download a finished video")
    download.add_argument("url")
    download.add_argument("output")

    dimensions = subparsers.add_parser("dimensions", help="Show preset dimensions for a ratio")
    dimensions.add_argument("ratio", help="Aspect ratio, e.g. 16:9 or 2.35:1")
    dimensions.add_argument("--quality", default="medium", help="low, medium, high or ultra")

    enhance = subparsers.add_parser("enhance", help="Suggest improved prompts")
    enhance.add_argument("prompt")
    enhance.add_argument("-n", "--count", type=int, default=3, help="Number of suggestions (1-10)")

    return parser


COMMANDS = {
    "generate": run_generate,
    "status": run_status,
    "wait": run_wait,
    "download": run_download,
    "enhance": run_enhance,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "dimensions":
        return run_dimensions(args)

    try:
        return asyncio.run(COMMANDS[args.command](args))
    except SoraError as e:
        logger.error(f"{e.kind.value}: {e}")
        return 1
    except ValueError as e:
        # Configuration problems
        logger.error(str(e))
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
