from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from .artifacts.export import export_filename
from .config import StudioConfig
from .media_pipeline.audio import WavFileSink
from .media_pipeline.image_client import AspectRatio, ImageModel
from .orchestrator import StudioSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a two-host Bible drama script, thumbnail and YouTube kit from a verse reference."
    )
    parser.add_argument("verse", help="Verse reference, e.g. '시편 23:1'")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional path to studio configuration JSON/YAML",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for exported scripts, images and audio previews",
    )
    parser.add_argument("--image", action="store_true", help="Also generate the thumbnail image")
    parser.add_argument("--audio", action="store_true", help="Also synthesize a WAV audio preview")
    parser.add_argument(
        "--image-model",
        choices=[model.value for model in ImageModel],
        help="Image model override",
    )
    parser.add_argument(
        "--aspect-ratio",
        choices=[ratio.value for ratio in AspectRatio],
        help="Image aspect ratio override",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use the offline stub script and skip image and audio generation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


async def run(args: argparse.Namespace, config: StudioConfig) -> int:
    sink = WavFileSink(config.output_dir / export_filename(args.verse, "미리듣기", config.export_label, "wav"))
    session = StudioSession.default(config, sink=sink)
    session.set_input(args.verse)
    if args.image_model:
        session.select_model(args.image_model)
    if args.aspect_ratio:
        session.select_aspect_ratio(args.aspect_ratio)

    state = await session.generate_script()
    if state.error or state.script is None:
        print(f"⚠️ {state.error}")
        return 1

    print(f"Wrote master script to {session.save_master_script()}")
    print(f"Wrote YouTube kit to {session.save_youtube_kit()}")
    print(f"Wrote script JSON to {session.save_script_json()}")

    if args.dry_run:
        return 0

    tasks = []
    if args.image:
        tasks.append(session.generate_image())
    if args.audio:
        tasks.append(session.play_audio())
    if tasks:
        await asyncio.gather(*tasks)

    if session.last_image is not None:
        target = session.exporter.path_for(args.verse, "thumbnail", extension="png")
        print(f"Wrote image to {session.last_image.save(target)}")
    if sink.written:
        print(f"Wrote audio preview to {sink.path}")
    if session.state.alert:
        print(f"⚠️ {session.state.alert}")
        return 1
    return 0


def main() -> None:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = StudioConfig.from_file(args.config) if args.config else StudioConfig()
    if args.output_dir:
        config = config.model_copy(update={"output_dir": args.output_dir})
    if args.dry_run:
        config = config.model_copy(update={"llm_provider": "echo"})

    raise SystemExit(asyncio.run(run(args, config)))


if __name__ == "__main__":
    main()
