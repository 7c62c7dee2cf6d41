import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from linkgeom import ConfigError, SceneError, compute_scene, geometry_report, load_scene

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Compute edge and path geometry for a node-link scene")
    parser.add_argument("path", help="Path to the JSON scene file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--output",
        help="Write the JSON report to the given path instead of stdout",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation of the JSON report (default: 2)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading scene from %s", args.path)
    try:
        scene = load_scene(args.path)
        geometry = compute_scene(scene)
    except (SceneError, ConfigError, OSError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)

    report = geometry_report(scene, geometry)
    text = json.dumps(report, indent=args.indent)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing geometry report to %s", output_path)
        output_path.write_text(text + "\n", encoding="utf-8")
        print(f"Geometry report written to {output_path}")
    else:
        print(text)


if __name__ == "__main__":
    main(sys.argv[1:])
