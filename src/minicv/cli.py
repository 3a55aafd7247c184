"""Command-line interface for minicv."""

import argparse
import json
import logging
import sys

import matplotlib.pyplot as plt
import yaml

from .core import (
    MinicvError,
    VectorizeConfig,
    load_config,
    load_image,
    polygons_to_patches,
    render_polygons,
    save_config,
    save_image,
    vectorize_mask,
)

logger = logging.getLogger("minicv")


def build_parser():
    parser = argparse.ArgumentParser(description="Vectorize classification masks into polygons.")
    parser.add_argument("mask", help="Path to the mask image.")
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a vectorization YAML file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write polygons as JSON to this path instead of stdout.",
    )
    parser.add_argument("--save-config", help="Save the settings used to this YAML path.")
    parser.add_argument("--overlay", help="Write the mask with polygon outlines to this image path.")
    parser.add_argument("--show", action="store_true", help="Display the polygons over the mask.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    try:
        config = load_config(args.config) if args.config else VectorizeConfig()
    except (OSError, yaml.YAMLError, TypeError) as e:
        logger.error("Error loading config: %s", e)
        sys.exit(1)

    try:
        mask = load_image(args.mask, grayscale=True)
    except OSError as e:
        logger.error("Error loading mask: %s", e)
        sys.exit(1)

    try:
        polygons = vectorize_mask(mask, config)
    except MinicvError as e:
        logger.error("Error vectorizing mask: %s", e)
        sys.exit(1)

    payload = json.dumps(
        {"mask": args.mask, "width": mask.cols, "height": mask.rows, "polygons": polygons},
        indent=2,
    )
    if args.output:
        with open(args.output, "w") as f:
            f.write(payload)
        logger.info("Polygons written to %s", args.output)
    else:
        print(payload)

    if args.save_config:
        save_config(config, args.save_config)
        logger.info("Settings saved to %s", args.save_config)

    if args.overlay:
        save_image(render_polygons(mask, polygons), args.overlay)
        logger.info("Overlay written to %s", args.overlay)

    if args.show:
        fig, ax = plt.subplots()
        ax.imshow(mask.as_numpy(), cmap="gray")
        ax.set_title(f"{len(polygons)} polygon(s)")
        for poly in polygons_to_patches(polygons):
            ax.add_patch(poly)
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
