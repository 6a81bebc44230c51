import argparse
import logging
from pprint import pprint
from typing import Optional

from arspaint import replay
from arspaint.api.document import Document
from arspaint.editor import Editor, to_color
from arspaint.version import __version__

logger = logging.getLogger(__name__)


def _color(value: str) -> tuple[int, int, int, int]:
    try:
        return to_color(int(v) for v in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("expected R,G,B,A, got %r" % value)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="arspaint command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="Write a blank canvas")
    new_parser.add_argument("width", type=int, help="Canvas width")
    new_parser.add_argument("height", type=int, help="Canvas height")
    new_parser.add_argument("output_file", help="Output image file")
    new_parser.add_argument(
        "--color",
        type=_color,
        default=(255, 255, 255, 255),
        help="Background color as R,G,B,A (default: opaque white)",
    )

    show_parser = subparsers.add_parser("show", help="Show the file content")
    show_parser.add_argument("input_file", help="Input image file")

    export_parser = subparsers.add_parser("export", help="Re-encode a flattened image")
    export_parser.add_argument("input_file", help="Input image file")
    export_parser.add_argument("output_file", help="Output image file")

    replay_parser = subparsers.add_parser("replay", help="Replay a gesture script")
    replay_parser.add_argument("input_file", help="Input image file")
    replay_parser.add_argument("script", help="JSON action script")
    replay_parser.add_argument("output_file", help="Output image file")

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    package_logger = logging.getLogger("arspaint")
    if args.verbose:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.INFO)

    try:
        if args.command == "new":
            document = Document.new((args.width, args.height), args.color)
            document.save(args.output_file)

        elif args.command == "show":
            document = Document.open(args.input_file)
            pprint(document)
            for index, layer in enumerate(document):
                pprint((index, layer))

        elif args.command == "export":
            Document.open(args.input_file).save(args.output_file)

        elif args.command == "replay":
            editor = Editor(document=Document.open(args.input_file))
            count = replay.replay(editor, replay.load(args.script))
            logger.info("Replayed %d actions" % count)
            editor.save(args.output_file)

    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    main()
