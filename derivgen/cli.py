"""
Command Line Interface for derivative generation.
"""

import argparse
import json
import logging
from typing import List, Optional

from .batch_progress import BatchProgress
from .config import DerivgenConfig
from .image_engine import ImageEngine
from .instruction_registry import InstructionRegistry
from .pipeline import Pipeline


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('derivgen')


def get_config(args: argparse.Namespace) -> DerivgenConfig:
    """Get configuration from environment and CLI overrides."""
    config = DerivgenConfig.from_env()

    if getattr(args, 'gravity', None):
        config.default_gravity = args.gravity
    if getattr(args, 'quality', None) is not None:
        config.default_quality = args.quality
    if getattr(args, 'resample', None):
        config.resample = args.resample

    return config


def load_registry(
    args: argparse.Namespace,
    logger: logging.Logger
) -> Optional[InstructionRegistry]:
    """Validate configuration and load the instructions file, or log why not."""
    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None

    try:
        return InstructionRegistry.load(args.instructions, config=config, logger=logger)
    except FileNotFoundError:
        logger.error(f"Instructions file not found: {args.instructions}")
    except (ValueError, OSError) as e:
        logger.error(f"Failed to load instructions: {e}")
    return None


def get_images(args: argparse.Namespace) -> list:
    """Build the image list from positional paths and/or an images file."""
    images = []

    if args.images_file:
        with open(args.images_file, 'r') as f:
            data = json.load(f)
        images.extend(data if isinstance(data, list) else [data])

    for path in args.paths:
        image = {'path': path}
        if args.label:
            image['labels'] = args.label
        if args.crop:
            image['crop'] = args.crop
        images.append(image)

    return images


def cmd_process(args: argparse.Namespace) -> int:
    """Execute process command."""
    logger = setup_logging(args.verbose)

    registry = load_registry(args, logger)
    if registry is None:
        return 1

    try:
        images = get_images(args)
    except FileNotFoundError:
        logger.error(f"Images file not found: {args.images_file}")
        return 1
    except ValueError as e:
        logger.error(f"Failed to load images: {e}")
        return 1

    if not images:
        logger.error("No images given")
        return 1

    progress = None
    if not args.quiet:
        progress = BatchProgress(show_files=args.show_files, logger=logger)

    pipeline = Pipeline(
        registry,
        image_engine=ImageEngine(config=registry.config, logger=logger),
        dry_run=args.dry_run,
        progress=progress,
        logger=logger,
    )

    outcome = {}

    def on_complete(err, derivatives=None, messages=None):
        outcome['error'] = err
        outcome['derivatives'] = derivatives or []
        outcome['messages'] = messages or []

    try:
        pipeline.process(args.type, images, on_complete)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if outcome['error'] is not None:
        logger.error(f"Processing failed: {outcome['error']}")
        return 1

    if not args.quiet:
        print()
        for derivative in outcome['derivatives']:
            print(derivative.format_status())
        for message in outcome['messages']:
            print(f"NOTE: {message}")
        print()
        print(f"Derivatives: {len(outcome['derivatives'])}")
        print(f"Messages: {len(outcome['messages'])}")

    return 0


def cmd_instructions(args: argparse.Namespace) -> int:
    """Execute instructions command."""
    logger = setup_logging(args.verbose)

    registry = load_registry(args, logger)
    if registry is None:
        return 1

    types = [args.type] if args.type else registry.types
    for image_type in types:
        instructions = registry.get(image_type)
        if not instructions:
            logger.error(f"No instructions for type: {image_type}")
            return 1

        print(f"{image_type}:")
        for i in instructions:
            flags = []
            if i.crop:
                flags.append('crop')
            if not i.force:
                flags.append('no-force')
            flag_str = f" [{', '.join(flags)}]" if flags else ""
            print(
                f"  {i.label:<16} {i.width}x{i.height}  gravity={i.gravity} "
                f"quality={i.quality}{flag_str}"
            )

    return 0


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add instruction and default configuration arguments to a parser."""
    parser.add_argument('-i', '--instructions', required=True, help='Instructions JSON file')
    group = parser.add_argument_group('Defaults')
    group.add_argument('--gravity', help='Override DERIVGEN_DEFAULT_GRAVITY')
    group.add_argument('--quality', type=float, help='Override DERIVGEN_DEFAULT_QUALITY')
    group.add_argument('--resample', help='Override DERIVGEN_RESAMPLE')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='derivgen',
        description='Generate named image derivatives from instruction sets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m derivgen instructions -i instructions.json
  python -m derivgen process -i instructions.json -t product photos/kitty.jpg
  python -m derivgen process -i instructions.json -t product --images images.json
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Process command
    proc_parser = subparsers.add_parser('process', help='Generate derivatives for images')
    proc_parser.add_argument('paths', nargs='*', metavar='IMAGE', help='Source image path(s)')
    proc_parser.add_argument('-t', '--type', required=True, help='Image type to apply')
    proc_parser.add_argument('--images', dest='images_file', metavar='FILE',
                             help='JSON file with image entries (path, labels, crop)')
    proc_parser.add_argument('--label', action='append',
                             help='Only generate these labels for the IMAGE paths')
    proc_parser.add_argument('--crop', metavar='WxH+X+Y', help='Crop region for the IMAGE paths')
    proc_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    proc_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    proc_parser.add_argument('--show-files', action='store_true',
                             help='Print each derivative as it is processed')
    proc_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(proc_parser)

    # Instructions command
    inst_parser = subparsers.add_parser('instructions', help='List loaded instructions')
    inst_parser.add_argument('-t', '--type', help='Only list this image type')
    inst_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(inst_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'process':
        return cmd_process(parsed_args)
    elif parsed_args.command == 'instructions':
        return cmd_instructions(parsed_args)

    return 1
