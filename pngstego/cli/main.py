#!/usr/bin/env python3
"""
pngstego Command Line Interface

Hide a file inside a PNG image, or recover it again.

Usage:
    pngstego embed <image> <message_file> [--output FILE] [--yes | --no]
    pngstego extract <image> <output_file>
    pngstego capacity <image>
    pngstego --version
    pngstego --help

Commands are matched case-insensitively on their leading keyword, so
"EMBED", "Embed" and "embedded" all select embed.
"""

import sys
import argparse
import logging
from typing import Optional, List

from .. import __version__
from ..config import StegoConfig
from ..errors import PngStegoError, IncompleteExtractionError
from ..stego.capacity import Capacity
from ..stego.controller import TruncationNotice
from ..stego.manager import PngSteganographer

COMMANDS = ('embed', 'extract', 'capacity')


def resolve_command(token: str) -> Optional[str]:
    """Map a command-line keyword to a command name, ignoring case and trailing text."""
    upper = token.upper()
    for command in COMMANDS:
        if upper.startswith(command.upper()):
            return command
    return None


def prompt_truncation(notice: TruncationNotice) -> bool:
    """Ask on the terminal whether to embed only the part of the message that fits."""
    sys.stderr.write(
        f"Warning! Message is too large to embed in the provided image "
        f"({notice.overage} bytes too large).\n"
        f"Do you wish to embed only the first {notice.available_bytes} bytes "
        f"of the message instead? Y/N\n> "
    )
    sys.stderr.flush()
    try:
        answer = input()
    except EOFError:
        return False
    answer = answer.strip()
    return answer[:1].upper() == 'Y'


class PngStegoCLI:
    """Main CLI application for pngstego."""

    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        args = list(args)
        position = self.command_position(args)
        if position is not None:
            args[position] = resolve_command(args[position]) or args[position]

        parser = self.create_parser()
        parsed = parser.parse_args(args)

        if not hasattr(parsed, 'func'):
            parser.print_help(self.stdout)
            return 0

        self.configure_logging(parsed.verbose)
        try:
            config = StegoConfig.from_file(parsed.config) if parsed.config else StegoConfig.default()
        except (OSError, ValueError) as e:
            print(f"Error: cannot load configuration {parsed.config}: {e}", file=self.stderr)
            return 1

        stego = PngSteganographer(config)
        try:
            return parsed.func(stego, parsed)
        except PngStegoError as e:
            print(f"Error: {e}", file=self.stderr)
            return 1

    @staticmethod
    def command_position(args: List[str]):
        """Index of the command keyword, skipping leading options."""
        skip = False
        for index, token in enumerate(args):
            if skip:
                skip = False
            elif token == '--config':
                skip = True
            elif not token.startswith('-'):
                return index
        return None

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="pngstego",
            description="Hide files in PNG images using least significant bit embedding",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    pngstego embed photo.png secret.txt
    pngstego embed photo.png secret.txt --output hidden.png --yes
    pngstego extract embedded_photo.png recovered.txt
    pngstego capacity photo.png
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'pngstego v{__version__}'
        )
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Verbose logging')
        parser.add_argument('--config', help='JSON configuration file')

        # Accepted after the command too; SUPPRESS keeps a subcommand from
        # resetting a value given before it.
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument('--verbose', '-v', action='store_true',
                            default=argparse.SUPPRESS, help='Verbose logging')
        common.add_argument('--config', default=argparse.SUPPRESS,
                            help='JSON configuration file')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_embed_command(subparsers, common)
        self.add_extract_command(subparsers, common)
        self.add_capacity_command(subparsers, common)

        return parser

    def add_embed_command(self, subparsers, common):
        """Add embed command to parser."""
        cmd = subparsers.add_parser('embed', parents=[common], help='Embed a file in an image')
        cmd.add_argument('image', help='Carrier PNG image')
        cmd.add_argument('message_file', help='File to hide')
        cmd.add_argument('--output', '-o',
                         help='Embedded image to write (default: embedded_<image>)')
        answer = cmd.add_mutually_exclusive_group()
        answer.add_argument('--yes', '-y', dest='truncate', action='store_const', const=True,
                            help='Truncate an oversized message without asking')
        answer.add_argument('--no', '-n', dest='truncate', action='store_const', const=False,
                            help='Refuse to truncate an oversized message without asking')
        cmd.set_defaults(func=self.handle_embed, truncate=None)

    def add_extract_command(self, subparsers, common):
        """Add extract command to parser."""
        cmd = subparsers.add_parser('extract', parents=[common], help='Extract a hidden file')
        cmd.add_argument('image', help='Embedded PNG image')
        cmd.add_argument('output_file', help='File to write the recovered payload to')
        cmd.set_defaults(func=self.handle_extract)

    def add_capacity_command(self, subparsers, common):
        """Add capacity command to parser."""
        cmd = subparsers.add_parser('capacity', parents=[common], help='Show image capacity')
        cmd.add_argument('image', help='Carrier PNG image')
        cmd.set_defaults(func=self.handle_capacity)

    # Command handlers

    def print_capacity(self, capacity: Capacity):
        print(f"Image is {capacity.width}px x {capacity.height}px", file=self.stdout)
        print(f"Able to embed {capacity.available_bytes} bytes "
              f"({capacity.available_kilobytes:.2f} kilobytes) of data", file=self.stdout)

    def handle_embed(self, stego: PngSteganographer, args):
        """Handle embed command."""
        if args.truncate is None:
            confirm = prompt_truncation
        else:
            confirm = lambda notice: args.truncate

        self.print_capacity(stego.capacity(args.image))
        result = stego.embed_file(args.image, args.message_file, args.output, confirm)

        print("Message has been embedded!", file=self.stdout)
        print(f"{result.bytes_embedded} bytes embedded", file=self.stdout)
        print(f"Written to {result.output_path}", file=self.stdout)
        return 0

    def handle_extract(self, stego: PngSteganographer, args):
        """Handle extract command."""
        try:
            result = stego.extract_file(args.image, args.output_file)
        except IncompleteExtractionError as e:
            print(f"Error: {e}", file=self.stderr)
            print(f"{e.result.bytes_extracted} of {e.result.declared_length} bytes "
                  f"extracted to {args.output_file}", file=self.stderr)
            return 1

        print("Done extracting!", file=self.stdout)
        print(f"{result.bytes_extracted} bytes extracted", file=self.stdout)
        return 0

    def handle_capacity(self, stego: PngSteganographer, args):
        """Handle capacity command."""
        capacity = stego.capacity(args.image)
        self.print_capacity(capacity)
        print(f"{capacity.payload_bytes} bytes fit after the {capacity.header_bits}-bit length header",
              file=self.stdout)
        return 0


def main():
    """Main entry point."""
    cli = PngStegoCLI()
    sys.exit(cli.run(sys.argv[1:]))


if __name__ == "__main__":
    main()
