"""Command-line interface for dither_maker.

Supports the interactive TUI, a headless/JSON mode for scripting, and the
classic three-question prompt.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dither_maker.core.kernels import KERNELS, KernelName, resolve_kernel

SUBCOMMANDS = ("convert", "prompt", "kernels")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dither-maker",
        description="Dither JPEG/PNG images to black and white with error diffusion.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither an image file.",
    )
    convert.add_argument("input", help="Input JPEG or PNG file path or URL.")
    convert.add_argument(
        "-o", "--output",
        help="Output PNG path. Defaults to output/output_<method>_<mode>.png.",
    )
    convert.add_argument(
        "-m", "--method",
        default=KernelName.ATKINSON.value,
        help=(
            "Kernel name or menu number: "
            + ", ".join(f"{i}={k.value}" for i, k in enumerate(KernelName, 1))
            + " (default: atkinson)."
        ),
    )
    mode = convert.add_mutually_exclusive_group()
    mode.add_argument(
        "--color",
        dest="color",
        action="store_true",
        help="Dither R, G and B channels separately.",
    )
    mode.add_argument(
        "--mono",
        dest="color",
        action="store_false",
        help="Dither a single grayscale channel (default).",
    )
    convert.set_defaults(color=False)
    convert.add_argument(
        "--brightness",
        type=int,
        default=0,
        help="Brightness adjustment, -100 to 100 (default: 0).",
    )
    convert.add_argument(
        "--contrast",
        type=int,
        default=100,
        help="Contrast adjustment, 0 to 200 (default: 100).",
    )
    convert.add_argument(
        "--invert",
        action="store_true",
        help="Invert intensities before dithering.",
    )
    convert.add_argument(
        "--width",
        type=int,
        default=None,
        help="Resize to this width before dithering (default: keep size).",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )

    subparsers.add_parser(
        "prompt",
        help="Ask for the file, mode and method interactively.",
    )
    subparsers.add_parser(
        "kernels",
        help="List the available dithering kernels.",
    )

    return parser


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(message: str, code: str, is_json: bool) -> None:
    if is_json:
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from dither_maker.core.processor import Settings, process_image
    from dither_maker.core.reader import is_url, open_image
    from dither_maker.core.writer import default_output_path, save_png

    is_json = args.json
    is_remote = is_url(args.input)

    def warn(message: str) -> None:
        if not is_json:
            print(message, file=sys.stderr)

    kernel = resolve_kernel(args.method, on_fallback=warn)

    if is_remote:
        warn(f"Downloading {args.input}...")

    try:
        source = open_image(args.input)
    except FileNotFoundError as e:
        _fail(str(e), "FILE_NOT_FOUND", is_json)
    except (ValueError, OSError) as e:
        _fail(str(e), "DOWNLOAD_FAILED" if is_remote else "INVALID_INPUT", is_json)

    try:
        settings = Settings(
            method=KernelName(kernel.name),
            color=args.color,
            brightness=max(-100, min(100, args.brightness)),
            contrast=max(0, min(200, args.contrast)),
            invert=args.invert,
            width=args.width,
        )
        if args.output:
            output_path = Path(args.output).resolve()
        else:
            output_path = default_output_path(settings.method.value, settings.mode_name)

        warn(f"Dithering {source.info.path.name} with {kernel.label} ({settings.mode_name})...")
        result = process_image(source.image, settings)
        save_png(result, output_path)
    except Exception as e:
        if is_json and args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _fail(str(e), "PROCESSING_ERROR", is_json)

    if not is_json:
        print(f"Dithered image saved as {output_path}", file=sys.stderr)
    else:
        payload = {
            "status": "success",
            "input": args.input if is_remote else str(source.info.path.resolve()),
            "output": str(output_path),
            "settings": {
                "method": settings.method.value,
                "mode": settings.mode_name,
                "brightness": settings.brightness,
                "contrast": settings.contrast,
                "invert": settings.invert,
            },
            "metadata": {
                "input_format": source.info.format,
                "input_width": source.info.width,
                "input_height": source.info.height,
                "output_width": result.width,
                "output_height": result.height,
            },
        }
        print(json.dumps(payload, indent=2))


def _run_prompt() -> None:
    """Ask for path, mode and method, then dither with the answers."""
    from rich.console import Console
    from rich.markup import escape
    from rich.prompt import Prompt

    from dither_maker.core.processor import Settings, process_image
    from dither_maker.core.reader import open_image
    from dither_maker.core.writer import default_output_path, save_png

    console = Console(stderr=True)

    image_path = Prompt.ask("Enter the path to the image file", console=console).strip()
    try:
        source = open_image(image_path)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error opening image file:[/red] {escape(str(e))}")
        sys.exit(1)

    mode = Prompt.ask(
        "Choose dithering mode (1 for color, 2 for mono)", console=console
    ).strip()
    is_color = mode == "1"

    console.print("Choose a dithering method:")
    for i, kernel in enumerate(KERNELS.values(), 1):
        console.print(f"{i}. {kernel.label}")
    choice = Prompt.ask("Enter your choice", console=console)

    kernel = resolve_kernel(
        choice, on_fallback=lambda msg: console.print(f"[yellow]{escape(msg)}[/yellow]")
    )
    settings = Settings(method=KernelName(kernel.name), color=is_color)
    output_path = default_output_path(settings.method.value, settings.mode_name)

    try:
        result = process_image(source.image, settings)
        save_png(result, output_path)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error writing output:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"Dithered image saved as {output_path}")


def _run_kernels() -> None:
    """Print the kernel catalog."""
    for i, kernel in enumerate(KERNELS.values(), 1):
        rows = " / ".join(
            "[" + ",".join(str(w) for w in row) + "]" for row in kernel.weights
        )
        print(
            f"{i}. {kernel.name:<16} {rows}  "
            f"divisor={kernel.divisor:g} anchor={kernel.anchor}"
        )


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      dither-maker convert <file> [opts]  → headless convert
      dither-maker prompt                 → interactive questions
      dither-maker kernels                → list kernels
      dither-maker <file>                 → launch TUI with file
      dither-maker                        → launch TUI (file prompt)
    """
    raw_args = sys.argv[1:] if argv is None else argv
    if raw_args and raw_args[0] in SUBCOMMANDS:
        parser = _build_parser()
        args = parser.parse_args(raw_args)
        if args.command == "convert":
            _run_convert(args)
        elif args.command == "prompt":
            _run_prompt()
        else:
            _run_kernels()
    elif raw_args and not raw_args[0].startswith("-"):
        # Positional arg = file path → TUI
        from dither_maker.app import run_app
        run_app(input_path=raw_args[0])
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args(raw_args)
    else:
        from dither_maker.app import run_app
        run_app()


if __name__ == "__main__":
    main()
