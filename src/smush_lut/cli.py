# SPDX-FileCopyrightText: 2025 Fuse Technical Group
#
# SPDX-License-Identifier: BSD-3-Clause

"""Command-line interface for smush-lut."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from PIL import Image

from . import __version__
from .color_correction import correct_lut
from .cube import CubeLut3d
from .errors import LutError
from .lut.lut3d import Lut3dLinear
from .nutexb import LUT_FILE_NAME, read_nutexb, write_nutexb
from .screenshot import extract_lut, stamp_neutral_lut

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool, info_logging: bool) -> None:
    """Configure root logging for the CLI."""
    if verbose:
        log_level = logging.DEBUG
    elif info_logging:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING  # Quiet mode - only warnings and errors

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_lut(path: Path) -> Lut3dLinear:
    """Load a LUT from a .cube, .nutexb or strip image file."""
    suffix = path.suffix.lower()
    if suffix == ".cube":
        return Lut3dLinear.from_cube(CubeLut3d.read(path))
    if suffix == ".nutexb":
        return read_nutexb(path)
    with Image.open(path) as image:
        return Lut3dLinear.from_image(image)


def load_graded_lut(path: Path) -> Lut3dLinear:
    """Load a LUT, cropping images to the strip in their top left corner."""
    if path.suffix.lower() in (".cube", ".nutexb"):
        return load_lut(path)
    with Image.open(path) as image:
        return extract_lut(image)


def save_lut(lut: Lut3dLinear, path: Path) -> None:
    """Save a LUT as .cube, .nutexb or a strip image based on the extension."""
    suffix = path.suffix.lower()
    if suffix == ".cube":
        lut.to_cube(title=path.stem).write(path)
    elif suffix == ".nutexb":
        write_nutexb(lut, path)
    else:
        lut.to_image().save(path)
        logger.info(f"Wrote {lut.size}x{lut.size}x{lut.size} LUT image to {path}")


def stamp_screenshot(input_path: Path, output: Path) -> None:
    """Write a screenshot with the neutral LUT stamped into it."""
    with Image.open(input_path) as image:
        stamped = stamp_neutral_lut(image)
    stamped.save(output)
    logger.info(f"Wrote stamped screenshot to {output}")


def _run(action: str, func: Callable[..., None], *args: Any) -> None:
    try:
        func(*args)
    except (LutError, ValueError, OSError) as e:
        click.echo(f"Error: {action} failed: {e}", err=True)
        sys.exit(1)


def _stamped_name(path: Path) -> Path:
    return path.with_name(f"{path.stem}.lut.png")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose (debug) logging")
@click.option("--info-logging", is_flag=True, help="Enable info-level logging")
@click.version_option(version=__version__, prog_name="smush-lut")
def main(verbose: bool, info_logging: bool) -> None:
    """smush-lut - Color grading LUT tools for Smash Ultimate stages.

    Converts LUTs between CUBE files, strip images (256x16 for a 16x16x16
    LUT) and swizzled color_grading_lut.nutexb textures.
    """
    configure_logging(verbose, info_logging)


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def auto(input_path: Path) -> None:
    """Pick the conversion from the file name (for drag and drop).

    \b
    *.lut.*  -> color_grading_lut.nutexb next to the input
    *.cube   -> color_grading_lut.nutexb next to the input
    *.nutexb -> *.png strip image
    other    -> *.lut.png screenshot with the neutral LUT stamped in
    """
    suffix = input_path.suffix.lower()
    if ".lut." in input_path.name or suffix == ".cube":
        output = input_path.with_name(LUT_FILE_NAME)
        _run("pack", lambda: write_nutexb(load_graded_lut(input_path), output))
    elif suffix == ".nutexb":
        output = input_path.with_suffix(".png")
        _run("unpack", lambda: save_lut(read_nutexb(input_path), output))
    else:
        output = _stamped_name(input_path)
        _run("stamp", stamp_screenshot, input_path, output)

    click.echo(f"✅ Wrote {output}")


@main.command()
@click.argument("screenshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output image path"
)
def stamp(screenshot: Path, output: Path | None) -> None:
    """Stamp the neutral LUT into a stage screenshot."""
    output = output or _stamped_name(screenshot)
    _run("stamp", stamp_screenshot, screenshot, output)
    click.echo(f"✅ Wrote {output}")


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Output nutexb path (default: {LUT_FILE_NAME} next to the input)",
)
def pack(input_path: Path, output: Path | None) -> None:
    """Pack a strip image or CUBE file into a nutexb texture."""
    output = output or input_path.with_name(LUT_FILE_NAME)
    _run("pack", lambda: write_nutexb(load_lut(input_path), output))
    click.echo(f"✅ Wrote {output}")


@main.command()
@click.argument("nutexb", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .png or .cube path (default: input name with .png)",
)
def unpack(nutexb: Path, output: Path | None) -> None:
    """Extract the LUT from a nutexb texture."""
    output = output or nutexb.with_suffix(".png")
    _run("unpack", lambda: save_lut(read_nutexb(nutexb), output))
    click.echo(f"✅ Wrote {output}")


@main.command()
@click.argument("edit", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--stage",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Stage LUT the renderer applies (default: neutral LUT)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Output .nutexb, .cube or image path (default: {LUT_FILE_NAME})",
)
def correct(edit: Path, stage: Path | None, output: Path | None) -> None:
    """Correct an edit LUT for the stage LUT and save the result."""
    output = output or edit.with_name(LUT_FILE_NAME)

    def run() -> None:
        lut_stage = load_lut(stage) if stage else Lut3dLinear.neutral()
        save_lut(correct_lut(load_lut(edit), lut_stage), output)

    _run("correct", run)
    click.echo(f"✅ Wrote {output}")


if __name__ == "__main__":
    main()
