#!/usr/bin/env python3
"""
IGC to FIT Converter

This script converts IGC flight logs to FIT activity files that GPS and
sports devices and their software can import.

Usage:
    python igc2fit.py [-c config] [-t timezone] [-o outputFolder] [-d dst.fit] [-s src.igc] file.igc [file2.igc ...]
"""

import os
import argparse
import contextlib
import sys
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from igc_config import Config
from igc_errors import EmptyTrackError
from igc_parser import parseIgcFile, getFiletype
from igc_model import FileType
from igc_summary import flightSummary
from fit_converter import convertTrack
from igc_constants import (
    DEFAULT_OUT_PATH,
    IGC_EXTENSION,
    FIT_EXTENSION,
    ALTITUDE_SOURCES
)

__version__ = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('igc2fit')


def outputPathFor(config, inPath: str, dstPath: Optional[str] = None) -> Path:
    """Work out where the FIT file for an input file goes"""
    if dstPath:
        return Path(dstPath)

    outPath = Path(inPath).with_suffix(FIT_EXTENSION)
    if config.outPath and config.outPath != DEFAULT_OUT_PATH:
        outPath = Path(config.outPath) / outPath.name
    return outPath


def writeAtomically(outPath: Path, data: bytes) -> None:
    """Write data to a temporary file beside outPath, then move it into place"""
    fd, tmpPath = tempfile.mkstemp(dir=outPath.parent, prefix=f'.{outPath.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as fitFile:
            fitFile.write(data)
        os.replace(tmpPath, outPath)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmpPath)
        raise


def process_file(config, inPath: str, dstPath: Optional[str] = None) -> bool:
    """Convert one IGC file; returns True when a FIT file was written"""
    logger.info(f"Processing {inPath}...")
    verbose = getattr(config.cli_args, 'verbose', False)

    if not inPath.lower().endswith(IGC_EXTENSION):
        logger.warning(f"{inPath} does not have an {IGC_EXTENSION} extension. Make sure it is a valid IGC file.")

    try:
        with open(inPath, 'r', encoding='utf-8', errors='ignore') as trackFile:
            if getFiletype(trackFile) != FileType.IGC:
                logger.error(f"{inPath} is not a valid IGC file")
                return False
            track = parseIgcFile(config, trackFile)

        fitData = convertTrack(track, config.fit_settings)

        outPath = outputPathFor(config, inPath, dstPath)
        if not outPath.parent.exists():
            logger.info(f"Creating output directory: {outPath.parent}")
            outPath.parent.mkdir(parents=True, exist_ok=True)
        writeAtomically(outPath, fitData)
    except EmptyTrackError:
        logger.error(f"No valid track data found in {inPath}")
        return False
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        return False
    except (ValueError, OSError) as e:
        logger.error(f"Error converting {inPath}: {e}", exc_info=verbose)
        return False

    logger.info(flightSummary(track, config.timezoneIGC))
    logger.info(f"Successfully generated: {outPath}")
    return True


def process_files(config, inPaths: List[str], dstPath: Optional[str] = None) -> int:
    """Convert several IGC files; returns the number of failures"""
    failures = 0
    for inPath in inPaths:
        if not process_file(config, inPath, dstPath):
            failures += 1

    if failures:
        logger.warning(f"{failures} of {len(inPaths)} files could not be converted")
    return failures


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Convert IGC flight logs into FIT activity files',
        epilog='Example: python igc2fit.py -o fit/ vuelo.igc'
    )

    parser.add_argument('-c', '--config', default=None, help='Path to config file')
    parser.add_argument('-t', '--timezone', default=None, help='UTC offset for times shown in the flight summary. +/-hh:mm[:ss] or +/-<decimal hours>')
    parser.add_argument('-o', '--outputFolder', dest='output', default=None, help='Folder to write FIT files to')
    parser.add_argument('-d', '--dst', default=None, help='Destination FIT file (single input only)')
    parser.add_argument('--altitude-source', choices=ALTITUDE_SOURCES, default=None, help='Altitude written to records (default: gps)')
    parser.add_argument('--clamp', action='store_true', help='Clamp out-of-range coordinates instead of rejecting the track')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-s', '--src', dest='src', action='append', default=[], help='Path to an IGC file (may be repeated)')
    parser.add_argument('trackfile', nargs='*', help='Path to one or more IGC files')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set log level based on verbose flag
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    trackfiles = args.src + args.trackfile
    if not trackfiles:
        parser.error('no input files given')
    if args.dst and len(trackfiles) > 1:
        parser.error('--dst can only be used with a single input file')

    config = Config(args)
    failures = process_files(config, trackfiles, args.dst)

    logger.info("Processing complete.")
    return 1 if failures else 0


def run() -> None:
    """Console entry point: map failures to exit codes"""
    try:
        sys.exit(main())
    except FileNotFoundError as e:
        logger.critical(f"File not found: {e.filename}")
        sys.exit(3)
    except ValueError as e:
        logger.critical(f"Invalid input: {e}")
        sys.exit(2)
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    run()
