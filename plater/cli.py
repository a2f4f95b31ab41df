"""Command-line entry point: place parts listed in a configuration file."""

from __future__ import annotations

import getopt
import re
import sys
from typing import Sequence

from plater.plate import PlateMode
from plater.request import OutputMode, Request, RequestError, SortStrategy
from plater.util import deg2rad, increase_verbose_level, log_error

_OPTIONS = "hvs:d:r:pj:d:o:W:H:R:D:t:Sc"

_USAGE = """\
Plater v1.0
Usage: plater [options] plater.conf
(Use - to read from stdin)

-h: Display this help
-v: Verbose mode
The size of the bed plate (topview, 2D):
  -W width: Setting the plate width (default: 150mm)
  -H height: Setting the plate height (default: 150mm)
-D diameter: Set the plate diameter, in mm. If set, this will put the plate in circular mode
-j precision: Sets the precision (in mm, default: 0.5)
-s spacing: Change the spacing between parts (in mm, default: 1.5)
-d delta: Sets the interval of place grid (in mm, default: 1.5)
-r rotation: Sets the interval of rotation (in °, default: 90)
-S: Trying multiple sort possibilities
-R random: Sets the number of random (shuffled parts) iterations (only with -S)
-o pattern: output file pattern (default: plate_%03d)
-p: will output ppm of the plates
-t threads: sets the number of threads (default 1)
-c: enables the output of plates.csv containing plates infos
"""

_FLOAT_PREFIX = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_INT_PREFIX = re.compile(r"\s*[-+]?\d+")


class _UsageError(Exception):
    """Raised when the usage text should be shown instead of running."""


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else 0.0


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else 0


def build_request(argv: Sequence[str]) -> tuple[Request, str | None]:
    """Parse command-line arguments into a request and the configuration file name."""
    options, args = getopt.gnu_getopt(list(argv), _OPTIONS)
    request = Request()
    for option, value in options:
        match option:
            case "-h":
                raise _UsageError()
            case "-v":
                increase_verbose_level()
            case "-s":
                request.spacing = _atof(value) * 1000
            case "-d":
                request.delta = _atof(value) * 1000
            case "-r":
                request.delta_r = deg2rad(_atof(value))
            case "-p":
                request.mode = OutputMode.PPM
            case "-j":
                request.precision = _atof(value) * 1000
            case "-o":
                request.pattern = value
            case "-W":
                request.plate_width = _atof(value) * 1000
            case "-H":
                request.plate_height = _atof(value) * 1000
            case "-S":
                request.sort_mode = SortStrategy.MULTIPLE
            case "-R":
                request.random_iterations = _atoi(value)
            case "-D":
                request.plate_mode = PlateMode.CIRCLE
                request.plate_diameter = _atof(value) * 1000
            case "-t":
                request.nb_threads = _atoi(value)
            case "-c":
                request.plates_info = True
    return request, (args[0] if args else None)


def _print_usage() -> None:
    sys.stderr.write(_USAGE)
    sys.stderr.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the placer from the command line; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        request, filename = build_request(args)
    except getopt.GetoptError as exc:
        log_error(f"plater: {exc}\n")
        _print_usage()
        return 1
    except _UsageError:
        _print_usage()
        return 1

    if filename is None:
        _print_usage()
        return 1

    try:
        if filename == "-":
            request.read_from_stdin()
        else:
            request.read_from_file(filename)
        request.process()
    except RequestError as exc:
        log_error(f"! Can't process: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())