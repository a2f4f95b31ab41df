# plater

Plater places the parts of a 3D print onto as few build plates as possible.
It reads a list of STL files with quantities, rasterises each part as seen
from above, tries a grid of positions and rotations for every part, and writes
one file per plate: a binary STL holding all the parts of that plate, or a
plain grey-map (PPM, `P2`) image of the plate's occupancy.

## Installing

```
pip install .
```

This installs the `plater` command. The package has no dependencies outside
the standard library.

## The parts list

The parts list (often called `plater.conf`) has one part per line:

```
# filename quantity [orientation]
bracket.stl 4
lid.stl 1 top
my part with spaces.stl 2 front
```

- The quantity is the last all-digit field on the line (the first field never
  counts); everything before it is the file name, so names may contain
  spaces. A line without such a field is ignored, as is a quantity of 0.
- The optional orientation says which face goes down on the plate: `bottom`
  (default), `top`, `front`, `back`, `left` or `right`. Any other word leaves
  the part as it is in the file.
- Lines starting with `#` and empty lines are ignored.

When the list is read from a file, `plater` first changes into that file's
directory, so part file names, the output files and `plates.csv` are all
relative to it.

## Running

```
plater [options] plater.conf
```

Use `-` instead of a file name to read the parts list from standard input.

| Option | Meaning |
| --- | --- |
| `-h` | Show help |
| `-v` | Verbose output on standard error |
| `-W width` | Plate width in mm (default 150) |
| `-H height` | Plate height in mm (default 150) |
| `-D diameter` | Plate diameter in mm; switches to a circular plate |
| `-j precision` | Raster precision in mm (default 0.5) |
| `-s spacing` | Spacing between parts in mm (default 1.5) |
| `-d delta` | Step of the placement grid in mm (default 1) |
| `-r rotation` | Rotation step in degrees (default 90) |
| `-S` | Try several part orderings and keep the best result |
| `-R random` | Number of shuffled orderings to try with `-S` (default 3) |
| `-o pattern` | Output file pattern (default `plate_%03d`); `.stl` or `.ppm` is appended |
| `-p` | Write PPM images instead of STL files |
| `-t threads` | Number of placement threads (default 1) |
| `-c` | Also write `plates.csv` with plate, part, centre position (mm) and rotation (degrees) of every part |

Example:

```
plater -v -W 200 -H 200 -s 2 -S -o out/plate_%03d plater.conf
```

The command exits with status 1 after showing the help (for `-h`, an unknown
option or a missing parts list) or when the request fails, for example when a
part cannot be read or does not fit on the plate at any rotation; otherwise
it exits with 0.

## Using it from Python

```python
from plater.request import Request, RequestError

request = Request()
request.set_plate_size(200, 200)          # millimetres
try:
    request.read_parts_from_string("bracket.stl 4\nlid.stl 1 top\n")
    request.process()
except RequestError as exc:
    print("failed:", exc)
else:
    print(request.plates, request.generated_files)
```

Inside a `Request`, lengths are in micrometres (`plate_width`, `spacing`,
`precision`, `delta`, ...) and `delta_r` is in radians. `set_plate_size`
takes millimetres. Setting `request.cancel = True` stops further placement
runs from starting.

The building blocks are usable on their own:

- `plater.stl`: `load_model`, `load_stl`, `load_ascii`, `load_binary`,
  `save_binary` and `save_ascii`; failures to open a file raise `StlError`.
  Coordinates are read from millimetres into micrometres and written back.
- `plater.model.Model`: `min`, `max`, `translate`, `rotate_x`, `rotate_y`,
  `rotate_z`, `center`, `put_face_on_plate`, `merge`, `contains` and
  `pixelize`.
- `plater.bitmap.Bitmap`: the raster used for placement, with `rotated`,
  `trimmed`, `dilatation`, `overlaps`, `write` and `to_ppm`.
- `plater.placer.Placer`, `plater.plate.Plate` and
  `plater.solution.Solution`: the greedy placement itself and its result.

## What it does not do

- There is no graphical interface and no 3D preview of parts or plates; the
  package works from the command line or from Python only.
- `load_model` reads only files whose name ends in `.stl` (in any case); any
  other file gives an empty model.
- Placement is a greedy brute-force search over a grid; it does not guarantee
  the smallest possible number of plates.