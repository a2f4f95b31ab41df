"""Reading and writing STL meshes in ASCII and binary form."""

from __future__ import annotations

import re
import struct
from pathlib import Path
from typing import Iterator

from plater.geometry import Face, Point3, Volume
from plater.model import Model

_HEADER_SIZE = 80
_FACE = struct.Struct("<12fH")
_COUNT = struct.Struct("<I")
_VERTICES = struct.Struct("<9f")
_LINE_LIMIT = 1024
_SNIFF_SIZE = 4096

_NUMBER = r"([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|[-+]?(?i:infinity|inf|nan))"
_VERTEX = re.compile(r"\s*vertex\s*" + _NUMBER + r"\s*" + _NUMBER + r"\s*" + _NUMBER)


class StlError(Exception):
    """Raised when an STL file cannot be read or written."""


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _read_bytes(filename: str, limit: int | None = None) -> bytes:
    try:
        with open(filename, "rb") as handle:
            return handle.read() if limit is None else handle.read(limit)
    except OSError as exc:
        raise StlError(f"Can't open file {filename} for reading") from exc


def _faces(model: Model) -> Iterator[Face]:
    for volume in model.volumes:
        yield from volume.faces


def save_ascii(filename: str, model: Model) -> None:
    """Write *model* as an ASCII STL file (coordinates in millimetres)."""
    lines = ["solid plate"]
    for face in _faces(model):
        lines.append("  facet normal 1 0 0")
        lines.append("    outer loop")
        for p in face:
            lines.append(f"      vertex {p.x / 1000.0:g} {p.y / 1000.0:g} {p.z / 1000.0:g}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append("endsolid plate")
    try:
        Path(filename).write_text("\n".join(lines) + "\n", encoding="ascii")
    except OSError as exc:
        raise StlError(f"Can't open file {filename} for writing") from exc


def _text_lines(text: str) -> Iterator[str]:
    """Yield newline-terminated lines; an unterminated last line is dropped."""
    for line in re.split(r"[\r\n]", text)[:-1]:
        if len(line) >= _LINE_LIMIT:
            return
        yield line


def load_ascii(filename: str) -> Model:
    """Read an ASCII STL file; coordinates are scaled to micrometres."""
    text = _read_bytes(filename).decode("latin-1")
    volume = Volume()
    pending: list[Point3] = []
    for line in _text_lines(text):
        match = _VERTEX.match(line)
        if match is None:
            continue
        x, y, z = (float(g) * 1000 for g in match.groups())
        pending.append(Point3(x, y, z))
        if len(pending) == 3:
            volume.add_face(Face(*pending))
            pending = []
    return Model([volume])


def save_binary(filename: str, model: Model) -> None:
    """Write *model* as a binary STL file (coordinates in millimetres)."""
    faces = list(_faces(model))
    chunks = [bytes(_HEADER_SIZE), _COUNT.pack(len(faces))]
    for face in faces:
        coords = [c / 1000.0 for p in face for c in (p.x, p.y, p.z)]
        chunks.append(_FACE.pack(1.0, 0.0, 0.0, *coords, 0))
    try:
        Path(filename).write_bytes(b"".join(chunks))
    except OSError as exc:
        raise StlError(f"Can't open file {filename} for writing") from exc


def load_binary(filename: str) -> Model:
    """Read a binary STL file; a truncated file yields the faces read so far."""
    data = _read_bytes(filename)
    model = Model()
    offset = _HEADER_SIZE
    if len(data) < offset + _COUNT.size:
        return model
    (face_count,) = _COUNT.unpack_from(data, offset)
    offset += _COUNT.size

    volume = Volume()
    model.volumes.append(volume)
    for _ in range(face_count):
        offset += 12
        if len(data) < offset + _VERTICES.size:
            return model
        v = [_f32(c * 1000) for c in _VERTICES.unpack_from(data, offset)]
        offset += _VERTICES.size
        volume.add_face(
            Face(Point3(v[0], v[1], v[2]), Point3(v[3], v[4], v[5]), Point3(v[6], v[7], v[8]))
        )
        offset += 2
        if len(data) < offset:
            return model
    return model


def load_stl(filename: str) -> Model:
    """Read an STL file, telling ASCII from binary by its content."""
    head = _read_bytes(filename, _SNIFF_SIZE)
    if not head:
        return Model()
    if head[:5].lower() != b"solid":
        return load_binary(filename)
    printable = sum(1 for b in head if b < 127)
    if printable / len(head) < 0.95:
        return load_binary(filename)
    return load_ascii(filename)


def load_model(filename: str) -> Model:
    """Load a model from a file with an .stl extension; other files give an empty model."""
    dot = filename.rfind(".")
    if dot >= 0 and filename[dot:].lower() == ".stl":
        return load_stl(filename)
    return Model()