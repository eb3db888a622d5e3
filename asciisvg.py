#!/usr/bin/env python3
"""Pure Python ASCII art -> SVG renderer.

Every character cell of the input is matched against an ordered table of
line-drawing glyph rules; the first rule that accepts the character places
its primitives on a regular grid of ``cellWidth`` x ``cellHeight`` pixels.

Supports:
- solid lines: | - _ / \\
- dashed lines: : =
- serialization of lines, arcs, text and paths
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union
import argparse
import logging
import math
import sys
import xml.etree.ElementTree as ET

logger = logging.getLogger("asciisvg")

# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class Settings:
    optimize: bool = True
    fontSize: float = 14
    cellWidth: float = 8
    cellHeight: float = 16
    compactPath: bool = True

    def __post_init__(self) -> None:
        for name in ('fontSize', 'cellWidth', 'cellHeight'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"{name} must be a positive finite number, got {value!r}")


DEFAULT_SETTINGS = Settings()


@dataclass(frozen=True)
class Loc:
    x: int
    y: int


@dataclass(frozen=True)
class Direction:
    x: int
    y: int


# Anchor positions inside a cell, in half-cell units.
Up = Direction(1, 0)
Down = Direction(1, 2)
Left = Direction(0, 1)
Right = Direction(2, 1)
UpperRight = Direction(2, 0)
UpperLeft = Direction(0, 0)
LowerRight = Direction(2, 2)
LowerLeft = Direction(0, 2)
Middle = Direction(1, 1)

ALL_DIRECTIONS = [
    Up, Down, Left, Right, UpperRight, UpperLeft, LowerRight, LowerLeft, Middle
]


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class Stroke(Enum):
    SOLID = 'solid'
    DASHED = 'dashed'


class Marker(Enum):
    NONE = 'none'
    ARROW = 'arrow'


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    stroke: Stroke = Stroke.SOLID
    marker: Marker = Marker.NONE


@dataclass(frozen=True)
class Arc:
    start: Point
    end: Point
    radius: float
    largeArc: bool = False


@dataclass(frozen=True)
class Text:
    at: Loc
    content: str


@dataclass(frozen=True)
class Path:
    start: Point
    end: Point
    command: str
    stroke: Stroke = Stroke.SOLID


Element = Union[Line, Arc, Text, Path]


@dataclass(frozen=True)
class Grid:
    rows: Tuple[Tuple[str, ...], ...]
    rowCount: int
    columnCount: int


@dataclass(frozen=True)
class RenderedDocument:
    width: float
    height: float
    elements: Tuple[Element, ...]


class UnsupportedElementError(TypeError):
    """Raised when an object with no SVG serialization reaches the renderer."""

    def __init__(self, element: object) -> None:
        super().__init__(f"unsupported primitive: {type(element).__name__}")
        self.element = element


# =============================================================================
# Coordinate helpers
# =============================================================================

# A cell is divided into a 4x4 sub-grid; anchors sit on every other line of it.
SUBDIVISIONS = 4


def loc_neighbor(loc: Loc, d: Direction) -> Loc:
    # Middle maps to the cell itself; no bounds checking.
    return Loc(loc.x + d.x - Middle.x, loc.y + d.y - Middle.y)


def loc_neighbors(loc: Loc) -> Dict[Direction, Loc]:
    return {d: loc_neighbor(loc, d) for d in ALL_DIRECTIONS if d != Middle}


def cell_point(loc: Loc, settings: Settings, qx: int, qy: int) -> Point:
    """Pixel position of sub-grid line ``(qx, qy)`` (0..4 each) of a cell."""
    return Point(
        x=loc.x * settings.cellWidth + settings.cellWidth * qx / SUBDIVISIONS,
        y=loc.y * settings.cellHeight + settings.cellHeight * qy / SUBDIVISIONS,
    )


def anchor(loc: Loc, settings: Settings, d: Direction) -> Point:
    step = SUBDIVISIONS // 2
    return cell_point(loc, settings, d.x * step, d.y * step)


# =============================================================================
# Grid loader
# =============================================================================

def load(text: str) -> Grid:
    rows = tuple(tuple(line.rstrip()) for line in text.splitlines())
    column_count = max((len(row) for row in rows), default=0)
    logger.debug("loaded grid of %d rows x %d columns", len(rows), column_count)
    return Grid(rows=rows, rowCount=len(rows), columnCount=column_count)


def grid_get(grid: Grid, loc: Loc) -> Optional[str]:
    if loc.y < 0 or loc.y >= grid.rowCount:
        return None
    row = grid.rows[loc.y]
    if loc.x < 0 or loc.x >= len(row):
        return None
    return row[loc.x]


# =============================================================================
# Cell classifier
# =============================================================================

def is_vertical(c: str) -> bool:
    return c == '|'


def is_horizontal(c: str) -> bool:
    return c == '-'


def is_low_horizontal(c: str) -> bool:
    return c == '_'


def is_slant_right(c: str) -> bool:
    return c == '/'


def is_slant_left(c: str) -> bool:
    return c == '\\'


def is_vertical_dashed(c: str) -> bool:
    return c == ':'


def is_horizontal_dashed(c: str) -> bool:
    return c == '='


Producer = Callable[[Loc, Settings], List[Element]]


def line_rule(frm: Direction, to: Direction, stroke: Stroke = Stroke.SOLID) -> Producer:
    def produce(loc: Loc, settings: Settings) -> List[Element]:
        return [Line(anchor(loc, settings, frm), anchor(loc, settings, to), stroke, Marker.NONE)]
    return produce


# Evaluated in order; the first predicate that accepts the character wins.
GLYPH_RULES: List[Tuple[Callable[[str], bool], Producer]] = [
    (is_vertical, line_rule(Up, Down)),
    (is_horizontal, line_rule(Left, Right)),
    (is_low_horizontal, line_rule(LowerLeft, LowerRight)),
    (is_slant_right, line_rule(LowerLeft, UpperRight)),
    (is_slant_left, line_rule(UpperLeft, LowerRight)),
    (is_vertical_dashed, line_rule(Up, Down, Stroke.DASHED)),
    (is_horizontal_dashed, line_rule(Left, Right, Stroke.DASHED)),
]


def classify(loc: Loc, grid: Grid, settings: Settings) -> Optional[List[Element]]:
    c = grid_get(grid, loc)
    if c is None:
        return None
    for predicate, produce in GLYPH_RULES:
        if predicate(c):
            return produce(loc, settings)
    # TODO: emit a Text element once label grouping across cells exists.
    return None


def classify_all(grid: Grid, settings: Settings) -> List[Tuple[Loc, List[Element]]]:
    matched: List[Tuple[Loc, List[Element]]] = []
    for y in range(grid.rowCount):
        for x in range(grid.columnCount):
            loc = Loc(x, y)
            elements = classify(loc, grid, settings)
            if elements:
                matched.append((loc, elements))
    return matched


# =============================================================================
# Element optimisation
# =============================================================================

def _point_key(p: Point) -> Tuple[float, float]:
    return (round(p.x, 6), round(p.y, 6))


def _line_heading(line: Line) -> Tuple[float, float]:
    dx = line.end.x - line.start.x
    dy = line.end.y - line.start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return (0.0, 0.0)
    return (round(dx / length, 6), round(dy / length, 6))


def merge_lines(elements: Sequence[Element]) -> List[Element]:
    """Join collinear lines that touch end to start into one longer line.

    A line arriving between two open runs bridges them into one. A merged line
    keeps the draw position of the earliest line of its run, so the relative
    order of everything that survives is unchanged.
    """
    merged: List[Optional[Element]] = []
    by_end: Dict[tuple, int] = {}
    by_start: Dict[tuple, int] = {}

    for e in elements:
        if not isinstance(e, Line) or e.start == e.end:
            merged.append(e)
            continue

        style = (_line_heading(e), e.stroke, e.marker)
        tail = by_end.pop((_point_key(e.start),) + style, None)
        head = by_start.pop((_point_key(e.end),) + style, None)

        if tail is None and head is None:
            merged.append(e)
            by_end[(_point_key(e.end),) + style] = len(merged) - 1
            by_start[(_point_key(e.start),) + style] = len(merged) - 1
            continue

        start = merged[tail].start if tail is not None else e.start  # type: ignore[union-attr]
        end = merged[head].end if head is not None else e.end  # type: ignore[union-attr]
        joined = [i for i in (tail, head) if i is not None]
        for i in joined:
            merged[i] = None
        keep = min(joined)
        merged[keep] = Line(start, end, e.stroke, e.marker)
        by_start[(_point_key(start),) + style] = keep
        by_end[(_point_key(end),) + style] = keep

    return [m for m in merged if m is not None]


@dataclass
class LineChain:
    stroke: Stroke
    points: List[Point]


def chain_to_element(chain: LineChain) -> Element:
    if len(chain.points) == 2:
        return Line(chain.points[0], chain.points[1], chain.stroke, Marker.NONE)
    command = ' '.join(f"L {fmt(p.x)} {fmt(p.y)}" for p in chain.points[1:-1]) + ' L'
    return Path(chain.points[0], chain.points[-1], command, chain.stroke)


def chain_lines(elements: Sequence[Element]) -> List[Element]:
    """Fold unmarked lines that continue one another into polyline paths.

    Lines chain when one ends where the next starts and both share a stroke,
    whatever their headings (``_/``, ``/\\``). A chain takes the draw position
    of its earliest line; a chain of a single line stays a ``Line``.
    """
    slots: List[Union[Element, LineChain, None]] = []
    by_end: Dict[tuple, int] = {}
    by_start: Dict[tuple, int] = {}

    for e in elements:
        if not isinstance(e, Line) or e.marker is not Marker.NONE or e.start == e.end:
            slots.append(e)
            continue

        tail = by_end.pop((_point_key(e.start), e.stroke), None)
        head = by_start.pop((_point_key(e.end), e.stroke), None)

        if tail is not None and tail == head:
            # Closes a loop; nothing left to attach to.
            slots[tail].points.append(e.end)  # type: ignore[union-attr]
            continue

        if tail is None and head is None:
            points = [e.start, e.end]
            slots.append(LineChain(e.stroke, points))
            keep = len(slots) - 1
        else:
            points = (
                (slots[tail].points if tail is not None else [e.start])  # type: ignore[union-attr]
                + (slots[head].points if head is not None else [e.end])  # type: ignore[union-attr]
            )
            joined = [i for i in (tail, head) if i is not None]
            for i in joined:
                slots[i] = None
            keep = min(joined)
            slots[keep] = LineChain(e.stroke, points)

        by_start[(_point_key(points[0]), e.stroke)] = keep
        by_end[(_point_key(points[-1]), e.stroke)] = keep

    chained: List[Element] = []
    for slot in slots:
        if slot is None:
            continue
        chained.append(chain_to_element(slot) if isinstance(slot, LineChain) else slot)
    return chained


# =============================================================================
# Geometry renderer
# =============================================================================

def render(grid: Grid, settings: Settings) -> RenderedDocument:
    elements: List[Element] = []
    for _loc, cell_elements in classify_all(grid, settings):
        elements.extend(cell_elements)

    count = len(elements)
    if settings.compactPath:
        elements = merge_lines(elements)
    if settings.optimize:
        elements = chain_lines(elements)
    logger.debug("rendered %d primitives (%d before optimisation)", len(elements), count)

    return RenderedDocument(
        width=settings.cellWidth * grid.columnCount,
        height=settings.cellHeight * grid.rowCount,
        elements=tuple(elements),
    )


SVG_NS = "http://www.w3.org/2000/svg"

STYLESHEET = (
    "line, path { stroke: black; stroke-width: 1; fill: none; }\n"
    ".dashed { stroke-dasharray: 3 3; }\n"
    "text { fill: black; }"
)

ARROW_MARKER_ID = "arrow"


def fmt(x: float) -> str:
    s = f"{x:.6f}".rstrip("0").rstrip(".")
    return s if s not in ("", "-0") else "0"


def stroke_attrs(stroke: Stroke) -> Dict[str, str]:
    return {"class": "dashed"} if stroke is Stroke.DASHED else {}


def line_to_svg(line: Line) -> ET.Element:
    attrs = {
        "x1": fmt(line.start.x),
        "y1": fmt(line.start.y),
        "x2": fmt(line.end.x),
        "y2": fmt(line.end.y),
    }
    attrs.update(stroke_attrs(line.stroke))
    if line.marker is Marker.ARROW:
        attrs["marker-end"] = f"url(#{ARROW_MARKER_ID})"
    return ET.Element("line", attrs)


def arc_to_svg(arc: Arc) -> ET.Element:
    r = fmt(arc.radius)
    d = (
        f"M {fmt(arc.start.x)} {fmt(arc.start.y)} "
        f"A {r} {r} 0 {1 if arc.largeArc else 0} 1 {fmt(arc.end.x)} {fmt(arc.end.y)}"
    )
    return ET.Element("path", {"d": d})


def text_to_svg(text: Text, settings: Settings) -> ET.Element:
    # Baseline sits three quarters down the cell.
    at = cell_point(text.at, settings, 0, 3)
    node = ET.Element("text", {"x": fmt(at.x), "y": fmt(at.y)})
    node.text = text.content
    return node


def path_to_svg(path: Path) -> ET.Element:
    d = f"M {fmt(path.start.x)} {fmt(path.start.y)} {path.command} {fmt(path.end.x)} {fmt(path.end.y)}"
    attrs = {"d": d}
    attrs.update(stroke_attrs(path.stroke))
    return ET.Element("path", attrs)


def element_to_svg(element: Element, settings: Settings) -> ET.Element:
    if isinstance(element, Line):
        return line_to_svg(element)
    if isinstance(element, Arc):
        return arc_to_svg(element)
    if isinstance(element, Text):
        return text_to_svg(element, settings)
    if isinstance(element, Path):
        return path_to_svg(element)
    raise UnsupportedElementError(element)


def arrow_marker_defs() -> ET.Element:
    defs = ET.Element("defs")
    marker = ET.SubElement(defs, "marker", {
        "id": ARROW_MARKER_ID,
        "viewBox": "0 0 10 10",
        "refX": "5",
        "refY": "5",
        "markerWidth": "6",
        "markerHeight": "6",
        "orient": "auto",
    })
    ET.SubElement(marker, "path", {"d": "M 0 0 L 10 5 L 0 10 z"})
    return defs


def to_svg(doc: RenderedDocument, settings: Settings) -> str:
    # Serialize every element first so nothing is emitted if one is unsupported.
    nodes = [element_to_svg(e, settings) for e in doc.elements]

    root = ET.Element("svg", {
        "xmlns": SVG_NS,
        "width": fmt(doc.width),
        "height": fmt(doc.height),
        "style": f"font-size:{fmt(settings.fontSize)}px;font-family:monospace",
    })
    style = ET.SubElement(root, "style")
    style.text = STYLESHEET
    if any(isinstance(e, Line) and e.marker is Marker.ARROW for e in doc.elements):
        root.append(arrow_marker_defs())
    root.extend(nodes)
    return ET.tostring(root, encoding="unicode")


# =============================================================================
# Top-level render
# =============================================================================

def render_svg(text: str, settings: Optional[Settings] = None) -> str:
    settings = settings or DEFAULT_SETTINGS
    return to_svg(render(load(text), settings), settings)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the 'asciisvg' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # stderr keeps stdout free for the SVG document.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


# =============================================================================
# CLI
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Render ASCII art diagrams to SVG.')
    parser.add_argument('input', nargs='?', default='-', help='Path to ASCII art text file ("-" reads stdin)')
    parser.add_argument('-o', '--output', help='Write the SVG here instead of stdout')
    parser.add_argument('--cell-width', type=float, default=DEFAULT_SETTINGS.cellWidth, help='Pixel width of one character cell')
    parser.add_argument('--cell-height', type=float, default=DEFAULT_SETTINGS.cellHeight, help='Pixel height of one character cell')
    parser.add_argument('--font-size', type=float, default=DEFAULT_SETTINGS.fontSize, help='Font size in pixels')
    parser.add_argument('--no-optimize', action='store_true', help='Keep connected lines as separate primitives instead of polyline paths')
    parser.add_argument('--no-compact', action='store_true', help='Do not merge collinear line segments')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = Settings(
            optimize=not args.no_optimize,
            fontSize=args.font_size,
            cellWidth=args.cell_width,
            cellHeight=args.cell_height,
            compactPath=not args.no_compact,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        if args.input == '-':
            text = sys.stdin.read()
        else:
            with open(args.input, 'r', encoding='utf-8') as f:
                text = f.read()
    except OSError as e:
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    output = render_svg(text, settings)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output + '\n')
        logger.info("wrote %s", args.output)
    else:
        print(output)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
