"""Final overlap pass over positioned tick labels."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from tick_core.duration import js_round

from .model import Box, TextAlign, TextBlock, TickTextItem

logger = logging.getLogger("tickaxis")


def absolute_span(coordinate: float, length: float, align: TextAlign) -> tuple[float, float]:
    if align == TextAlign.START:
        return coordinate, coordinate + length
    if align == TextAlign.END:
        return coordinate - length, coordinate
    return coordinate - length / 2, coordinate + length / 2


def text_block_box(block: TextBlock) -> Box | None:
    """Axis-aligned bounds of an unrotated block; ``None`` when it has no extent."""
    anchor_x, anchor_y = block.anchor or (0, 0)
    result = None
    for line in block.lines:
        left, right = absolute_span(line.x + anchor_x, line.length, block.paral_align)
        top, bottom = absolute_span(line.y + anchor_y, block.style.font_size, block.perpen_align)
        if right == left or bottom == top:
            continue
        result = Box(top, right, bottom, left).union(result)
    return result


def rotate_to_horizontal(blocks: Sequence[TextBlock]) -> None:
    """Rotate every anchor around the first one so the shared text angle becomes zero."""
    angle = blocks[0].angle
    degrees = 360 - angle if angle > 0 else -angle
    theta = math.radians(degrees)
    rotation = np.array([[math.cos(theta), -math.sin(theta)], [math.sin(theta), math.cos(theta)]])
    origin = np.array(blocks[0].anchor or (0, 0), dtype=float)
    anchors = np.array([block.anchor or (0, 0) for block in blocks], dtype=float)
    rotated = (anchors - origin) @ rotation.T + origin
    for block, (x, y) in zip(blocks, rotated.tolist()):
        block.anchor = (x, y)
        block.angle = 0


def resolve_collisions(ticks: Sequence[TickTextItem], text_position: str = "out") -> bool:
    """Hide optional labels that overlap others.

    Non-optional labels are placed first. An optional label that hits any
    placed label is hidden. A non-optional label that hits another
    non-optional one makes the pass fail.

    Returns:
        ``False`` on a collision between non-optional labels, else ``True``.
    """
    if text_position == "none":
        return True

    candidates = [tick for tick in ticks if tick.is_visible and tick.text_block is not None]
    ordered = sorted(candidates, key=lambda tick: tick.optional)
    blocks = [tick.text_block.clone() for tick in ordered]
    if blocks and blocks[0].angle != 0:
        rotate_to_horizontal(blocks)

    fixed_boxes: list[Box] = []
    optional_boxes: list[Box] = []
    hidden = 0
    for tick, block in zip(ordered, blocks):
        box = text_block_box(block)
        if box is None:
            continue
        box = box.expand(js_round(block.style.font_size / 4), 0)

        if any(box.intersects(other) for other in fixed_boxes):
            if not tick.optional:
                logger.debug(f"Label '{tick.text}' overlaps another required label")
                return False
            tick.is_visible = False
            hidden += 1
            continue

        if not tick.optional:
            fixed_boxes.append(box)
        elif any(box.intersects(other) for other in optional_boxes):
            tick.is_visible = False
            hidden += 1
        else:
            optional_boxes.append(box)

    if hidden:
        logger.debug(f"Collision pass hid {hidden} optional labels")
    return True
