"""
Size label derivation for tires and alloy wheels.

Labels are what staff type into the search box, so the format is fixed:

    tire   205/55R16            (+ " 91V" when both load index and speed rating are known)
    wheel  16x7 PCD:5x114.3 5 Stud (Long Stud)

Every segment after the diameter/width pair is optional and only rendered when present.
"""
from __future__ import annotations

from typing import Any


def format_number(value: Any) -> str:
    """Render 7.0 as "7" and 7.5 as "7.5"; strings pass through trimmed."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:g}"
    return str(value).strip()


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def tire_size_display(
    width: Any,
    aspect_ratio: Any,
    diameter: Any,
    load_index: Any = None,
    speed_rating: Any = None,
) -> str | None:
    if not (_present(width) and _present(aspect_ratio) and _present(diameter)):
        return None

    label = f"{format_number(width)}/{format_number(aspect_ratio)}R{format_number(diameter)}"
    if _present(load_index) and _present(speed_rating):
        label += f" {format_number(load_index)}{format_number(speed_rating)}"
    return label


def wheel_size_display(
    diameter: Any,
    width: Any,
    pcd: Any = None,
    stud_count: Any = None,
    stud_type: Any = None,
) -> str | None:
    if not (_present(diameter) and _present(width)):
        return None

    label = f"{format_number(diameter)}x{format_number(width)}"
    if _present(pcd):
        label += f" PCD:{format_number(pcd)}"
    if _present(stud_count):
        label += f" {format_number(stud_count)} Stud"
    if _present(stud_type):
        label += f" ({format_number(stud_type)})"
    return label
