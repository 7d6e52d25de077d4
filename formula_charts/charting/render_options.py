from __future__ import annotations

from typing import Any

from ..core.enums import ChartKind
from .options import ChartOptions


def translate_options(kind: ChartKind, options: ChartOptions) -> dict[str, Any]:
    """Map resolved chart options onto the renderer's option bag.

    Domain text goes to the category axis, range text and log scale to the
    value axis; which of ``hAxis``/``vAxis`` that is depends on the domain
    orientation.
    """
    bag: dict[str, Any] = {
        "width": options.width,
        "height": options.height,
        "enableInteractivity": False,
        "backgroundColor": {"strokeWidth": 1, "stroke": "black"},
        "legend": {"alignment": "center"},
        "hAxis": {},
        "vAxis": {},
    }

    domain_axis = "hAxis" if options.horizontal_domain else "vAxis"
    range_axis = "vAxis" if options.horizontal_domain else "hAxis"

    if not options.horizontal_domain:
        bag["orientation"] = "vertical"

    if options.title is not None:
        bag["title"] = options.title

    if options.stacking is not None:
        bag["isStacked"] = options.stacking.value

    if kind is ChartKind.PIE:
        bag["legend"]["position"] = options.legend_position.value
        bag["pieSliceText"] = options.slice_text.value
        if options.is_3d:
            bag["is3D"] = True
    else:
        # unnamed series carry no useful legend
        bag["legend"]["position"] = (
            "none" if options.series_names is None else options.legend_position.value
        )

    if options.background_color is not None:
        bag["backgroundColor"]["fill"] = options.background_color

    if options.domain_text is not None:
        bag[domain_axis]["title"] = options.domain_text

    if options.range_text is not None:
        bag[range_axis]["title"] = options.range_text

    if options.logarithmic_scale is not None:
        bag[range_axis]["logScale"] = options.logarithmic_scale

    if options.dot_size is not None:
        bag["pointSize"] = options.dot_size

    return bag
