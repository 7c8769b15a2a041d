# mdcanvas layout engine

from .units import (
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_PADDING,
)

from .geometry import (
    Rect,
    clamp_to_canvas,
    rect_of,
)

from .text_measure import (
    clean_markdown_text,
    estimate_text_height,
)

from .layout_engine import (
    layout,
    plan_layout,
    estimate_density,
)

from .paginator import (
    paginate,
    layout_pages,
    split_by_headings,
)

from .svg_renderer import (
    SVGRenderer,
    render_page_to_svg,
    render_to_data_uri,
)

from .export import (
    ArchiveWriter,
    ZipArchiveWriter,
    export_pages,
    batch_filename,
    single_page_filename,
)

__all__ = [
    # Units
    'DEFAULT_CANVAS_WIDTH',
    'DEFAULT_CANVAS_HEIGHT',
    'DEFAULT_PADDING',
    # Geometry
    'Rect',
    'clamp_to_canvas',
    'rect_of',
    # Text measurement
    'clean_markdown_text',
    'estimate_text_height',
    # Layout
    'layout',
    'plan_layout',
    'estimate_density',
    # Pagination
    'paginate',
    'layout_pages',
    'split_by_headings',
    # Rendering
    'SVGRenderer',
    'render_page_to_svg',
    'render_to_data_uri',
    # Export
    'ArchiveWriter',
    'ZipArchiveWriter',
    'export_pages',
    'batch_filename',
    'single_page_filename',
]
