"""SVG badge rendering.

The geometry matches the badges already embedded in READMEs: a grey name panel
sized at 10px per character plus padding, followed by a fixed-width red
"FAULT" panel, both under a subtle gradient and linked to the offending commit.
"""

from xml.sax.saxutils import escape

SVG_MEDIA_TYPE = "image/svg+xml; charset=utf-8"

EMPTY_BADGE = '<svg xmlns="http://www.w3.org/2000/svg" width="1" height="1"></svg>'

CHAR_WIDTH = 10
NAME_PADDING = 10
FAULT_BOX_WIDTH = 43

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

_BADGE_TEMPLATE = """<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="{total_width}" height="20">
    <linearGradient id="b" x2="0" y2="100%">
        <stop offset="0" stop-color="#bbb" stop-opacity=".1" />
        <stop offset="1" stop-opacity=".1" />
    </linearGradient>
    <clipPath id="a">
        <rect width="{total_width}" height="20" rx="3" fill="#fff" />
    </clipPath>
    <g clip-path="url(#a)">
        <path fill="#555" d="M0 0h{name_box_width}v20H0z" />
        <path fill="#e05d44" d="M{name_box_width} 0h{fault_box_width}v20H{name_box_width}z" />
        <path fill="url(#b)" d="M0 0h{total_width}v20H0z" />
    </g>
    <g fill="#fff" text-anchor="middle" font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">
        <a xlink:href="{commit_url}">
            <text x="{name_x}" y="14" fill="#eee">{name}&apos;s</text>
            <text x="{fault_x}" y="14" fill="#eee">FAULT</text>
        </a>
    </g>
</svg>"""


def xml_escape(value: str) -> str:
    return escape(value, _XML_ENTITIES)


def _format_number(value: float) -> str:
    # Whole numbers are written without a trailing ".0"
    return str(int(value)) if value == int(value) else str(value)


def render_badge(name: str, commit_url: str) -> str:
    """Render the "<name>'s FAULT" badge linking to commit_url."""
    name = xml_escape(name)
    commit_url = xml_escape(commit_url)

    name_box_width = len(name) * CHAR_WIDTH + NAME_PADDING
    total_width = name_box_width + FAULT_BOX_WIDTH

    return _BADGE_TEMPLATE.format(
        total_width=total_width,
        name_box_width=name_box_width,
        fault_box_width=FAULT_BOX_WIDTH,
        commit_url=commit_url,
        name=name,
        name_x=_format_number(name_box_width / 2),
        fault_x=_format_number(FAULT_BOX_WIDTH / 2 + name_box_width),
    )
