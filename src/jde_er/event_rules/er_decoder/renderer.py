from pathlib import Path

import yaml
from jinja2 import Template

# Load once at module import
with open(Path(__file__).parent / "templates.yml", encoding="utf-8") as f:
    _cfg = yaml.safe_load(f)

# Load and compile all templates at import time
TEMPLATES = {
    tpl_id: Template(tpl_text)
    for tpl_id, tpl_text in _cfg["templates"].items()
}
FILE_IO_ARROWS: dict[str, str] = _cfg["file_io_arrows"]
BF_ARROWS: dict[str, str] = _cfg["bf_arrows"]


def render_line(template_id: str, **ctx) -> str:
    """Render one output line with the named template."""
    tpl = TEMPLATES.get(template_id)
    if tpl is None:
        raise KeyError(f"No template found: {template_id}")
    return tpl.render(**ctx)


def _arrow(arrows: dict[str, str], copy_word: str | None) -> str:
    direction = (copy_word or "").strip().upper()
    return arrows.get(direction, arrows["*"])


def format_file_io_param_line(copy_word: str | None, source: str, target: str) -> str:
    """IN copies event value into the column (->), OUT copies it back (<-)."""
    return render_line("FILE_IO_PARAM", source=source, arrow=_arrow(FILE_IO_ARROWS, copy_word), target=target)


def format_business_function_param_line(copy_word: str | None, event_label: str, param_label: str) -> str:
    return render_line(
        "BF_PARAM",
        event_label=event_label,
        arrow=_arrow(BF_ARROWS, copy_word),
        param_label=param_label,
    )
