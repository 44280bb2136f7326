from __future__ import annotations

from typing import Dict, Tuple

# outcome -> (banner background, banner text colour)
STATUS_COLOURS: Dict[str, Tuple[str, str]] = {
    "failed": ("#fdecea", "#b42318"),
    "fixed": ("#e7f6ec", "#1e7b34"),
}
NEUTRAL_COLOURS = ("#f3f4f6", "#374151")


def status_banner(*, project: str, label: int, outcome: str) -> str:
    background, colour = STATUS_COLOURS.get(outcome, NEUTRAL_COLOURS)
    return (
        f'<div style="background:{background};color:{colour};padding:14px 18px;'
        'font-size:17px;font-weight:700;border-bottom:1px solid #e6e8f0;">'
        f"{escape_html(project)} build {label} "
        f'<span style="text-transform:uppercase;letter-spacing:0.04em;">{escape_html(outcome)}</span>'
        "</div>"
    )


def render_build_report(*, subject: str, project: str, label: int, outcome: str, body_html: str) -> str:
    """Full HTML document for a build report: status banner above the report body."""
    return (
        "<!doctype html>\n"
        "<html>\n<head>\n"
        '  <meta charset="UTF-8" />\n'
        f"  <title>{escape_html(subject)}</title>\n"
        "</head>\n"
        '<body style="margin:0;padding:16px;background:#f7f8fb;color:#14161b;font-family:sans-serif;">\n'
        '  <div style="max-width:760px;margin:0 auto;background:#ffffff;border:1px solid #e6e8f0;">\n'
        f"    {status_banner(project=project, label=label, outcome=outcome)}\n"
        f'    <div style="padding:16px 18px;">\n{body_html}\n    </div>\n'
        "  </div>\n"
        "</body>\n</html>"
    )


def escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
