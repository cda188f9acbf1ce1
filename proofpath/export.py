"""LaTeX and plain-text export of distilled proofs and review reports."""

import re

from proofpath.models import DistillationModel, ReviewItem

_UNSAFE_FILENAME_RE = re.compile(r"[^a-z0-9\-_]+", re.IGNORECASE)
_TITLE_ESCAPE_RE = re.compile(r"[\\{}]")

LATEX_PREAMBLE = [
    "\\documentclass[11pt]{article}",
    "\\usepackage{amsmath,amssymb,amsthm}",
    "\\usepackage[margin=1in]{geometry}",
]


def sanitize_filename(name: str | None, default: str = "distilled-proof") -> str:
    return _UNSAFE_FILENAME_RE.sub("_", name or default)[:120]


def _title(s: str | None) -> str:
    return _TITLE_ESCAPE_RE.sub(" ", s or "")


def distillation_to_latex(model: DistillationModel) -> str:
    lines = list(LATEX_PREAMBLE)
    lines.append(f"\\title{{Distilled Proof for: {_title(model.title)}}}")
    lines.append("\\begin{document}")
    lines.append("\\maketitle")
    if model.definitions:
        lines.append("\\section*{Definitions and Notations}")
        for d in model.definitions:
            lines.append(d)
            lines.append("")
    if model.supporting:
        lines.append("\\section*{Supporting Results}")
        for r in model.supporting:
            lines.append(f"\\subsection*{{{_title(r.title)}}}")
            lines.append(r.content)
            lines.append("")
    lines.append("\\section*{Target Theorem and Proof}")
    lines.append(f"\\subsection*{{{_title(model.target.title)}}}")
    lines.append(model.target.content)
    lines.append("\\end{document}")
    return "\n".join(lines)


def distillation_to_text(model: DistillationModel) -> str:
    lines = [f"Distilled Proof: {model.title}", ""]
    lines.append("== Definitions and Notations ==")
    if model.definitions:
        for d in model.definitions:
            lines.append(d)
            lines.append("")
    else:
        lines.append("No explicit definitions or notations were required beyond the visible path.")
        lines.append("")

    lines.append("== Supporting Results ==")
    if model.supporting:
        for r in model.supporting:
            lines.append(f"-- {r.title} --")
            lines.append(r.content)
            lines.append("")
    else:
        lines.append("No intermediate results are required at the current unfolding depth.")
        lines.append("")

    lines.append("== Target Theorem and Proof ==")
    lines.append(f"-- {model.target.title} --")
    lines.append(model.target.content or "No statement available.")
    return "\n".join(lines)


def review_to_text(paper_title: str, items: list[ReviewItem]) -> str:
    lines = [paper_title, ""]
    for it in items:
        lines.append(f"=== {it.title} ===")
        lines.append("Clarity:")
        lines.append(it.clarity)
        lines.append("")
        lines.append("Soundness:")
        lines.append(it.soundness)
        lines.append("")
        lines.append("Suggestions for Improvement:")
        lines.append(it.suggestions)
        lines.append("\n")
    return "\n".join(lines)


def review_to_latex(paper_title: str, items: list[ReviewItem]) -> str:
    lines = list(LATEX_PREAMBLE)
    lines.append(f"\\title{{Review for: {_title(paper_title)}}}")
    lines.append("\\begin{document}")
    lines.append("\\maketitle")
    for it in items:
        lines.append(f"\\section*{{{_title(it.title)}}}")
        lines.append("\\subsection*{Clarity}")
        lines.append(it.clarity)
        lines.append("")
        lines.append("\\subsection*{Soundness}")
        lines.append(it.soundness)
        lines.append("")
        lines.append("\\subsection*{Suggestions for Improvement}")
        lines.append(it.suggestions)
    lines.append("\\end{document}")
    return "\n".join(lines)
