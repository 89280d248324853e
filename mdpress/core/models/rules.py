"""
Enhance rules — the static lookup tables behind the HTML enhancer.

Every vocabulary and CSS class name the enhancer knows about lives here,
so the transform functions stay pure: they receive an ``EnhanceRules``
instance and never consult module globals.  The defaults cover English
and Japanese source documents; a project can override any table from
the ``enhance:`` block of mdpress.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# CSS classes the print stylesheet ships styles for.
NOTE_BOX_CLASSES = ("danger", "info", "success", "warning")
BADGE_CLASSES = ("danger", "success", "info", "warning")


def _default_callouts() -> dict[str, tuple[str, ...]]:
    return {
        "danger": ("Note", "Warning", "Important", "注意", "警告", "重要"),
        "info": ("Point", "Tip", "Tips", "ポイント", "ヒント"),
        "success": ("Done", "Success", "完了", "成功"),
    }


def _default_badges() -> dict[str, str]:
    return {
        "Required": "danger",
        "Recommended": "success",
        "Optional": "info",
        "Planned": "warning",
        "必須": "danger",
        "推奨": "success",
        "任意": "info",
        "対応予定": "warning",
    }


class EnhanceRules(BaseModel):
    """Vocabularies and class names used by ``md_transforms.enhance``.

    ``callouts`` maps a severity (the note-box CSS modifier) to the bold
    labels that select it.  Order matters: the first severity whose
    vocabulary contains a label wins.

    ``badges`` maps a bracketed token (without brackets) to the badge
    CSS modifier.  Tokens not in this table are left as literal text.
    """

    model_config = ConfigDict(frozen=True)

    points_labels: tuple[str, ...] = ("Points", "ポイント")
    cautions_labels: tuple[str, ...] = ("Cautions", "注意点")

    callouts: dict[str, tuple[str, ...]] = Field(default_factory=_default_callouts)

    footnote_mark: str = "※"
    footnote_class: str = "info"

    step_words: tuple[str, ...] = ("Step",)

    badges: dict[str, str] = Field(default_factory=_default_badges)

    pagebreak_token: str = "pagebreak"

    section_class: str = "h2-section"
    subsection_class: str = "h3-section"

    def callout_labels(self) -> list[tuple[str, str]]:
        """Flatten ``callouts`` into ``(label, severity)`` pairs, in table order."""
        return [
            (label, severity)
            for severity, labels in self.callouts.items()
            for label in labels
        ]
