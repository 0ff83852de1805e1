"""Process schedule derived from dough timing parameters."""

from dataclasses import dataclass
from typing import List

from recipe import PreFermentType, Timing, round_half_up

COLD_FERMENT_HOURS = 12
FOLD_THRESHOLD_HOURS = 4
SLOW_PROOF_HOURS = 4


@dataclass(frozen=True)
class Step:
    title: str
    guidance: str
    number: int | None = None  # None for the Day Before and Ready markers
    duration_minutes: float | None = None
    hourly: bool = False  # duration entered in hours rather than minutes

    @property
    def duration_label(self) -> str | None:
        if self.duration_minutes is None:
            return None
        return format_duration(self.duration_minutes, self.hourly)


def format_duration(minutes: float, hourly: bool = False) -> str:
    if hourly:
        return f"{minutes / 60:g}hrs"
    return f"{minutes:g} min"


def _bulk_guidance(hours: float) -> str:
    if hours >= COLD_FERMENT_HOURS:
        return "Cold ferment in refrigerator."
    if hours < FOLD_THRESHOLD_HOURS:
        return "Room temperature ferment with folds every 30 minutes."
    return "Room temperature ferment."


def derive_schedule(timing: Timing, pre_ferment_enabled: bool,
                    pre_ferment_type: PreFermentType, dough_ball_count: int) -> List[Step]:
    """
    Build the ordered list of process steps.

    Day Before and Ready are unnumbered markers; the steps in between are
    numbered from 1 and close up when Autolyse is skipped.
    """
    pf_name = PreFermentType(pre_ferment_type).value
    body = []
    if timing.autolyse_minutes > 0:
        body.append(("Autolyse", "Mix flour + water only. Rest covered.", timing.autolyse_minutes, False))

    extras = "salt, yeast, oil, sugar"
    if pre_ferment_enabled:
        extras += f", {pf_name}"
    body.append(("Mix Final Dough", f"Add {extras}. Mix until smooth.", None, False))
    body.append(("Bulk Ferment", _bulk_guidance(timing.bulk_ferment_hours),
                 timing.bulk_ferment_hours * 60, True))
    body.append(("Ball & Rest", f"Divide into {dough_ball_count} balls. Shape and rest covered.",
                 timing.ball_and_rest_minutes, False))
    proof = "Room temp until doubled and jiggly"
    if timing.final_proof_hours >= SLOW_PROOF_HOURS:
        proof += " (or slow proof in fridge)"
    body.append(("Final Proof", proof + ".", timing.final_proof_hours * 60, True))

    steps = []
    if pre_ferment_enabled:
        steps.append(Step(
            "Day Before",
            f"Mix {pf_name} ingredients. Ferment 12-24 hours at room temp. Refrigerate until use.",
        ))
    for number, (title, guidance, minutes, hourly) in enumerate(body, start=1):
        steps.append(Step(title, guidance, number=number, duration_minutes=minutes, hourly=hourly))
    steps.append(Step("Ready", "Ready to stretch & bake! Dough should be soft, airy, and easy to stretch."))
    return steps


def total_hours(timing: Timing) -> float:
    return (timing.bulk_ferment_hours + timing.final_proof_hours
            + (timing.autolyse_minutes + timing.ball_and_rest_minutes) / 60.0)


def time_bucket(hours: float) -> str:
    if hours < 12:
        return "same day"
    if hours < 30:
        return "overnight"
    return "long ferment"


def total_time_label(timing: Timing) -> str:
    hours = total_hours(timing)
    return f"~{round_half_up(hours)}hrs ({time_bucket(hours)})"


def timing_summary(timing: Timing) -> str:
    """Collapsed one-line description, e.g. '30min autolyse, 24hr bulk, 2hr proof'."""
    text = f"{timing.bulk_ferment_hours:g}hr bulk, {timing.final_proof_hours:g}hr proof"
    if timing.autolyse_minutes > 0:
        text = f"{timing.autolyse_minutes:g}min autolyse, " + text
    return text
