# wipercheck/services/route_sampler.py
import math
from typing import List

from wipercheck.models.journey import RouteStep, SampledStep


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def sampling_interval(total_duration: float) -> float:
    """
    Seconds between weather samples for a trip of `total_duration` seconds.

    Longer trips get sparser samples; very long trips are always split
    into 20 parts and very short ones into 3.
    """
    if total_duration > 18_000:  # 5 h
        return total_duration / 20
    if total_duration > 7_200:  # 2 h
        return 15 * 60.0
    if total_duration > 3_600:  # 1 h
        return 10 * 60.0
    if total_duration > 300:  # 5 min
        return 5 * 60.0
    return total_duration / 3


def resolve_name(steps: List[RouteStep], index: int) -> str:
    """
    Name of the step at `index`, or of the nearest preceding named step.
    """
    for i in range(index, -1, -1):
        if steps[i].name:
            return steps[i].name
    return ""


def sample_route(steps: List[RouteStep], total_duration: float) -> List[SampledStep]:
    """
    Pick the route steps that get a weather lookup.

    The crossing check uses the running total *before* the current step's
    own duration is added, so a sample lands on the step following the
    one whose duration crossed the goal.
    """
    interval = sampling_interval(total_duration)
    if interval <= 0:
        return []

    sampled: List[SampledStep] = []
    running = 0.0
    goal = interval

    for i, step in enumerate(steps):
        if running >= goal:
            sampled.append(
                SampledStep(
                    name=resolve_name(steps, i),
                    step_duration=round_half_up(step.step_duration),
                    total_duration=round_half_up(running),
                    coordinates=step.coordinates,
                )
            )
            goal = running + interval
        running += step.step_duration

    return sampled
