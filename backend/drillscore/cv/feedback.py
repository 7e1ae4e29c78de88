"""
Coaching feedback from drill scores.

Feedback is a pure function of the numeric scores (and the drill for
drill-specific tips): the same scores always produce the same strings.
Scores are banded at 90 / 80 / 70.
"""

from typing import Dict, List, Sequence, Tuple, Union

from drillscore.cv.drill_types import DrillType

Bands = Sequence[Tuple[float, str]]

FLEXIBILITY_BANDS: Bands = (
    (90, "Excellent range of motion throughout the drill."),
    (80, "Good range of motion. A little more depth will pay off."),
    (70, "Fair range of motion. Add mobility work to your warm-up."),
    (0, "Range of motion needs work. Focus on flexibility exercises."),
)

POWER_BANDS: Bands = (
    (90, "Explosive power! Your speed through the movement is outstanding."),
    (80, "Good power. Keep driving hard through the movement."),
    (70, "Fair power. Work on accelerating through the key phase."),
    (0, "Power needs work. Incorporate explosive training exercises."),
)

STABILITY_BANDS: Bands = (
    (90, "Rock-solid stability throughout the movement!"),
    (80, "Good stability. Work on maintaining consistent form."),
    (70, "Fair stability. Focus on a steady base and a braced core."),
    (0, "Stability needs work. Practice balance and core stability exercises."),
)

# Overall tips, three per band
OVERALL_BANDS: Sequence[Tuple[float, Tuple[str, str, str]]] = (
    (90, (
        "Outstanding performance! Your technique is excellent across all metrics.",
        "Consider adding advanced variations to challenge yourself further.",
        "You're ready for competitive-level training and drills.",
    )),
    (80, (
        "Great job! You're performing well overall with room for improvement.",
        "Focus on your weakest area to reach the next level.",
        "Consistent practice will help you achieve elite performance.",
    )),
    (70, (
        "Good foundation! There's significant room for improvement.",
        "Focus on proper form and technique before increasing intensity.",
        "Consider working with a coach for personalized guidance.",
    )),
    (0, (
        "Keep practicing! Focus on proper form and gradual progression.",
        "Start with basic exercises to build a solid foundation.",
        "Consider consulting a trainer for personalized guidance.",
    )),
)

WEAK_METRIC_THRESHOLD = 70

WEAK_METRIC_TIPS = {
    "flexibility": "Work on flexibility exercises to improve your range of motion.",
    "power": "Incorporate explosive training exercises to build power.",
    "stability": "Practice balance and core stability exercises regularly.",
}

DRILL_TIPS: Dict[str, Tuple[str, str]] = {
    DrillType.SQUAT.value: (
        "Keep your chest up and your knees tracking over your toes.",
        "Drive through your heels on the way up.",
    ),
    DrillType.PUSHUP.value: (
        "Keep a straight line from head to heels.",
        "Lower under control, then press up explosively.",
    ),
    DrillType.BASKETBALL_FREE_THROW.value: (
        "Focus on consistent shooting form and follow-through.",
        "Practice your routine to build muscle memory.",
    ),
    DrillType.CRICKET_BOWLING.value: (
        "Work on your run-up rhythm and delivery stride.",
        "Focus on maintaining balance throughout your action.",
    ),
    DrillType.SOCCER_PENALTY.value: (
        "Practice your approach and follow-through technique.",
        "Work on maintaining composure under pressure.",
    ),
    DrillType.TENNIS_SERVE.value: (
        "Focus on your toss consistency and service motion.",
        "Work on generating power from your legs and core.",
    ),
}


def band_text(value: float, bands: Bands) -> str:
    """Text of the first band whose threshold the value reaches."""
    for threshold, text in bands:
        if value >= threshold:
            return text
    return bands[-1][1]


def _overall_tips(average: float) -> Tuple[str, str, str]:
    for threshold, tips in OVERALL_BANDS:
        if average >= threshold:
            return tips
    return OVERALL_BANDS[-1][1]


def metric_feedback(flexibility: float, power: float, stability: float) -> List[str]:
    """
    One line per metric, then one overall tip from the mean score.

    Returns:
        [flexibility line, power line, stability line, overall line]
    """
    average = (flexibility + power + stability) / 3
    return [
        band_text(flexibility, FLEXIBILITY_BANDS),
        band_text(power, POWER_BANDS),
        band_text(stability, STABILITY_BANDS),
        _overall_tips(average)[0],
    ]


def coaching_tips(
    drill_type: Union[DrillType, str],
    flexibility: float,
    power: float,
    stability: float,
    limit: int = 4,
) -> List[str]:
    """
    Tips shown on the results screen.

    Three general tips for the overall band, one tip for each metric
    under 70, then two drill-specific tips, truncated to limit.
    """
    average = (flexibility + power + stability) / 3
    tips = list(_overall_tips(average))

    scores = {"flexibility": flexibility, "power": power, "stability": stability}
    for metric, value in scores.items():
        if value < WEAK_METRIC_THRESHOLD:
            tips.append(WEAK_METRIC_TIPS[metric])

    drill = drill_type.value if isinstance(drill_type, DrillType) else str(drill_type)
    tips.extend(DRILL_TIPS.get(drill, ()))

    return tips[:limit]
