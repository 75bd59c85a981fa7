# backend/fitlog/services/coaching.py
"""
Adapter around the external generative coaching service.

The generator itself is opaque: it receives sanitized history and must
return something matching the output schemas below. Nothing here computes a
recommendation.
"""
import json
import logging
from typing import Any, Callable, Dict, Iterable, List

from pydantic import ValidationError

from ..schemas import RecommendationRequest, WorkoutInsights, WorkoutRecommendations

logger = logging.getLogger(__name__)

MIN_LOGS_FOR_INSIGHTS = 5
DEFAULT_MAX_LOGS = 50


class CoachingUnavailable(Exception):
    pass


def sanitize_logs(logs: Iterable, max_logs: int = DEFAULT_MAX_LOGS) -> List[Dict[str, Any]]:
    """
    Strip logs down to date, title, duration, calories and exercise
    summaries. ``logs`` are expected newest first; only ``max_logs`` are kept.
    """
    sanitized = []
    for log in list(logs)[:max_logs]:
        sanitized.append(
            {
                "date": log.date.isoformat() if log.date else None,
                "workout_title": log.workout_title,
                "duration": log.duration,
                "calories": log.calories,
                "exercises": [
                    {
                        "name": e.name,
                        "sets": e.sets,
                        "reps": e.reps,
                        "weight": e.weight,
                    }
                    for e in log.exercise_list()
                ],
            }
        )
    return sanitized


def _call(generator: Callable, argument: Any, schema):
    try:
        raw = generator(argument)
    except Exception as e:
        # any generator failure surfaces as CoachingUnavailable
        logger.exception("Coaching generator failed")
        raise CoachingUnavailable("coaching service failed") from e

    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        logger.warning("Coaching generator returned malformed output: %s", e)
        raise CoachingUnavailable("coaching service returned malformed output") from e


def get_workout_insights(
    logs: Iterable,
    generator: Callable[[str], Any],
    max_logs: int = DEFAULT_MAX_LOGS,
) -> WorkoutInsights:
    logs = list(logs)
    if len(logs) < MIN_LOGS_FOR_INSIGHTS:
        return WorkoutInsights(insights=[])

    history = json.dumps(sanitize_logs(logs, max_logs), indent=2)
    return _call(generator, history, WorkoutInsights)


def get_recommendations(
    request: RecommendationRequest,
    generator: Callable[[Dict[str, str]], Any],
) -> WorkoutRecommendations:
    return _call(generator, request.model_dump(), WorkoutRecommendations)
