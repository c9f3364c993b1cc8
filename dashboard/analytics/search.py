"""Relevance ranking for the course catalog search box."""

import logging
from typing import Iterable, List

from ..models.course import Course

logger = logging.getLogger(__name__)

ALL_COURSES = "All Courses"

EXACT_CATEGORY_SCORE = 100
PARTIAL_CATEGORY_SCORE = 80
TITLE_SCORE = 40
INSTRUCTOR_SCORE = 30
DESCRIPTION_SCORE = 20
LEVEL_SCORE = 10


def _normalise(value) -> str:
    return (value or "").strip().lower()


def score_course(query: str, course: Course) -> int:
    """Score how well a course matches the search query.

    The score is the best tier the course reaches: an exact type or category
    match (100) beats a partial one (80), which beats any match on title (40),
    instructor name (30), description (20) or level (10). Matching is
    case-insensitive; 0 means no match at all.
    """
    term = _normalise(query)
    if not term:
        return 0

    labels = [_normalise(course.type)] + [_normalise(c) for c in course.categories]
    labels = [label for label in labels if label]
    if term in labels:
        return EXACT_CATEGORY_SCORE
    if any(term in label for label in labels):
        return PARTIAL_CATEGORY_SCORE

    instructor = course.instructor.name if course.instructor else ""
    tiers = (
        (course.title, TITLE_SCORE),
        (instructor, INSTRUCTOR_SCORE),
        (course.description, DESCRIPTION_SCORE),
        (course.level, LEVEL_SCORE),
    )
    for text, score in tiers:
        if term in _normalise(text):
            return score
    return 0


def search_courses(courses: Iterable[Course], query: str) -> List[Course]:
    """Matching courses, best match first.

    A blank query returns every course in its original order. Courses with
    equal scores keep their relative order.
    """
    courses = list(courses)
    if not _normalise(query):
        return courses
    scored = [(score_course(query, course), course) for course in courses]
    # sorted() is stable, so ties keep input order
    ranked = sorted((pair for pair in scored if pair[0] > 0), key=lambda pair: -pair[0])
    logger.debug(f"Search {query!r} matched {len(ranked)} of {len(courses)} courses")
    return [course for _, course in ranked]


def filter_by_category(courses: Iterable[Course], category: str) -> List[Course]:
    if not category or category == ALL_COURSES:
        return list(courses)
    return [
        course for course in courses
        if course.type == category or category in course.categories
    ]
