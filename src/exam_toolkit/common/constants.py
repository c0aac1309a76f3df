"""Fixed exam-shape constants shared by the builder, scorer and CLI."""

from __future__ import annotations

EXAM_QUESTION_COUNT = 90
EXAM_DURATION_SECONDS = 90 * 60

# Upper bound on performance-based questions per session
MAX_PBQ_COUNT = 12

# Right column of a match PBQ never has fewer entries than this
MIN_MATCH_RIGHT_POOL = 4
