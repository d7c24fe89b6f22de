"""School Results package.

Grading and performance core (grade table, mark aggregation, class ranking,
trend analysis, report cards) with thin service/repository layers and a
Flask JSON controller, organized by feature modules.
"""
