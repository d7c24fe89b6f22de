"""Example: use the service layer directly (no Flask).

Controllers stay thin; the grading and ranking rules live in the core modules.
"""

import importlib

from config import get_settings_module

from src.school_results.school_results.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    result = container.marks_service.class_performance("3 East", term=1, year=2024)
    if not result.success:
        print(result.message)
        return

    snapshot = result.data
    print(f"{snapshot.class_name} T{snapshot.term}/{snapshot.year} mean={snapshot.class_mean}")
    for sp in snapshot.rankings:
        print(sp.position or "-", sp.admission_no, sp.full_name, sp.mean_score)


if __name__ == "__main__":
    main()
