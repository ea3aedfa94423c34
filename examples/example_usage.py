"""Example: use the service layer directly (without Flask).

Controllers stay thin; the rules live in the services and evaluators.
"""

import importlib

from config import get_settings_module

from src.school_records.school_records.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        honor_policy=getattr(settings, "HONOR_TIER_POLICY", "strict"),
    )
    context = container.context_resolver.resolve()

    print(context.to_dict())
    print(container.attendance_service.tardiness_stats(context, student_id=1))
    print(container.promotion_service.section_readiness(context, section_id=1).to_dict())
    check = container.certificate_service.eligibility(
        context,
        student_id=1,
        quarter_id=context.quarter_ids[0] if context.quarter_ids else 1,
        certificate_type="honor_roll",
    )
    print(check.value.to_dict())


if __name__ == "__main__":
    main()
