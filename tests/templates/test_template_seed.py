import pytest
from sqlalchemy import func, select

from looptimer.db.models import TimerTemplate
from looptimer.templates.seed import TemplateLibraryError, load_builtin_templates, seed_templates
from looptimer.timers.constants import SYSTEM_USER_ID, TemplateCategory
from looptimer.timers.flatten import compute_total_time
from looptimer.timers.models import config_to_dict
from looptimer.timers.validation import validate_advanced_config


def test_library_loads_every_builtin_template():
    templates = load_builtin_templates()

    assert len(templates) == 23
    assert {t.category for t in templates} == set(TemplateCategory) - {TemplateCategory.CUSTOM}
    assert len({t.id for t in templates}) == len(templates)


def test_builtin_templates_pass_strict_validation():
    for template in load_builtin_templates():
        result = validate_advanced_config(config_to_dict(template.config))
        assert result.valid, f"{template.id}: {result.errors}"


def test_tabata_classic_structure():
    tabata = next(t for t in load_builtin_templates() if t.id == "template-tabata")

    loop = tabata.config.items[0]
    assert loop.id == "loop-1"
    assert loop.loops == 8
    assert [child.id for child in loop.items] == ["work-1", "rest-1"]
    assert compute_total_time(tabata.config.items) == 240


def test_boxing_rest_is_skipped_after_last_round():
    boxing = next(t for t in load_builtin_templates() if t.id == "template-boxing")

    assert boxing.config.items[1].items[1].skip_on_last_loop is True
    assert compute_total_time(boxing.config.items) == 180 + 12 * 240 - 60


def test_invalid_yaml_raises_library_error(tmp_path):
    library = tmp_path / "library.yaml"
    library.write_text("templates: [unclosed", encoding="utf-8")

    with pytest.raises(TemplateLibraryError) as exc_info:
        load_builtin_templates(library)

    assert exc_info.value.code == "INVALID_YAML"


def test_unknown_category_raises_library_error(tmp_path):
    library = tmp_path / "library.yaml"
    library.write_text(
        "templates:\n  - id: t\n    name: T\n    category: dance\n    items:\n      - [Go, work, 10]\n",
        encoding="utf-8",
    )

    with pytest.raises(TemplateLibraryError) as exc_info:
        load_builtin_templates(library)

    assert exc_info.value.code == "INVALID_CATEGORY"


def test_seeding_is_idempotent_and_keeps_clone_counts(db_session):
    seed_templates(db_session)
    db_session.get(TimerTemplate, "template-tabata").clone_count = 5

    seed_templates(db_session)

    total = db_session.execute(select(func.count()).select_from(TimerTemplate)).scalar_one()
    tabata = db_session.get(TimerTemplate, "template-tabata")
    assert total == 23
    assert tabata.clone_count == 5
    assert tabata.user_id == SYSTEM_USER_ID
    assert tabata.is_public is True
