# tests/test_migrate.py
import os

from wise_advice.scripts.migrate import MIGRATIONS_DIR, build_config


def test_build_config_points_at_migrations() -> None:
    cfg = build_config()

    assert cfg.get_main_option("script_location") == MIGRATIONS_DIR
    assert os.path.isfile(os.path.join(MIGRATIONS_DIR, "env.py"))
    assert os.path.isdir(os.path.join(MIGRATIONS_DIR, "versions"))
