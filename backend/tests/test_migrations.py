"""Alembic revisions build the same schema the models describe, and seed the catalog."""

from flask_migrate import downgrade, upgrade
from sqlalchemy import inspect, text

from tirepos import create_app
from tirepos.extensions import db


def _file_app(tmp_path):
    return create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'tirepos.sqlite3'}",
        'LOG_LEVEL': 'WARNING',
    })


def test_upgrade_creates_schema_and_seeds_catalog(tmp_path):
    app = _file_app(tmp_path)
    with app.app_context():
        upgrade()

        tables = set(inspect(db.engine).get_table_names())
        assert {
            "alembic_version",
            "brands",
            "tire_sizes",
            "wheel_sizes",
            "products",
            "stock_movements",
            "invoices",
            "invoice_items",
        } <= tables

        for table in db.metadata.sorted_tables:
            migrated = {c["name"] for c in inspect(db.engine).get_columns(table.name)}
            assert migrated == {c.name for c in table.columns}, table.name

        with db.engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM brands")).scalar() == 12
            assert conn.execute(text("SELECT COUNT(*) FROM tire_sizes")).scalar() == 16
            assert conn.execute(text("SELECT version_num FROM alembic_version")).scalar() == "0002_seed_catalog"

        # Re-running is a no-op
        upgrade()
        with db.engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM brands")).scalar() == 12

        db.session.remove()
        db.engine.dispose()


def test_downgrade_to_base_drops_everything(tmp_path):
    app = _file_app(tmp_path)
    with app.app_context():
        upgrade()
        downgrade(revision="base")

        tables = set(inspect(db.engine).get_table_names())
        assert tables <= {"alembic_version"}

        db.session.remove()
        db.engine.dispose()


def test_system_init_command(tmp_path):
    app = _file_app(tmp_path)
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init"])
    assert result.exit_code == 0, result.output
    assert "PASS Schema is at the latest revision" in result.output
    # Revision 0002 already seeded everything
    assert "Brands added: 0, tire sizes added: 0" in result.output

    result = runner.invoke(args=["inventory", "low-stock"])
    assert result.exit_code == 0
    assert "No products are low on stock" in result.output

    result = runner.invoke(args=["reports", "daily", "--date", "2026-01-31"])
    assert result.exit_code == 0
    assert "Daily sales for 2026-01-31" in result.output
    assert "Revenue:   0.00" in result.output

    with app.app_context():
        db.session.remove()
        db.engine.dispose()
