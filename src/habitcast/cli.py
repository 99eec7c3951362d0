"""Flask CLI commands for HabitCast."""

from __future__ import annotations

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habitcast-init-db")
    def habitcast_init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_app_context
        from .infra.database import init_database

        ctx = get_app_context()
        init_database(ctx.engine)
        click.echo(f"Database ready: {ctx.config.DATABASE_URL}")

    @app.cli.command("habitcast-seed")
    @click.option("--demo", is_flag=True, default=False, help="Seed demo data for a user")
    @click.option("--user-id", default="demo-user", show_default=True, help="Owner of the seeded rows")
    def habitcast_seed(demo: bool, user_id: str) -> None:
        """Seed application data (demo)."""

        if not demo:
            click.echo("No action specified. Use --demo to seed demo data.")
            return

        from .context import UserContext
        from .extensions import get_app_context
        from .seed import run_demo_seed

        ctx = UserContext(app=get_app_context(), user_id=user_id)
        summary = run_demo_seed(ctx)
        click.echo(
            "Demo seed completed: "
            + ", ".join(f"{count} {name}" for name, count in summary.items())
        )
