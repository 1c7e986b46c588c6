import click
from edutoolkit.database import get_db
from edutoolkit.services import users as user_service

ROLES = ["SUPER_ADMIN", "ADMIN", "EDITOR", "DOCENTE", "VIEWER"]

@click.command()
@click.argument("email")
@click.option("--role", "-r", type=click.Choice(ROLES), default="ADMIN", show_default=True)
def promote(email, role):
    """Change the global role of an existing profile."""

    with next(get_db()) as db:
        profile = user_service.get_user_by_email(db, email)
        if profile is None:
            raise click.ClickException(f"No profile for {email}; the user has to sign in once first")
        user_service.update_user_role(db, profile.uid, role)

    click.echo(f"{email} is now {role}")

@click.group()
def users():
    pass

users.add_command(promote,"promote")
