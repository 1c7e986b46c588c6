from datetime import datetime
import click
from edutoolkit.database import get_db
from edutoolkit.services import permissions_store

ROLES = ["EDITOR", "DOCENTE", "VIEWER"]

@click.command()
@click.argument("course_id")
@click.argument("email")
@click.option("--role", "-r", type=click.Choice(ROLES), default="DOCENTE", show_default=True)
@click.option("--expires", "-e", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Last day of access (inclusive)")
@click.option("--name", "-n", default="")
def grant(course_id, email, role, expires: datetime, name):

    expires_at = permissions_store.end_of_day(expires.date()) if expires else None

    with next(get_db()) as db:
        grant_id = permissions_store.grant_access(db, course_id, email, role, expires_at, name)

    if grant_id is None:
        click.echo(f"{permissions_store.normalize_email(email)} already has access to {course_id}")
    else:
        click.echo(grant_id)

@click.command()
@click.argument("grant_id")
def revoke(grant_id):

    with next(get_db()) as db:
        deleted = permissions_store.revoke_access(db, grant_id)

    click.echo("Revoked" if deleted else f"No grant {grant_id}")

@click.command("list")
@click.option("--course", "-c", "course_id", default=None)
def list_grants(course_id):

    with next(get_db()) as db:
        if course_id:
            grants = permissions_store.get_course_permissions(db, course_id)
        else:
            grants = permissions_store.get_all_permissions(db)

        for g in grants:
            state = "expired" if permissions_store.is_expired(g) else "active"
            expires = g.expires_at.isoformat() if g.expires_at else "never"
            click.echo(f"{g.id}\t{g.course_id}\t{g.email}\t{g.role_in_course}\t{expires}\t{state}")

@click.group()
def permissions():
    pass

permissions.add_command(grant,"grant")
permissions.add_command(revoke,"revoke")
permissions.add_command(list_grants,"list")
