import click
from edutoolkit.database import get_engine
from edutoolkit.model import Base

@click.command()
def init_db():
    """Create all tables on the configured database."""
    Base.metadata.create_all(bind=get_engine())
    click.echo("Database tables created")
