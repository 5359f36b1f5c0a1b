import logging

import click
from flask.cli import with_appcontext
from sqlalchemy import or_

from models import db
from models.users import User

logger = logging.getLogger(__name__)


@click.command("init-db")
@with_appcontext
def init_db():
    """Create every table without migrations (local development)."""
    db.create_all()
    click.echo("Database tables created.")


@click.command("create-admin")
@click.argument("username")
@click.argument("email")
@click.password_option()
@with_appcontext
def create_admin(username, email, password):
    """Create an admin account."""
    if User.query.filter(or_(User.username == username, User.email == email)).first():
        raise click.ClickException("User with this username or email already exists")

    user = User(username=username, email=email, role="admin")
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("Admin %s created from the command line", username)
    click.echo(f"Admin {username} created.")


@click.command("set-password")
@click.argument("username")
@click.password_option()
@with_appcontext
def set_password(username, password):
    """Reset a user's password."""
    user = User.query.filter_by(username=username).first()
    if not user:
        raise click.ClickException("User not found!")

    user.set_password(password)
    db.session.commit()
    click.echo("Password updated successfully!")


def register_commands(app):
    app.cli.add_command(init_db)
    app.cli.add_command(create_admin)
    app.cli.add_command(set_password)
