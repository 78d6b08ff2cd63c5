import click
from dotenv import load_dotenv

load_dotenv()

from admindash import create_app, db  # noqa: E402
from admindash.models.user import User, ROLES, ROLE_USER  # noqa: E402

app = create_app()


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in flask shell."""
    return {'db': db, 'User': User}


@app.cli.command('init-db')
def init_db():
    """Create all tables."""
    db.create_all()
    click.echo('Database initialized.')


@app.cli.command('create-user')
@click.option('--username', prompt=True)
@click.option('--email', prompt=True)
@click.option('--role', type=click.Choice(ROLES, case_sensitive=False), default=ROLE_USER)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
def create_user(username, email, role, password):
    """Create a user account."""
    if User.query.filter_by(username=username).first():
        click.echo(f'User {username} already exists.')
        return
    user = User(username=username, email=email, role=role.upper())
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    click.echo(f'User {username} created with role {user.role}.')


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=4000)
