# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/harierp/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: one default user per job role plus the milk and raw-water tanks.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username jdoe --password "Password123!" --role SalesManager
#   Create a user (prompts if options are omitted).
# - python -m flask users set-active jdoe --inactive
#   Activate or deactivate a user (deactivation revokes sessions).
#
# Permission inspection:
# - python -m flask perms list --role ProductionManager
#   List permissions (optionally filtered by role or category).
# - python -m flask perms check admin APPROVE_STOCK
#   Check whether a user has a permission.
#
# Maintenance:
# - python -m flask maintenance cleanup --security-days 90 --activity-days 365
#   Delete security events and activity logs older than the retention windows.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import RawMaterial, User
from .permissions import (
    ASSIGNABLE_ROLES,
    PERMISSION_DEFINITIONS,
    get_permission_roles,
    get_role_permission_codes,
)
from .services.auth_service import create_user, PasswordValidationError
from .services import auth_service, maintenance_service, permission_service, session_service
from .validation import ConflictError, ValidationError


# (username, job role)
DEFAULT_USERS = [
    ("admin", "DirectorGeneral"),
    ("gm", "GeneralManager"),
    ("finance", "FinanceManager"),
    ("sales", "SalesManager"),
    ("lab", "Laboratory"),
    ("production", "ProductionManager"),
]


def ensure_tank_materials() -> list[RawMaterial]:
    """Create the milk and raw-water tank raw materials if missing."""
    tanks = [
        (current_app.config["MILK_TANK_SKU"], "Milk Tank", "Other Supplies"),
        (current_app.config["RAW_WATER_TANK_SKU"], "Raw Water Tank", "Raw Water"),
    ]
    created = []
    for sku, name, category in tanks:
        if db.session.query(RawMaterial).filter_by(sku=sku).first():
            continue
        material = RawMaterial(
            sku=sku,
            name=name,
            category=category,
            unit_of_measure="Litres",
            stock=0.0,
            description="Intake deliveries are added to this tank",
        )
        db.session.add(material)
        created.append(material)
    db.session.commit()
    return created


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize Hari ERP: default users and tank materials.

    Creates:
    - One user per job role (admin, gm, finance, sales, lab, production)
    - The milk tank and raw-water tank raw materials
    - All passwords default to DEFAULT_RESET_PASSWORD

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing Hari ERP...")

    default_password = current_app.config["DEFAULT_RESET_PASSWORD"]

    click.echo("\nUSERS Creating default users...")
    for username, role in DEFAULT_USERS:
        if db.session.query(User).filter_by(username=username).first():
            click.echo(f"SKIP  User '{username}' already exists")
            continue
        create_user(username=username, password=default_password, role=role)
        click.echo(f"PASS Created user '{username}' ({role})")

    click.echo("\nTANKS Ensuring tank materials...")
    for material in ensure_tank_materials():
        click.echo(f"PASS Created {material.name} ({material.sku})")

    click.echo("\nDONE Hari ERP initialized.")
    click.echo(f"   All default users use the password: {default_password}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their role."""
    users = auth_service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Role':<20} {'Active':<8} {'Permission roles'}")
    click.echo("=" * 80)
    for user in users:
        active_str = "Yes" if user.is_active else "No"
        roles_str = ", ".join(get_permission_roles(user.role))
        click.echo(f"{user.id:<5} {user.username:<20} {user.role:<20} {active_str:<8} {roles_str}")
    click.echo("=" * 80 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(ASSIGNABLE_ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """Create a user account."""
    try:
        user = create_user(username=username, password=password, role=role)
    except (PasswordValidationError, ValidationError, ConflictError) as e:
        db.session.rollback()
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user '{user.username}' (ID: {user.id}, role: {user.role})")


@users_group.command('set-active')
@click.argument('username')
@click.option('--active/--inactive', default=True, help='Activate (default) or deactivate')
@with_appcontext
def set_active_cli(username, active):
    """Activate or deactivate a user; deactivation revokes all sessions."""
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        raise click.ClickException(f"User '{username}' not found")
    user.is_active = active
    if not active:
        revoked = session_service.revoke_all_user_sessions(user.id, reason="Deactivated via CLI", commit=False)
        click.echo(f"   Revoked {revoked} session(s)")
    db.session.commit()
    click.echo(f"PASS User '{username}' is now {'active' if active else 'inactive'}")


@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(list(ASSIGNABLE_ROLES)), help='Only codes held by this role')
@click.option('--category', help='Only codes in this category')
@with_appcontext
def list_perms(role, category):
    """List permission codes."""
    allowed = get_role_permission_codes(role) if role else None
    for code, name, description, perm_category in PERMISSION_DEFINITIONS:
        if category and perm_category != category.upper():
            continue
        if allowed is not None and code not in allowed:
            continue
        click.echo(f"{code:<28} {perm_category:<12} {description}")


@perms_group.command('check')
@click.argument('username')
@click.argument('permission_code')
@with_appcontext
def check_perm(username, permission_code):
    """Check whether a user holds a permission."""
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        raise click.ClickException(f"User '{username}' not found")
    if permission_service.user_has_permission(user, permission_code):
        click.echo(f"PASS {username} ({user.role}) has {permission_code}")
    else:
        click.echo(f"FAIL {username} ({user.role}) does not have {permission_code}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup')
@click.option('--security-days', type=int, default=90, show_default=True, help='Security event retention')
@click.option('--activity-days', type=int, help='Activity log retention (default ACTIVITY_LOG_RETENTION_DAYS)')
@click.option('--session-days', type=int, default=30, show_default=True, help='Dead session retention')
@with_appcontext
def cleanup(security_days, activity_days, session_days):
    """Delete old security events, activity logs and dead sessions."""
    if activity_days is None:
        activity_days = current_app.config["ACTIVITY_LOG_RETENTION_DAYS"]
    events = maintenance_service.cleanup_security_events(retention_days=security_days)
    activity = maintenance_service.cleanup_activity_logs(retention_days=activity_days)
    sessions = session_service.cleanup_expired_sessions(older_than_days=session_days)
    click.echo(f"PASS Deleted {events} security event(s), {activity} activity log(s), {sessions} session(s)")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(perms_group)
    app.cli.add_command(maintenance_group)
