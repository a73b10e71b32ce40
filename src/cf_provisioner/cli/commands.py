"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from cf_provisioner.cli import app
from cf_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cf_provisioner.core.pulumi_cli import PulumiCLI

PropertiesPath = Annotated[
    Path | None,
    typer.Option("--properties", "-p", help="Path to the setup properties file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

Auto = Annotated[
    bool,
    typer.Option("--auto", "-y", help="Run without prompts."),
]

DEFAULT_PROPERTIES = Path("setup.properties")


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _properties_path(path: Path | None, *, auto: bool) -> Path:
    if path is not None:
        return path
    if auto:
        return DEFAULT_PROPERTIES
    return Path(typer.prompt("Path to properties file", default=str(DEFAULT_PROPERTIES)))


def _passphrase(found: str | None, *, auto: bool) -> str:
    from cf_provisioner.config.errors import ConfigError

    if found:
        return found
    if auto:
        raise ConfigError("PULUMI_CONFIG_PASSPHRASE is not set")
    return typer.prompt("Pulumi config passphrase", hide_input=True)


def _check_stack_keys(properties: Mapping[str, str]) -> None:
    from cf_provisioner.config.errors import ConfigError
    from cf_provisioner.config.keys import survives_stack_round_trip

    unmappable = [key for key in properties if not survives_stack_round_trip(key)]
    if unmappable:
        raise ConfigError(
            f"Property name(s) cannot be stored as stack config: {', '.join(unmappable)}"
        )


def _set_stack_config(
    pulumi: PulumiCLI, properties: Mapping[str, str], stack: str, *, color: bool
) -> int:
    """Store every property as camelCase stack config with a Rich progress bar."""
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from cf_provisioner.config.keys import LOCAL_ONLY_KEYS, is_secret, snake_to_camel

    items = [(k, v) for k, v in properties.items() if k not in LOCAL_ONLY_KEYS and v]
    console = Console(no_color=not color, stderr=True)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Setting stack config", total=len(items))
        for key, value in items:
            camel = snake_to_camel(key)
            secret = is_secret(key)
            progress.update(task, description=f"{camel}: setting...")
            pulumi.config_set(camel, value, secret=secret, stack=stack)
            progress.console.print(f"  {camel}{' (secret)' if secret else ''}")
            progress.advance(task)
    return len(items)


@app.command()
def setup(
    properties: PropertiesPath = None,
    auto: Auto = False,
    no_color: NoColor = False,
) -> None:
    """Configure the Pulumi stack from a properties file and run ``pulumi up``."""
    from cf_provisioner.config.errors import ConfigError
    from cf_provisioner.config.loader import PASSPHRASE_ENV, load_properties, resolve_passphrase
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.core.process import cloudflare_env
    from cf_provisioner.core.pulumi_cli import PulumiCLI
    from cf_provisioner.engine.errors import DuplicateResourceError
    from cf_provisioner.engine.specs import parse_resource_list
    from cf_provisioner.engine.synchronizer import validate_specs

    color = _use_color(no_color)
    path = _properties_path(properties, auto=auto)
    try:
        settings = ProvisionerSettings()
        props = load_properties(path)
        specs = parse_resource_list(props.cloudflare_resource)
        errors = validate_specs(specs, props.project_id)
        if errors:
            raise DuplicateResourceError(errors)
        _check_stack_keys(props.raw)
        passphrase = _passphrase(resolve_passphrase(props), auto=auto)

        creds = props.credentials
        env = cloudflare_env(creds.api_token.get_secret_value(), creds.account_id)
        env[PASSPHRASE_ENV] = passphrase
        env["CF_PROVISIONER_PROJECT_DIR"] = str(settings.project_dir.resolve())

        pulumi = PulumiCLI(settings.resolved_pulumi_dir, env=env)
        if not pulumi.is_logged_in():
            raise ConfigError("Not logged in to Pulumi; run 'pulumi login' first")

        stack = props.stack_name
        created = pulumi.select_or_init(stack)
        typer.echo(f"{'Created' if created else 'Selected'} stack {stack}")
        count = _set_stack_config(pulumi, props.raw, stack, color=color)
        typer.echo(f"Stored {count} config values")
        pulumi.up(auto=auto)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc


@app.command()
def cleanup(
    stack: Annotated[str, typer.Argument(help="Stack name, host or base URL.")],
    auto: Auto = False,
    no_color: NoColor = False,
) -> None:
    """Delete the deployed worker and destroy the stack."""
    from cf_provisioner.config.errors import ConfigError
    from cf_provisioner.config.loader import PASSPHRASE_ENV
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.config.stack import normalize_stack_name
    from cf_provisioner.core.process import cloudflare_env
    from cf_provisioner.core.pulumi_cli import PulumiCLI
    from cf_provisioner.core.wrangler_cli import WranglerCLI

    color = _use_color(no_color)
    try:
        settings = ProvisionerSettings()
        name = normalize_stack_name(stack)
        base_env = dict(os.environ)
        base_env[PASSPHRASE_ENV] = _passphrase(base_env.get(PASSPHRASE_ENV), auto=auto)

        pulumi = PulumiCLI(settings.resolved_pulumi_dir, env=base_env)
        if not pulumi.stack_exists(name):
            pulumi.show_stacks()
            raise ConfigError(f"Invalid stack name: {stack}")

        if not auto:
            typer.confirm(f"Destroy stack {name} and delete its worker?", abort=True)

        pulumi.select(name)
        api_token = pulumi.config_get("cloudflareApiToken", stack=name)
        account_id = pulumi.config_get("cloudflareAccountId", stack=name)
        project_id = pulumi.config_get("projectId", stack=name)
        typer.echo(f"Cleaning up project {project_id} (stack {name}, account {account_id})")

        env = cloudflare_env(api_token, account_id, base=base_env)
        WranglerCLI(settings.project_dir, env=env).delete(
            project_id, settings.wrangler_config_path(name)
        )
        PulumiCLI(settings.resolved_pulumi_dir, env=env).destroy(name)
    except typer.Abort as exc:
        typer.echo("Cleanup canceled.", err=True)
        raise typer.Exit(1) from exc
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(f"Stack {name} removed.")


@app.command(name="list")
def list_cmd(no_color: NoColor = False) -> None:
    """Show Pulumi stacks."""
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.core.pulumi_cli import PulumiCLI

    color = _use_color(no_color)
    try:
        PulumiCLI(ProvisionerSettings().resolved_pulumi_dir).show_stacks()
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc


@app.command()
def validate(
    properties: PropertiesPath = None,
    no_color: NoColor = False,
) -> None:
    """Check a properties file and show the resources it requests."""
    from cf_provisioner.cli.formatting import format_planned
    from cf_provisioner.config.loader import load_properties
    from cf_provisioner.engine.errors import DuplicateResourceError
    from cf_provisioner.engine.specs import parse_resource_list
    from cf_provisioner.engine.synchronizer import validate_specs

    color = _use_color(no_color)
    try:
        props = load_properties(properties or DEFAULT_PROPERTIES)
        specs = parse_resource_list(props.cloudflare_resource)
        errors = validate_specs(specs, props.project_id)
        if errors:
            raise DuplicateResourceError(errors)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_planned(specs, props.project_id, color=color))
    typer.echo(f"\nStack: {props.stack_name}")


def _parse_ids(values: list[str]) -> dict[str, str]:
    ids: dict[str, str] = {}
    for value in values:
        name, sep, remote_id = value.partition("=")
        if not sep or not name.strip() or not remote_id.strip():
            raise typer.BadParameter(f"expected NAME=ID, got '{value}'", param_hint="--id")
        ids[name.strip()] = remote_id.strip()
    return ids


@app.command()
def render(
    properties: PropertiesPath = None,
    ids: Annotated[
        list[str] | None,
        typer.Option("--id", help="Existing resource as NAME=ID (repeatable)."),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write to file instead of stdout."),
    ] = None,
    no_color: NoColor = False,
) -> None:
    """Render wrangler.toml offline from a properties file."""
    from cf_provisioner.cli.formatting import format_resolved
    from cf_provisioner.config.loader import load_properties
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.engine.handlers import PlaceholderProvisioner, StaticLookup
    from cf_provisioner.engine.specs import parse_resource_list
    from cf_provisioner.engine.synchronizer import ResourceSynchronizer
    from cf_provisioner.render import RenderOptions, render_wrangler_toml, write_atomic

    color = _use_color(no_color)
    known = _parse_ids(ids or [])
    try:
        props = load_properties(properties or DEFAULT_PROPERTIES)
        specs = parse_resource_list(props.cloudflare_resource)
        synchronizer = ResourceSynchronizer(
            lookup=StaticLookup(known), provisioner=PlaceholderProvisioner()
        )
        collection = synchronizer.synchronize(
            specs, props.cloudflare_account_id, props.project_id
        )
        text = render_wrangler_toml(
            collection,
            project_id=props.project_id,
            account_id=props.cloudflare_account_id,
            config=props.raw,
            options=RenderOptions.from_settings(ProvisionerSettings()),
        )
        if out is not None:
            write_atomic(out, text)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if out is None:
        typer.echo(text, nl=False)
    else:
        typer.echo(format_resolved(collection, color=color), err=True)
        typer.echo(f"Wrote {out}", err=True)


@app.command(name="write-config")
def write_config(
    path: Annotated[Path, typer.Argument(help="Destination file.")],
) -> None:
    """Write stdin to PATH atomically."""
    from cf_provisioner.render.writer import write_atomic

    content = typer.get_text_stream("stdin").read()
    try:
        write_atomic(path, content)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=_use_color(False))) from exc
    typer.echo(f"Wrote {path}")


@app.command(name="pages-deploy")
def pages_deploy(
    project: Annotated[str, typer.Argument(help="Pages project name.")],
    environment: Annotated[str, typer.Argument(help="Deployment environment.")],
    domain: Annotated[str | None, typer.Argument(help="Custom domain.")] = None,
    no_color: NoColor = False,
) -> None:
    """Build the site and deploy it to Cloudflare Pages."""
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.core.process import run_command
    from cf_provisioner.core.wrangler_cli import WranglerCLI, clean_cache

    color = _use_color(no_color)
    typer.echo(
        f"Deploying project {project} to environment {environment}"
        + (f" using custom domain {domain}" if domain else "")
    )
    try:
        settings = ProvisionerSettings()
        clean_cache(settings.project_dir)
        run_command("npm", ["run", "build"], cwd=settings.project_dir, capture=False, timeout=None)
        WranglerCLI(settings.project_dir).pages_deploy(project)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc
