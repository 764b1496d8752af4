"""Stack setup command: the idempotent bootstrap pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from rcstack_common import PLACEHOLDER_SENTINEL, StackConfig

from rcstack import output
from rcstack.audit import audit
from rcstack.config import load_config
from rcstack.errors import SetupError, UnconfiguredPlaceholderError
from rcstack.output import console
from rcstack.services import bundle, directories, docker, permissions, prereqs, proxy_config, tls

TOTAL_STEPS = 6


def _banner(title: str) -> None:
    console.print()
    console.print("=============================================")
    console.print(f"  {title}")
    console.print("=============================================")
    console.print()


def _explain_placeholder(exc: UnconfiguredPlaceholderError, env_path: Path) -> None:
    console.print()
    console.print("[red bold]  !! .env has not been configured !![/red bold]")
    console.print()
    console.print(f"  You must edit .env and replace {PLACEHOLDER_SENTINEL} with your")
    console.print("  actual Unraid server IP address before running setup.")
    console.print()
    console.print(f"  Still unconfigured: {', '.join(exc.keys)}", markup=False)
    console.print(f"  Example:  nano {env_path}", markup=False)
    console.print()
    console.print("  Then change:")
    console.print(f"    NGINX_HOST={PLACEHOLDER_SENTINEL}      ->  NGINX_HOST=192.168.1.50")
    console.print(f"    ROOT_URL=http://{PLACEHOLDER_SENTINEL}:60080  ->  ROOT_URL=http://192.168.1.50:60080")
    console.print()


def _show_config(cfg: StackConfig) -> None:
    output.info(f"PROJECT_DIR    = {cfg.project_dir}")
    output.info(f"DATA_DIR       = {cfg.data_dir}")
    output.info(f"NGINX_HOST     = {cfg.nginx_host}")
    output.info(f"NGINX_HTTPS    = {cfg.nginx_https_port}")
    output.info(f"NGINX_HTTP     = {cfg.nginx_http_port}")
    output.info(f"RC_DIRECT_PORT = {cfg.rc_host_port}")
    output.info(f"PERMISSIONS    = {cfg.permissions.value}")
    console.print()


def _check_prerequisites() -> prereqs.Toolchain:
    output.info("Checking prerequisites...")
    toolchain = prereqs.check_prerequisites()
    output.ok(f"Docker found: {toolchain.docker_version or toolchain.docker}")
    output.ok(f"Compose found: {toolchain.compose_display}")
    output.ok("OpenSSL found.")
    console.print()
    return toolchain


def _summary(cfg: StackConfig, toolchain: prereqs.Toolchain) -> None:
    compose = toolchain.compose_display
    console.print()
    console.print("=============================================")
    console.print("  [green]Setup complete![/green]")
    console.print("=============================================")
    console.print()
    console.print("  Start the stack:")
    console.print(f"    cd {cfg.data_dir}", markup=False)
    console.print(f"    {compose} up -d", markup=False)
    console.print()
    console.print("  Access Rocket.Chat:")
    console.print(f"    HTTP   -> http://{cfg.nginx_host}:{cfg.nginx_http_port}", markup=False)
    console.print(f"    HTTPS  -> https://{cfg.nginx_host}:{cfg.nginx_https_port}", markup=False)
    console.print(f"    Direct -> http://{cfg.nginx_host}:{cfg.rc_host_port}", markup=False)
    console.print()
    console.print("  First-run wizard will guide you through admin account setup.")
    console.print()
    console.print("  Replace self-signed cert:")
    console.print(f"    cp your-cert.pem {cfg.cert_path}", markup=False)
    console.print(f"    cp your-key.pem  {cfg.key_path}", markup=False)
    console.print(f"    {compose} restart nginx", markup=False)
    console.print()


def provision(
    cfg: StackConfig,
    toolchain: prereqs.Toolchain,
    *,
    force_cert: bool = False,
    force_render: bool = False,
    check_compose: bool = True,
) -> dict[str, object]:
    """Run every provisioning stage in order. Any SetupError halts the run.

    Returns a summary of what each stage did.
    """
    step = 0

    step += 1
    output.step(step, TOTAL_STEPS, f"Creating data directories under {cfg.data_dir}")
    created = directories.ensure_directories(cfg.data_directories)
    if created:
        output.ok(f"Created {len(created)} data director{'y' if len(created) == 1 else 'ies'}.")
    else:
        output.ok("Data directories already exist.")

    step += 1
    output.step(step, TOTAL_STEPS, f"TLS certificate for '{cfg.nginx_host}'")
    generated = tls.ensure_tls_material(cfg, force=force_cert)
    if generated:
        output.ok("TLS certificate generated (valid 10 years).")
        output.info(f"  Cert: {cfg.cert_path}")
        output.info(f"  Key:  {cfg.key_path}")
    else:
        output.ok("TLS certificate already exists - skipping generation.")
        output.info("  To regenerate: rcstack setup --force-cert")

    step += 1
    output.step(step, TOTAL_STEPS, "Writing Nginx config from template")
    rendered = proxy_config.ensure_proxy_config(
        cfg.nginx_https_port,
        cfg.proxy_template_path,
        cfg.proxy_conf_path,
        force=force_render,
    )
    if rendered:
        output.ok(f"Nginx config written to {cfg.proxy_conf_path}")
    else:
        output.ok(f"Nginx config already uses port {cfg.nginx_https_port} - unchanged.")

    step += 1
    output.step(step, TOTAL_STEPS, f"Copying bundle files into {cfg.data_dir}")
    copied = bundle.sync_bundle(cfg)
    if copied:
        output.ok(f"Copied {', '.join(p.name for p in copied)}.")
    else:
        output.info("Project directory is the data directory - nothing to copy.")

    step += 1
    output.step(step, TOTAL_STEPS, "Normalising permissions")
    touched = permissions.normalize_permissions(
        [cfg.database_dir, cfg.uploads_dir, cfg.proxy_dir],
        mode=cfg.permissions,
        uid=cfg.puid,
        gid=cfg.pgid,
    )
    output.ok(f"Permissions set on {touched} entries ({cfg.permissions.value}).")

    step += 1
    output.step(step, TOTAL_STEPS, "Validating compose file")
    if not check_compose:
        output.info("Skipped (--skip-compose-check).")
    elif docker.validate_compose(toolchain.compose, cfg.compose_file):
        output.ok("Compose file is valid.")
    else:
        output.warn("Compose validation had warnings (may be fine on first run).")

    return {
        "directories_created": len(created),
        "cert_generated": generated,
        "config_rendered": rendered,
        "files_copied": len(copied),
    }


def setup(
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-C", help="Directory holding .env and the bundle files"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Explicit .env path (default: <project-dir>/.env)"),
    force_cert: bool = typer.Option(False, "--force-cert", help="Regenerate the TLS pair even if it exists"),
    force_render: bool = typer.Option(False, "--force-render", help="Re-render the Nginx config even if current"),
    skip_compose_check: bool = typer.Option(False, "--skip-compose-check", help="Skip advisory compose validation"),
) -> None:
    """Create directories, generate the TLS cert and write the Nginx config."""
    _banner("Rocket.Chat Unraid Stack Setup")

    try:
        try:
            cfg = load_config(project_dir, env_file)
        except UnconfiguredPlaceholderError as exc:
            _explain_placeholder(exc, env_file or project_dir.resolve() / ".env")
            raise

        _show_config(cfg)
        toolchain = _check_prerequisites()

        with audit(
            cfg,
            "setup",
            target=str(cfg.data_dir),
            force_cert=force_cert,
            force_render=force_render,
        ) as event:
            event.params.update(
                provision(
                    cfg,
                    toolchain,
                    force_cert=force_cert,
                    force_render=force_render,
                    check_compose=not skip_compose_check,
                )
            )
    except SetupError as exc:
        output.fail(str(exc))
        raise typer.Exit(exc.exit_code)

    _summary(cfg, toolchain)
