# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/cli.py

"""Command line interface for snapboot."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .bootloader import install_bootloader, is_installed as bootloader_installed
from .config import DEFAULT_ESP, Settings
from .context import BootContext, open_context
from .entries import install_all_kernels, install_kernel, remove_all_kernels, remove_kernel
from .errors import SnapbootError
from .reconcile import kernel_status, snapshot_entries
from .selector import set_default_snapshot
from .token import parse_token_option, write_entry_token

app = typer.Typer(help="Manage kernels and boot entries of btrfs root snapshots")
console = Console()
err_console = Console(stderr=True)

STATUS_STYLES = {"installed": "green", "missing": "yellow", "stale": "red"}


@dataclass
class CliState:
    settings: Settings
    # collaborators handed to open_context instead of the real ones
    overrides: dict = field(default_factory=dict)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


@contextmanager
def _boot_context(ctx: typer.Context) -> Iterator[BootContext]:
    state: CliState = ctx.obj
    try:
        with open_context(state.settings, **state.overrides) as boot:
            yield boot
    except SnapbootError as e:
        _fail(str(e))


@app.callback()
def main_options(
    ctx: typer.Context,
    esp_path: Path = typer.Option(DEFAULT_ESP, "--esp-path", envvar="SYSTEMD_ESP_PATH",
                                  help="Mount point of the EFI system partition"),
    entry_token: Optional[str] = typer.Option(
        None, "--entry-token",
        help="machine-id, os-id, os-image, auto or literal:STRING"),
    arch: Optional[str] = typer.Option(None, "--arch", help="Override machine architecture"),
    image: Optional[str] = typer.Option(None, "--image",
                                        help="Kernel image name, e.g. vmlinuz"),
    no_reuse_initrd: bool = typer.Option(False, "--no-reuse-initrd",
                                         help="Never reuse the parent snapshot's initrd"),
    readonly_parent: bool = typer.Option(
        False, "--require-readonly-parent",
        help="Only reuse initrds of read-only parent snapshots"),
    sysroot: Path = typer.Option(Path("/"), "--sysroot", hidden=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Manage kernels and boot entries of btrfs root snapshots."""
    _setup_logging(verbose)
    try:
        mode, override = parse_token_option(entry_token)
    except SnapbootError as e:
        _fail(str(e))
    settings = Settings(
        sysroot=sysroot,
        esp=esp_path,
        arch=arch,
        image=image,
        token_mode=mode,
        token_override=override,
        reuse_initrd=not no_reuse_initrd,
        require_readonly_parent=readonly_parent,
    )
    ctx.obj = CliState(settings=settings, overrides=dict(ctx.obj or {}))


SnapshotArg = typer.Argument(None, help="Snapshot number (default: root snapshot)")


@app.command("add-kernel")
def add_kernel(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Kernel version"),
    snapshot: Optional[int] = SnapshotArg,
) -> None:
    """Install one kernel of a snapshot and its boot entry."""
    with _boot_context(ctx) as boot:
        eid = install_kernel(boot, boot.snapshot(snapshot), version)
        console.print(f"Installed [green]{eid}[/green]")


@app.command("add-all-kernels")
def add_all_kernels(ctx: typer.Context, snapshot: Optional[int] = SnapshotArg) -> None:
    """Install every kernel of a snapshot."""
    with _boot_context(ctx) as boot:
        report = install_all_kernels(boot, boot.snapshot(snapshot))
    for eid in report.installed.values():
        console.print(f"Installed [green]{eid}[/green]")
    for version, error in report.failed.items():
        err_console.print(f"[red]Failed[/red] {version}: {error}")
    if not report.ok:
        raise typer.Exit(1)


@app.command("remove-kernel")
def remove_kernel_cmd(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Kernel version"),
    snapshot: Optional[int] = SnapshotArg,
) -> None:
    """Remove the boot entry of one kernel of a snapshot."""
    with _boot_context(ctx) as boot:
        eid = remove_kernel(boot, boot.snapshot(snapshot), version)
        console.print(f"Removed {eid}")


@app.command("remove-all-kernels")
def remove_all_kernels_cmd(ctx: typer.Context, snapshot: Optional[int] = SnapshotArg) -> None:
    """Remove every boot entry of a snapshot."""
    with _boot_context(ctx) as boot:
        for eid in remove_all_kernels(boot, boot.snapshot(snapshot)):
            console.print(f"Removed {eid}")


@app.command("set-default-snapshot")
def set_default_snapshot_cmd(
    ctx: typer.Context,
    snapshot: Optional[int] = SnapshotArg,
    oneshot: bool = typer.Option(False, "--oneshot", help="Only for the next boot"),
) -> None:
    """Make a snapshot's first entry the default boot entry."""
    with _boot_context(ctx) as boot:
        eid = set_default_snapshot(boot, boot.snapshot(snapshot), oneshot=oneshot)
        console.print(f"{'Next boot' if oneshot else 'Default'}: [green]{eid}[/green]")


@app.command()
def install(ctx: typer.Context) -> None:
    """Install the boot loader and make the root snapshot bootable."""
    with _boot_context(ctx) as boot:
        write_entry_token(boot.settings.entry_token_file, boot.token)
        for path in install_bootloader(boot):
            console.print(f"Installed {path}")
        eid = set_default_snapshot(boot, boot.snapshot())
        console.print(f"Default: [green]{eid}[/green]")


@app.command("is-installed")
def is_installed(ctx: typer.Context) -> None:
    """Exit 0 if the boot loader is installed on the ESP."""
    with _boot_context(ctx) as boot:
        installed = bootloader_installed(boot)
    if not installed:
        err_console.print("systemd-boot is not installed")
        raise typer.Exit(1)
    console.print("systemd-boot is installed")


@app.command("entry-token")
def entry_token_cmd(ctx: typer.Context) -> None:
    """Print the resolved entry token."""
    with _boot_context(ctx) as boot:
        console.print(boot.token)


@app.command("list-kernels")
def list_kernels(ctx: typer.Context, snapshot: Optional[int] = SnapshotArg) -> None:
    """Show which kernels of a snapshot are installed."""
    with _boot_context(ctx) as boot:
        snap = boot.snapshot(snapshot)
        status = kernel_status(boot, snap)

    table = Table(title=f"Kernels of snapshot {snap.number}")
    table.add_column("Kernel", style="cyan")
    table.add_column("Status")
    for path, state in sorted(status.items()):
        table.add_row(path, f"[{STATUS_STYLES[state]}]{state}[/]")
    console.print(table)


@app.command("list-entries")
def list_entries(ctx: typer.Context, snapshot: Optional[int] = typer.Argument(
        None, help="Only entries of this snapshot")) -> None:
    """Show boot entries."""
    with _boot_context(ctx) as boot:
        if snapshot is None:
            entries = boot.boot_manager.list_entries()
        else:
            entries = snapshot_entries(boot, boot.snapshot(snapshot))

    table = Table(title="Boot entries")
    table.add_column("", style="green")
    table.add_column("Id", style="cyan")
    table.add_column("Title")
    table.add_column("Snapshot", style="yellow")
    table.add_column("Kernel", style="magenta")
    for entry in entries:
        table.add_row("*" if entry.is_default else "", entry.id, entry.title,
                      entry.snapshot or "", entry.kernel_version or "")
    console.print(table)


@app.command("list-snapshots")
def list_snapshots(ctx: typer.Context) -> None:
    """Show snapshots and how many entries boot each."""
    rows = []
    with _boot_context(ctx) as boot:
        for number in boot.volume.list_snapshots():
            entries = snapshot_entries(boot, boot.snapshot(number))
            rows.append((
                number,
                len(entries),
                any(e.is_default for e in entries),
                number == boot.root_snapshot,
            ))

    table = Table(title="Snapshots")
    table.add_column("Snapshot", style="cyan")
    table.add_column("Entries")
    table.add_column("Default", style="green")
    table.add_column("Root", style="yellow")
    for number, count, default, root in rows:
        table.add_row(str(number), str(count), "*" if default else "", "*" if root else "")
    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
