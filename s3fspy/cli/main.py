"""s3fs CLI - Main commands."""
import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..client import S3FileSystem
from ..core.api import S3Config
from ..core.exceptions import S3FileSystemError
from ..core.logging import get_logger, set_level
from ..core.models import WriteFileAttributes
from ..core.navigation import NavigationState
from ..core.path import S3File
from ..core.session import SessionData, SQLiteSession

app = typer.Typer(
    name="s3fs",
    help="Browse S3 buckets as folders and files",
    add_completion=False
)
console = Console()
logger = get_logger('s3fspy.cli')

T = TypeVar('T')


# Session path: ~/.config/s3fs/session.session (override with S3FS_CONFIG_DIR)
def get_session_path() -> Path:
    config_dir = Path(os.environ.get("S3FS_CONFIG_DIR") or Path.home() / ".config" / "s3fs")
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "session"


def create_filesystem(config: S3Config, navigation: NavigationState) -> S3FileSystem:
    """Build the filesystem used by every command."""
    return S3FileSystem(config=config, navigation=navigation)


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def run_with_filesystem(action: Callable[[S3FileSystem], Awaitable[T]]) -> T:
    """
    Run ``action`` against a filesystem restored from the saved session.

    The cursor is saved again afterwards. Public errors are printed and
    turned into exit code 1.
    """
    config = S3Config.from_env()
    session = SQLiteSession(str(get_session_path()))

    async def run():
        saved = session.load()
        folder = None
        if saved and saved.matches(config.endpoint_url, config.region):
            folder = saved.folder
        logger.debug(f"Restored folder: {folder.url if folder else None}")
        navigation = NavigationState(folder)

        async with create_filesystem(config, navigation) as fs:
            try:
                return await action(fs)
            finally:
                current = fs.current_folder
                logger.debug(f"Saving folder: {current.url if current else None}")
                session.save(SessionData(
                    current_folder=current.url if current else None,
                    endpoint_url=config.endpoint_url,
                    region=config.region,
                ))

    try:
        return run_async(run())
    except S3FileSystemError as e:
        console.print(f"[red]{e.code}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    finally:
        session.close()


def resolve_file(name: str):
    """An ``s3://`` URL becomes an S3File, anything else stays relative."""
    if name.lower().startswith("s3://"):
        file = S3File.from_url(name)
        if file is None:
            console.print(f"[red]Not a file URL: {name}[/red]")
            raise typer.Exit(1)
        return file
    return name


def format_size(size: Optional[int]) -> str:
    if size is None:
        return "-"
    size = float(size)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


@app.callback()
def options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Browse S3 buckets as folders and files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        set_level(logging.DEBUG)


def parse_tags(values: Optional[List[str]]) -> dict:
    tags = {}
    for value in values or []:
        key, sep, tag_value = value.partition("=")
        if not sep or not key:
            console.print(f"[red]Invalid tag (expected key=value): {value}[/red]")
            raise typer.Exit(1)
        tags[key] = tag_value
    return tags


# =========================================================================
# Navigation
# =========================================================================

@app.command()
def cd(
    url: str = typer.Argument(..., help="Folder URL, e.g. s3://bucket/folder"),
    create: bool = typer.Option(False, "--create", "-c", help="Create the bucket if missing"),
):
    """Set the current folder (verifies the bucket)."""
    async def do_cd(fs: S3FileSystem):
        folder = await fs.set_current_folder(url, create_bucket=create)
        console.print(f"[green]{folder.url}[/green]")

    run_with_filesystem(do_cd)


@app.command("cd-path")
def cd_path(
    path: str = typer.Argument(..., help="Folder path from the bucket root"),
):
    """Move within the current bucket (no server check)."""
    async def do_cd_path(fs: S3FileSystem):
        console.print(fs.set_current_path(path).url)

    run_with_filesystem(do_cd_path)


@app.command()
def push(name: str = typer.Argument(..., help="Subfolder name")):
    """Enter a subfolder of the current folder."""
    async def do_push(fs: S3FileSystem):
        console.print(fs.push_folder(name).url)

    run_with_filesystem(do_push)


@app.command()
def pop():
    """Go up one folder level."""
    async def do_pop(fs: S3FileSystem):
        console.print(fs.pop_folder().url)

    run_with_filesystem(do_pop)


@app.command()
def pwd():
    """Show the current folder."""
    async def do_pwd(fs: S3FileSystem):
        folder = fs.current_folder
        if folder is None:
            console.print("[yellow]No current folder. Run 's3fs cd s3://bucket' first.[/yellow]")
        else:
            console.print(folder.url)

    run_with_filesystem(do_pwd)


@app.command()
def reset():
    """Forget the saved current folder."""
    session = SQLiteSession(str(get_session_path()))
    try:
        session.delete()
    finally:
        session.close()
    console.print("[green]Session cleared[/green]")


# =========================================================================
# Listing
# =========================================================================

@app.command()
def ls(
    long: bool = typer.Option(False, "-l", "--long", help="Long format with details"),
    recursive: bool = typer.Option(False, "-r", "--recursive", help="Include files in subfolders"),
    dirs: bool = typer.Option(False, "-d", "--dirs", help="List subfolders only"),
):
    """List the current folder."""
    async def do_ls(fs: S3FileSystem):
        folders = [] if recursive else await fs.list_subfolders()
        files = [] if dirs else await fs.list_files(include_sub_folders=recursive)

        if long:
            table = Table()
            table.add_column("Type", style="cyan")
            table.add_column("Size", justify="right")
            table.add_column("Modified")
            table.add_column("Name")

            for folder in folders:
                table.add_row("D", "-", "-", f"{folder.name}/")
            for entry in files:
                modified = entry.last_modified.strftime("%Y-%m-%d %H:%M") if entry.last_modified else "-"
                table.add_row("F", format_size(entry.size), modified, entry.relative_path)

            console.print(table)
        else:
            for folder in folders:
                console.print(f"[blue]{folder.name}/[/blue]")
            for entry in files:
                console.print(entry.relative_path)

    run_with_filesystem(do_ls)


@app.command()
def buckets():
    """List buckets."""
    async def do_buckets(fs: S3FileSystem):
        for folder in await fs.list_buckets():
            console.print(folder.url)

    run_with_filesystem(do_buckets)


@app.command()
def mb(name: str = typer.Argument(..., help="Bucket name")):
    """Create a bucket."""
    async def do_mb(fs: S3FileSystem):
        folder = await fs.create_bucket(name)
        console.print(f"[green]Created:[/green] {folder.url}")

    run_with_filesystem(do_mb)


@app.command()
def rb(
    name: str = typer.Argument(..., help="Bucket name"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete an (empty) bucket."""
    if not force:
        typer.confirm(f"Delete bucket '{name}'?", abort=True)

    async def do_rb(fs: S3FileSystem):
        await fs.delete_bucket(name)
        console.print(f"[green]Deleted:[/green] {name}")

    run_with_filesystem(do_rb)


# =========================================================================
# Files
# =========================================================================

@app.command()
def cat(name: str = typer.Argument(..., help="File name or s3:// URL")):
    """Print a file."""
    async def do_cat(fs: S3FileSystem):
        data = await fs.read_file(resolve_file(name))
        console.out(data.decode(errors="replace"), end="")

    run_with_filesystem(do_cat)


@app.command()
def put(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    name: str = typer.Option(None, "--name", "-n", help="Destination name or s3:// URL"),
    content_type: str = typer.Option(None, "--content-type", help="MIME type"),
    acl: str = typer.Option(None, "--acl", help="Canned ACL"),
    tag: List[str] = typer.Option(None, "--tag", "-t", help="Tag as key=value (repeatable)"),
):
    """Upload a local file into the current folder."""
    tags = parse_tags(tag)

    async def do_put(fs: S3FileSystem):
        attributes = WriteFileAttributes(acl=acl, content_type=content_type, tags=tags or None)
        target = resolve_file(name) if name else None
        file = await fs.upload_file(file_path, target, attributes)
        console.print(f"[green]Uploaded:[/green] {file.url}")

    run_with_filesystem(do_put)


@app.command()
def get(
    name: str = typer.Argument(..., help="File name or s3:// URL"),
    dest: Path = typer.Argument(None, help="Local destination"),
):
    """Download a file."""
    async def do_get(fs: S3FileSystem):
        path = await fs.download_file(resolve_file(name), dest)
        console.print(f"[green]Downloaded:[/green] {path}")

    run_with_filesystem(do_get)


@app.command()
def rm(
    name: str = typer.Argument(..., help="File name or s3:// URL"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a file."""
    if not force:
        typer.confirm(f"Delete '{name}'?", abort=True)

    async def do_rm(fs: S3FileSystem):
        await fs.delete_file(resolve_file(name))
        console.print(f"[green]Deleted:[/green] {name}")

    run_with_filesystem(do_rm)


@app.command()
def cp(
    source: str = typer.Argument(..., help="Source name or s3:// URL"),
    dest: str = typer.Argument(..., help="Destination name or s3:// URL"),
):
    """Copy a file."""
    async def do_cp(fs: S3FileSystem):
        file = await fs.copy_file(resolve_file(source), resolve_file(dest))
        console.print(f"[green]Copied:[/green] {file.url}")

    run_with_filesystem(do_cp)


@app.command()
def stat(name: str = typer.Argument(..., help="File name or s3:// URL")):
    """Show file attributes."""
    async def do_stat(fs: S3FileSystem):
        attributes = await fs.get_file_attributes(resolve_file(name))
        console.print(f"[bold]Size:[/bold] {format_size(attributes.size)}")
        console.print(f"[bold]ETag:[/bold] {attributes.e_tag or '-'}")
        console.print(f"[bold]Modified:[/bold] {attributes.last_modified or '-'}")
        console.print(f"[bold]Content-Type:[/bold] {attributes.content_type or '-'}")
        if attributes.content_encoding:
            console.print(f"[bold]Content-Encoding:[/bold] {attributes.content_encoding}")

    run_with_filesystem(do_stat)



@app.command()
def tags(
    name: str = typer.Argument(..., help="File name or s3:// URL"),
    set_tags: List[str] = typer.Option(None, "--set", "-s", help="Replace tags with key=value (repeatable)"),
):
    """Show or replace file tags."""
    new_tags = parse_tags(set_tags)

    async def do_tags(fs: S3FileSystem):
        file = resolve_file(name)
        if new_tags:
            await fs.set_file_tagging(file, new_tags)
        for key, value in (await fs.get_file_tagging(file)).items():
            console.print(f"{key}={value}")

    run_with_filesystem(do_tags)


@app.command()
def presign(
    name: str = typer.Argument(..., help="File name or s3:// URL"),
    write: bool = typer.Option(False, "--put", help="Sign an upload URL instead of a download URL"),
    expires: int = typer.Option(None, "--expires", "-e", help="Lifetime in seconds"),
):
    """Print a signed URL for a file."""
    async def do_presign(fs: S3FileSystem):
        file = resolve_file(name)
        if write:
            url = await fs.write_file_url(file, expires)
        else:
            url = await fs.read_file_url(file, expires)
        console.out(url)

    run_with_filesystem(do_presign)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
