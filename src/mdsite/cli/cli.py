"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, check_cmd, main_callback, nav_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Markdown chapters to a static HTML site")

app.callback()(main_callback)
app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)
app.command(name="nav")(nav_cmd)
