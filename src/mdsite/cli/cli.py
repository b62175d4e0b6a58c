"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, init_cmd, render_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Markdown folder to static blog generator")

app.command(name="build")(build_cmd)
app.command(name="render")(render_cmd)
app.command(name="init")(init_cmd)
