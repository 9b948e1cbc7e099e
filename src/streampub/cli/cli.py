"""CLI entrypoint: Typer app definition and command registration"""

import typer

from streampub.cli.commands import anchors_cmd, init_cmd, list_cmd, render_cmd


app = typer.Typer(name="streampub", no_args_is_help=True, help="Streamed tag markup to structured documents")

app.command(name="render")(render_cmd)
app.command(name="anchors")(anchors_cmd)
app.command(name="init")(init_cmd)
app.command(name="list")(list_cmd)
