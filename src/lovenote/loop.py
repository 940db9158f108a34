import os

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import typer

from lovenote.cli.commands.run import run_command

app = typer.Typer()


@app.callback()
def callback() -> None:
    """Pressable heart greeting with a hidden message."""


app.command(name="run")(run_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
