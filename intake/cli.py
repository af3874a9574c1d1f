"""Command line entry point for the intake wizard.

Two commands:
- run:  walk through a form interactively, or headless with an answers file
- show: print the steps and fields of a form
"""

import logging
from pathlib import Path
from typing import Optional

import typer
import yaml

from .config import load_config
from .engine import IncompleteStepError, RealIntakeRunner, SpecLoader, UnknownFieldError, WizardEngine

app = typer.Typer(help="Step-by-step client intake wizard.")


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, help="Path to intake-config.yaml"),
    form: Optional[str] = typer.Option(None, help="Form to run (e.g. vera_client)"),
    answers: Optional[Path] = typer.Option(None, help="YAML file with answers by field key (headless run)"),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for submitted records"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Run a form and submit the answers.

    Without --answers the form is asked step by step on the terminal.
    With --answers every value is read as text from the YAML file (no
    number or date conversion) and the run fails on the first incomplete step.
    """
    settings = load_config(config)
    updates = {'form': form, 'output_dir': output_dir}
    settings = settings.model_copy(update={k: v for k, v in updates.items() if v is not None})
    if verbose:
        settings = settings.model_copy(update={'verbose': True})

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    runner = RealIntakeRunner(verbose=settings.verbose, output_dir=settings.output_dir)
    engine = WizardEngine(runner, form_name=settings.form, base_path=settings.forms_path)

    if answers is None:
        try:
            engine.run()
        except (KeyboardInterrupt, EOFError):
            typer.echo("\nAbgebrochen - keine Daten gesendet.")
            raise typer.Exit(code=130)
        return

    with open(answers, 'r', encoding='utf-8') as f:
        # BaseLoader keeps scalars as written, e.g. phone numbers with a leading zero
        data = yaml.load(f, Loader=yaml.BaseLoader) or {}
    if not isinstance(data, dict):
        raise typer.BadParameter("answers file must contain a mapping of field key to value")

    try:
        engine.run(headless_inputs=data)
    except UnknownFieldError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except IncompleteStepError as e:
        typer.echo(f"Error: step {e.step} is incomplete", err=True)
        raise typer.Exit(code=1)


@app.command()
def show(
    form: str = typer.Argument('vera_client'),
    forms_path: Optional[Path] = typer.Option(None, help="Directory with form specs"),
):
    """Print the steps and fields of a form."""
    spec = SpecLoader(base_path=forms_path).load_form(form)
    typer.echo(f"{spec.title} (v{spec.version})")
    for step in spec.steps:
        typer.echo(f"\n{step.number}. {step.title}")
        for field in spec.fields_for_step(step.number):
            marker = '*' if field.required else ' '
            line = f"  {marker} {field.key} [{field.type.value}]"
            if field.reveal_when is not None:
                line += f" (if {field.reveal_when.field} == {field.reveal_when.equals})"
            typer.echo(line)


def main():
    app()
