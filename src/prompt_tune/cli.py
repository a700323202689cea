"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from prompt_tune.config import load_config
from prompt_tune.models.request import ComplexityLevel, PromptStyle
from prompt_tune.models.result import OptimizationResult
from prompt_tune.models.stage import STEP_LABELS, PipelineStage
from prompt_tune.pipeline.optimizer import PromptOptimizer
from prompt_tune.pipeline.session import OptimizationSession
from prompt_tune.pipeline.stage_sequencer import StageSequencer

app = typer.Typer(
    name="prompt-tune",
    help="Turn a raw prompt into three optimized variants",
    no_args_is_help=True,
)
console = Console()


def _render_result(result: OptimizationResult, max_issues: int) -> None:
    analysis = result.original_analysis
    lines = [
        f"[bold]Detected intent:[/bold] {analysis.intent_detected}",
        f"[bold]Clarity score:[/bold] {analysis.clarity_score:g}/100",
    ]
    issues = analysis.issues[:max_issues]
    if issues:
        lines.append("[bold]Fixed issues:[/bold]")
        lines.extend(f"  - {issue}" for issue in issues)
    console.print(Panel("\n".join(lines), title="Analysis"))

    for i, variant in enumerate(result.variants, 1):
        tags = f" [dim]({', '.join(variant.tags)})[/dim]" if variant.tags else ""
        console.print(Panel(
            f"{variant.content}\n\n[cyan]Why it works:[/cyan] {variant.reasoning}",
            title=f"{i}. {variant.title}{tags}",
            border_style="cyan",
        ))


@app.command()
def optimize(
    prompt: str = typer.Argument(None, help="Raw prompt text"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a text file"),
    style: PromptStyle = typer.Option(PromptStyle.PROFESSIONAL, "--style", "-s", help="Target style"),
    complexity: ComplexityLevel = typer.Option(
        ComplexityLevel.MODERATE, "--complexity", "-c", help="Complexity level",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Optimize a prompt and print the analysis and three variants."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        prompt = file.read_text(encoding="utf-8")

    if not prompt or not prompt.strip():
        console.print("[red]Enter a prompt to optimize (argument or --file).[/red]")
        raise typer.Exit(1)

    config = load_config()
    session = OptimizationSession(
        PromptOptimizer.from_config(config),
        StageSequencer(config.pipeline.stage_delays),
        input_text=prompt,
        style=style,
        complexity=complexity,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=None)

        def on_change(s: OptimizationSession) -> None:
            if s.stage in STEP_LABELS:
                label, desc = STEP_LABELS[s.stage]
                progress.update(task, description=f"{label}: {desc}")

        session.subscribe(on_change)
        asyncio.run(session.submit())

    if session.stage is PipelineStage.ERROR:
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(1)

    result = session.visible_result
    if as_json:
        typer.echo(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False, indent=2))
        return

    _render_result(result, config.pipeline.max_grammar_issues_shown)
    usage = session.optimizer.last_usage
    if verbose and usage:
        console.print(
            f"[dim]Tokens: {usage['input']} in / {usage['output']} out, "
            f"~${usage['cost_usd']:.4f}, {session.elapsed_seconds:.1f}s[/dim]"
        )


@app.command()
def styles() -> None:
    """List the available styles and complexity levels."""
    console.print("[bold]Styles:[/bold]")
    for s in PromptStyle:
        console.print(f"  [bold]{s.value}[/bold]: {s.label}")
    console.print("[bold]Complexity levels:[/bold]")
    for c in ComplexityLevel:
        console.print(f"  [bold]{c.value}[/bold]: {c.label}")


if __name__ == "__main__":
    app()
