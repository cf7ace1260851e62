"""CLI - Command line interface for Careerflow."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from .config import AppConfig, Severity, has_errors, load_config, validate_config
from .domain import (
    ProjectionStyle,
    Resume,
    build_keyword_prompt,
    combine_scores,
    format_ats_report,
    parse_keyword_payload,
    project_resume,
    resolve_display_name,
    score_heuristics,
    validate_resume_form,
)
from .observability import service_call, setup_logging
from .providers import ChatProvider, GenerationConfig, Message, create_provider
from .rendering import write_pdf

console = Console()


def read_form(path: Path) -> Resume:
    """Load a resume form saved as JSON (camelCase or snake_case keys)."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Resume form must be a JSON object: {path}")
    return Resume.from_dict(data)


def load_content(path: Path, name: str = "", style: ProjectionStyle = ProjectionStyle.STANDARD) -> str:
    """Return resume text: ``.json`` forms are projected, anything else is read as-is."""
    if path.suffix.lower() == ".json":
        return project_resume(read_form(path), resolve_display_name(name), style=style)
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_preview(args: argparse.Namespace, config: AppConfig) -> int:
    resume = read_form(Path(args.form))
    result = validate_resume_form(resume)
    for issue in result.errors + result.warnings:
        style = "red" if issue["level"] == "error" else "yellow"
        console.print(f"{issue['field']}: {issue['message']}", style=style)

    text = project_resume(resume, resolve_display_name(args.name), style=ProjectionStyle(args.style))
    if args.rich:
        console.print(Panel(Markdown(text), title="Resume preview"))
    else:
        console.print(text, markup=False, highlight=False)
    return 0 if result.valid else 1


def cmd_export(args: argparse.Namespace, config: AppConfig) -> int:
    text = load_content(Path(args.input), name=args.name, style=ProjectionStyle(args.style))
    if not text.strip():
        console.print("Nothing to export: resume content is empty", style="red")
        return 1
    out_dir = Path(args.output or config.export_dir)
    path = write_pdf(text, out_dir)
    console.print(f"✓ Exported {path}", style="green")
    return 0


def cmd_score(args: argparse.Namespace, config: AppConfig) -> int:
    content = load_content(Path(args.input), name=args.name)
    job_description = args.job_description or ""
    if args.jd_file:
        job_description = Path(args.jd_file).read_text(encoding="utf-8")

    heuristic = score_heuristics(content)
    if args.heuristic_only:
        console.print(f"Heuristic score: {heuristic.score}/100", style="bold cyan")
        for message in heuristic.feedback:
            console.print(f"  • {message}")
        return 0

    if not job_description.strip():
        console.print("Please enter a job description first (--job-description or --jd-file)", style="red")
        return 1

    try:
        provider = create_provider("gemini", config.gemini_api_key, config.gemini_model)
    except ValueError as e:
        console.print(f"❌ {e}", style="red")
        console.print("Use --heuristic-only to score without the AI keyword check.", style="dim")
        return 1

    try:
        raw = asyncio.run(_keyword_score(provider, content, job_description, config))
        keywords = parse_keyword_payload(raw)
    except Exception as e:
        console.print(f"❌ Failed to calculate ATS score: {e}", style="red")
        return 1
    result = combine_scores(heuristic, keywords)
    console.print(Markdown(format_ats_report(result)))
    return 0


def cmd_config(args: argparse.Namespace, config: AppConfig) -> int:
    issues = validate_config(config)
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("gemini.model", config.gemini_model)
    table.add_row("services.keyword_api_url", config.keyword_api_url)
    table.add_row("services.courses_api_url", config.courses_api_url)
    table.add_row("storage.database_path", config.database_path)
    table.add_row("export.directory", config.export_dir)
    console.print(table)

    for issue in issues:
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"{issue.severity.value}: {issue.field} - {issue.message}", style=style)
    if not issues:
        console.print("✓ Configuration OK", style="green")
    return 1 if has_errors(issues) else 0


def cmd_serve(args: argparse.Namespace, config: AppConfig) -> int:
    import uvicorn

    uvicorn.run("careerflow.web.app:create_app", factory=True, host=args.host, port=args.port)
    return 0


async def _keyword_score(provider: ChatProvider, content: str, job_description: str, config: AppConfig) -> str:
    gen_config = GenerationConfig(temperature=config.temperature, max_tokens=config.max_tokens)
    with service_call("gemini.keyword_score", model=provider.model):
        response = await provider.generate([Message.user(build_keyword_prompt(content, job_description))], gen_config)
    return response.text


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="careerflow", description="Careerflow - resume builder and ATS checker")
    parser.add_argument("--config", "-c", default=None, help="Path to configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", default=False, help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    styles = [s.value for s in ProjectionStyle]

    preview = sub.add_parser("preview", help="Render a resume form (JSON) as Markdown")
    preview.add_argument("form", help="Resume form JSON file")
    preview.add_argument("--name", default="", help="Display name for the header")
    preview.add_argument("--style", choices=styles, default=ProjectionStyle.STANDARD.value)
    preview.add_argument("--rich", action="store_true", help="Pretty-print instead of raw Markdown")
    preview.set_defaults(func=cmd_preview)

    export = sub.add_parser("export", help="Export a resume (form JSON or Markdown) to resume.pdf")
    export.add_argument("input", help="Resume form JSON or Markdown file")
    export.add_argument("--output", "-o", default=None, help="Output directory (default: export.directory)")
    export.add_argument("--name", default="", help="Display name when projecting a form")
    export.add_argument("--style", choices=styles, default=ProjectionStyle.STANDARD.value)
    export.set_defaults(func=cmd_export)

    score = sub.add_parser("score", help="Compute the ATS score of a resume")
    score.add_argument("input", help="Resume form JSON or Markdown file")
    score.add_argument("--job-description", "-j", default="", help="Job description text")
    score.add_argument("--jd-file", default=None, help="Read the job description from a file")
    score.add_argument("--name", default="", help="Display name when projecting a form")
    score.add_argument("--heuristic-only", action="store_true", help="Skip the AI keyword check")
    score.set_defaults(func=cmd_score)

    config_cmd = sub.add_parser("config", help="Show and validate the loaded configuration")
    config_cmd.set_defaults(func=cmd_config)

    serve = sub.add_parser("serve", help="Run the web API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        console.print(f"⚠️ Config file not found: {args.config}", style="yellow")
        console.print("Using default configuration. Set GEMINI_API_KEY environment variable.", style="dim")
        config = AppConfig()
    setup_logging(args.verbose or config.verbose)

    try:
        return args.func(args, config)
    except (OSError, ValueError) as e:
        console.print(f"❌ {e}", style="red")
        return 1


if __name__ == "__main__":
    sys.exit(main())
