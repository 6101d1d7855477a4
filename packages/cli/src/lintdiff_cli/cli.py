"""CLI entry point for lintdiff.

Commands:
  diff   - diff two checkstyle reports and render the result site
  stats  - print rule and file breakdowns of a diff without writing files
"""

from __future__ import annotations

import importlib.metadata

import click

from lintdiff_cli.commands.diff import diff_cmd
from lintdiff_cli.commands.stats import stats_cmd


def _build_renderer(config: dict, output_dir, source_root=None):
    """Instantiate the configured renderer.

      format: json → JsonRenderer
      (default)    → HtmlSiteRenderer

    This factory lives in cli.py so neither lintdiff_core nor lintdiff_site
    know about the CLI config format.
    """
    if config.get("format") == "json":
        from lintdiff_site.json_report import JsonRenderer

        return JsonRenderer(output_dir)

    from lintdiff_site.html_site import HtmlSiteRenderer

    return HtmlSiteRenderer(output_dir, source_root=source_root)


@click.group()
@click.version_option(
    version=importlib.metadata.version("lintdiff"),
    prog_name="lintdiff",
)
@click.option(
    "--config",
    "config_path",
    default=".lintdiff.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="LINTDIFF_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Symmetric difference of two static-analysis reports."""
    import logging

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


main.add_command(diff_cmd)
main.add_command(stats_cmd)
