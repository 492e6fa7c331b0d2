#!/usr/bin/env python3
"""
sqlbatch – split SQL scripts into batches on separator lines.

• Separator:     `GO` unless the profile or `--separator` says otherwise
• Repeat counts: `GO 3` emits the previous batch three times
• Profiles:      declared in sqlbatch.config.yml (see sqlbatch.config)

Nothing is executed; batches are printed for another tool (or a human) to
run.
"""
from __future__ import annotations

import json
import logging
import pathlib
import sys
import typing as t

import click

from sqlbatch import __version__
from sqlbatch.config import ConfigError, Profile, load
from sqlbatch.reader import ScriptError, ScriptFile, discover
from sqlbatch.statements import split_statements


def _load_profile(ctx, _param, value) -> Profile:
    try:
        return load(ctx.obj["config_path"], value)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)


def _scripts(paths: t.Iterable[pathlib.Path], profile: Profile) -> list[ScriptFile]:
    try:
        return [sf for p in paths for sf in discover(p, profile.encoding)]
    except ScriptError as exc:
        click.echo(f"Script error: {exc}", err=True)
        sys.exit(1)


def _separator(profile: Profile, override: str | None) -> str:
    return profile.separator if override is None else override


def _common_opts(fn):
    opts = [
        click.option("-p", "--profile", callback=_load_profile, expose_value=True),
        click.option("-s", "--separator", help="batch separator word (overrides profile)"),
        click.argument(
            "paths",
            nargs=-1,
            required=True,
            type=click.Path(exists=True, path_type=pathlib.Path),
        ),
    ]
    for opt in reversed(opts):
        fn = opt(fn)
    return fn


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="profile config YAML"
)
@click.option("-v", "--verbose", is_flag=True, help="debug logging on stderr")
@click.pass_context
def main(ctx, config_path, verbose):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="[sqlbatch] %(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = {"config_path": pathlib.Path(config_path) if config_path else None}


@main.command()
def version():
    click.echo(__version__)


@main.command("split")
@_common_opts
@click.option("--statements", is_flag=True, help="also split each batch into statements")
@click.option("--json", "as_json", is_flag=True, help="emit a JSON array")
def split_cmd(profile, separator, paths, statements, as_json):
    sep = _separator(profile, separator)
    per_statement = statements or profile.statements
    records: list[dict[str, t.Any]] = []

    for sf in _scripts(paths, profile):
        bodies = sf.batches(sep)
        for idx, body in enumerate(bodies, start=1):
            if per_statement:
                records.append({"file": str(sf.path), "batch": idx, "sql": split_statements(body)})
            else:
                records.append({"file": str(sf.path), "batch": idx, "sql": body})

            if as_json:
                continue
            click.echo(f"-- {sf.path} [batch {idx}/{len(bodies)}]")
            if per_statement:
                for stmt in records[-1]["sql"]:
                    click.echo(stmt)
            else:
                click.echo(body.strip("\r\n"))

    if as_json:
        click.echo(json.dumps(records, indent=2))


@main.command("inspect")
@_common_opts
def inspect_cmd(profile, separator, paths):
    sep = _separator(profile, separator)
    for sf in _scripts(paths, profile):
        batches = sf.scan(sep)
        runs = sum(b.count for b in batches)
        click.echo(
            f"{sf.path}  {sf.checksum[:12]}  batches {len(batches)}  executions {runs}"
        )
