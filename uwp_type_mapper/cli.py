import json
import logging
import os
import typing as t
from abc import abstractmethod

import click

from uwp_type_mapper.config import ExtractionConfig, ParserConfig
from uwp_type_mapper.corpus import cached_type_map, load_type_map, parse_corpus
from uwp_type_mapper.errors import CorpusParseError
from uwp_type_mapper.logger import get_logger, log_streaming_init, logger


class CliMixin:
    @staticmethod
    @abstractmethod
    def get_cli_options() -> t.List[click.Option]:
        pass

    @classmethod
    def add_cli_options(cls, cmd: click.Command) -> None:
        options_to_add = cls.get_cli_options()
        CliMixin.add_params(cmd, params=options_to_add)

    @staticmethod
    def add_params(cmd: click.Command, params: t.List[click.Parameter]):
        existing_opts = []
        for param in cmd.params:
            existing_opts.extend(param.opts)

        for param in params:
            for opt in param.opts:
                if opt in existing_opts:
                    raise ValueError(f"{opt} is already defined on the command {cmd.name}")
                existing_opts.append(opt)
            cmd.params.append(param)


class CliExtractionConfig(ExtractionConfig, CliMixin):
    @staticmethod
    def get_cli_options() -> t.List[click.Option]:
        defaults = ExtractionConfig()
        options = [
            click.Option(
                ["--target-language"],
                default=defaults.target_language,
                show_default=True,
                help="Language whose type is picked from a multi-language type table.",
            ),
            click.Option(
                ["--language-category"],
                default=defaults.language_category,
                show_default=True,
                help="Microsoft.Help.Category meta value a document must carry to be parsed.",
            ),
            click.Option(
                ["--namespace-root"],
                default=defaults.namespace_root,
                show_default=True,
                help="Help identifiers are truncated at the first ':<namespace-root>' marker.",
            ),
            click.Option(
                ["--exclude-namespace", "excluded_namespaces"],
                multiple=True,
                default=defaults.excluded_namespaces,
                show_default=True,
                help="Lowercase identifier prefix to leave out of the map. "
                "Can be given multiple times.",
            ),
        ]
        return options

    @classmethod
    def from_options(cls, options: t.Dict[str, t.Any]) -> ExtractionConfig:
        return ExtractionConfig(
            target_language=options["target_language"],
            language_category=options["language_category"],
            namespace_root=options["namespace_root"],
            excluded_namespaces=[ns.lower() for ns in options["excluded_namespaces"]],
        )


class CliParserConfig(ParserConfig, CliMixin):
    @staticmethod
    def get_cli_options() -> t.List[click.Option]:
        defaults = ParserConfig()
        options = [
            click.Option(
                ["--corpus-path"],
                type=click.Path(file_okay=False),
                default=defaults.corpus_path,
                show_default=True,
                help="Root directory of the reference-document corpus.",
            ),
            click.Option(
                ["--output-path"],
                type=click.Path(dir_okay=False),
                default=defaults.output_path,
                show_default=True,
                help="Where the mapping file is written.",
            ),
            click.Option(
                ["--reparse"],
                is_flag=True,
                default=False,
                help="Parse the corpus even if the mapping file already exists.",
            ),
            click.Option(
                ["--verbose"],
                is_flag=True,
                default=False,
                help="Log per-document progress and list skipped documents.",
            ),
        ]
        return options

    @classmethod
    def from_options(cls, options: t.Dict[str, t.Any]) -> ParserConfig:
        return ParserConfig(
            corpus_path=options["corpus_path"],
            output_path=options["output_path"],
            reparse=options["reparse"],
            verbose=options["verbose"],
            extraction=CliExtractionConfig.from_options(options),
        )


@click.group()
def uwp_type_mapper():
    get_logger()


@click.command()
def parse(**options: t.Any):
    """Parse the reference-document corpus into the mapping file."""
    config = CliParserConfig.from_options(options)
    log_streaming_init(logging.DEBUG if config.verbose else logger.getEffectiveLevel())

    try:
        reference_map = cached_type_map(config)
        if reference_map is not None:
            click.echo(
                f"{config.output_path} already holds {len(reference_map)} entries,"
                " use --reparse to parse the corpus again."
            )
            return
        result = parse_corpus(config)
    except CorpusParseError as e:
        raise click.ClickException(e.message) from e

    click.echo(
        f"Wrote {len(result.reference_map)} entries to {config.output_path}"
        f" ({result.document_count} documents, {len(result.skipped)} skipped)."
    )
    if config.verbose:
        for skipped in result.skipped:
            click.echo(f"  skipped {skipped.title or skipped.path}: {skipped.reason}")


@click.command()
@click.argument("key")
@click.option(
    "--output-path",
    type=click.Path(dir_okay=False),
    default=ParserConfig().output_path,
    show_default=True,
    help="Mapping file to look the entry up in.",
)
def show(key: str, output_path: str):
    """Print the JSON of one mapping-file entry."""
    if not os.path.isfile(output_path):
        raise click.ClickException(f"{output_path} does not exist, run `parse` first.")
    try:
        reference_map = load_type_map(output_path)
    except CorpusParseError as e:
        raise click.ClickException(e.message) from e
    key = key.lower()
    if key not in reference_map:
        raise click.ClickException(f"No entry for {key!r} in {output_path}.")
    click.echo(json.dumps(reference_map[key].to_dict(), indent=2, ensure_ascii=False))


CliParserConfig.add_cli_options(parse)
CliExtractionConfig.add_cli_options(parse)


def get_cmd() -> click.Group:
    """Construct and return the Click group with its subcommands."""
    cmd = uwp_type_mapper
    cmd.add_command(parse)
    cmd.add_command(show)
    return cmd


def main():
    get_cmd()()

