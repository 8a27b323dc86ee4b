# === FILE: scratch_fetch/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для сборки статического бинарника и scratch-образа.

Команды:
  build       Скомпилировать бинарник и собрать образ (оба шага)
  compile     Только шаг 1: статический бинарник
  package     Только шаг 2: образ из готового бинарника
  dockerfile  Показать описание образа
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --image TAG         Тег образа (override image)
  --arch ARCH         Целевая архитектура (override target_arch)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию

Пример:
  build-scratch --image example-scratch build
"""
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from scratch_fetch import __version__
from scratch_fetch.build.image import render_dockerfile
from scratch_fetch.config import load_config
from scratch_fetch.engine import compile_binary, package_binary, run_build
from scratch_fetch.errors import ScratchFetchError
from scratch_fetch.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

# Everything a build step may raise that is reported rather than traced back.
BUILD_ERRORS = (ScratchFetchError, OSError)


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def without_bundle_option(f):
    return click.option(
        '--without-ca-bundle', 'without_ca_bundle',
        is_flag=True,
        help='Не добавлять корневые сертификаты (HTTPS в контейнере упадёт на проверке сертификата)'
    )(f)


def _config_for(ctx, without_ca_bundle: bool):
    cfg = ctx.obj['config']
    if without_ca_bundle:
        cfg = cfg.with_overrides(include_ca_bundle=False)
    return cfg


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='scratch-fetch, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--image', '-i', 'image',
    default=None,
    help='Тег образа (override image)'
)
@click.option(
    '--arch', 'arch',
    default=None,
    type=click.Choice(['amd64', 'arm64']),
    help='Целевая архитектура (override target_arch)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, image, arch, log_level, log_file, log_format):
    """Сборка статического бинарника и минимального образа."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    overrides = {}
    if image is not None:
        overrides['image'] = image
    if arch is not None:
        overrides['target_arch'] = arch
    if overrides:
        try:
            cfg = cfg.with_overrides(**overrides)
        except ValidationError as e:
            print_error(f'Недопустимое значение опции: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('build', context_settings=CONTEXT_SETTINGS)
@without_bundle_option
@click.pass_context
def build(ctx, without_ca_bundle):
    """Скомпилировать бинарник и собрать образ."""
    cfg = _config_for(ctx, without_ca_bundle)
    try:
        result = run_build(cfg)
    except BUILD_ERRORS as e:
        print_error(f'Ошибка сборки: {e}')
    click.echo(result.image)


@cli.command('compile', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def compile_cmd(ctx):
    """Собрать только статический бинарник."""
    cfg = ctx.obj['config']
    try:
        binary = compile_binary(cfg)
    except BUILD_ERRORS as e:
        print_error(f'Ошибка компиляции: {e}')
    click.echo(str(binary))


@cli.command('package', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--binary', '-b', 'binary',
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Статический бинарник для упаковки'
)
@without_bundle_option
@click.pass_context
def package(ctx, binary, without_ca_bundle):
    """Собрать образ из готового бинарника."""
    cfg = _config_for(ctx, without_ca_bundle)
    try:
        package_binary(cfg, binary)
    except BUILD_ERRORS as e:
        print_error(f'Ошибка упаковки: {e}')
    click.echo(cfg.image)


@cli.command('dockerfile', context_settings=CONTEXT_SETTINGS)
@without_bundle_option
@click.pass_context
def show_dockerfile(ctx, without_ca_bundle):
    """Показать описание образа, которое будет использовано при сборке."""
    cfg = _config_for(ctx, without_ca_bundle)
    click.echo(render_dockerfile(cfg), nl=False)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
