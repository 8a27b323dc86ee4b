# === FILE: scratch_fetch/main.py ===
"""
Демонстрационная программа: один HTTPS-запрос к фиксированному адресу,
вывод длины тела ответа в байтах.

Поведение:
  * успех  — в stdout печатается длина тела и перевод строки, код выхода 0;
  * ошибка — в stdout печатается описание ошибки, код выхода 1.

Аргументов и переменных окружения программа не принимает.
"""
from __future__ import annotations

import asyncio
import ssl
import sys
from typing import Final, Optional

import click
from aiohttp import ClientError

from scratch_fetch.fetcher import fetch

TARGET_URL: Final[str] = "https://google.com"

# Connection, TLS trust and read failures are all fatal in the same way.
FETCH_ERRORS = (ClientError, OSError, asyncio.TimeoutError)


def describe_error(exc: BaseException) -> str:
    """Текст ошибки; имя класса, если сообщение пустое (например, у таймаута)."""
    return str(exc) or type(exc).__name__


async def report(url: str = TARGET_URL, ssl_context: Optional[ssl.SSLContext] = None) -> int:
    """Выполняет запрос, печатает результат и возвращает код выхода."""
    try:
        page = await fetch(url, ssl_context=ssl_context)
    except FETCH_ERRORS as exc:
        click.echo(describe_error(exc))
        return 1
    click.echo(page.size)
    return 0


@click.command(
    context_settings=dict(
        help_option_names=[],
        ignore_unknown_options=True,
        allow_extra_args=True,
    )
)
def main():
    """Fetch the fixed address and print the body length."""
    sys.exit(asyncio.run(report(TARGET_URL)))


if __name__ == "__main__":
    main()
