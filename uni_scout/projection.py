# File: uni_scout/projection.py
"""uni_scout.projection: Оффлайн-утилита, сокращает сохранённые записи до
{domain, url, title, extractionMethod}.

Вход (JSON-массив записей или JSON Lines) читается порциями, выход пишется
запись за записью, так что файл целиком в память не попадает.
"""

from __future__ import annotations

import itertools
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, TextIO, Union

from uni_scout.logger import logger

__all__ = ["PROJECTED_FIELDS", "project_record", "iter_records", "write_projection", "project_file"]

PROJECTED_FIELDS = ("domain", "url", "title", "extractionMethod")
CHUNK_SIZE = 64 * 1024


def project_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Оставляет только поля проекции (отсутствующие — None)."""
    return {key: record.get(key) for key in PROJECTED_FIELDS}


def iter_records(stream: TextIO, chunk_size: int = CHUNK_SIZE) -> Iterator[Dict[str, Any]]:
    """Читает записи из JSON-массива или JSON Lines, пропуская не-объекты."""
    head = stream.read(1)
    while head and head.isspace():
        head = stream.read(1)
    if not head:
        return
    if head == "[":
        items: Iterable[Any] = _iter_json_array(stream, chunk_size)
    else:
        items = _iter_json_lines(head, stream)
    for item in items:
        if isinstance(item, dict):
            yield item
        else:
            logger.warning("Skipping non-object entry: %r", item)


def _iter_json_array(stream: TextIO, chunk_size: int) -> Iterator[Any]:
    """Элементы массива, у которого '[' уже прочитан; буфер держит не больше одного элемента."""
    decoder = json.JSONDecoder()
    buf = ""
    eof = False
    need_comma = False
    while True:
        buf = buf.lstrip()
        if need_comma and buf and buf[0] not in ",]":
            raise ValueError(f"Expected ',' or ']' in JSON array, got {buf[0]!r}")
        if not buf:
            if eof:
                raise ValueError("Unterminated JSON array")
            chunk = stream.read(chunk_size)
            eof = not chunk
            buf += chunk
            continue
        if buf[0] == "]":
            return
        if need_comma:
            buf = buf[1:]
            need_comma = False
            continue
        try:
            item, end = decoder.raw_decode(buf)
        except json.JSONDecodeError:
            if eof:
                raise
            chunk = stream.read(chunk_size)
            eof = not chunk
            buf += chunk
            continue
        # число на границе порции может продолжиться в следующей
        if end == len(buf) and not eof:
            chunk = stream.read(chunk_size)
            eof = not chunk
            buf += chunk
            continue
        yield item
        buf = buf[end:]
        need_comma = True


def _iter_json_lines(first_char: str, stream: TextIO) -> Iterator[Any]:
    for line in itertools.chain([first_char + stream.readline()], stream):
        line = line.strip()
        if line:
            yield json.loads(line)


def write_projection(records: Iterable[Dict[str, Any]], out: TextIO) -> int:
    """Пишет JSON-массив проекций; возвращает число записей."""
    out.write("[\n")
    count = 0
    for record in records:
        if count:
            out.write(",\n")
        out.write(json.dumps(project_record(record), ensure_ascii=False, indent=2))
        count += 1
    out.write("\n]\n")
    return count


def project_file(input_path: Union[str, Path], output_path: Union[str, Path]) -> int:
    """Читает input_path и сохраняет проекцию в output_path."""
    src = Path(input_path)
    dst = Path(output_path)
    dst.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Reading from %s and writing to %s...", src, dst)
    with src.open("r", encoding="utf-8") as fin, dst.open("w", encoding="utf-8") as fout:
        count = write_projection(iter_records(fin), fout)
    logger.info("Processing complete: %d records.", count)
    return count
