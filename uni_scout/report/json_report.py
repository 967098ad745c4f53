# uni_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта UniScout.

Сериализация результатов обхода (CrawlReport) в файл — тот же массив
записей, что уходит на webhook.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from uni_scout.crawler.models import CrawlReport


def render_json(report: CrawlReport | Any, output_path: Path | str, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: CrawlReport или уже готовая JSON-совместимая структура
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from uni_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/example.edu.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    # Приводим к Path
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dicts() if isinstance(report, CrawlReport) else report

    # Запись в файл с отступами и Unicode
    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
