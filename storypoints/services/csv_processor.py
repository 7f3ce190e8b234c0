from __future__ import annotations

import csv
import io
import re
import time
from datetime import datetime, timezone

import pandas as pd
import structlog
from pydantic import BaseModel

from storypoints.schemas.task import Task
from storypoints.services.estimator import snap_to_scale

logger = structlog.get_logger(__name__)

COLUMN_ALIASES: dict[str, list[str]] = {
    "title": ["title", "titulo", "nome", "name", "task"],
    "description": ["description", "descricao", "desc", "details", "detalhes"],
    "type": ["type", "tipo", "category", "categoria"],
    "story_points": ["storypoints", "story_points", "points", "pontos", "sp"],
}

_leading_int = re.compile(r"^\s*([+-]?\d+)")


class CSVImportError(ValueError):
    pass


class CSVRow(BaseModel):
    title: str
    description: str
    task_type: str
    story_points: int


def find_column_index(headers: list[str], possible_names: list[str]) -> int:
    for name in possible_names:
        for index, header in enumerate(headers):
            if name in header:
                return index
    return -1


def clean_value(value) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip().strip('"').strip()


def normalize_task_type(value: str) -> str:
    lower = value.lower()
    if "feature" in lower or "funcionalidade" in lower or "nova" in lower:
        return "feature"
    if "bug" in lower or "erro" in lower or "correção" in lower:
        return "bug"
    if "refactor" in lower or "refatoração" in lower:
        return "refactor"
    if "doc" in lower:
        return "documentation"
    return "feature"


def parse_story_points(value: str) -> int:
    """Parse a leading integer and snap it onto the story point scale ("6" -> 5)."""
    match = _leading_int.match(value or "")
    if not match:
        raise ValueError(f"invalid story points value: {value!r}")
    return snap_to_scale(int(match.group(1)))


def _read_frame(content: str) -> pd.DataFrame:
    header = pd.read_csv(io.StringIO(content), nrows=0, dtype=str)
    width = len(header.columns)

    # Extra trailing fields are dropped instead of failing the whole file.
    # index_col=False keeps a single trailing comma from turning column 0 into the index.
    return pd.read_csv(
        io.StringIO(content),
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        skipinitialspace=True,
        engine="python",
        on_bad_lines=lambda fields: fields[:width],
    )


def parse_csv(content: str) -> list[CSVRow]:
    lines = [line for line in content.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise CSVImportError("The CSV file needs a header line and at least one data row")

    frame = _read_frame(content.strip())
    headers = [str(h).strip().lower().replace('"', "") for h in frame.columns]

    column_map = {field: find_column_index(headers, aliases) for field, aliases in COLUMN_ALIASES.items()}
    missing = [field for field, index in column_map.items() if index == -1]
    if missing:
        raise CSVImportError(
            f"Required columns not found: {', '.join(missing)}. "
            "The CSV must contain the columns: title, description, type, storyPoints"
        )

    rows: list[CSVRow] = []
    for position, record in enumerate(frame.itertuples(index=False, name=None), start=2):
        values = [record[index] for index in column_map.values()]
        if any(pd.isna(v) for v in values):
            logger.warning("csv_row_too_short", line=position)
            continue

        title = clean_value(record[column_map["title"]])
        description = clean_value(record[column_map["description"]])
        if not title or not description:
            logger.warning("csv_row_missing_text", line=position)
            continue

        try:
            rows.append(CSVRow(
                title=title,
                description=description,
                task_type=normalize_task_type(clean_value(record[column_map["type"]])),
                story_points=parse_story_points(clean_value(record[column_map["story_points"]])),
            ))
        except ValueError as e:
            logger.warning("csv_row_invalid", line=position, error=str(e))

    logger.info("csv_parsed", rows=len(rows), skipped=len(frame) - len(rows))
    return rows


def csv_rows_to_tasks(rows: list[CSVRow]) -> list[Task]:
    stamp = int(time.time() * 1000)
    now = datetime.now(timezone.utc)
    return [
        Task(
            id=f"csv-import-{stamp}-{index}",
            title=row.title,
            description=row.description,
            task_type=row.task_type,
            estimated_points=row.story_points,
            final_points=row.story_points,
            created_at=now,
        )
        for index, row in enumerate(rows)
    ]


SAMPLE_ROWS = [
    (
        "Implementar login de usuário",
        "Criar tela de login com validação de email e senha, integração com backend de autenticação",
        "feature",
        "5",
    ),
    (
        "Corrigir bug no carrinho de compras",
        "Produtos duplicados aparecem no carrinho quando adicionados rapidamente",
        "bug",
        "3",
    ),
    (
        "Refatorar componente de navegação",
        "Melhorar performance e organização do código do menu principal",
        "refactor",
        "8",
    ),
    (
        "Documentar API de pagamentos",
        "Criar documentação completa dos endpoints de pagamento com exemplos",
        "documentation",
        "2",
    ),
]


def generate_sample_csv() -> str:
    frame = pd.DataFrame(SAMPLE_ROWS, columns=["title", "description", "type", "storyPoints"])
    return frame.to_csv(index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n").strip()
