"""In-process analysis engine: empty-value scan and schema-driven numeric validation.

The orchestrator only relies on the ``AnalysisEngine`` protocol; a remote
engine speaking the same contract can replace ``LocalAnalysisEngine``.
"""

from __future__ import annotations

import contextlib
import json
import logging
import re
import sqlite3
import time
from typing import Any, Protocol

from lens_core.constants import NUMERIC_TYPE_MARKERS
from lens_core.exceptions import EngineError
from lens_core.findings import EmptyValueFinding, InvalidNumericFinding, ResultSet
from lens_services.document_io_service import parse_json_text

_LOG = logging.getLogger(__name__)

_DENIED_SQL_ACTIONS = frozenset({
    sqlite3.SQLITE_ATTACH,
    sqlite3.SQLITE_DETACH,
    # CREATE TABLE ... AS SELECT would run the query.
    sqlite3.SQLITE_SELECT,
    sqlite3.SQLITE_RECURSIVE,
})
_QUOTE_CLOSERS = {"'": "'", '"': '"', "`": "`", "[": "]"}
_CREATE_TABLE_HEAD = re.compile(r"^create\s+(?:temp\w*\s+)?table\s+(?:if\s+not\s+exists\s+)?[^;]+$", re.IGNORECASE)
_AS_WORD = re.compile(r"\bas\b", re.IGNORECASE)
# Characters float() tolerates but a strict floating-point literal does not.
_NON_LITERAL_CHARS = re.compile(r"[\s_]")


class AnalysisEngine(Protocol):
    def scan_empty_values(self, raw_text: str) -> Any: ...

    def scan_invalid_numerics(self, raw_text: str, schema_ddl: str) -> Any: ...


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _load_json(raw_text: str) -> Any:
    try:
        return parse_json_text(raw_text)
    except ValueError as exc:
        raise EngineError(f"JSON parsing error: {exc}") from exc


class _DdlAuthorizer:
    """Denies file access and query execution while ``active`` is set."""

    def __init__(self) -> None:
        self.active = True

    def __call__(self, action: int, *_args: Any) -> int:
        if self.active and action in _DENIED_SQL_ACTIONS:
            return sqlite3.SQLITE_DENY
        return sqlite3.SQLITE_OK


def _column_list_end(ddl: str) -> int:
    """Index just past the parenthesised column list, or -1 when there is none."""
    depth = 0
    closer = ""
    for pos, char in enumerate(ddl):
        if closer:
            if char == closer:
                closer = ""
            continue
        if char in _QUOTE_CLOSERS:
            closer = _QUOTE_CLOSERS[char]
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return pos + 1
            if depth < 0:
                return -1
    return -1


def strip_table_options(schema_ddl: str) -> str:
    """Drop trailing table options such as ``ENGINE=InnoDB DEFAULT CHARSET=utf8``.

    They follow the column list and never declare columns. A tail holding
    another statement is left alone so the single-statement check still fires.
    """
    ddl = str(schema_ddl or "").strip()
    head = ddl.split("(", 1)[0]
    if not _CREATE_TABLE_HEAD.match(head) or _AS_WORD.search(head):
        return ddl
    end = _column_list_end(ddl)
    if end < 0:
        return ddl
    tail = ddl[end:].strip().rstrip(";").strip()
    if not tail or ";" in tail:
        return ddl
    return ddl[:end]


def numeric_columns_from_ddl(schema_ddl: str) -> set[str]:
    """Names of numeric columns declared by a single CREATE TABLE statement.

    The statement is executed in a throwaway in-memory SQLite database, which
    does the parsing; the declared column types are then read back. Queries
    are refused, so ``CREATE TABLE ... AS SELECT`` fails instead of running.
    """
    ddl = strip_table_options(schema_ddl)
    if not ddl:
        raise EngineError("SQL parsing error: schema is empty.")
    with contextlib.closing(sqlite3.connect(":memory:")) as conn:
        authorizer = _DdlAuthorizer()
        conn.set_authorizer(authorizer)
        try:
            conn.execute(ddl)
        except (sqlite3.Error, sqlite3.Warning) as exc:
            raise EngineError(f"SQL parsing error: {exc}") from exc
        authorizer.active = False
        tables = [
            row[0]
            for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' "
                "UNION ALL SELECT name FROM sqlite_temp_master WHERE type = 'table'"
            )
        ]
        if len(tables) != 1:
            raise EngineError("SQL parsing error: Could not parse a CREATE TABLE statement.")
        columns = conn.execute("SELECT name, type FROM pragma_table_info(?)", (tables[0],)).fetchall()
    numeric = set()
    for name, declared_type in columns:
        type_text = str(declared_type or "").lower()
        if any(marker in type_text for marker in NUMERIC_TYPE_MARKERS):
            numeric.add(str(name))
    return numeric


def is_numeric_text(text: str) -> bool:
    """True when text is a plain floating-point literal (``inf``/``nan`` included)."""
    if not text or not text.isascii() or _NON_LITERAL_CHARS.search(text):
        return False
    try:
        float(text)
    except ValueError:
        return False
    return True


def _is_json_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _invalid_value_text(value: Any) -> str | None:
    if _is_json_number(value):
        return None
    if isinstance(value, str):
        return None if is_numeric_text(value) else value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class LocalAnalysisEngine:
    def scan_empty_values(self, raw_text: str) -> ResultSet:
        start = time.perf_counter()
        _LOG.info("Starting search for empty values.")
        data = _load_json(raw_text)
        findings = []
        if isinstance(data, list):
            for index, record in enumerate(data):
                if not isinstance(record, dict):
                    continue
                for key, value in record.items():
                    if value is None or value == "":
                        findings.append(EmptyValueFinding(index, key))
        elapsed = _elapsed_ms(start)
        _LOG.info("Found %d empty values in %dms.", len(findings), elapsed)
        return ResultSet(tuple(findings), elapsed)

    def scan_invalid_numerics(self, raw_text: str, schema_ddl: str) -> ResultSet:
        start = time.perf_counter()
        _LOG.info("Starting search for invalid numeric values.")
        numeric_columns = numeric_columns_from_ddl(schema_ddl)
        _LOG.info("Identified numeric columns from SQL: %s", sorted(numeric_columns))
        data = _load_json(raw_text)
        if not isinstance(data, list):
            raise EngineError("Document top level must be an array of objects.")
        findings = []
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                continue
            for key, value in record.items():
                if key not in numeric_columns:
                    continue
                bad = _invalid_value_text(value)
                if bad is not None:
                    findings.append(InvalidNumericFinding(index, key, bad))
        elapsed = _elapsed_ms(start)
        _LOG.info("Found %d invalid numeric values in %dms.", len(findings), elapsed)
        return ResultSet(tuple(findings), elapsed)
