import sqlite3
from typing import List


def _skip_space_and_comments(s: str) -> int:
    """Index of the first character that is neither whitespace nor inside a leading comment."""
    i, n = 0, len(s)
    while True:
        while i < n and s[i].isspace():
            i += 1
        if i >= n:
            return n
        # line comments
        if s.startswith("--", i):
            j = s.find("\n", i)
            i = n if j == -1 else j + 1
            continue
        # block comments
        if s.startswith("/*", i):
            j = s.find("*/", i + 2)
            i = n if j == -1 else j + 2
            continue
        return i


def is_blank_sql(chunk: str) -> bool:
    """True if ``chunk`` holds nothing but whitespace, comments and semicolons."""
    rest = chunk[_skip_space_and_comments(chunk):]
    return not rest.strip().strip(";").strip()


def leading_keyword(statement: str) -> str:
    """First SQL keyword of ``statement``, upper-cased, skipping leading comments."""
    rest = statement[_skip_space_and_comments(statement):]
    keyword = ""
    for ch in rest:
        if not (ch.isalpha() or ch == "_"):
            break
        keyword += ch
    return keyword.upper()


def split_sql_text(sql_text: str) -> List[str]:
    """
    Split SQL text into statements using sqlite3.complete_statement().

    Text is accumulated up to each ';' until the accumulated chunk is a
    syntactically complete statement, so semicolons inside string literals,
    comments and trigger bodies do not split. Chunks holding only comments
    or whitespace are dropped. A trailing statement without a semicolon is
    kept.
    """
    stmts: List[str] = []
    parts = sql_text.split(";")
    buf = ""
    for idx, part in enumerate(parts):
        buf += part
        if idx == len(parts) - 1:
            break
        buf += ";"
        if sqlite3.complete_statement(buf):
            if not is_blank_sql(buf):
                stmts.append(buf.strip())
            buf = ""

    if not is_blank_sql(buf):
        stmts.append(buf.strip())
    return stmts
