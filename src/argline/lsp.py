"""Minimal LSP server for command-line files, diagnostics only.

Every non-blank line of a document is parsed on its own as a final
(``ACCEPT_LINE``) parse. Input that more typing could still fix is reported
as a warning; hard syntax errors are reported as errors.
"""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from argline.config import ParseMode
from argline.errors import ParseError
from argline.tokenizer import Tokenizer

server = LanguageServer("argline-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)

tokenizer = Tokenizer()


def _diagnostic(exc: ParseError, line_no: int) -> Diagnostic:
    col = exc.position.column - 1
    width = max(1, len(exc.missing)) if not exc.incomplete else 1
    severity = DiagnosticSeverity.Warning if exc.incomplete else DiagnosticSeverity.Error
    return Diagnostic(
        range=Range(
            start=Position(line=line_no, character=col),
            end=Position(line=line_no, character=col + width),
        ),
        message=f"{exc.message} ({exc.hint})",
        severity=severity,
        source="argline",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse every line of the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    for line_no, line in enumerate(doc.source.splitlines()):
        if not line.strip():
            continue
        try:
            tokenizer.parse(line, len(line), ParseMode.ACCEPT_LINE)
        except ParseError as exc:
            diagnostics.append(_diagnostic(exc, line_no))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
