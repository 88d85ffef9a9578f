"""FastAPI application exposing lexicon suffixes over HTTP."""

from __future__ import annotations

import os
from typing import Any, Callable, NoReturn, TypeVar

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import Response

from lexmap.contracts.error import (
    BadInputError,
    DuplicateKeyError,
    EnvelopeError,
    KeyNotFoundError,
    PolicyError,
)
from lexmap.core.lexicon import Lexicon
from lexmap.core.suffixes import get_suffix, invoke_suffix, set_suffix
from lexmap.io.dump import DumpRecord, decode_value, dump_lexicon, encode_value, load_dump

from .models import (
    CreateLexiconRequest,
    DumpDocument,
    LexiconListResponse,
    LexiconSummary,
    SuffixCall,
    SuffixResult,
)
from .store import LexiconStore

T = TypeVar("T")


def _raise_http(exc: EnvelopeError) -> NoReturn:
    if isinstance(exc, DuplicateKeyError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, KeyNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, BadInputError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, PolicyError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: dict[str, Any] = {"error": type(exc).__name__, "detail": str(exc)}
    if exc.hint:
        detail["hint"] = exc.hint
    raise HTTPException(status_code=code, detail=detail) from exc


def create_app(store: LexiconStore | None = None) -> FastAPI:
    """Create a FastAPI application wired to the given lexicon store."""

    lexicon_store = LexiconStore() if store is None else store
    app = FastAPI(title="Lexicon Control Surface", version="0.1.0")
    app.state.store = lexicon_store

    token_value = os.getenv("LEXMAP_TOKEN")

    async def require_token(request: Request) -> None:
        if not token_value:
            return
        authorization = request.headers.get("Authorization")
        if authorization == f"Bearer {token_value}":
            return
        if request.query_params.get("token") == token_value:
            return
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    def get_store() -> LexiconStore:
        return app.state.store

    store_dep = Depends(get_store)
    auth = [Depends(require_token)]

    def run(target: LexiconStore, name: str, fn: Callable[[Lexicon], T]) -> T:
        try:
            return target.apply(name, fn)
        except KeyError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Lexicon {name!r} not found"
            ) from exc
        except EnvelopeError as exc:
            _raise_http(exc)

    @app.get("/healthz", response_model=dict)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/lexicons", response_model=LexiconListResponse, dependencies=auth)
    def list_lexicons(target: LexiconStore = store_dep) -> LexiconListResponse:  # noqa: B008
        return LexiconListResponse(
            lexicons=[
                LexiconSummary(name=name, length=length, case_sensitive=case_sensitive)
                for name, length, case_sensitive in target.summaries()
            ]
        )

    @app.put(
        "/api/lexicons/{name}",
        response_model=LexiconSummary,
        status_code=status.HTTP_201_CREATED,
        dependencies=auth,
    )
    def create_lexicon(
        name: str,
        request: CreateLexiconRequest,
        target: LexiconStore = store_dep,  # noqa: B008
    ) -> LexiconSummary:
        try:
            lex = target.create(name, case_sensitive=request.case_sensitive, replace=request.replace)
        except EnvelopeError as exc:
            _raise_http(exc)
        return LexiconSummary(name=name, length=len(lex), case_sensitive=lex.case_sensitive)

    @app.delete(
        "/api/lexicons/{name}",
        response_class=Response,
        status_code=status.HTTP_204_NO_CONTENT,
        response_model=None,
        dependencies=auth,
    )
    def delete_lexicon(name: str, target: LexiconStore = store_dep) -> Response:  # noqa: B008
        try:
            target.delete(name)
        except KeyError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Lexicon {name!r} not found"
            ) from exc
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post(
        "/api/lexicons/{name}/suffixes/{suffix}",
        response_model=SuffixResult,
        dependencies=auth,
    )
    def call_suffix(
        name: str,
        suffix: str,
        call: SuffixCall,
        target: LexiconStore = store_dep,  # noqa: B008
    ) -> SuffixResult:
        try:
            if call.value is not None and call.args:
                raise BadInputError(
                    "Send either args (to call a suffix) or value (to set one), not both"
                )
            canonical = get_suffix(suffix).names[0]
            args = [decode_value(arg) for arg in call.args]
            assigned = decode_value(call.value) if call.value is not None else None
        except EnvelopeError as exc:
            _raise_http(exc)

        def apply(lex: Lexicon) -> SuffixResult:
            if assigned is not None:
                set_suffix(lex, suffix, assigned)
            result = invoke_suffix(lex, suffix, *args)
            if result is None:
                return SuffixResult(suffix=canonical)
            return SuffixResult(suffix=canonical, result=encode_value(result), text=str(result))

        return run(target, name, apply)

    @app.get("/api/lexicons/{name}/dump", response_model=DumpDocument, dependencies=auth)
    def get_dump(name: str, target: LexiconStore = store_dep) -> DumpDocument:  # noqa: B008
        document = run(target, name, lambda lex: dump_lexicon(lex).to_document())
        return DumpDocument(**document)

    @app.put("/api/lexicons/{name}/dump", response_model=LexiconSummary, dependencies=auth)
    def put_dump(
        name: str,
        document: DumpDocument,
        target: LexiconStore = store_dep,  # noqa: B008
    ) -> LexiconSummary:
        try:
            record = DumpRecord.from_document(document.model_dump())
        except EnvelopeError as exc:
            _raise_http(exc)
        strict = target.config.lexicon.strict_load

        def apply(lex: Lexicon) -> LexiconSummary:
            load_dump(lex, record, strict=strict)
            return LexiconSummary(name=name, length=len(lex), case_sensitive=lex.case_sensitive)

        return run(target, name, apply)

    return app


__all__ = ["create_app"]
