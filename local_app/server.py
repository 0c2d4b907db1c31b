from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException

from local_app.schemas import (
    ClassifyRequest,
    ClassifyResponse,
    MatchInfo,
    MatchRequest,
    MatchResponse,
    PrefixLabelInfo,
    PrefixResponse,
    RagaInfo,
    SequenceRequest,
    TokenInfo,
)
from swara_match.catalog import CatalogEntry, ReferenceCatalog, default_catalog
from swara_match.engine import MatchEngine
from swara_match.tokens import SARGAM_TO_OFFSET, as_tokens, classify, token_to_hz, token_to_midi


def _entry_to_response(entry: CatalogEntry) -> RagaInfo:
    return RagaInfo(**entry.to_dict())


def _token_info(token: str, tonic: Optional[str]) -> TokenInfo:
    if not tonic or token not in SARGAM_TO_OFFSET:
        return TokenInfo(token=token, pitch_class=classify(token).value)
    return TokenInfo(
        token=token,
        pitch_class=classify(token).value,
        midi=token_to_midi(token, tonic),
        hz=round(token_to_hz(token, tonic), 2),
    )


def create_app(catalog: ReferenceCatalog | None = None) -> FastAPI:
    app = FastAPI(title="Swara Match Local App", version="0.1.0")
    app.state.engine = MatchEngine(catalog if catalog is not None else default_catalog())

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        engine: MatchEngine = app.state.engine
        return {
            "ok": True,
            "ragas": len(engine.catalog),
            "indexed_sequences": len(engine.prefix_index),
        }

    @app.get("/api/ragas")
    def api_ragas() -> Dict[str, Any]:
        engine: MatchEngine = app.state.engine
        return {"ragas": engine.catalog.names, "source": engine.catalog.source}

    @app.get("/api/ragas/{name}", response_model=RagaInfo)
    def api_raga(name: str) -> RagaInfo:
        entry = app.state.engine.get_entry(name)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Raga '{name}' not found")
        return _entry_to_response(entry)

    @app.post("/api/classify", response_model=ClassifyResponse)
    def api_classify(request: ClassifyRequest) -> ClassifyResponse:
        if request.tonic:
            try:
                token_to_midi("Sa", request.tonic)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        counts = app.state.engine.classify_sequence(request.sequence)
        return ClassifyResponse(
            tokens=[_token_info(token, request.tonic) for token in as_tokens(request.sequence)],
            counts={pc.value: count for pc, count in counts.items()},
        )

    @app.post("/api/match", response_model=MatchResponse)
    def api_match(request: MatchRequest) -> MatchResponse:
        engine: MatchEngine = app.state.engine
        try:
            results = engine.top_matches(request.sequence, request.top_n)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        matches: List[MatchInfo] = [
            MatchInfo(rank=i, **result.to_dict()) for i, result in enumerate(results, start=1)
        ]
        return MatchResponse(
            sequence=request.sequence,
            matches=matches,
            prefix_matches=[str(label) for label in engine.prefix_matches(request.sequence)],
        )

    @app.post("/api/prefix", response_model=PrefixResponse)
    def api_prefix(request: SequenceRequest) -> PrefixResponse:
        labels = app.state.engine.prefix_matches(request.sequence)
        return PrefixResponse(
            labels=[
                PrefixLabelInfo(entry_name=label.entry_name, direction=label.direction.value, label=str(label))
                for label in labels
            ]
        )

    return app


app = create_app()
