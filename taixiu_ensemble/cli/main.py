import json
import os
from pathlib import Path

import requests
import typer

from taixiu_ensemble.config import settings
from taixiu_ensemble.core.normalize import normalize
from taixiu_ensemble.ensemble import predict_history


app = typer.Typer()
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")


def _get(path: str, **params):
    r = requests.get(f"{BASE}{path}", params=params or None, timeout=settings.fetch_timeout + 5)
    typer.echo(json.dumps(r.json(), ensure_ascii=False, indent=2))


@app.command()
def serve(host: str = "0.0.0.0", port: int = int(os.getenv("PORT", 8000))):
    import uvicorn
    uvicorn.run("taixiu_ensemble.api.main:app", host=host, port=port)


@app.command()
def predict():
    _get("/predict-tai-xiu")


@app.command()
def history(limit: int = 20):
    _get("/history", limit=limit)


@app.command()
def performance():
    _get("/performance")


@app.command()
def local(path: Path, samples: bool = typer.Option(False, "--samples", help="Also print the mined samples.")):
    """Run the ensemble offline on a saved JSON feed."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    labels = normalize(payload)
    p = predict_history(labels, sample_count=settings.sample_count, min_history=settings.min_history,
                        short_window=settings.short_window, long_window=settings.long_window)
    typer.echo(f"{p.label} ({p.confidence_text})")
    typer.echo(p.summary)
    if samples and not p.insufficient:
        for s in p.samples:
            typer.echo(f"  [{s.kind.value}] {s.key} -> {s.next.value}")
    typer.echo("")
    typer.echo(p.rationale)


if __name__ == "__main__":
    app()
