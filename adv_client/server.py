"""
Module: adv_client.server
Purpose: Local web UI for the adversarial demo (FastAPI)
Dependencies: fastapi, uvicorn, pydantic, python-multipart

Serves a single page plus a small JSON API over one AdversarialSession. The
page only renders `GET /api/state`; all state lives in the session.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
import logging

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from adv_client.core import AdversarialSession
from adv_client.config import get_config
from adv_client.errors import DecodeError, PreconditionError, RequestError, ValidationError

logger = logging.getLogger(__name__)

# Global session instance (lazy-loaded)
_session: Optional[AdversarialSession] = None


def get_session() -> AdversarialSession:
    """Get or create the global session instance."""
    global _session
    if _session is None:
        logger.info("Creating AdversarialSession...")
        _session = AdversarialSession()
    return _session


@asynccontextmanager
async def lifespan(app: FastAPI):
    status = await get_session().initialize()
    logger.info(f"Backend status at startup: {status.display}")
    yield


app = FastAPI(
    title="Adversarial Demo Client",
    description="Upload a digit, pick epsilon, compare predictions before and after FGSM",
    version="0.1.0",
    lifespan=lifespan,
)


class StrengthRequest(BaseModel):
    """Request model for setting the perturbation strength."""
    value: float = Field(..., description="Epsilon; clamped to [0, 0.5] and rounded to 0.01")


@app.get("/", response_class=HTMLResponse)
async def get_interface():
    """Serve the demo page."""
    return HTMLResponse(content=INDEX_HTML)


@app.get("/api/state")
async def get_state(session: AdversarialSession = Depends(get_session)) -> Dict[str, Any]:
    """Current session state for rendering."""
    return session.snapshot()


@app.post("/api/image")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    session: AdversarialSession = Depends(get_session),
):
    """
    Replace the current image with an uploaded file.

    Returns 400 if no file was sent or it is not an image.
    """
    try:
        raw = await file.read() if file is not None else None
        session.ingestor.ingest(
            raw,
            filename=file.filename if file is not None else None,
            content_type=file.content_type if file is not None else None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.snapshot()


@app.delete("/api/image")
async def clear_image(session: AdversarialSession = Depends(get_session)):
    session.ingestor.clear()
    return session.snapshot()


@app.post("/api/strength")
async def set_strength(request: StrengthRequest, session: AdversarialSession = Depends(get_session)):
    """
    Set the perturbation strength.

    Returns 400 for a value that is not a number (NaN); the stored strength is kept.
    """
    try:
        session.parameters.set_strength(request.value)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.snapshot()


@app.post("/api/status/check")
async def check_status(session: AdversarialSession = Depends(get_session)):
    """Re-run the liveness probe."""
    await session.check_backend()
    return session.snapshot()


@app.post("/api/generate")
async def generate(session: AdversarialSession = Depends(get_session)):
    """
    Generate an adversarial example from the current image and strength.

    Returns:
        409 when no image is uploaded or a request is already running,
        502 when the generation service fails or answers garbage
    """
    try:
        await session.generate()
    except PreconditionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (RequestError, DecodeError) as e:
        logger.error(f"Generation failed: {e}")
        raise HTTPException(
            status_code=502,
            detail="Error generating adversarial example. Check if backend is running.",
        )
    return session.snapshot()


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: Optional[bool] = None,
):
    """
    Run the web UI.

    Args:
        host: Host to bind to (default from config)
        port: Port to listen on (default from config)
        reload: Enable auto-reload for development
    """
    import uvicorn

    ui = get_config().ui
    host = host or ui["host"]
    port = port or ui["port"]
    reload = ui["reload"] if reload is None else reload

    logger.info(f"Starting Adversarial Demo UI on {host}:{port}")

    uvicorn.run(
        "adv_client.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level=ui["log_level"]
    )


INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>FGSM Adversarial Attack Demo</title>
    <style>
        body { max-width: 1200px; margin: 0 auto; padding: 20px; font-family: Arial, sans-serif; }
        header { text-align: center; margin-bottom: 40px; }
        .status { margin-top: 20px; padding: 10px; border-radius: 5px; display: inline-block; }
        .status.connected { background: #d4edda; color: #155724; }
        .status.other { background: #f8d7da; color: #721c24; }
        .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 30px; }
        .panel { padding: 25px; border-radius: 10px; }
        .controls { background: #f8f9fa; }
        .results { border: 1px solid #dee2e6; }
        .frame { width: 200px; height: 200px; margin: 0 auto; display: flex;
                 align-items: center; justify-content: center; background: #f8f9fa; }
        .frame img { max-width: 100%; max-height: 100%; }
        #generateBtn { width: 100%; padding: 15px; color: white; border: none;
                       border-radius: 5px; font-size: 1.1rem; font-weight: bold; background: #28a745; }
        #generateBtn:disabled { background: #6c757d; }
        #error { display: none; margin-top: 15px; padding: 10px; background: #f8d7da; border-radius: 5px; }
    </style>
</head>
<body>
    <header>
        <h1>FGSM Adversarial Attack Demo</h1>
        <p>Fast Gradient Sign Method for generating adversarial examples</p>
        <div id="status" class="status other">
            Backend Status: <span id="statusText">Checking...</span>
            <button id="checkBtn">Check Again</button>
        </div>
    </header>

    <div class="grid">
        <div class="panel controls">
            <h2>Controls</h2>
            <label>Attack Strength (Epsilon): <span id="epsilonValue">0.10</span></label>
            <input id="epsilon" type="range" min="0" max="0.5" step="0.01" value="0.1" style="width: 100%">
            <div style="display: flex; justify-content: space-between"><span>Weak (0)</span><span>Strong (0.5)</span></div>

            <p><label>Upload MNIST Digit Image</label><br>
            <input id="file" type="file" accept="image/*"></p>
            <p style="font-size: 0.9rem; color: #6c757d">Upload a 28x28 grayscale image of a digit (0-9)</p>

            <button id="generateBtn" disabled>Generate Adversarial Example</button>
            <div id="error"><span id="errorText"></span> <button id="dismissBtn">Dismiss</button></div>

            <div id="predictions" style="display: none; margin-top: 25px; padding: 15px; background: #e9ecef">
                <h3>Predictions</h3>
                <strong>Original:</strong> <span id="origLabel" style="color: #007bff"></span>
                &nbsp; <strong>Adversarial:</strong> <span id="advLabel" style="color: #dc3545"></span>
            </div>
        </div>

        <div class="panel results">
            <h2>Results</h2>
            <div class="grid">
                <div style="text-align: center"><h3>Original Image</h3>
                    <div class="frame" id="origFrame"><span>No image uploaded</span></div></div>
                <div style="text-align: center"><h3>Adversarial Image</h3>
                    <div class="frame" id="advFrame"><span>Not generated yet</span></div></div>
            </div>
            <div style="margin-top: 30px; padding: 15px; background: #e7f1ff; border-radius: 5px">
                <h3>How FGSM Works:</h3>
                <p>The Fast Gradient Sign Method (FGSM) adds small perturbations to the input image
                in the direction of the gradient of the loss function:
                <strong>perturbation = epsilon * sign(gradient)</strong>.
                Even though the changes are barely visible to humans, they can cause the model
                to misclassify the image.</p>
            </div>
        </div>
    </div>

    <script>
        function frame(id, src, placeholder) {
            const el = document.getElementById(id);
            el.innerHTML = src ? `<img src="${src}">` : `<span>${placeholder}</span>`;
        }

        function showError(message) {
            document.getElementById('errorText').textContent = message;
            document.getElementById('error').style.display = message ? 'block' : 'none';
        }

        function render(state) {
            const connected = state.backend.status === 'connected';
            document.getElementById('status').className = 'status ' + (connected ? 'connected' : 'other');
            document.getElementById('statusText').textContent = state.backend.display;

            const eps = state.strength.value;
            document.getElementById('epsilon').value = eps;
            document.getElementById('epsilonValue').textContent = eps.toFixed(2);

            const btn = document.getElementById('generateBtn');
            btn.disabled = state.request.loading || !state.image;
            btn.textContent = state.request.loading ? 'Generating...' : 'Generate Adversarial Example';

            frame('origFrame', state.image && state.image.preview, 'No image uploaded');
            frame('advFrame', state.result && state.result.adversarial_image, 'Not generated yet');

            document.getElementById('predictions').style.display = state.result ? 'block' : 'none';
            if (state.result) {
                document.getElementById('origLabel').textContent = state.result.original_label;
                document.getElementById('advLabel').textContent = state.result.adversarial_label;
            }
        }

        async function call(method, url, body) {
            const response = await fetch(url, { method, body });
            const data = await response.json();
            if (!response.ok) {
                showError(data.detail);
                await refresh();
                return;
            }
            render(data);
        }

        async function refresh() {
            const response = await fetch('/api/state');
            render(await response.json());
        }

        document.getElementById('checkBtn').onclick = () => call('POST', '/api/status/check');
        document.getElementById('dismissBtn').onclick = () => showError('');
        document.getElementById('epsilon').oninput = (e) => {
            document.getElementById('epsilonValue').textContent = parseFloat(e.target.value).toFixed(2);
        };
        document.getElementById('epsilon').onchange = (e) =>
            fetch('/api/strength', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ value: parseFloat(e.target.value) })
            }).then(r => r.json()).then(render);
        document.getElementById('file').onchange = (e) => {
            if (!e.target.files || !e.target.files[0]) return;
            const form = new FormData();
            form.append('file', e.target.files[0]);
            call('POST', '/api/image', form);
        };
        document.getElementById('generateBtn').onclick = () => {
            const btn = document.getElementById('generateBtn');
            btn.disabled = true;
            btn.textContent = 'Generating...';
            call('POST', '/api/generate');
        };

        refresh();
    </script>
</body>
</html>
"""


if __name__ == "__main__":
    run_server(reload=True)
