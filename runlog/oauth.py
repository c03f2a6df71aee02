"""Interactive authorization-code flow against Strava.

A throwaway callback listener is served on the configured local port while the
user approves access in the browser. The listener lives only for the duration
of one flow and is shut down on every exit path.
"""
import asyncio
import html
import socket
import webbrowser
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlencode

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from loguru import logger

from .config import settings
from .strava import AUTHORIZE_URL

class AuthorizationError(Exception):
    pass

class AuthorizationTimeout(AuthorizationError):
    pass

@dataclass
class AuthorizationGrant:
    code: str
    scope: str | None = None

def authorize_url(redirect_uri: str, scope: str | None = None) -> str:
    query = urlencode({
        "client_id": settings.STRAVA_CLIENT_ID,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "approval_prompt": "force",
        "scope": scope or settings.STRAVA_SCOPES,
    })
    return f"{AUTHORIZE_URL}?{query}"

def _page(title: str, body: str) -> str:
    return f"<html><body><h1>{html.escape(title)}</h1><p>{html.escape(body)}</p></body></html>"

def callback_app(result: asyncio.Future) -> FastAPI:
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/callback")
    async def callback(
        code: str | None = None,
        scope: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ):
        if result.done():
            return HTMLResponse(_page("Already handled", "This authorization has already completed."), status_code=409)
        if error:
            result.set_exception(AuthorizationError(f"Authorization failed: {error}"))
            return HTMLResponse(_page("Authorization Failed", f"{error}: {error_description or ''}"), status_code=400)
        if not code:
            result.set_exception(AuthorizationError("No authorization code received"))
            return HTMLResponse(_page("Error", "No authorization code received"), status_code=400)

        result.set_result(AuthorizationGrant(code=code, scope=scope))
        return HTMLResponse(_page("Success!", "Authorization successful. You can close this window and return to the terminal."))

    return app

def _listen(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
        sock.listen(16)
    except OSError as e:
        sock.close()
        raise AuthorizationError(f"Could not start the OAuth callback listener on {host}:{port}: {e}") from e
    return sock

async def wait_for_authorization(
    *,
    host: str | None = None,
    port: int | None = None,
    timeout: float | None = None,
    scope: str | None = None,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> AuthorizationGrant:
    """Open the browser on Strava's consent page and wait for the redirect.

    Raises AuthorizationTimeout if no callback arrives within `timeout` seconds
    and AuthorizationError if the user denies access.
    """
    host = host or settings.OAUTH_CALLBACK_HOST
    port = settings.OAUTH_CALLBACK_PORT if port is None else port
    timeout = timeout or settings.OAUTH_TIMEOUT_SECONDS

    result = asyncio.get_running_loop().create_future()
    sock = _listen(host, port)
    redirect_uri = f"http://{host}:{sock.getsockname()[1]}/callback"

    server = uvicorn.Server(uvicorn.Config(callback_app(result), log_level="warning", lifespan="off"))
    serve_task = asyncio.create_task(server.serve(sockets=[sock]))
    try:
        url = authorize_url(redirect_uri, scope)
        logger.info("Starting OAuth authorization flow, opening browser")
        try:
            opened = open_browser(url)
        except webbrowser.Error as e:
            logger.warning(f"Failed to open browser: {e}")
            opened = False
        if not opened:
            logger.info(f"Please manually visit: {url}")

        try:
            return await asyncio.wait_for(result, timeout)
        except asyncio.TimeoutError as e:
            raise AuthorizationTimeout("Authorization timeout. Please try again.") from e
    finally:
        server.should_exit = True
        await serve_task
        sock.close()
