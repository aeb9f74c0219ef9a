from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope


class FrontendFiles(StaticFiles):
    """
    Built single-page app served from "/".

    Unknown paths fall back to index.html so client-side routes such as
    /login load the app; unknown paths under the API prefix get a JSON 404.
    """

    def __init__(self, *, directory, api_prefix: str = "") -> None:
        super().__init__(directory=directory, html=True)
        self.api_prefix = api_prefix.rstrip("/")

    def is_api_path(self, path: str) -> bool:
        if not self.api_prefix:
            return False
        request_path = "/" + path.replace("\\", "/").lstrip("/")
        return request_path == self.api_prefix or request_path.startswith(self.api_prefix + "/")

    async def get_response(self, path: str, scope: Scope) -> Response:
        if self.is_api_path(path):
            return JSONResponse({"detail": "API route not found"}, status_code=404)
        try:
            response = await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
        else:
            if response.status_code != 404:
                return response
        return await super().get_response("index.html", scope)
