from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from .handler import ProxyChatHandler

router = APIRouter()

# Methods other than OPTIONS and POST reach the handler too and fail on the body;
# anything else gets a 405 envelope from http_exception_handler.
@router.api_route("/perplexity", methods=["OPTIONS", "POST", "GET", "HEAD", "PUT", "PATCH", "DELETE"])
async def proxy_chat(
    request: Request,
    handler: ProxyChatHandler = Depends(ProxyChatHandler)
) -> Response:
    return await handler.handle(request)
