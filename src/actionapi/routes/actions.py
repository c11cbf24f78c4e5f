import structlog
from fastapi import APIRouter, Request, Response

from actionapi.schemas.action import ActionRequest

log = structlog.get_logger()

router = APIRouter(tags=["actions"])

# Placeholder operation until actions are looked up by id
STUB_SERIAL = "testSerial"
STUB_OPERATION = "rebootDevice"


async def dump_request(request: Request) -> str:
    """Render the inbound request as HTTP/1.1 wire text."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    lines = [f"{request.method} {target} HTTP/{request.scope.get('http_version', '1.1')}"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    body = await request.body()
    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")


@router.get("/action/{id}")
async def get_action_request(id: str) -> ActionRequest:
    # Always a fresh record; the path id is not used for lookup.
    action = ActionRequest.create(STUB_SERIAL, STUB_OPERATION)
    log.info("action_requested", action_id=action.id)
    return action


@router.delete("/action/{id}")
async def delete_action_request(request: Request) -> Response:
    log.info("request_dump", dump=await dump_request(request))
    action_id = request.path_params.get("id", "")
    log.info("action_removable", action_id=action_id)
    return Response(status_code=200)
