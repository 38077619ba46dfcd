from fastapi import APIRouter
from starlette.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    """
    Simple landing page.
    """
    return "Data Centers Registry"
