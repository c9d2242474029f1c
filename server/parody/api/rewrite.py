from fastapi import APIRouter

from parody.config import settings
from parody.models.parody import ParodyGenerateBody, ParodyGenerateResponse
from parody.services.llm_service import ParodyService

router = APIRouter()


@router.post("/parody-generate")
async def generate_parody(body: ParodyGenerateBody) -> dict:
    """Rewrite the given lyrics as a parody about the requested topic."""
    service = ParodyService(settings)
    result = await service.rewrite(body.to_request())
    return ParodyGenerateResponse(generated_parody=result.text).model_dump(by_alias=True)
