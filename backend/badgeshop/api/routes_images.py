from fastapi import APIRouter, Depends, HTTPException

from badgeshop.adapters.anthropic_chat import AnthropicChatAdapter, get_chat_adapter
from badgeshop.adapters.openai_images import OpenAIImageAdapter, get_image_adapter
from badgeshop.schemas.image_schema import ApiConnectionIn, GenerateImageIn, GenerateTemplateIn
from badgeshop.services.image_service import ImageService, ImageServiceException

router = APIRouter(tags=["images"])


def get_image_service(
    chat: AnthropicChatAdapter = Depends(get_chat_adapter),
    images: OpenAIImageAdapter = Depends(get_image_adapter),
) -> ImageService:
    return ImageService(chat, images)


@router.post("/generate-image", summary="Generate a badge background")
def generate_image(payload: GenerateImageIn, svc: ImageService = Depends(get_image_service)):
    try:
        return svc.generate(payload.prompt, payload.type)
    except ImageServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/generate-template", summary="Suggest a badge template from a description")
def generate_template(payload: GenerateTemplateIn, svc: ImageService = Depends(get_image_service)):
    try:
        return svc.template(payload.prompt)
    except ImageServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/test-api-connection", summary="Probe the OpenAI or Anthropic credentials")
def test_api_connection(payload: ApiConnectionIn, svc: ImageService = Depends(get_image_service)):
    try:
        return svc.test_connection(payload.service)
    except ImageServiceException as e:
        raise HTTPException(status_code=400, detail={"success": False, "error": str(e)})
