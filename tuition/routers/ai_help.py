from fastapi import APIRouter, Depends

from tuition.dependencies import ensure_ok, get_ai_client
from tuition.route_logging import EndpointNameRoute
from tuition.schemas import AIHelpRequest
from tuition.services.ai_helper_service import EXAMPLE_QUESTIONS, AIHelpView, AIHelperClient


router = APIRouter(prefix='/ai-help', tags=['AI Help'], route_class=EndpointNameRoute)


@router.get('/examples')
def example_questions():
    return {'questions': EXAMPLE_QUESTIONS}


@router.post('')
async def ask(payload: AIHelpRequest, client: AIHelperClient = Depends(get_ai_client)):
    view = AIHelpView(client)
    result = ensure_ok(await view.ask(payload.question), failed_status=502)
    return {'answer': result.data}
