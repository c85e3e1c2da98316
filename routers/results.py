# routers/results.py
from typing import Annotated

from fastapi import APIRouter, Depends

from deps.auth import require_admin
from deps.services import get_query_service, get_retake_manager
from schemas.results import MessageOut, ResultOut
from services.queries import ResultQueryService
from services.retakes import RetakeAuthorizationManager

# every route here is admin-only
router = APIRouter(prefix="/api/results", tags=["results"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[ResultOut])
def list_results(queries: Annotated[ResultQueryService, Depends(get_query_service)]):
    return queries.list_results()


@router.delete("/{result_id}", response_model=MessageOut)
def delete_result(
    result_id: int,
    queries: Annotated[ResultQueryService, Depends(get_query_service)],
):
    queries.delete_result(result_id)
    return MessageOut(message="Result deleted successfully")


@router.post("/{result_id}/allow-retake", response_model=MessageOut)
def allow_retake(
    result_id: int,
    retakes: Annotated[RetakeAuthorizationManager, Depends(get_retake_manager)],
):
    retakes.allow(result_id)
    return MessageOut(message="Quiz retake allowed successfully")


@router.post("/{result_id}/disallow-retake", response_model=MessageOut)
def disallow_retake(
    result_id: int,
    retakes: Annotated[RetakeAuthorizationManager, Depends(get_retake_manager)],
):
    retakes.disallow(result_id)
    return MessageOut(message="Quiz retake disallowed successfully")
