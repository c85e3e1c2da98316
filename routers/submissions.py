# routers/submissions.py
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from deps.services import get_admission_controller, get_query_service
from schemas.results import ResultOut, RetakeStatusOut, SubmitRequest, SubmitResponse
from services.admission import AdmissionController, Submission
from services.queries import ResultQueryService

router = APIRouter(prefix="/api", tags=["submissions"])


@router.post("/submit", response_model=SubmitResponse)
def submit(
    req: SubmitRequest,
    controller: Annotated[AdmissionController, Depends(get_admission_controller)],
    user_agent: Annotated[str | None, Header()] = None,
):
    admission = controller.submit(
        Submission(
            phone=req.phone,
            name=req.name,
            correct=req.correct,
            wrong=req.wrong,
            score=req.score,
            answers=req.answers,
        ),
        user_agent=user_agent,
    )
    if not admission.accepted:
        raise HTTPException(status_code=400, detail=admission.reason)

    return SubmitResponse(
        ok=True,
        message="Submitted successfully",
        result_id=admission.result_id,
        retake=admission.retake,
    )


@router.get("/check-retake/{phone}", response_model=RetakeStatusOut)
def check_retake(
    phone: str,
    queries: Annotated[ResultQueryService, Depends(get_query_service)],
):
    status = queries.check_retake(phone)
    if status.result is None:
        return RetakeStatusOut(allowed_retake=False, message="No results found for this number")
    return RetakeStatusOut(
        allowed_retake=status.allowed_retake,
        result=ResultOut.model_validate(status.result),
    )
