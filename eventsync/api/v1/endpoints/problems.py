"""Problem statement endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from eventsync.api.deps import get_db, verify_admin_token
from eventsync.schemas import ProblemUpdate, ProblemResponse, SuccessResponse
from eventsync.services.problems import delete_problem, get_problem, update_problem

router = APIRouter()


@router.get("/{problem_id}", response_model=ProblemResponse)
async def get_problem_endpoint(problem_id: str, db: Session = Depends(get_db)):
    problem = get_problem(db, problem_id)
    if not problem:
        raise HTTPException(status_code=404, detail="Problem statement not found")
    return problem


@router.patch("/{problem_id}", response_model=ProblemResponse, dependencies=[Depends(verify_admin_token)])
async def update_problem_endpoint(problem_id: str, payload: ProblemUpdate, db: Session = Depends(get_db)):
    """Edit a problem statement (admin only). The spreadsheet tab keeps its name."""
    problem = update_problem(db, problem_id, payload.title, payload.description)
    if not problem:
        raise HTTPException(status_code=404, detail="Problem statement not found")
    return problem


@router.delete("/{problem_id}", response_model=SuccessResponse, dependencies=[Depends(verify_admin_token)])
async def delete_problem_endpoint(problem_id: str, db: Session = Depends(get_db)):
    if not delete_problem(db, problem_id):
        raise HTTPException(status_code=404, detail="Problem statement not found")
    return SuccessResponse(message="Problem statement deleted")
